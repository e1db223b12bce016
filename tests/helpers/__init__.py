from .settings import make_settings
from .emit import RecordingEmitter
from .live import FakeLiveClient, FakeLiveHandle

__all__ = ["FakeLiveClient", "FakeLiveHandle", "RecordingEmitter", "make_settings"]
