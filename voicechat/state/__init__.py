from .runtime import RuntimeDeps
from .settings import AppSettings
from .session import Emitter, Session

__all__ = ["AppSettings", "Emitter", "RuntimeDeps", "Session"]
