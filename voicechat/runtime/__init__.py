"""Runtime package.

Keep this module dependency-light: importing `voicechat.runtime.*` in unit
tests should not open any network connection or audio device.
"""

__all__: list[str] = []
