"""Voice chat relay and command-line client for Gemini Live."""

__version__ = "0.1.0"
