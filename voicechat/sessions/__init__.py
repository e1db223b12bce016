"""Conversation session management."""

from .sweeper import IdleSweeper
from .registry import SessionRegistry
from .assembler import ResponseAssembler

__all__ = ["IdleSweeper", "ResponseAssembler", "SessionRegistry"]
