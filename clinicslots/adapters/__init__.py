"""
Adapters layer - Stores and clock implementations.
"""

from .clock import SystemClock
from .memory_store import InMemoryStore

__all__ = ["InMemoryStore", "SystemClock"]
