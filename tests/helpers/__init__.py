"""Test helper utilities for SnipeSniff tests."""

from .manual_engine import EngineFactory, ManualClock, ManualClockEngine

__all__ = ["EngineFactory", "ManualClock", "ManualClockEngine"]
