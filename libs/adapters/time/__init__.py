from .clock import MonotonicClock

__all__ = ["MonotonicClock"]
