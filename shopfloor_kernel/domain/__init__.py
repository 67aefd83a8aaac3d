"""Pure kernel domain helpers (no I/O)."""

from shopfloor_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = ["Clock", "DeterministicClock", "SystemClock"]
