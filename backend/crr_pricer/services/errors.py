from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised for caller programming errors (bad tag, bad step count, bad dividend)."""


class ResourceExhausted(RuntimeError):
    """Raised when a fixed-capacity arena cannot hold the requested lattice."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"arena needs capacity {required} but only {available} is available")
        self.required = required
        self.available = available
