from __future__ import annotations

URGENT_SECONDS = 10
LONG_REST_SECONDS = 60


class RestCountdown:
    """Plain countdown between sets. ``tick()`` returns True on the second it runs out."""

    def __init__(self, seconds: int):
        if seconds <= 0:
            raise ValueError("rest must be at least one second")
        self.total = seconds
        self.remaining = seconds
        self.is_running = True

    def tick(self) -> bool:
        if not self.is_running:
            return False
        if self.remaining > 0:
            self.remaining -= 1
        if self.remaining == 0:
            self.is_running = False
            return True
        return False

    def extend(self, seconds: int) -> None:
        if not self.is_running or seconds <= 0:
            return
        self.remaining += seconds
        self.total += seconds

    def stop(self) -> None:
        self.is_running = False

    @property
    def progress(self) -> float:
        return self.remaining / max(self.total, 1)

    @property
    def is_urgent(self) -> bool:
        return self.is_running and self.remaining <= URGENT_SECONDS

    @property
    def is_long(self) -> bool:
        return self.total >= LONG_REST_SECONDS
