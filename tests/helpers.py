from datetime import datetime, timedelta, timezone


class FakeClock:
    """Deterministic clock; every call returns the current value, tick() moves it."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float = 1) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


def parse_ts(value: str) -> datetime:
    # Python < 3.11 fromisoformat does not accept the "Z" suffix pydantic emits
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
