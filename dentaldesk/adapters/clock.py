from datetime import UTC, date, datetime


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now_utc().date()
