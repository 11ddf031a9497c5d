from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class LatestRatesResult:
    base: str
    as_of: date
    rates: dict[str, Decimal]
    amount: Decimal = Decimal("1")


@dataclass(frozen=True)
class HistoricalRatesResult:
    base: str
    start_date: date
    end_date: date
    rates: dict[str, dict[str, Decimal]] = field(default_factory=dict)
    amount: Decimal = Decimal("1")

    def __post_init__(self):
        for day in self.rates:
            parsed = date.fromisoformat(day)
            if not self.start_date <= parsed <= self.end_date:
                raise ValueError(
                    f"Rate date {day} outside range {self.start_date}..{self.end_date}"
                )
