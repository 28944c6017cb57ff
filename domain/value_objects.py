from __future__ import annotations

from dataclasses import dataclass, field

from domain.models import ApplicationStatus


@dataclass(frozen=True)
class Fee:
    amount: float
    currency: str = "INR"

    def display(self) -> str:
        if self.amount <= 0:
            return "Free"
        return f"₹{self.amount:,.0f}"


@dataclass
class StatusCounts:
    """Count of applications per status, one slot for every status."""

    counts: dict[ApplicationStatus, int] = field(
        default_factory=lambda: {s: 0 for s in ApplicationStatus}
    )

    @classmethod
    def tally(cls, statuses) -> "StatusCounts":
        out = cls()
        for s in statuses:
            out.counts[ApplicationStatus(s)] += 1
        return out

    def __getitem__(self, status: ApplicationStatus | str) -> int:
        return self.counts[ApplicationStatus(status)]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def as_dict(self) -> dict[str, int]:
        return {s.value: n for s, n in self.counts.items()}
