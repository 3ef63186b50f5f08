"""Small value objects shared by scouted and official figures."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class ReefCounts:
    """Coral pieces per reef level (L1 is the trough, L4 the top row)."""

    l1: int = 0
    l2: int = 0
    l3: int = 0
    l4: int = 0

    @property
    def total(self) -> int:
        return self.l1 + self.l2 + self.l3 + self.l4

    def levels(self) -> tuple[int, int, int, int]:
        return (self.l1, self.l2, self.l3, self.l4)

    def __add__(self, other: ReefCounts) -> ReefCounts:
        return ReefCounts(
            l1=self.l1 + other.l1,
            l2=self.l2 + other.l2,
            l3=self.l3 + other.l3,
            l4=self.l4 + other.l4,
        )

    def minus_clamped(self, other: ReefCounts) -> ReefCounts:
        """Subtract level by level, never going below zero."""

        return ReefCounts(
            l1=max(0, self.l1 - other.l1),
            l2=max(0, self.l2 - other.l2),
            l3=max(0, self.l3 - other.l3),
            l4=max(0, self.l4 - other.l4),
        )
