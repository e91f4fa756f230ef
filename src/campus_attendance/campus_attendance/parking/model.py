from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParkingConfig:
    """Singleton row: capacity and current occupancy of the campus lot."""

    id: int
    total_spaces: int
    occupied_spaces: int

    @property
    def available_spaces(self) -> int:
        return max(0, self.total_spaces - self.occupied_spaces)

    @property
    def is_full(self) -> bool:
        return self.occupied_spaces >= self.total_spaces
