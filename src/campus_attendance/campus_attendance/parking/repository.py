from __future__ import annotations

from typing import Optional, Protocol

from .model import ParkingConfig


class ParkingRepository(Protocol):
    def get(self) -> Optional[ParkingConfig]:
        raise NotImplementedError

    def get_for_update(self) -> Optional[ParkingConfig]:
        """Same as get() but locks the row until the enclosing transaction ends."""

        raise NotImplementedError

    def save(self, config_id: int, *, total_spaces: int, occupied_spaces: int) -> bool:
        raise NotImplementedError
