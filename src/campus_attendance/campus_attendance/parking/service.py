from __future__ import annotations

import logging
from typing import Any, Optional

from ..audit.service import AuditService
from ..common.permissions import PARKING_EDITORS, require_role
from ..common.validators import require_int
from ..core.exceptions import InvalidConfigError, NotFoundError
from ..database.transaction import NullTransaction, TransactionManager
from ..users.model import Actor
from .model import ParkingConfig
from .repository import ParkingRepository

logger = logging.getLogger(__name__)


class ParkingService:
    """Reads and hand-edits the parking singleton.

    Occupancy changes caused by entry/exit events go through GateService.
    """

    def __init__(
        self,
        parking: ParkingRepository,
        *,
        audit: Optional[AuditService] = None,
        tx: Optional[TransactionManager] = None,
    ):
        self._parking = parking
        self._audit = audit
        self._tx = tx or NullTransaction()

    def get_config(self) -> ParkingConfig:
        config = self._parking.get()
        if not config:
            raise NotFoundError("Parking config not found")
        return config

    def update(self, actor: Actor, *, total_spaces: Any, occupied_spaces: Any = None) -> ParkingConfig:
        require_role(actor.role, PARKING_EDITORS)
        total = require_int(total_spaces, "total_spaces")

        with self._tx.transaction():
            config = self._parking.get_for_update()
            if not config:
                raise NotFoundError("Parking config not found")

            occupied = config.occupied_spaces if occupied_spaces is None else require_int(occupied_spaces, "occupied_spaces")
            if total < 1:
                raise InvalidConfigError("Please enter a valid number of parking spaces")
            if occupied < 0:
                raise InvalidConfigError("Occupied spaces cannot be negative")
            if total < occupied:
                raise InvalidConfigError("Total spaces cannot be less than currently occupied spaces")

            self._parking.save(config.id, total_spaces=total, occupied_spaces=occupied)

        logger.info("parking config set to %s/%s by %s", occupied, total, actor.username)
        if self._audit:
            self._audit.record(actor, "Update Parking", f"Total spaces: {total}, occupied: {occupied}")
        return self.get_config()
