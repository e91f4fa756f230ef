from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import ParkingConfig
from .repository import ParkingRepository


class MySQLParkingRepository(ParkingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, *, lock: bool) -> Optional[ParkingConfig]:
        suffix = " FOR UPDATE" if lock else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, total_spaces, occupied_spaces FROM parking_config ORDER BY id LIMIT 1" + suffix
            )
            r = fetchone(cur)
            if not r:
                return None
            return ParkingConfig(
                id=int(r["id"]),
                total_spaces=int(r["total_spaces"]),
                occupied_spaces=int(r["occupied_spaces"]),
            )

    def get(self) -> Optional[ParkingConfig]:
        return self._select(lock=False)

    def get_for_update(self) -> Optional[ParkingConfig]:
        return self._select(lock=True)

    def save(self, config_id: int, *, total_spaces: int, occupied_spaces: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE parking_config
                SET total_spaces=%s, occupied_spaces=%s, updated_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (int(total_spaces), int(occupied_spaces), int(config_id)),
            )
            return cur.rowcount > 0
