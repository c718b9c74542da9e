"""
Adapter: Admin setting repository.

Implements AdminSettingRepository port over the admin_settings table.
"""

from datetime import datetime

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from app.domain.settlement.ports import AdminSettingRepository
from app.infrastructure.database import admin_settings
from app.infrastructure.settlement.sql_errors import translate_db_errors


class AdminSettingRepositoryAdapter(AdminSettingRepository):
    """SQL implementation of the payment settings store.

    Upsert is an update followed by an insert when no row matched, which
    works the same on PostgreSQL and SQLite.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_all(self) -> dict[str, str]:
        with translate_db_errors("read settings"):
            with self._engine.connect() as conn:
                rows = conn.execute(select(admin_settings.c.key, admin_settings.c.value)).fetchall()
        return {row.key: row.value for row in rows}

    def upsert(self, key: str, value: str, now: datetime) -> None:
        with translate_db_errors("write setting"):
            with self._engine.begin() as conn:
                result = conn.execute(
                    update(admin_settings)
                    .where(admin_settings.c.key == key)
                    .values(value=value, updated_at=now)
                )
                if result.rowcount == 0:
                    conn.execute(
                        insert(admin_settings).values(key=key, value=value, updated_at=now)
                    )
