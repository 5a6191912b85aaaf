"""
Legacy omgang store, selected with USE_REPOSITORY_PATTERN=false.

Reads and the week writer behave like the SQLAlchemy store; creating a single
omgang entry was never supported on this path and answers 501.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import LegacyPathNotImplementedError
from ouderschaps_api.models import Omgang
from ouderschaps_api.stores.planning_store import SqlOmgangStore


class LegacyOmgangStore(SqlOmgangStore):
    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> Omgang:
        raise LegacyPathNotImplementedError("Legacy omgang creation not implemented")
