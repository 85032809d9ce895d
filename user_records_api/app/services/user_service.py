"""
Business logic for user records.

``UserService`` validates request bodies against the active field
descriptors, builds a single parameterized statement per operation and
runs it on the injected store.  Validation always happens before the
store is touched.  Store failures propagate as ``StoreError`` and are
not retried.
"""

import logging
import re
from typing import Any, Dict, List

from ..core import queries
from ..core.errors import RecordValidationError, UserNotFoundError
from ..schemas.fields import Fields, is_identifier
from ..schemas.user import UserPayloads

logger = logging.getLogger(__name__)

# ASCII digits with an optional minus sign; no "_", "+" or other Unicode digits.
_INTEGER_ID = re.compile(r"-?[0-9]+")


def parse_user_id(raw: Any) -> int:
    """Parse a path identifier, raising ``RecordValidationError`` if not an integer."""
    if isinstance(raw, bool):
        raise RecordValidationError("id", "must be an integer")
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str) or not _INTEGER_ID.fullmatch(raw):
        raise RecordValidationError("id", "must be an integer")
    return int(raw)


class UserService:
    """CRUD operations over the users table."""

    def __init__(self, store, fields: Fields, table: str = "users") -> None:
        if not is_identifier(table):
            raise ValueError(f"Invalid table name {table!r}")
        self.store = store
        self.fields = fields
        self.table = table
        self.payloads = UserPayloads(fields)

    async def create_user(self, body: Any) -> Dict[str, Any]:
        """Insert a new record and return it with its generated ``id``."""
        values = self.payloads.for_create(body)
        sql, params = queries.build_insert(self.table, self.fields, values)
        row = await self.store.fetch_one(sql, params)
        logger.info("Created user %s", row["id"])
        return row

    async def list_users(self) -> List[Dict[str, Any]]:
        """Return all records ordered by ascending ``id``."""
        sql, params = queries.build_select_all(self.table, self.fields)
        return await self.store.fetch_all(sql, params)

    async def get_user(self, user_id: Any) -> Dict[str, Any]:
        user_id = parse_user_id(user_id)
        sql, params = queries.build_select_one(self.table, self.fields, user_id)
        row = await self.store.fetch_one(sql, params)
        if row is None:
            raise UserNotFoundError(user_id)
        return row

    async def replace_user(self, user_id: Any, body: Any) -> Dict[str, Any]:
        """Overwrite every field of a record.

        All required fields must be supplied.  Optional fields that are
        omitted are stored as NULL.
        """
        user_id = parse_user_id(user_id)
        values = self.payloads.for_replace(body)
        return await self._update(user_id, values)

    async def patch_user(self, user_id: Any, body: Any) -> Dict[str, Any]:
        """Update only the supplied fields of a record."""
        user_id = parse_user_id(user_id)
        values = self.payloads.for_patch(body)
        return await self._update(user_id, values)

    async def delete_user(self, user_id: Any) -> None:
        user_id = parse_user_id(user_id)
        sql, params = queries.build_delete(self.table, user_id)
        row = await self.store.fetch_one(sql, params)
        if row is None:
            raise UserNotFoundError(user_id)
        logger.info("Deleted user %s", user_id)

    async def _update(self, user_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        sql, params = queries.build_update(
            self.table, self.fields, list(values.items()), user_id
        )
        row = await self.store.fetch_one(sql, params)
        if row is None:
            raise UserNotFoundError(user_id)
        logger.info("Updated user %s (%s)", user_id, ", ".join(values))
        return row
