"""In-process storage backend (volatile, for development and tests)"""

import copy
import logging
from typing import Any, Dict, List, Optional

from designdesk.exceptions import ConflictError, NotFoundError, ValidationError
from designdesk.models import ENTITY_MODELS
from designdesk.models.base import utcnow
from designdesk.schemas.project import ProjectAggregate
from designdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class MemoryStorage(StorageBackend):
    """
    Dict-backed storage: one id -> record mapping and one id counter per
    entity kind. Nothing survives the process.

    Records are deep-copied on the way in and out, so callers can never
    change stored state behind the backend's back.
    """

    def __init__(
        self,
        admin_username: str = "admin",
        admin_email: str = "admin@example.com",
        admin_password: str = "admin123",
    ):
        super().__init__()
        self._records: Dict[str, Dict[int, Dict[str, Any]]] = {
            kind: {} for kind in ENTITY_MODELS
        }
        self._next_ids: Dict[str, int] = {kind: 1 for kind in ENTITY_MODELS}

        # Default user for development logins
        self.create_user({
            "username": admin_username,
            "email": admin_email,
            "password": admin_password,
            "role": "admin",
            "full_name": "Admin User",
            "name": "Admin",
        })

    def _defaults(self, kind: str) -> Dict[str, Any]:
        """Column defaults, evaluated the way the ORM would on insert"""
        record = {}
        for column in ENTITY_MODELS[kind].__table__.columns:
            default = column.default
            if default is None:
                record[column.name] = None
            elif default.is_callable:
                record[column.name] = default.arg(None)
            else:
                record[column.name] = default.arg
        return record

    def _check_unique(self, kind: str, record: Dict[str, Any]) -> None:
        for column in ENTITY_MODELS[kind].__table__.columns:
            value = record.get(column.name)
            if not column.unique or value is None:
                continue
            for other in self._records[kind].values():
                if other["id"] != record["id"] and other.get(column.name) == value:
                    raise ValidationError(
                        f"Invalid {kind} data",
                        [{"field": column.name, "message": "Value already in use"}],
                    )

    def _get(self, kind: str, entity_id: int) -> Optional[Dict[str, Any]]:
        record = self._records[kind].get(entity_id)
        return copy.deepcopy(record) if record is not None else None

    def _list(
        self,
        kind: str,
        filters: Optional[Dict[str, Any]] = None,
        newest_first: bool = False,
        limit: Optional[int] = None,
        degrade: bool = True,
    ) -> List[Dict[str, Any]]:
        filters = filters or {}
        records = [
            record
            for record in self._records[kind].values()
            if all(record.get(name) == value for name, value in filters.items())
        ]
        if newest_first:
            records.sort(key=lambda record: (record["created_at"], record["id"]), reverse=True)
        else:
            records.sort(key=lambda record: record["id"])
        if limit is not None:
            records = records[:limit]
        return copy.deepcopy(records)

    def _create(self, kind: str, data: Dict[str, Any]) -> Dict[str, Any]:
        entity_id = self._next_ids[kind]
        now = utcnow()

        record = self._defaults(kind)
        record.update(copy.deepcopy(data))
        record["id"] = entity_id
        record["created_at"] = now
        record["updated_at"] = now
        if "version" in record:
            record["version"] = 1
        self._check_unique(kind, record)

        self._next_ids[kind] += 1
        self._records[kind][entity_id] = record
        return copy.deepcopy(record)

    def _update(self, kind: str, entity_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        existing = self._records[kind].get(entity_id)
        if existing is None:
            return None

        record = {**existing, **copy.deepcopy(data), "updated_at": utcnow()}
        if "version" in record:
            record["version"] = existing["version"] + 1
        self._check_unique(kind, record)

        self._records[kind][entity_id] = record
        return copy.deepcopy(record)

    def _delete(self, kind: str, entity_id: int) -> bool:
        return self._records[kind].pop(entity_id, None) is not None

    def load_project_aggregate(self, project_id: int) -> Optional[ProjectAggregate]:
        record = self._records["project"].get(project_id)
        if record is None:
            return None
        return ProjectAggregate.model_validate(copy.deepcopy(record))

    def save_project_aggregate(self, aggregate: ProjectAggregate) -> Dict[str, Any]:
        record = self._records["project"].get(aggregate.id)
        if record is None:
            raise NotFoundError("project", aggregate.id)
        if record["version"] != aggregate.version:
            logger.warning(
                f"Stale write to project {aggregate.id}: "
                f"version {aggregate.version}, stored {record['version']}"
            )
            raise ConflictError(aggregate.id)

        record.update(aggregate.to_storage())
        record["version"] += 1
        return copy.deepcopy(record)
