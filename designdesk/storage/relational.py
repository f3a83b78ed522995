"""Relational storage backend on SQLAlchemy"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from designdesk.database import create_db_engine, create_session_factory, init_db, session_scope
from designdesk.exceptions import BackendError, ConflictError, NotFoundError, ValidationError
from designdesk.models import ENTITY_MODELS, Project
from designdesk.models.base import utcnow
from designdesk.schemas.project import ProjectAggregate
from designdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class RelationalStorage(StorageBackend):
    """
    Storage on a relational database through the SQLAlchemy ORM.

    Every call runs in its own short transaction. Project collections
    are JSON columns, so each aggregate mutation reads the row, rewrites
    the columns in memory and writes them back in full. The row's
    version column makes that write fail with ConflictError if another
    writer got there first.

    List reads degrade to an empty result when the engine fails, so
    listing screens stay up; single reads, lookups by a unique field
    and all writes raise.
    """

    def __init__(self, session_factory: sessionmaker):
        """Initialize with a session factory"""
        super().__init__()
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, create_tables: bool = True, **engine_options) -> "RelationalStorage":
        """Build engine and session factory for a URL, creating tables on request"""
        engine = create_db_engine(database_url, **engine_options)
        if create_tables:
            init_db(engine)
        return cls(create_session_factory(engine))

    def _get(self, kind: str, entity_id: int) -> Optional[Dict[str, Any]]:
        model = ENTITY_MODELS[kind]
        try:
            with session_scope(self.session_factory) as db:
                row = db.get(model, entity_id)
                return row.to_dict() if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {kind} with id {entity_id}: {e}")
            raise BackendError(f"get_{kind}", e) from e

    def _list(
        self,
        kind: str,
        filters: Optional[Dict[str, Any]] = None,
        newest_first: bool = False,
        limit: Optional[int] = None,
        degrade: bool = True,
    ) -> List[Dict[str, Any]]:
        model = ENTITY_MODELS[kind]
        attributes = model.column_attributes()

        query = select(model)
        for name, value in (filters or {}).items():
            query = query.where(getattr(model, attributes[name]) == value)
        if newest_first:
            query = query.order_by(model.created_at.desc(), model.id.desc())
        else:
            query = query.order_by(model.id)
        if limit is not None:
            query = query.limit(limit)

        try:
            with session_scope(self.session_factory) as db:
                rows = db.execute(query).scalars().all()
                return [row.to_dict() for row in rows]
        except SQLAlchemyError as e:
            if not degrade:
                logger.error(f"Error looking up {kind}: {e}")
                raise BackendError(f"find_{kind}", e) from e
            logger.error(f"Error listing {kind} records, returning empty result: {e}")
            return []

    def _create(self, kind: str, data: Dict[str, Any]) -> Dict[str, Any]:
        model = ENTITY_MODELS[kind]
        attributes = model.column_attributes()
        try:
            with session_scope(self.session_factory) as db:
                row = model(**{attributes[name]: value for name, value in data.items()})
                db.add(row)
                db.flush()
                return row.to_dict()
        except IntegrityError as e:
            raise ValidationError(
                f"Invalid {kind} data: a uniqueness or reference constraint failed",
                [{"field": kind, "message": str(e.orig)}],
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating {kind}: {e}")
            raise BackendError(f"create_{kind}", e) from e

    def _update(self, kind: str, entity_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        model = ENTITY_MODELS[kind]
        attributes = model.column_attributes()
        try:
            with session_scope(self.session_factory) as db:
                row = db.get(model, entity_id)
                if row is None:
                    return None
                for name, value in data.items():
                    setattr(row, attributes[name], value)
                row.updated_at = utcnow()
                db.flush()
                return row.to_dict()
        except StaleDataError as e:
            raise ConflictError(entity_id) from e
        except IntegrityError as e:
            raise ValidationError(
                f"Invalid {kind} data: a uniqueness or reference constraint failed",
                [{"field": kind, "message": str(e.orig)}],
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating {kind} {entity_id}: {e}")
            raise BackendError(f"update_{kind}", e) from e

    def _delete(self, kind: str, entity_id: int) -> bool:
        model = ENTITY_MODELS[kind]
        try:
            with session_scope(self.session_factory) as db:
                row = db.get(model, entity_id)
                if row is None:
                    return False
                db.delete(row)
                return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {kind} {entity_id}: {e}")
            raise BackendError(f"delete_{kind}", e) from e

    def load_project_aggregate(self, project_id: int) -> Optional[ProjectAggregate]:
        record = self._get("project", project_id)
        if record is None:
            return None
        return ProjectAggregate.model_validate(record)

    def save_project_aggregate(self, aggregate: ProjectAggregate) -> Dict[str, Any]:
        try:
            with session_scope(self.session_factory) as db:
                row = db.get(Project, aggregate.id)
                if row is None:
                    raise NotFoundError("project", aggregate.id)
                if row.version != aggregate.version:
                    logger.warning(
                        f"Stale write to project {aggregate.id}: "
                        f"version {aggregate.version}, stored {row.version}"
                    )
                    raise ConflictError(aggregate.id)

                for name, value in aggregate.to_storage().items():
                    setattr(row, name, value)
                db.flush()
                return row.to_dict()
        except StaleDataError as e:
            raise ConflictError(aggregate.id) from e
        except SQLAlchemyError as e:
            logger.error(f"Error saving project {aggregate.id}: {e}")
            raise BackendError("save_project_aggregate", e) from e
