"""Storage contract shared by the in-process and relational backends"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from designdesk.exceptions import ValidationError
from designdesk.models import ENTITY_MODELS
from designdesk.schemas.project import ProjectAggregate
from designdesk.services.project_aggregate import (
    ProjectAggregateService,
    projects_due_for_report,
)

logger = logging.getLogger(__name__)

# Columns a caller may never write directly
MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at", "version"})
PROJECT_AGGREGATE_FIELDS = frozenset({"rooms", "tasks", "logs", "photos", "progress"})


class StorageBackend(ABC):
    """
    Repository contract for every entity kind.

    Concrete backends implement the record primitives (_get, _list,
    _create, _update, _delete) and the aggregate load/save pair; the
    named operations and the project aggregate mutations are written
    once here on top of them. Records are plain dicts with snake_case
    keys named after the storage columns.
    """

    def __init__(self):
        self.aggregates = ProjectAggregateService(self)

    # Primitives

    @abstractmethod
    def _get(self, kind: str, entity_id: int) -> Optional[Dict[str, Any]]:
        """Fetch one record, None when absent"""

    @abstractmethod
    def _list(
        self,
        kind: str,
        filters: Optional[Dict[str, Any]] = None,
        newest_first: bool = False,
        limit: Optional[int] = None,
        degrade: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Records matching every filter by equality, id order unless newest_first.

        With degrade, an engine failure yields an empty list; otherwise it
        raises BackendError.
        """

    @abstractmethod
    def _create(self, kind: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it with its assigned id"""

    @abstractmethod
    def _update(self, kind: str, entity_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge fields into a record, None when absent"""

    @abstractmethod
    def _delete(self, kind: str, entity_id: int) -> bool:
        """Delete a record, False when absent"""

    @abstractmethod
    def load_project_aggregate(self, project_id: int) -> Optional[ProjectAggregate]:
        """Read the mutable part of a project, None when absent"""

    @abstractmethod
    def save_project_aggregate(self, aggregate: ProjectAggregate) -> Dict[str, Any]:
        """Write the aggregate back and return the full project record"""

    # Field checks

    def _check_fields(self, kind: str, data: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise ValidationError(f"Expected an object for {kind}")
        columns = ENTITY_MODELS[kind].__table__.columns
        known = {column.name for column in columns}

        errors = [
            {"field": name, "message": "Unknown field"}
            for name in data
            if name not in known
        ]
        errors.extend(
            {"field": name, "message": "Field is managed by storage"}
            for name in data
            if name in MANAGED_FIELDS
        )
        if creating:
            errors.extend(
                {"field": column.name, "message": "Field required"}
                for column in columns
                if not column.nullable
                and column.default is None
                and column.name not in MANAGED_FIELDS
                and data.get(column.name) is None
            )
        if errors:
            raise ValidationError(f"Invalid {kind} data", errors)
        return dict(data)

    def _create_checked(self, kind: str, data: Dict[str, Any]) -> Dict[str, Any]:
        record = self._create(kind, self._check_fields(kind, data, creating=True))
        logger.info(f"Created {kind} {record['id']}")
        return record

    def _update_checked(self, kind: str, entity_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = self._update(kind, entity_id, self._check_fields(kind, data, creating=False))
        if record is None:
            logger.warning(f"Cannot update {kind} {entity_id}: not found")
        return record

    def _delete_logged(self, kind: str, entity_id: int) -> bool:
        deleted = self._delete(kind, entity_id)
        if deleted:
            logger.info(f"Deleted {kind} {entity_id}")
        return deleted

    def _find_one(self, kind: str, **filters) -> Optional[Dict[str, Any]]:
        records = self._list(kind, filters, limit=1, degrade=False)
        return records[0] if records else None

    # Users

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self._get("user", user_id)

    def get_user_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return self._find_one("user", username=username)

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self._find_one("user", email=email)

    def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("user", data)

    def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_checked("user", user_id, data)

    # Leads

    def get_leads(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """All leads, or only those assigned to user_id"""
        filters = {"assigned_to": user_id} if user_id is not None else None
        return self._list("lead", filters)

    def get_leads_by_stage(self, stage: str) -> List[Dict[str, Any]]:
        return self._list("lead", {"stage": stage})

    def get_lead(self, lead_id: int) -> Optional[Dict[str, Any]]:
        return self._get("lead", lead_id)

    def create_lead(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("lead", data)

    def update_lead(self, lead_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_checked("lead", lead_id, data)

    def delete_lead(self, lead_id: int) -> bool:
        return self._delete_logged("lead", lead_id)

    # Clients

    def get_clients(self) -> List[Dict[str, Any]]:
        return self._list("client")

    def get_client(self, client_id: int) -> Optional[Dict[str, Any]]:
        return self._get("client", client_id)

    def create_client(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("client", data)

    def update_client(self, client_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_checked("client", client_id, data)

    def delete_client(self, client_id: int) -> bool:
        return self._delete_logged("client", client_id)

    # Projects

    def get_projects(self) -> List[Dict[str, Any]]:
        return self._list("project")

    def get_project(self, project_id: int) -> Optional[Dict[str, Any]]:
        return self._get("project", project_id)

    def get_projects_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return self._list("project", {"client_id": client_id})

    def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a project; it always starts with empty collections"""
        if isinstance(data, dict):
            data = {
                key: value
                for key, value in data.items()
                if key not in PROJECT_AGGREGATE_FIELDS
            }
        return self._create_checked("project", data)

    def update_project(self, project_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update scalar project fields; collections change only through the aggregate operations"""
        if isinstance(data, dict):
            protected = sorted(PROJECT_AGGREGATE_FIELDS.intersection(data))
            if protected:
                raise ValidationError(
                    "Embedded collections and progress cannot be written directly",
                    [{"field": name, "message": "Field is derived or embedded"} for name in protected],
                )
        return self._update_checked("project", project_id, data)

    def delete_project(self, project_id: int) -> bool:
        return self._delete_logged("project", project_id)

    def list_projects_due_for_report(
        self, now: Optional[datetime] = None, interval_days: int = 7
    ) -> List[Dict[str, Any]]:
        """Projects with automatic reports enabled whose next report is due"""
        return projects_due_for_report(
            self.get_projects(), now=now, interval=timedelta(days=interval_days)
        )

    # Project aggregate

    def add_project_room(
        self, project_id: int, name: str, description: Optional[str] = None
    ) -> Dict[str, Any]:
        return self.aggregates.add_room(project_id, name, description)

    def update_project_room(self, project_id: int, room_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self.aggregates.update_room(project_id, room_id, patch)

    def delete_project_room(self, project_id: int, room_id: int) -> Dict[str, Any]:
        return self.aggregates.delete_room(project_id, room_id)

    def add_project_task(
        self, project_id: int, room_id: Optional[int], data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return self.aggregates.add_task(project_id, room_id, data)

    def update_project_task(self, project_id: int, task_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self.aggregates.update_task(project_id, task_id, patch)

    def delete_project_task(self, project_id: int, task_id: int) -> Dict[str, Any]:
        return self.aggregates.delete_task(project_id, task_id)

    def add_project_log(
        self,
        project_id: int,
        text: str,
        actor_id: int,
        room_id: Optional[int] = None,
        photo_url: Optional[str] = None,
        photo_caption: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.aggregates.add_log(
            project_id,
            text,
            actor_id,
            room_id=room_id,
            photo_url=photo_url,
            photo_caption=photo_caption,
        )

    def configure_project_reports(self, project_id: int, report_settings: Dict[str, Any]) -> Dict[str, Any]:
        return self.aggregates.configure_reports(project_id, report_settings)

    # Proposals

    def get_proposals(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """All proposals, or only those created by user_id"""
        filters = {"created_by": user_id} if user_id is not None else None
        return self._list("proposal", filters)

    def get_proposal(self, proposal_id: int) -> Optional[Dict[str, Any]]:
        return self._get("proposal", proposal_id)

    def get_proposals_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return self._list("proposal", {"client_id": client_id})

    def create_proposal(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("proposal", data)

    def update_proposal(self, proposal_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_checked("proposal", proposal_id, data)

    def delete_proposal(self, proposal_id: int) -> bool:
        return self._delete_logged("proposal", proposal_id)

    # Moodboards

    def get_moodboards(self) -> List[Dict[str, Any]]:
        return self._list("moodboard")

    def get_moodboard(self, moodboard_id: int) -> Optional[Dict[str, Any]]:
        return self._get("moodboard", moodboard_id)

    def get_moodboards_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return self._list("moodboard", {"client_id": client_id})

    def get_moodboard_templates(self) -> List[Dict[str, Any]]:
        return self._list("moodboard", {"is_template": True})

    def duplicate_moodboard(self, moodboard_id: int) -> Optional[Dict[str, Any]]:
        """Copy a moodboard (a template becomes a regular board), None when absent"""
        original = self._get("moodboard", moodboard_id)
        if original is None:
            return None
        copy = {
            key: value
            for key, value in original.items()
            if key not in MANAGED_FIELDS
        }
        copy["name"] = f"{original.get('name') or 'Moodboard'} (Copy)"
        copy["is_template"] = False
        copy["shared_link"] = None
        return self._create_checked("moodboard", copy)

    def create_moodboard(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("moodboard", data)

    def update_moodboard(self, moodboard_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_checked("moodboard", moodboard_id, data)

    def delete_moodboard(self, moodboard_id: int) -> bool:
        return self._delete_logged("moodboard", moodboard_id)

    # Estimates

    def get_estimates(self) -> List[Dict[str, Any]]:
        return self._list("estimate")

    def get_estimate(self, estimate_id: int) -> Optional[Dict[str, Any]]:
        return self._get("estimate", estimate_id)

    def get_estimates_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return self._list("estimate", {"client_id": client_id})

    def get_estimates_by_lead_id(self, lead_id: int) -> List[Dict[str, Any]]:
        return self._list("estimate", {"lead_id": lead_id})

    def get_estimate_templates(self) -> List[Dict[str, Any]]:
        return self._list("estimate", {"is_template": True})

    def create_estimate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("estimate", data)

    def update_estimate(self, estimate_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_checked("estimate", estimate_id, data)

    def delete_estimate(self, estimate_id: int) -> bool:
        return self._delete_logged("estimate", estimate_id)

    # Activities

    def get_activities(self, user_id: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Newest first, optionally for one user and capped at limit"""
        filters = {"user_id": user_id} if user_id is not None else None
        return self._list("activity", filters, newest_first=True, limit=limit)

    def get_activity(self, activity_id: int) -> Optional[Dict[str, Any]]:
        return self._get("activity", activity_id)

    def get_activities_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return self._list("activity", {"client_id": client_id}, newest_first=True)

    def get_activities_by_project_id(self, project_id: int) -> List[Dict[str, Any]]:
        return self._list("activity", {"project_id": project_id}, newest_first=True)

    def create_activity(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_checked("activity", data)
