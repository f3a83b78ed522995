"""Project aggregate service: room, task, log and report mutations"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from designdesk.exceptions import NotFoundError, ValidationError
from designdesk.models.base import utcnow
from designdesk.schemas.project import (
    CreatedBy,
    Log,
    LogCreate,
    Photo,
    ProjectAggregate,
    ReportSettings,
    Room,
    RoomCreate,
    RoomUpdate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger(__name__)


class AggregateStore(Protocol):
    """What a backend must provide for the aggregate algorithms to run"""

    def load_project_aggregate(self, project_id: int) -> Optional[ProjectAggregate]:
        ...

    def save_project_aggregate(self, aggregate: ProjectAggregate) -> Dict[str, Any]:
        ...


def next_id(items: Sequence[Any]) -> int:
    """Highest id in the collection plus one, or 1 when empty"""
    return max((item.id for item in items), default=0) + 1


def compute_progress(tasks: Sequence[Task]) -> int:
    """Percentage of done tasks, rounded half up; 0 without tasks"""
    total = len(tasks)
    if total == 0:
        return 0
    done = sum(1 for task in tasks if task.status == TaskStatus.DONE.value)
    return (200 * done + total) // (2 * total)


def projects_due_for_report(
    projects: Iterable[Dict[str, Any]],
    now: Optional[datetime] = None,
    interval: timedelta = timedelta(days=7),
) -> List[Dict[str, Any]]:
    """
    Select projects whose automatic report is due.

    A project qualifies when its report settings enable auto generation
    and it has never had a report, or the last one is older than the
    interval.

    Args:
        projects: snake_case project records
        now: Reference time (defaults to current UTC time)
        interval: Minimum time between two reports

    Returns:
        The qualifying records, in input order
    """
    now = now or utcnow()
    due = []
    for project in projects:
        report_settings = project.get("report_settings")
        if not isinstance(report_settings, dict) or not report_settings.get("auto_generate"):
            continue
        last_report_date = project.get("last_report_date")
        if last_report_date is None or now - last_report_date > interval:
            due.append(project)
    return due


def _validate(schema, data: Any, detail: str):
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, detail) from e


_OPTIONAL_ID = TypeAdapter(Optional[int])


def _validate_id(value: Any, field: str, detail: str) -> Optional[int]:
    """Coerce an optional id (numeric strings included) to int"""
    try:
        return _OPTIONAL_ID.validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError(
            detail, [{"field": field, "message": error["msg"]} for error in e.errors()]
        ) from e


class ProjectAggregateService:
    """
    Mutations of a project's embedded collections.

    Every operation loads the aggregate from the store, applies the
    change in memory and hands the whole aggregate back for saving.
    The store only has to provide load/save; both backends share
    this one implementation.
    """

    def __init__(self, store: AggregateStore):
        """Initialize with the backend that loads and saves aggregates"""
        self.store = store

    def add_room(
        self, project_id: int, name: str, description: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Append a room to the project.

        Args:
            project_id: Project ID
            name: Room name
            description: Optional room description

        Returns:
            Updated project record

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the name is empty
        """
        payload = _validate(
            RoomCreate, {"name": name, "description": description}, "Invalid room"
        )
        aggregate = self._load(project_id)

        room = Room(
            id=next_id(aggregate.rooms),
            name=payload.name,
            description=payload.description,
            created_at=utcnow(),
        )
        aggregate.rooms.append(room)

        logger.info(f"Added room {room.id} to project {project_id}")
        return self._save(aggregate)

    def update_room(
        self, project_id: int, room_id: int, patch: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Merge a patch over an existing room. The room id never changes.

        Raises:
            NotFoundError: If the project or the room does not exist
            ValidationError: If the patch has unknown or invalid fields
        """
        changes = _validate(RoomUpdate, patch, "Invalid room update").model_dump(
            exclude_unset=True
        )
        aggregate = self._load(project_id)
        index = self._index_of(aggregate.rooms, room_id, "room", project_id)

        merged = {**aggregate.rooms[index].model_dump(), **changes, "id": room_id}
        aggregate.rooms[index] = _validate(Room, merged, "Invalid room update")

        logger.info(f"Updated room {room_id} in project {project_id}")
        return self._save(aggregate)

    def delete_room(self, project_id: int, room_id: int) -> Dict[str, Any]:
        """
        Remove a room together with every task assigned to it.

        Raises:
            NotFoundError: If the project or the room does not exist
        """
        aggregate = self._load(project_id)
        self._index_of(aggregate.rooms, room_id, "room", project_id)

        aggregate.rooms = [room for room in aggregate.rooms if room.id != room_id]
        kept_tasks = [task for task in aggregate.tasks if task.room_id != room_id]
        removed = len(aggregate.tasks) - len(kept_tasks)
        aggregate.tasks = kept_tasks
        aggregate.progress = compute_progress(aggregate.tasks)

        logger.info(
            f"Deleted room {room_id} and {removed} task(s) from project {project_id}"
        )
        return self._save(aggregate)

    def add_task(
        self, project_id: int, room_id: Optional[int], data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Append a task, optionally attached to a room.

        Args:
            project_id: Project ID
            room_id: Room the task belongs to, or None for a project-wide task
            data: Task fields (name required; status defaults to not_started)

        Returns:
            Updated project record

        Raises:
            NotFoundError: If the project or the referenced room does not exist
            ValidationError: If the task data or the room id is malformed
        """
        payload = _validate(TaskCreate, data, "Invalid task")
        room_id = _validate_id(room_id, "room_id", "Invalid task")
        aggregate = self._load(project_id)

        if room_id is not None:
            self._index_of(aggregate.rooms, room_id, "room", project_id)

        task = Task(
            id=next_id(aggregate.tasks),
            name=payload.name,
            description=payload.description,
            status=payload.status.value,
            room_id=room_id,
            due_date=payload.due_date,
            assigned_to=payload.assigned_to,
            created_at=utcnow(),
        )
        aggregate.tasks.append(task)
        aggregate.progress = compute_progress(aggregate.tasks)

        logger.info(f"Added task {task.id} to project {project_id} (room {room_id})")
        return self._save(aggregate)

    def update_task(
        self, project_id: int, task_id: int, patch: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Merge a patch over an existing task and recompute progress.

        Raises:
            NotFoundError: If the project or the task does not exist
            ValidationError: If the patch is invalid or points at a missing room
        """
        changes = _validate(TaskUpdate, patch, "Invalid task update").model_dump(
            exclude_unset=True
        )
        aggregate = self._load(project_id)
        index = self._index_of(aggregate.tasks, task_id, "task", project_id)

        new_room_id = changes.get("room_id")
        if new_room_id is not None and not any(
            room.id == new_room_id for room in aggregate.rooms
        ):
            raise ValidationError(
                "Task references a room that does not exist",
                [{"field": "room_id", "message": f"Room {new_room_id} not found in project {project_id}"}],
            )
        if isinstance(changes.get("status"), TaskStatus):
            changes["status"] = changes["status"].value

        merged = {**aggregate.tasks[index].model_dump(), **changes, "id": task_id}
        aggregate.tasks[index] = _validate(Task, merged, "Invalid task update")
        aggregate.progress = compute_progress(aggregate.tasks)

        logger.info(f"Updated task {task_id} in project {project_id}")
        return self._save(aggregate)

    def delete_task(self, project_id: int, task_id: int) -> Dict[str, Any]:
        """
        Remove a task and recompute progress.

        Raises:
            NotFoundError: If the project or the task does not exist
        """
        aggregate = self._load(project_id)
        self._index_of(aggregate.tasks, task_id, "task", project_id)

        aggregate.tasks = [task for task in aggregate.tasks if task.id != task_id]
        aggregate.progress = compute_progress(aggregate.tasks)

        logger.info(f"Deleted task {task_id} from project {project_id}")
        return self._save(aggregate)

    def add_log(
        self,
        project_id: int,
        text: str,
        actor_id: int,
        room_id: Optional[int] = None,
        photo_url: Optional[str] = None,
        photo_caption: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Prepend a log entry; a photo URL also prepends a derived photo.

        Args:
            project_id: Project ID
            text: Log text
            actor_id: User writing the log
            room_id: Optional room the entry is about
            photo_url: Optional photo attached to the entry
            photo_caption: Optional caption for the photo

        Returns:
            Updated project record

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the text is empty or the author id is missing
        """
        payload = _validate(
            LogCreate,
            {
                "text": text,
                "room_id": room_id,
                "photo_url": photo_url,
                "photo_caption": photo_caption,
            },
            "Invalid log entry",
        )
        actor_id = _validate_id(actor_id, "actor_id", "Invalid log entry")
        if actor_id is None:
            raise ValidationError(
                "Invalid log entry", [{"field": "actor_id", "message": "Field required"}]
            )
        created_by = CreatedBy(id=actor_id)
        aggregate = self._load(project_id)
        now = utcnow()

        log = Log(
            id=next_id(aggregate.logs),
            text=payload.text,
            room_id=payload.room_id,
            photo_url=payload.photo_url or None,
            photo_caption=payload.photo_caption or None,
            created_at=now,
            created_by=created_by,
        )
        aggregate.logs.insert(0, log)

        if payload.photo_url:
            photo = Photo(
                id=next_id(aggregate.photos),
                url=payload.photo_url,
                caption=payload.photo_caption or None,
                room_id=payload.room_id,
                log_id=log.id,
                created_at=now,
                created_by=created_by,
            )
            aggregate.photos.insert(0, photo)
            logger.info(f"Added photo {photo.id} from log {log.id} to project {project_id}")

        logger.info(f"Added log {log.id} to project {project_id}")
        return self._save(aggregate)

    def configure_reports(
        self, project_id: int, report_settings: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Replace the report settings wholesale.

        A truthy generate_now also stamps the last report date.

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the settings are malformed
        """
        if not isinstance(report_settings, dict):
            raise ValidationError(
                "Report settings must be an object",
                [{"field": "report_settings", "message": "Expected a mapping"}],
            )
        parsed = _validate(ReportSettings, report_settings, "Invalid report settings")
        aggregate = self._load(project_id)

        aggregate.report_settings = dict(report_settings)
        if parsed.generate_now:
            aggregate.last_report_date = utcnow()

        logger.info(f"Configured reports for project {project_id}")
        return self._save(aggregate)

    def _load(self, project_id: int) -> ProjectAggregate:
        aggregate = self.store.load_project_aggregate(project_id)
        if aggregate is None:
            logger.warning(f"Project {project_id} not found")
            raise NotFoundError("project", project_id)
        return aggregate

    def _save(self, aggregate: ProjectAggregate) -> Dict[str, Any]:
        now = utcnow()
        # updated_at must strictly advance even within one clock tick
        if aggregate.updated_at is not None and now <= aggregate.updated_at:
            now = aggregate.updated_at + timedelta(microseconds=1)
        aggregate.updated_at = now
        return self.store.save_project_aggregate(aggregate)

    @staticmethod
    def _index_of(items: Sequence[Any], item_id: int, resource: str, project_id: int) -> int:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        logger.warning(f"{resource.capitalize()} {item_id} not found in project {project_id}")
        raise NotFoundError(resource, item_id, project_id)
