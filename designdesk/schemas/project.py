"""Project aggregate schemas: embedded records, patches and the aggregate itself"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Task workflow status"""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DELAYED = "delayed"
    BLOCKED = "blocked"
    DONE = "done"


class CreatedBy(BaseModel):
    """Reference to the user who created a log or photo"""
    model_config = ConfigDict(extra="allow")

    id: int


# Stored records keep unknown keys so a read-modify-write never drops data


class Room(BaseModel):
    """Room inside a project"""
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime


class Task(BaseModel):
    """Task, optionally attached to a room; ids are unique per project"""
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    description: Optional[str] = None
    status: str = TaskStatus.NOT_STARTED.value
    room_id: Optional[int] = None
    due_date: Optional[date] = None
    assigned_to: Optional[int] = None
    created_at: datetime


class Log(BaseModel):
    """Site log entry, newest first in the collection"""
    model_config = ConfigDict(extra="allow")

    id: int
    text: str
    room_id: Optional[int] = None
    photo_url: Optional[str] = None
    photo_caption: Optional[str] = None
    created_at: datetime
    created_by: CreatedBy


class Photo(BaseModel):
    """Photo derived from a log entry that carried a photo URL"""
    model_config = ConfigDict(extra="allow")

    id: int
    url: str
    caption: Optional[str] = None
    room_id: Optional[int] = None
    log_id: int
    created_at: datetime
    created_by: CreatedBy


# Inputs: unknown fields are rejected


class RoomCreate(BaseModel):
    """Room creation payload"""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255, description="Room name")
    description: Optional[str] = Field(None, description="Room description")


class RoomUpdate(BaseModel):
    """Room patch - all fields optional, id is ignored"""
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(None, exclude=True)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class TaskCreate(BaseModel):
    """Task creation payload; the room is passed separately"""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255, description="Task name")
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    due_date: Optional[date] = None
    assigned_to: Optional[int] = None


class TaskUpdate(BaseModel):
    """Task patch - all fields optional, id is ignored"""
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(None, exclude=True)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    room_id: Optional[int] = None
    due_date: Optional[date] = None
    assigned_to: Optional[int] = None


class LogCreate(BaseModel):
    """Log entry payload"""
    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., min_length=1)
    room_id: Optional[int] = None
    photo_url: Optional[str] = None
    photo_caption: Optional[str] = None


class ReportSettings(BaseModel):
    """Report configuration; stored exactly as supplied once it validates"""
    model_config = ConfigDict(extra="allow")

    auto_generate: bool = False
    frequency: Literal["weekly", "biweekly", "monthly"] = "weekly"
    include_photos: bool = True
    include_notes: bool = True
    recipients: List[str] = Field(default_factory=list)
    generate_now: bool = False


class ProjectAggregate(BaseModel):
    """
    The mutable part of a project: the embedded collections plus the
    fields derived from them. Scalar project columns are not carried.
    """
    model_config = ConfigDict(extra="ignore")

    id: int
    version: int = 1
    progress: int = 0
    rooms: List[Room] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    logs: List[Log] = Field(default_factory=list)
    photos: List[Photo] = Field(default_factory=list)
    report_settings: Optional[Dict[str, Any]] = None
    last_report_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("rooms", "tasks", "logs", "photos", mode="before")
    @classmethod
    def _collection_or_empty(cls, value: Any) -> Any:
        # Legacy rows may hold NULL or a non-list value
        return value if isinstance(value, list) else []

    def to_storage(self) -> Dict[str, Any]:
        """Column values to write back, collections in their JSON form"""
        return {
            "progress": self.progress,
            "rooms": [room.model_dump(mode="json") for room in self.rooms],
            "tasks": [task.model_dump(mode="json") for task in self.tasks],
            "logs": [log.model_dump(mode="json") for log in self.logs],
            "photos": [photo.model_dump(mode="json") for photo in self.photos],
            "report_settings": self.report_settings,
            "last_report_date": self.last_report_date,
            "updated_at": self.updated_at,
        }
