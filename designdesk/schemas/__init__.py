"""Schemas package"""

from .project import (
    TaskStatus,
    CreatedBy,
    Room,
    Task,
    Log,
    Photo,
    RoomCreate,
    RoomUpdate,
    TaskCreate,
    TaskUpdate,
    LogCreate,
    ReportSettings,
    ProjectAggregate,
)

__all__ = [
    "TaskStatus",
    "CreatedBy",
    "Room",
    "Task",
    "Log",
    "Photo",
    "RoomCreate",
    "RoomUpdate",
    "TaskCreate",
    "TaskUpdate",
    "LogCreate",
    "ReportSettings",
    "ProjectAggregate",
]
