"""Project management endpoints"""

from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends, Response, status

from designdesk.api.dependencies import get_storage
from designdesk.exceptions import NotFoundError, ValidationError
from designdesk.storage.adapter import StorageAdapter

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


def _require_project(project: Any, project_id: int) -> Dict[str, Any]:
    if project is None:
        raise NotFoundError("project", project_id)
    return project


@router.get("", status_code=status.HTTP_200_OK)
def list_projects(storage: StorageAdapter = Depends(get_storage)) -> List[Dict[str, Any]]:
    """List all projects"""
    return storage.get_projects()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """
    Create a project

    Rooms, tasks, logs, photos and progress in the body are ignored;
    a new project always starts empty.
    """
    return storage.create_project(payload)


@router.get("/{project_id}", status_code=status.HTTP_200_OK)
def get_project(project_id: int, storage: StorageAdapter = Depends(get_storage)) -> Dict[str, Any]:
    """Get a project with its rooms, tasks, logs and photos"""
    return _require_project(storage.get_project(project_id), project_id)


@router.patch("/{project_id}", status_code=status.HTTP_200_OK)
def update_project(
    project_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Update scalar project fields"""
    return _require_project(storage.update_project(project_id, payload), project_id)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, storage: StorageAdapter = Depends(get_storage)) -> Response:
    """Delete a project"""
    if not storage.delete_project(project_id):
        raise NotFoundError("project", project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Rooms


@router.post("/{project_id}/rooms", status_code=status.HTTP_201_CREATED)
def add_room(
    project_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Add a room to a project"""
    unknown = sorted(set(payload) - {"name", "description"})
    if unknown:
        raise ValidationError(
            "Invalid room",
            [{"field": name, "message": "Unknown field"} for name in unknown],
        )
    return storage.add_project_room(project_id, payload.get("name"), payload.get("description"))


@router.patch("/{project_id}/rooms/{room_id}", status_code=status.HTTP_200_OK)
def update_room(
    project_id: int,
    room_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Update a room"""
    return storage.update_project_room(project_id, room_id, payload)


@router.delete("/{project_id}/rooms/{room_id}", status_code=status.HTTP_200_OK)
def delete_room(
    project_id: int,
    room_id: int,
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Delete a room and every task assigned to it"""
    return storage.delete_project_room(project_id, room_id)


# Tasks


@router.post("/{project_id}/tasks", status_code=status.HTTP_201_CREATED)
def add_task(
    project_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Add a task; roomId in the body attaches it to a room"""
    data = dict(payload)
    room_id = data.pop("roomId", None)
    return storage.add_project_task(project_id, room_id, data)


@router.patch("/{project_id}/tasks/{task_id}", status_code=status.HTTP_200_OK)
def update_task(
    project_id: int,
    task_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Update a task"""
    return storage.update_project_task(project_id, task_id, payload)


@router.delete("/{project_id}/tasks/{task_id}", status_code=status.HTTP_200_OK)
def delete_task(
    project_id: int,
    task_id: int,
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Delete a task"""
    return storage.delete_project_task(project_id, task_id)


# Logs and reports


@router.post("/{project_id}/logs", status_code=status.HTTP_201_CREATED)
def add_log(
    project_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """
    Add a site log entry

    Body: text, userId, and optionally roomId, photoUrl, photoCaption.
    A photoUrl also adds a photo to the project gallery.
    """
    unknown = sorted(set(payload) - {"text", "userId", "roomId", "photoUrl", "photoCaption"})
    if unknown:
        raise ValidationError(
            "Invalid log entry",
            [{"field": name, "message": "Unknown field"} for name in unknown],
        )
    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise ValidationError(
            "Invalid log entry",
            [{"field": "userId", "message": "Field required"}],
        )

    return storage.add_project_log(
        project_id,
        payload.get("text"),
        user_id,
        room_id=payload.get("roomId"),
        photo_url=payload.get("photoUrl"),
        photo_caption=payload.get("photoCaption"),
    )


@router.put("/{project_id}/report-settings", status_code=status.HTTP_200_OK)
def configure_reports(
    project_id: int,
    payload: Dict[str, Any] = Body(...),
    storage: StorageAdapter = Depends(get_storage),
) -> Dict[str, Any]:
    """Replace the project's report settings"""
    return storage.configure_project_reports(project_id, payload)
