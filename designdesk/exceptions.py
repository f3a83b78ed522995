"""Storage error taxonomy shared by every backend and the facade"""

from typing import Any, Dict, List, Optional


class StorageError(Exception):
    """Base class for all storage failures"""


class NotFoundError(StorageError):
    """A project, or a room/task inside a project, does not exist"""

    def __init__(self, resource: str, resource_id: Any, project_id: Optional[int] = None):
        self.resource = resource
        self.resource_id = resource_id
        self.project_id = project_id
        if project_id is not None and resource != "project":
            message = f"{resource.capitalize()} with id {resource_id} not found in project {project_id}"
        else:
            message = f"{resource.capitalize()} with id {resource_id} not found"
        super().__init__(message)


class ValidationError(StorageError):
    """Malformed input: unknown fields, bad types or a dangling room reference"""

    def __init__(self, detail: str, errors: Optional[List[Dict[str, str]]] = None):
        self.detail = detail
        self.errors = errors or []
        super().__init__(detail)

    @classmethod
    def from_pydantic(cls, exc, detail: str = "Validation failed") -> "ValidationError":
        """Build from a pydantic ValidationError"""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or "__root__",
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return cls(detail, errors)


class ConflictError(StorageError):
    """The project changed between read and write"""

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__(f"Project {project_id} was modified concurrently; reload and retry")


class BackendError(StorageError):
    """The underlying engine failed (missing table, lost connection, ...)"""

    def __init__(self, operation: str, original: Exception):
        self.operation = operation
        self.original = original
        super().__init__(f"Storage operation '{operation}' failed: {original}")
