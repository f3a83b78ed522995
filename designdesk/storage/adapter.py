"""Repository facade: camelCase at the edge, snake_case in storage"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from designdesk.storage.base import StorageBackend
from designdesk.utils.casing import convert_keys_to_camel, convert_keys_to_snake


def _incoming(data: Dict[str, Any]) -> Dict[str, Any]:
    return convert_keys_to_snake(data)


def _outgoing(value: Any) -> Any:
    return convert_keys_to_camel(value)


class StorageAdapter:
    """
    Single entry point callers use to reach storage.

    Converts input keys camelCase -> snake_case before delegating and
    every result snake_case -> camelCase on the way out, nested
    collections included. It holds no business logic and lets every
    storage error propagate.
    """

    def __init__(self, backend: StorageBackend):
        """Wrap a concrete storage backend"""
        self.backend = backend

    # Users

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_user(user_id))

    def get_user_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_user_by_username(username))

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_user_by_email(email))

    def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_user(_incoming(data)))

    def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_user(user_id, _incoming(data)))

    # Leads

    def get_leads(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_leads(user_id))

    def get_leads_by_stage(self, stage: str) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_leads_by_stage(stage))

    def get_lead(self, lead_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_lead(lead_id))

    def create_lead(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_lead(_incoming(data)))

    def update_lead(self, lead_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_lead(lead_id, _incoming(data)))

    def delete_lead(self, lead_id: int) -> bool:
        return self.backend.delete_lead(lead_id)

    # Clients

    def get_clients(self) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_clients())

    def get_client(self, client_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_client(client_id))

    def create_client(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_client(_incoming(data)))

    def update_client(self, client_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_client(client_id, _incoming(data)))

    def delete_client(self, client_id: int) -> bool:
        return self.backend.delete_client(client_id)

    # Projects

    def get_projects(self) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_projects())

    def get_project(self, project_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_project(project_id))

    def get_projects_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_projects_by_client_id(client_id))

    def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_project(_incoming(data)))

    def update_project(self, project_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_project(project_id, _incoming(data)))

    def delete_project(self, project_id: int) -> bool:
        return self.backend.delete_project(project_id)

    def list_projects_due_for_report(
        self, now: Optional[datetime] = None, interval_days: int = 7
    ) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.list_projects_due_for_report(now, interval_days))

    # Project aggregate

    def add_project_room(
        self, project_id: int, name: str, description: Optional[str] = None
    ) -> Dict[str, Any]:
        return _outgoing(self.backend.add_project_room(project_id, name, description))

    def update_project_room(self, project_id: int, room_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.update_project_room(project_id, room_id, _incoming(patch)))

    def delete_project_room(self, project_id: int, room_id: int) -> Dict[str, Any]:
        return _outgoing(self.backend.delete_project_room(project_id, room_id))

    def add_project_task(
        self, project_id: int, room_id: Optional[int], data: Dict[str, Any]
    ) -> Dict[str, Any]:
        return _outgoing(self.backend.add_project_task(project_id, room_id, _incoming(data)))

    def update_project_task(self, project_id: int, task_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.update_project_task(project_id, task_id, _incoming(patch)))

    def delete_project_task(self, project_id: int, task_id: int) -> Dict[str, Any]:
        return _outgoing(self.backend.delete_project_task(project_id, task_id))

    def add_project_log(
        self,
        project_id: int,
        text: str,
        actor_id: int,
        room_id: Optional[int] = None,
        photo_url: Optional[str] = None,
        photo_caption: Optional[str] = None,
    ) -> Dict[str, Any]:
        return _outgoing(
            self.backend.add_project_log(
                project_id,
                text,
                actor_id,
                room_id=room_id,
                photo_url=photo_url,
                photo_caption=photo_caption,
            )
        )

    def configure_project_reports(self, project_id: int, report_settings: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(
            self.backend.configure_project_reports(project_id, _incoming(report_settings))
        )

    # Proposals

    def get_proposals(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_proposals(user_id))

    def get_proposal(self, proposal_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_proposal(proposal_id))

    def get_proposals_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_proposals_by_client_id(client_id))

    def create_proposal(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_proposal(_incoming(data)))

    def update_proposal(self, proposal_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_proposal(proposal_id, _incoming(data)))

    def delete_proposal(self, proposal_id: int) -> bool:
        return self.backend.delete_proposal(proposal_id)

    # Moodboards

    def get_moodboards(self) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_moodboards())

    def get_moodboard(self, moodboard_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_moodboard(moodboard_id))

    def get_moodboards_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_moodboards_by_client_id(client_id))

    def get_moodboard_templates(self) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_moodboard_templates())

    def duplicate_moodboard(self, moodboard_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.duplicate_moodboard(moodboard_id))

    def create_moodboard(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_moodboard(_incoming(data)))

    def update_moodboard(self, moodboard_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_moodboard(moodboard_id, _incoming(data)))

    def delete_moodboard(self, moodboard_id: int) -> bool:
        return self.backend.delete_moodboard(moodboard_id)

    # Estimates

    def get_estimates(self) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_estimates())

    def get_estimate(self, estimate_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_estimate(estimate_id))

    def get_estimates_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_estimates_by_client_id(client_id))

    def get_estimates_by_lead_id(self, lead_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_estimates_by_lead_id(lead_id))

    def get_estimate_templates(self) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_estimate_templates())

    def create_estimate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_estimate(_incoming(data)))

    def update_estimate(self, estimate_id: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.update_estimate(estimate_id, _incoming(data)))

    def delete_estimate(self, estimate_id: int) -> bool:
        return self.backend.delete_estimate(estimate_id)

    # Activities

    def get_activities(self, user_id: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_activities(user_id, limit))

    def get_activity(self, activity_id: int) -> Optional[Dict[str, Any]]:
        return _outgoing(self.backend.get_activity(activity_id))

    def get_activities_by_client_id(self, client_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_activities_by_client_id(client_id))

    def get_activities_by_project_id(self, project_id: int) -> List[Dict[str, Any]]:
        return _outgoing(self.backend.get_activities_by_project_id(project_id))

    def create_activity(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return _outgoing(self.backend.create_activity(_incoming(data)))
