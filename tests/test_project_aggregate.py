"""Tests for project room, task, log and report operations on both backends"""

from datetime import datetime, timedelta

import pytest

from designdesk.exceptions import ConflictError, NotFoundError, ValidationError
from designdesk.models.base import utcnow
from designdesk.schemas.project import Task
from designdesk.services.project_aggregate import compute_progress, next_id


def _task(task_id, status):
    return Task(id=task_id, name=f"Task {task_id}", status=status, created_at=datetime(2024, 1, 1))


class TestAggregateHelpers:
    """Test suite for id assignment and progress calculation"""

    def test_next_id_empty(self):
        """Test that the first id in a collection is 1"""
        assert next_id([]) == 1

    def test_next_id_is_max_plus_one(self):
        """Test that gaps are not reused"""
        assert next_id([_task(1, "done"), _task(5, "done"), _task(3, "done")]) == 6

    def test_progress_without_tasks(self):
        """Test that progress is zero with no tasks"""
        assert compute_progress([]) == 0

    def test_progress_rounds_half_up(self):
        """Test rounding of the done percentage"""
        assert compute_progress([_task(1, "done"), _task(2, "blocked")]) == 50
        assert compute_progress([_task(1, "done"), _task(2, "done"), _task(3, "delayed")]) == 67
        assert compute_progress([_task(1, "done"), _task(2, "in_progress"), _task(3, "delayed")]) == 33
        # 101 of 200 done is 50.5%
        tasks = [_task(i, "done" if i <= 101 else "not_started") for i in range(1, 201)]
        assert compute_progress(tasks) == 51


class TestRooms:
    """Test suite for room operations"""

    def test_room_ids_are_sequential(self, backend, project):
        """Test that rooms get ids 1..n in append order"""
        for name in ["Living Room", "Kitchen", "Master Bedroom"]:
            updated = backend.add_project_room(project["id"], name)

        assert [room["id"] for room in updated["rooms"]] == [1, 2, 3]
        assert [room["name"] for room in updated["rooms"]] == ["Living Room", "Kitchen", "Master Bedroom"]

    def test_room_id_after_deletion(self, backend, project):
        """Test that a new room takes max existing id plus one"""
        for name in ["A", "B", "C"]:
            backend.add_project_room(project["id"], name)

        backend.delete_project_room(project["id"], 2)
        updated = backend.add_project_room(project["id"], "D")
        assert [room["id"] for room in updated["rooms"]] == [1, 3, 4]

        backend.delete_project_room(project["id"], 4)
        backend.delete_project_room(project["id"], 3)
        updated = backend.add_project_room(project["id"], "E")
        assert [room["id"] for room in updated["rooms"]] == [1, 2]

    def test_add_room_with_description(self, backend, project):
        """Test that the room carries its description and a timestamp"""
        updated = backend.add_project_room(project["id"], "Kitchen", "Modular, island counter")

        room = updated["rooms"][0]
        assert room["description"] == "Modular, island counter"
        assert room["created_at"]

    def test_add_room_requires_name(self, backend, project):
        """Test that an empty room name is rejected"""
        with pytest.raises(ValidationError):
            backend.add_project_room(project["id"], "")

    def test_add_room_unknown_project(self, backend):
        """Test adding a room to a missing project"""
        with pytest.raises(NotFoundError) as exc_info:
            backend.add_project_room(999, "Kitchen")

        assert exc_info.value.resource == "project"
        assert exc_info.value.resource_id == 999

    def test_update_room_merges_patch(self, backend, project):
        """Test that a patch changes only the fields it names"""
        backend.add_project_room(project["id"], "Kitchen", "Open plan")

        updated = backend.update_project_room(project["id"], 1, {"name": "Kitchen & Dining"})

        room = updated["rooms"][0]
        assert room["name"] == "Kitchen & Dining"
        assert room["description"] == "Open plan"

    def test_update_room_id_is_immutable(self, backend, project):
        """Test that an id in the patch is ignored"""
        backend.add_project_room(project["id"], "Kitchen")

        updated = backend.update_project_room(project["id"], 1, {"id": 42, "name": "Pantry"})

        assert updated["rooms"][0]["id"] == 1
        assert updated["rooms"][0]["name"] == "Pantry"

    def test_update_missing_room(self, backend, project):
        """Test updating a room that does not exist"""
        with pytest.raises(NotFoundError) as exc_info:
            backend.update_project_room(project["id"], 99, {"name": "x"})

        assert exc_info.value.resource == "room"
        assert exc_info.value.resource_id == 99

    def test_update_room_null_name(self, backend, project):
        """Test that clearing a room name is a validation error"""
        backend.add_project_room(project["id"], "Kitchen")

        with pytest.raises(ValidationError) as exc_info:
            backend.update_project_room(project["id"], 1, {"name": None})

        assert exc_info.value.errors[0]["field"] == "name"
        assert backend.get_project(project["id"])["rooms"][0]["name"] == "Kitchen"

    def test_update_room_unknown_field(self, backend, project):
        """Test that unknown patch fields are rejected"""
        backend.add_project_room(project["id"], "Kitchen")

        with pytest.raises(ValidationError) as exc_info:
            backend.update_project_room(project["id"], 1, {"colour": "teal"})

        assert exc_info.value.errors[0]["field"] == "colour"

    def test_delete_room_cascades_tasks(self, backend, project):
        """Test that deleting a room removes its tasks and recomputes progress"""
        backend.add_project_room(project["id"], "Kitchen")
        backend.add_project_room(project["id"], "Bath")
        backend.add_project_task(project["id"], 1, {"name": "Tiles", "status": "not_started"})
        backend.add_project_task(project["id"], 2, {"name": "Fixtures", "status": "done"})
        backend.add_project_task(project["id"], None, {"name": "Site survey", "status": "done"})
        before = backend.get_project(project["id"])
        assert before["progress"] == 67

        updated = backend.delete_project_room(project["id"], 1)

        assert [room["id"] for room in updated["rooms"]] == [2]
        assert [task["name"] for task in updated["tasks"]] == ["Fixtures", "Site survey"]
        assert updated["progress"] == 100

    def test_delete_missing_room(self, backend, project):
        """Test deleting a room that does not exist"""
        with pytest.raises(NotFoundError):
            backend.delete_project_room(project["id"], 1)


class TestTasks:
    """Test suite for task operations"""

    def test_add_task_defaults(self, backend, project):
        """Test default status and project-wide task"""
        updated = backend.add_project_task(project["id"], None, {"name": "Measure site"})

        task = updated["tasks"][0]
        assert task["id"] == 1
        assert task["status"] == "not_started"
        assert task["room_id"] is None
        assert updated["progress"] == 0

    def test_add_task_to_room(self, backend, project):
        """Test attaching a task to an existing room"""
        backend.add_project_room(project["id"], "Kitchen")

        updated = backend.add_project_task(
            project["id"], 1, {"name": "Install cabinets", "due_date": "2024-07-15", "assigned_to": 1}
        )

        task = updated["tasks"][0]
        assert task["room_id"] == 1
        assert task["due_date"] == "2024-07-15"
        assert task["assigned_to"] == 1

    def test_add_task_missing_room_leaves_project_unchanged(self, backend, project):
        """Test that a task for an unknown room is rejected before mutation"""
        before = backend.get_project(project["id"])

        with pytest.raises(NotFoundError) as exc_info:
            backend.add_project_task(project["id"], 5, {"name": "Paint"})

        assert exc_info.value.resource == "room"
        assert backend.get_project(project["id"]) == before

    def test_add_task_requires_name(self, backend, project):
        """Test that a task without a name is rejected"""
        with pytest.raises(ValidationError):
            backend.add_project_task(project["id"], None, {"status": "done"})

    def test_add_task_invalid_status(self, backend, project):
        """Test that an unknown status is rejected"""
        with pytest.raises(ValidationError):
            backend.add_project_task(project["id"], None, {"name": "Paint", "status": "finished"})

    def test_progress_follows_task_changes(self, backend, project):
        """Test progress after add, update and delete"""
        backend.add_project_task(project["id"], None, {"name": "One", "status": "done"})
        backend.add_project_task(project["id"], None, {"name": "Two", "status": "done"})
        updated = backend.add_project_task(project["id"], None, {"name": "Three", "status": "in_progress"})
        assert updated["progress"] == 67

        updated = backend.update_project_task(project["id"], 3, {"status": "done"})
        assert updated["progress"] == 100

        updated = backend.update_project_task(project["id"], 1, {"status": "blocked"})
        assert updated["progress"] == 67

        updated = backend.delete_project_task(project["id"], 2)
        assert updated["progress"] == 50

        backend.delete_project_task(project["id"], 1)
        updated = backend.delete_project_task(project["id"], 3)
        assert updated["tasks"] == []
        assert updated["progress"] == 0

    def test_task_ids_shared_across_rooms(self, backend, project):
        """Test that task ids are unique per project, not per room"""
        backend.add_project_room(project["id"], "Kitchen")
        backend.add_project_room(project["id"], "Bath")
        backend.add_project_task(project["id"], 1, {"name": "A"})
        updated = backend.add_project_task(project["id"], 2, {"name": "B"})

        assert [task["id"] for task in updated["tasks"]] == [1, 2]

    def test_update_task_missing(self, backend, project):
        """Test updating a task that does not exist"""
        with pytest.raises(NotFoundError) as exc_info:
            backend.update_project_task(project["id"], 7, {"status": "done"})

        assert exc_info.value.resource == "task"

    def test_update_task_null_required_fields(self, backend, project):
        """Test that a patch cannot null out the task name or status"""
        backend.add_project_task(project["id"], None, {"name": "Paint", "status": "done"})

        with pytest.raises(ValidationError) as exc_info:
            backend.update_project_task(project["id"], 1, {"status": None})
        assert exc_info.value.errors[0]["field"] == "status"

        with pytest.raises(ValidationError):
            backend.update_project_task(project["id"], 1, {"name": None})

        task = backend.get_project(project["id"])["tasks"][0]
        assert task["name"] == "Paint"
        assert task["status"] == "done"

    def test_add_task_numeric_string_room_id(self, backend, project):
        """Test that a numeric string room id is read as an int"""
        backend.add_project_room(project["id"], "Kitchen")

        updated = backend.add_project_task(project["id"], "1", {"name": "Cabinets"})

        assert updated["tasks"][0]["room_id"] == 1

    def test_add_task_malformed_room_id(self, backend, project):
        """Test that a non-numeric room id is a validation error, not a missing room"""
        backend.add_project_room(project["id"], "Kitchen")

        with pytest.raises(ValidationError) as exc_info:
            backend.add_project_task(project["id"], "kitchen", {"name": "Cabinets"})

        assert exc_info.value.errors[0]["field"] == "room_id"
        assert backend.get_project(project["id"])["tasks"] == []

    def test_update_task_to_missing_room(self, backend, project):
        """Test that re-pointing a task at a missing room is rejected"""
        backend.add_project_task(project["id"], None, {"name": "Paint"})

        with pytest.raises(ValidationError):
            backend.update_project_task(project["id"], 1, {"room_id": 3})

        assert backend.get_project(project["id"])["tasks"][0]["room_id"] is None

    def test_update_task_moves_room(self, backend, project):
        """Test moving a task to another existing room"""
        backend.add_project_room(project["id"], "Kitchen")
        backend.add_project_room(project["id"], "Bath")
        backend.add_project_task(project["id"], 1, {"name": "Lights"})

        updated = backend.update_project_task(project["id"], 1, {"room_id": 2, "name": "Vanity lights"})

        task = updated["tasks"][0]
        assert task["room_id"] == 2
        assert task["name"] == "Vanity lights"
        assert task["id"] == 1

    def test_delete_task_missing(self, backend, project):
        """Test deleting a task that does not exist"""
        with pytest.raises(NotFoundError):
            backend.delete_project_task(project["id"], 1)


class TestLogs:
    """Test suite for site logs and derived photos"""

    def test_logs_are_newest_first(self, backend, project):
        """Test that log entries are prepended"""
        backend.add_project_log(project["id"], "Demolition started", 1)
        updated = backend.add_project_log(project["id"], "Electrical rough-in done", 1)

        assert [log["text"] for log in updated["logs"]] == ["Electrical rough-in done", "Demolition started"]
        assert [log["id"] for log in updated["logs"]] == [2, 1]
        assert updated["logs"][0]["created_by"] == {"id": 1}
        assert updated["photos"] == []

    def test_log_with_photo_derives_photo(self, backend, project):
        """Test that a photo URL adds exactly one linked photo"""
        backend.add_project_room(project["id"], "Kitchen")

        updated = backend.add_project_log(
            project["id"],
            "Counter installed",
            3,
            room_id=1,
            photo_url="https://cdn.example.com/counter.jpg",
            photo_caption="Quartz top",
        )

        log = updated["logs"][0]
        assert len(updated["photos"]) == 1
        photo = updated["photos"][0]
        assert photo["id"] == 1
        assert photo["url"] == "https://cdn.example.com/counter.jpg"
        assert photo["caption"] == "Quartz top"
        assert photo["log_id"] == log["id"]
        assert photo["room_id"] == log["room_id"] == 1
        assert photo["created_by"] == {"id": 3}

    def test_photos_are_newest_first(self, backend, project):
        """Test that derived photos are prepended"""
        backend.add_project_log(project["id"], "Before", 1, photo_url="https://cdn.example.com/1.jpg")
        backend.add_project_log(project["id"], "No photo", 1)
        updated = backend.add_project_log(project["id"], "After", 1, photo_url="https://cdn.example.com/2.jpg")

        assert [photo["url"] for photo in updated["photos"]] == [
            "https://cdn.example.com/2.jpg",
            "https://cdn.example.com/1.jpg",
        ]
        assert [photo["log_id"] for photo in updated["photos"]] == [3, 1]

    def test_empty_photo_url_adds_no_photo(self, backend, project):
        """Test that an empty photo URL is treated as absent"""
        updated = backend.add_project_log(project["id"], "Note", 1, photo_url="")

        assert updated["photos"] == []

    def test_log_author_must_be_an_id(self, backend, project):
        """Test that a missing or malformed author id is a validation error"""
        with pytest.raises(ValidationError) as exc_info:
            backend.add_project_log(project["id"], "Note", None)
        assert exc_info.value.errors == [{"field": "actor_id", "message": "Field required"}]

        with pytest.raises(ValidationError):
            backend.add_project_log(project["id"], "Note", "site-manager")

        assert backend.get_project(project["id"])["logs"] == []

    def test_empty_log_text(self, backend, project):
        """Test that empty log text is rejected"""
        with pytest.raises(ValidationError):
            backend.add_project_log(project["id"], "", 1)


class TestReports:
    """Test suite for report settings"""

    def test_configure_replaces_settings(self, backend, project):
        """Test that settings are replaced wholesale"""
        backend.configure_project_reports(
            project["id"], {"auto_generate": True, "recipients": ["client@example.com"]}
        )

        updated = backend.configure_project_reports(project["id"], {"frequency": "monthly"})

        assert updated["report_settings"] == {"frequency": "monthly"}
        assert updated["last_report_date"] is None

    def test_generate_now_stamps_report_date(self, backend, project):
        """Test that generate_now records the report time"""
        updated = backend.configure_project_reports(
            project["id"], {"auto_generate": True, "generate_now": True}
        )

        assert isinstance(updated["last_report_date"], datetime)

    def test_invalid_settings(self, backend, project):
        """Test that malformed settings are rejected"""
        with pytest.raises(ValidationError):
            backend.configure_project_reports(project["id"], {"frequency": "hourly"})

    def test_projects_due_for_report(self, backend):
        """Test selecting projects whose automatic report is due"""
        never = backend.create_project({"name": "Never reported"})
        recent = backend.create_project({"name": "Recently reported"})
        manual = backend.create_project({"name": "Manual only"})
        backend.configure_project_reports(never["id"], {"auto_generate": True})
        backend.configure_project_reports(recent["id"], {"auto_generate": True, "generate_now": True})
        backend.configure_project_reports(manual["id"], {"auto_generate": False})

        due_now = backend.list_projects_due_for_report()
        due_later = backend.list_projects_due_for_report(now=utcnow() + timedelta(days=8))

        assert [project["id"] for project in due_now] == [never["id"]]
        assert [project["id"] for project in due_later] == [never["id"], recent["id"]]


class TestAggregateWrites:
    """Test suite for timestamps and concurrent writes"""

    def test_updated_at_advances(self, backend, project):
        """Test that every mutation moves updated_at forward"""
        first = backend.add_project_room(project["id"], "Kitchen")
        second = backend.update_project_room(project["id"], 1, {"description": "Open"})
        third = backend.add_project_log(project["id"], "Note", 1)

        assert project["updated_at"] < first["updated_at"] < second["updated_at"] < third["updated_at"]

    def test_version_increments(self, backend, project):
        """Test that each aggregate write bumps the version"""
        assert project["version"] == 1

        updated = backend.add_project_room(project["id"], "Kitchen")

        assert updated["version"] == 2

    def test_stale_write_is_rejected(self, backend, project):
        """Test that saving an outdated aggregate raises a conflict"""
        stale = backend.load_project_aggregate(project["id"])
        backend.add_project_room(project["id"], "Kitchen")

        with pytest.raises(ConflictError):
            backend.save_project_aggregate(stale)

        assert len(backend.get_project(project["id"])["rooms"]) == 1

    def test_scalar_fields_survive_mutations(self, backend, project):
        """Test that aggregate writes leave scalar columns alone"""
        updated = backend.add_project_task(project["id"], None, {"name": "Paint"})

        assert updated["name"] == "Sharma Residence"
        assert updated["location"] == "Pune"
        assert updated["status"] == "planning"
