"""Tests for the append-only repositories: usage events, activity logs and tasks."""

import pytest
from datetime import datetime, timedelta

from frontdesk.db.database_models import TaskDO, TASK_COMPLETED
from frontdesk.db.repositories import ActivityLogRepository, TaskRepository, UsageEventRepository


NOW = datetime(2026, 3, 2, 9, 30, 0)


@pytest.fixture
def events(db):
    return UsageEventRepository(db.conn)


@pytest.fixture
def activity(db):
    return ActivityLogRepository(db.conn)


@pytest.fixture
def tasks(db):
    return TaskRepository(db.conn)


class TestUsageEventRepository:
    """SUT: UsageEventRepository"""

    def test_count_since_is_inclusive(self, events):
        """Events at exactly ``since`` should be counted."""
        events.append("p1", "action", "generate_seo_post", NOW - timedelta(seconds=60))
        events.append("p1", "action", "generate_seo_post", NOW)
        assert events.count_since("p1", "action", NOW - timedelta(seconds=60)) == 2
        assert events.count_since("p1", "action", NOW - timedelta(seconds=59)) == 1

    def test_count_scoped_by_category_and_project(self, events):
        """Counts should only include the requested project and category."""
        events.append("p1", "action", "a", NOW)
        events.append("p1", "llm", "seo_post", NOW)
        events.append("p2", "action", "a", NOW)
        assert events.count_since("p1", "action", NOW - timedelta(hours=1)) == 1
        assert events.count_since("p1", "llm", NOW - timedelta(hours=1)) == 1

    def test_empty_count_is_zero(self, events):
        assert events.count_since("p1", "action", NOW) == 0


class TestActivityLogRepository:
    """SUT: ActivityLogRepository"""

    def test_add_returns_id(self, activity):
        row_id = activity.add("p1", "generate_seo_post", "success", {"userMessage": "hi"}, {"success": True})
        assert isinstance(row_id, int)

    def test_list_newest_first(self, activity):
        """Rows should be listed newest first with JSON decoded."""
        activity.add("p1", "a1", "success", {"n": 1}, {"success": True})
        activity.add("p1", "a2", "failed", {"n": 2}, {"success": False})
        rows = activity.list_by_project("p1")
        assert [r["action_type"] for r in rows] == ["a2", "a1"]
        assert rows[0]["input_payload"] == {"n": 2}
        assert rows[0]["result"] == {"success": False}


class TestTaskRepository:
    """SUT: TaskRepository"""

    def test_count_pending(self, tasks):
        """Only pending tasks of the project should be counted."""
        tasks.create(TaskDO(id="t1", project_id="p1", action_type="follow_up", execute_at=NOW))
        tasks.create(TaskDO(id="t2", project_id="p1", action_type="follow_up", execute_at=NOW,
                            status=TASK_COMPLETED))
        tasks.create(TaskDO(id="t3", project_id="p2", action_type="follow_up", execute_at=NOW))
        assert tasks.count_pending("p1") == 1

    def test_list_by_project(self, tasks):
        """Tasks should be listed by execution time with context decoded."""
        tasks.create(TaskDO(id="late", project_id="p1", action_type="follow_up",
                            execute_at=NOW + timedelta(hours=2), context={"note": "later"}))
        tasks.create(TaskDO(id="early", project_id="p1", action_type="follow_up",
                            execute_at=NOW, chat_id="42"))
        listed = tasks.list_by_project("p1")
        assert [t.id for t in listed] == ["early", "late"]
        assert listed[0].chat_id == "42"
        assert listed[1].context == {"note": "later"}
