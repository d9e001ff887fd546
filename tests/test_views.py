"""Tests for derived task views."""

from datetime import date

import pytest

from taskflow.models import ALL, UNCATEGORIZED, Category, FilterCriteria, Task
from taskflow.services import views


def make_task(task_id: str, **fields) -> Task:
    data = {"id": task_id, "title": f"Task {task_id}", "category_id": "1"}
    data.update(fields)
    return Task(**data)


@pytest.fixture
def tasks():
    return [
        make_task("1", title="Write report", description="Quarterly numbers", priority="high"),
        make_task("2", title="Buy milk", category_id="3", priority="low"),
        make_task("3", title="Pay rent", category_id="2", completed=True),
        make_task("4", title="Fix REPORT typo", category_id="9", completed=True, priority="high"),
    ]


@pytest.fixture
def categories():
    return [
        Category(id="1", name="Work", color="#3b82f6"),
        Category(id="2", name="Personal", color="#8b5cf6"),
        Category(id="3", name="Shopping", color="#10b981"),
    ]


class TestFiltering:
    """Test filter predicates and the active/completed split."""

    def test_default_criteria_pass_everything(self, tasks):
        """Test that the default criteria keep every task in store order."""
        assert [t.id for t in views.filter_tasks(tasks, FilterCriteria())] == ["1", "2", "3", "4"]

    def test_category_filter(self, tasks):
        criteria = FilterCriteria(selected_category="1")
        assert [t.id for t in views.filter_tasks(tasks, criteria)] == ["1"]

    def test_unknown_category_ids_are_included_under_all(self, tasks):
        assert "4" in [t.id for t in views.filter_tasks(tasks, FilterCriteria(selected_category=ALL))]

    def test_priority_filter(self, tasks):
        criteria = FilterCriteria(priority_filter="high")
        assert [t.id for t in views.filter_tasks(tasks, criteria)] == ["1", "4"]

    def test_search_is_case_insensitive_over_title_and_description(self, tasks):
        """Test that the query matches title or description, ignoring case."""
        criteria = FilterCriteria(search_query="report")
        assert [t.id for t in views.filter_tasks(tasks, criteria)] == ["1", "4"]

        criteria = FilterCriteria(search_query="QUARTERLY")
        assert [t.id for t in views.filter_tasks(tasks, criteria)] == ["1"]

    def test_whitespace_query_is_not_empty(self, tasks):
        """Test that a space query matches on spaces instead of passing everything."""
        tasks = tasks + [make_task("5", title="Groceries", description="")]
        criteria = FilterCriteria(search_query=" ")
        assert [t.id for t in views.filter_tasks(tasks, criteria)] == ["1", "2", "3", "4"]

    def test_predicates_combine(self, tasks):
        criteria = FilterCriteria(selected_category="1", priority_filter="low")
        assert views.filter_tasks(tasks, criteria) == []

    def test_active_and_completed_partition_filtered(self, tasks):
        """Test that active and completed are disjoint and cover the filtered set."""
        criteria = FilterCriteria(priority_filter="high")
        active = views.active_tasks(tasks, criteria)
        completed = views.completed_tasks(tasks, criteria)

        assert [t.id for t in active] == ["1"]
        assert [t.id for t in completed] == ["4"]
        assert {t.id for t in active} | {t.id for t in completed} == {
            t.id for t in views.filter_tasks(tasks, criteria)
        }


class TestCompletionPercentage:
    """Test the completion metric."""

    def test_empty_collection(self):
        assert views.completion_percentage([]) == 0

    def test_half_done(self, tasks):
        assert views.completion_percentage(tasks) == 50

    def test_ignores_filters(self, tasks):
        """Test that the metric is computed over all tasks."""
        view = views.build_view(tasks, [], FilterCriteria(selected_category="2"))
        assert view.completion_percentage == 50
        assert view.total_count == 4

    @pytest.mark.parametrize("done,total,expected", [
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (0, 5, 0),
        (199, 200, 99),
        (3, 3, 100),
    ])
    def test_rounding(self, done, total, expected):
        tasks = [make_task(str(i), completed=i < done) for i in range(total)]
        assert views.completion_percentage(tasks) == expected


class TestCategories:
    """Test category counts and resolution."""

    def test_category_task_count_is_unfiltered(self, tasks):
        assert views.category_task_count(tasks, "1") == 1
        assert views.category_task_count(tasks, "9") == 1
        assert views.category_task_count(tasks, "5") == 0

    def test_category_counts(self, tasks, categories):
        assert views.category_counts(tasks, categories) == {"1": 1, "2": 1, "3": 1}

    def test_resolve_known_category(self, categories):
        assert views.resolve_category(categories, "2").name == "Personal"

    @pytest.mark.parametrize("category_id", [None, "", "42"])
    def test_resolve_falls_back_to_uncategorized(self, categories, category_id):
        category = views.resolve_category(categories, category_id)
        assert category == UNCATEGORIZED
        assert category.name == "Uncategorized"
        assert category.color == "#94a3b8"


class TestDueDates:
    """Test due-date labels."""

    TODAY = date(2026, 10, 18)

    def test_no_due_date(self):
        task = make_task("1")
        assert views.due_date_label(task, self.TODAY) is None
        assert views.is_overdue(task, self.TODAY) is False

    def test_due_today(self):
        task = make_task("1", due_date=self.TODAY)
        assert views.due_date_label(task, self.TODAY) == "Today"
        assert views.is_overdue(task, self.TODAY) is False

    def test_overdue(self):
        task = make_task("1", due_date=date(2026, 10, 17))
        assert views.due_date_label(task, self.TODAY) == "Overdue"
        assert views.is_overdue(task, self.TODAY) is True

    def test_future_date_label(self):
        task = make_task("1", due_date=date(2026, 12, 5))
        assert views.due_date_label(task, self.TODAY) == "Dec 5"
