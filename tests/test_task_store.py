import sys
from pathlib import Path
from datetime import date, datetime
import random

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest

from tasklist.store import TaskStore, TaskPriority, TaskNotFoundError


def titles(store):
    return [t.title for t in store.list()]


def test_add_and_list():
    store = TaskStore()

    task = store.add("Test task")

    tasks = store.list()
    assert len(tasks) == 1
    assert tasks[0].title == "Test task"
    assert tasks[0].id == task.id
    assert tasks[0].completed is False


def test_add_grows_by_one_and_is_retrievable():
    store = TaskStore()
    store.add("A")
    before = len(store)

    task = store.add("B", priority=TaskPriority.LOW, due_date=date(2026, 10, 20))

    assert len(store) == before + 1
    found = store.get(task.id)
    assert found is not None
    assert found.title == "B"
    assert found.priority == TaskPriority.LOW
    assert found.due_date == date(2026, 10, 20)


def test_add_preserves_insertion_order():
    store = TaskStore()
    for title in ["A", "B", "C"]:
        store.add(title)

    assert titles(store) == ["A", "B", "C"]


def test_get_unknown_returns_none():
    store = TaskStore()
    store.add("A")

    assert store.get("nope") is None


def test_returned_tasks_are_copies():
    store = TaskStore()
    task = store.add("Original")

    task.title = "Changed outside"
    store.list()[0].completed = True

    stored = store.get(task.id)
    assert stored.title == "Original"
    assert stored.completed is False


def test_remove_middle_position():
    store = TaskStore()
    a, b, c = store.add("A"), store.add("B"), store.add("C")

    removed = store.remove({1})

    assert [t.id for t in removed] == [b.id]
    assert [t.id for t in store.list()] == [a.id, c.id]


def test_remove_several_positions_keeps_order():
    store = TaskStore()
    for title in "ABCDE":
        store.add(title)

    removed = store.remove([3, 0, 3])

    assert [t.title for t in removed] == ["A", "D"]
    assert titles(store) == ["B", "C", "E"]


@pytest.mark.parametrize("positions", [{3}, {-1}, {0, 5}])
def test_remove_out_of_range_changes_nothing(positions):
    store = TaskStore()
    for title in "ABC":
        store.add(title)

    with pytest.raises(IndexError):
        store.remove(positions)

    assert titles(store) == ["A", "B", "C"]


def test_remove_nothing():
    store = TaskStore()
    store.add("A")

    assert store.remove(set()) == []
    assert titles(store) == ["A"]


def test_update_fields():
    store = TaskStore()
    task = store.add("Original", due_date=date(2026, 1, 1))

    updated = store.update(
        task.id,
        title="Updated",
        priority="High",
        due_date=None,
        completed=True,
    )

    assert updated.id == task.id
    assert updated.title == "Updated"
    assert updated.priority == TaskPriority.HIGH
    assert updated.due_date is None
    assert updated.completed is True
    assert store.get(task.id) == updated


def test_update_keeps_position():
    store = TaskStore()
    store.add("A")
    b = store.add("B")
    store.add("C")

    store.update(b.id, title="B2")

    assert titles(store) == ["A", "B2", "C"]


def test_update_due_datetime_becomes_date():
    store = TaskStore()
    task = store.add("A")

    updated = store.update(task.id, due_date=datetime(2026, 5, 1, 23, 59))

    assert updated.due_date == date(2026, 5, 1)


def test_complete_is_idempotent():
    store = TaskStore()
    task = store.add("A")
    store.add("B")

    store.update(task.id, completed=True)
    once = store.list()
    store.update(task.id, completed=True)
    twice = store.list()

    assert once == twice
    assert twice[0].completed is True


def test_update_missing_task_leaves_store_unchanged():
    store = TaskStore()
    store.add("A")
    store.add("B")
    before = store.list()

    with pytest.raises(TaskNotFoundError) as exc_info:
        store.update("missing", title="X")

    assert exc_info.value.task_id == "missing"
    assert "missing" in str(exc_info.value)
    assert store.list() == before


def test_update_rejects_unknown_fields():
    store = TaskStore()
    task = store.add("A")

    with pytest.raises(TypeError):
        store.update(task.id, id="other")
    with pytest.raises(TypeError):
        store.update(task.id, title="B", notes="x")

    assert store.get(task.id).title == "A"


def test_update_bad_priority_changes_nothing():
    store = TaskStore()
    task = store.add("A")

    with pytest.raises(ValueError):
        store.update(task.id, title="B", priority="urgent")

    assert store.get(task.id).title == "A"


def test_ids_stay_distinct_over_random_operations():
    rng = random.Random(1234)
    store = TaskStore()

    for step in range(300):
        if len(store) and rng.random() < 0.4:
            count = rng.randint(1, len(store))
            store.remove(rng.sample(range(len(store)), count))
        else:
            store.add(f"task {step}")

        ids = [t.id for t in store.list()]
        assert len(ids) == len(set(ids))


def test_subscribers_get_snapshot_after_each_mutation():
    store = TaskStore()
    changes = []
    store.subscribe(changes.append)

    task = store.add("A")
    store.update(task.id, completed=True)
    store.remove({0})

    assert [c.action for c in changes] == ["added", "updated", "removed"]
    assert all(c.task_ids == (task.id,) for c in changes)
    assert [t.title for t in changes[0].snapshot] == ["A"]
    assert changes[1].snapshot[0].completed is True
    assert changes[2].snapshot == []


def test_no_notification_without_mutation():
    store = TaskStore()
    store.add("A")
    changes = []
    store.subscribe(changes.append)

    store.remove([])
    with pytest.raises(TaskNotFoundError):
        store.update("missing", completed=True)
    with pytest.raises(IndexError):
        store.remove({4})

    assert changes == []


def test_unsubscribe():
    store = TaskStore()
    changes = []
    unsubscribe = store.subscribe(changes.append)

    store.add("A")
    unsubscribe()
    store.add("B")
    unsubscribe()

    assert len(changes) == 1


def test_failing_subscriber_does_not_block_others():
    store = TaskStore()
    seen = []

    def broken(change):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(seen.append)

    store.add("A")

    assert titles(store) == ["A"]
    assert len(seen) == 1


def test_subscribers_called_in_subscription_order():
    store = TaskStore()
    calls = []
    store.subscribe(lambda change: calls.append(("first", change.action)))
    store.subscribe(lambda change: calls.append(("second", change.action)))

    task = store.add("A")
    store.update(task.id, title="B")

    assert calls == [
        ("first", "added"),
        ("second", "added"),
        ("first", "updated"),
        ("second", "updated"),
    ]


def test_each_subscriber_gets_its_own_snapshot():
    store = TaskStore()
    seen = []

    def meddler(change):
        change.snapshot[0].title = "Tampered"
        change.snapshot.clear()

    store.subscribe(meddler)
    store.subscribe(lambda change: seen.append([t.title for t in change.snapshot]))

    store.add("A")

    assert seen == [["A"]]
    assert titles(store) == ["A"]
