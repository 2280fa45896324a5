from __future__ import annotations

from datetime import date

from app.services.task_stats import compute_stats


def test_stats_on_empty_collection():
    stats = compute_stats([])
    assert stats.total_tasks == 0
    assert stats.completion_rate == 0


def test_stats_counts_by_state_and_priority(store):
    store.create({"title": "a", "priority": "high"})
    store.create({"title": "b", "scheduled_time": "10:00"})
    store.create({"title": "c", "completed": True, "priority": "low"})

    stats = compute_stats(store.get_all(), today=date(2025, 3, 10))
    assert stats.total_tasks == 3
    assert stats.completed_tasks == 1
    assert stats.scheduled_tasks == 1
    assert stats.unscheduled_tasks == 1
    assert stats.completed_today == 1
    assert stats.completion_rate == 33
    assert stats.by_priority["high"].open == 1
    assert stats.by_priority["low"].completed == 1


def test_completed_today_uses_updated_date(store):
    store.create({"title": "a", "completed": True})
    assert compute_stats(store.get_all(), today=date(2025, 3, 11)).completed_today == 0


def test_completion_rate_rounds_halves_up(store):
    for n in range(8):
        store.create({"title": f"t{n}", "completed": n < 1})
    assert compute_stats(store.get_all()).completion_rate == 13

    for task in store.get_all()[1:5]:
        store.update(task.id, {"completed": True})
    assert compute_stats(store.get_all()).completion_rate == 63
