"""Tests for dayplanner.services.suggestion_service."""

import json

import pytest

from dayplanner.models.task import Task
from dayplanner.models.task_history import HistoricalTask
from dayplanner.models.task_suggestion import TaskSuggestion
from dayplanner.services import suggestion_service
from dayplanner.services.suggestion_service import (
    DEFAULT_SUGGESTIONS,
    FALLBACK_SUGGESTIONS,
    validate_suggestions,
)
from dayplanner.utils.ai_engine import CompletionError
from dayplanner.utils.errors import NotFoundError, ValidationError

from .conftest import DEFAULT_NOW
from .fakes import FakeCompletion


def suggestion(**overrides):
    item = {
        "activity": "Reading",
        "description": "Read two chapters",
        "startTime": 20,
        "duration": 1,
        "category": "Personal",
        "confidence": 75,
        "reasoning": "You read most evenings",
    }
    item.update(overrides)
    return item


def completion_body(*items):
    return json.dumps({"suggestions": list(items)})


def add_history(db, user_id="user-1", count=3):
    for i in range(count):
        db.add(HistoricalTask(
            task_id=f"old-{i}", user_id=user_id, date="2026-03-01", day_of_week="sunday",
            start_time=8 + i, duration=1, activity=f"Old {i}", completed=bool(i % 2),
            original_date="2026-03-01", actual_date="2026-03-01", archived_at=1000 + i,
        ))
    db.commit()


class TestValidateSuggestions:
    def test_accepts_two(self):
        items = validate_suggestions(completion_body(suggestion(), suggestion(startTime=7, category=None)))
        assert [i["startTime"] for i in items] == [20, 7]
        assert items[1]["category"] == "General"

    @pytest.mark.parametrize("bad", [
        {"startTime": 24},
        {"startTime": 9.5},
        {"startTime": "9"},
        {"duration": 5},
        {"duration": 0.5},
        {"confidence": 101},
        {"description": "x" * 100},
        {"activity": ""},
    ])
    def test_rejects_out_of_range(self, bad):
        with pytest.raises(ValueError):
            validate_suggestions(completion_body(suggestion(**bad), suggestion()))

    def test_rejects_wrong_count(self):
        with pytest.raises(ValueError):
            validate_suggestions(completion_body(suggestion()))
        with pytest.raises(ValueError):
            validate_suggestions(completion_body(suggestion(), suggestion(), suggestion()))

    def test_rejects_non_json(self):
        with pytest.raises(ValueError):
            validate_suggestions("Sure! Here are your suggestions")


class TestGenerateSuggestions:
    def test_defaults_without_history(self, db, make_prefs):
        make_prefs()
        completion = FakeCompletion()

        result = suggestion_service.generate_suggestions(db, completion, "user-1", "monday")

        assert [s["activity"] for s in result] == [d["activity"] for d in DEFAULT_SUGGESTIONS]
        assert completion.prompts == []
        stored = db.query(TaskSuggestion).all()
        assert len(stored) == 3
        assert all(s.processed is False for s in stored)

    def test_existing_unprocessed_are_reused(self, db, make_prefs):
        make_prefs()
        first = suggestion_service.generate_suggestions(db, FakeCompletion(), "user-1", "monday")
        second = suggestion_service.generate_suggestions(db, FakeCompletion(), "user-1", "monday")
        assert {s["id"] for s in first} == {s["id"] for s in second}
        assert db.query(TaskSuggestion).count() == 3

    def test_llm_suggestions_are_persisted(self, db, make_prefs):
        make_prefs()
        add_history(db)
        completion = FakeCompletion(completion_body(suggestion(), suggestion(activity="Walk", startTime=7)))

        result = suggestion_service.generate_suggestions(db, completion, "user-1", "monday")

        assert sorted(s["activity"] for s in result) == ["Reading", "Walk"]
        assert all(s["id"] for s in result)
        assert "Old 0" in completion.prompts[0]
        assert db.query(TaskSuggestion).count() == 2

    def test_malformed_output_falls_back_without_saving(self, db, make_prefs):
        make_prefs()
        add_history(db)
        completion = FakeCompletion(completion_body(suggestion()))

        result = suggestion_service.generate_suggestions(db, completion, "user-1", "monday")

        assert [s["activity"] for s in result] == [f["activity"] for f in FALLBACK_SUGGESTIONS]
        assert all(s["id"] is None for s in result)
        assert db.query(TaskSuggestion).count() == 0

    def test_provider_error_falls_back(self, db, make_prefs):
        make_prefs()
        add_history(db)
        completion = FakeCompletion(exc=CompletionError("timeout"))

        result = suggestion_service.generate_suggestions(db, completion, "user-1", "monday")

        assert len(result) == len(FALLBACK_SUGGESTIONS)

    def test_history_is_capped(self, db, make_prefs):
        make_prefs()
        add_history(db, count=40)
        completion = FakeCompletion(exc=CompletionError("timeout"))

        suggestion_service.generate_suggestions(db, completion, "user-1", "monday")

        assert completion.prompts[0].count('"activity": "Old') == 30


class TestAcceptDismiss:
    def test_accept_creates_task(self, db, make_prefs):
        make_prefs()
        first = suggestion_service.generate_suggestions(db, FakeCompletion(), "user-1", "monday")[0]

        task = suggestion_service.accept_suggestion(db, "user-1", first["id"], "tomorrow", DEFAULT_NOW)

        assert task.activity == first["activity"]
        assert task.start_time == first["startTime"]
        assert task.date == "2026-03-03"
        assert db.get(TaskSuggestion, first["id"]).processed is True
        assert db.query(Task).count() == 1

    def test_accept_twice_rejected(self, db, make_prefs):
        make_prefs()
        first = suggestion_service.generate_suggestions(db, FakeCompletion(), "user-1", "monday")[0]
        suggestion_service.accept_suggestion(db, "user-1", first["id"], "today", DEFAULT_NOW)
        with pytest.raises(ValidationError):
            suggestion_service.accept_suggestion(db, "user-1", first["id"], "tomorrow", DEFAULT_NOW)

    def test_dismiss(self, db, make_prefs):
        make_prefs()
        first = suggestion_service.generate_suggestions(db, FakeCompletion(), "user-1", "monday")[0]
        suggestion_service.dismiss_suggestion(db, "user-1", first["id"])
        assert db.get(TaskSuggestion, first["id"]).processed is True
        assert db.query(Task).count() == 0

    def test_other_users_suggestion_not_found(self, db, make_prefs):
        make_prefs()
        first = suggestion_service.generate_suggestions(db, FakeCompletion(), "user-1", "monday")[0]
        with pytest.raises(NotFoundError):
            suggestion_service.dismiss_suggestion(db, "user-2", first["id"])
