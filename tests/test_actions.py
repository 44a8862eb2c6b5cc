"""Tests for typed actions and their remote mapping."""
import asyncio

import pytest

from buddy_sync.offline.actions import (
    ACTION_TYPES,
    AddXp,
    PendingAction,
    SaveAssessment,
    SaveLearningSession,
    SaveXpTransaction,
    UnknownActionType,
    UpdateStreak,
    decode_action,
    new_action_id,
)


def _pending(action_type: str, data) -> PendingAction:
    return PendingAction(id="1_a", type=action_type, data=data, timestamp=1)


class TestDecode:
    """PendingAction -> typed variant."""

    def test_closed_set(self):
        assert set(ACTION_TYPES) == {
            "add_xp",
            "save_learning_session",
            "update_streak",
            "save_assessment",
            "save_xp_transaction",
        }

    def test_add_xp_optional_fields(self):
        action = decode_action(_pending("add_xp", {
            "user_id": "u1", "amount": 20, "reason": "quiz", "source": "practice",
        }))
        assert action == AddXp("u1", 20, "quiz", "practice")
        assert action.subject is None and action.concept is None

    def test_unknown_type(self):
        with pytest.raises(UnknownActionType) as exc:
            decode_action(_pending("award_badge", {}))
        assert exc.value.action_type == "award_badge"

    def test_missing_field(self):
        with pytest.raises(ValueError):
            decode_action(_pending("update_streak", {}))

    def test_bool_is_not_an_amount(self):
        with pytest.raises(TypeError):
            decode_action(_pending("add_xp", {
                "user_id": "u1", "amount": True, "reason": "r", "source": "s",
            }))

    def test_payload_must_be_object(self):
        with pytest.raises(TypeError):
            decode_action(_pending("save_assessment", ["not", "a", "dict"]))

    def test_empty_record_rejected(self):
        with pytest.raises(ValueError):
            decode_action(_pending("save_learning_session", {}))

    def test_record_variant_keeps_record(self):
        record = {"user_id": "u1", "topic": "fractions", "duration_seconds": 300}
        action = decode_action(_pending("save_learning_session", record))
        assert isinstance(action, SaveLearningSession)
        assert action.to_data() == record


class TestPendingAction:
    """Persisted record shape."""

    def test_from_dict_rejects_missing_id(self):
        with pytest.raises(ValueError):
            PendingAction.from_dict({"type": "update_streak", "data": {}, "timestamp": 1})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ValueError):
            PendingAction.from_dict("update_streak")

    def test_ids_are_unique(self):
        ids = {new_action_id(1_700_000_000_000) for _ in range(500)}
        assert len(ids) == 500


class TestSend:
    """Each variant issues exactly one remote call."""

    def test_add_xp_rpc_params(self, remote, backend):
        action = AddXp("u1", 15, "lesson", "tutor", subject="math", concept="fractions")
        asyncio.run(action.send(remote))

        assert backend.posts() == [("/rest/v1/rpc/add_xp_to_user", {
            "p_user_id": "u1",
            "p_xp_amount": 15,
            "p_reason": "lesson",
            "p_source": "tutor",
            "p_subject": "math",
            "p_concept": "fractions",
        })]

    def test_update_streak_rpc(self, remote, backend):
        asyncio.run(UpdateStreak("u7").send(remote))
        assert backend.posts() == [("/rest/v1/rpc/update_learning_streak", {"p_user_id": "u7"})]

    @pytest.mark.parametrize("cls, table", [
        (SaveLearningSession, "learning_history"),
        (SaveAssessment, "assessments"),
        (SaveXpTransaction, "xp_transactions"),
    ])
    def test_record_inserts(self, remote, backend, cls, table):
        record = {"user_id": "u1", "value": 1}
        asyncio.run(cls(record=record).send(remote))
        assert backend.posts() == [(f"/rest/v1/{table}", record)]
