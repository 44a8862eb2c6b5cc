"""Queued action records and their typed variants.

A PendingAction is what sits on disk: an id, a type tag, a JSON payload
and a creation timestamp. Before replay it is decoded into one of the
SyncAction dataclasses below, each of which knows the single remote call
it maps to.

Types:
    add_xp                 -> rpc add_xp_to_user
    save_learning_session  -> insert learning_history
    update_streak          -> rpc update_learning_streak
    save_assessment        -> insert assessments
    save_xp_transaction    -> insert xp_transactions
"""
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from buddy_sync.remote.client import RemoteService


class UnknownActionType(Exception):
    """Raised when a queued action carries a tag outside ACTION_TYPES.

    Only reachable for data persisted by another client version. Never
    retried by the sync engine.
    """

    def __init__(self, action_type: str):
        super().__init__(f"Unknown action type: {action_type}")
        self.action_type = action_type


@dataclass
class PendingAction:
    """A queued client mutation awaiting replay."""
    id: str
    type: str
    data: dict
    timestamp: int  # ms since epoch, display and ordering only

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "data": self.data,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "PendingAction":
        """Rebuild from its persisted form.

        Raises:
            ValueError: If a required field is missing or mistyped
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Pending action must be an object, got {type(raw).__name__}")
        try:
            return cls(
                id=str(raw["id"]),
                type=str(raw["type"]),
                data=raw.get("data") or {},
                timestamp=int(raw["timestamp"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed pending action: {e}") from e


def new_action_id(timestamp: int) -> str:
    """Timestamp plus a random suffix, unique across devices in practice."""
    return f"{timestamp}_{uuid.uuid4().hex}"


def _require(data: dict, key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data:
        raise ValueError(f"Missing field: {key}")
    value = data[key]
    if isinstance(value, bool) and kind is int:
        raise TypeError(f"Field {key} must be int, got bool")
    if not isinstance(value, kind):
        raise TypeError(f"Field {key} has type {type(value).__name__}")
    return value


def _optional(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"Field {key} has type {type(value).__name__}")
    return value


class SyncAction(ABC):
    """Base class for every replayable action variant."""

    action_type: ClassVar[str]

    @abstractmethod
    def to_data(self) -> dict:
        """Payload persisted in PendingAction.data."""
        pass

    @classmethod
    @abstractmethod
    def from_data(cls, data: dict) -> "SyncAction":
        """Decode a persisted payload. Raises ValueError or TypeError."""
        pass

    @abstractmethod
    async def send(self, remote: RemoteService) -> None:
        """Issue the one remote call this action stands for."""
        pass


@dataclass
class AddXp(SyncAction):
    """Grant XP to a learner."""
    action_type: ClassVar[str] = "add_xp"

    user_id: str
    amount: int
    reason: str
    source: str
    subject: Optional[str] = None
    concept: Optional[str] = None

    def to_data(self) -> dict:
        return {
            "user_id": self.user_id,
            "amount": self.amount,
            "reason": self.reason,
            "source": self.source,
            "subject": self.subject,
            "concept": self.concept,
        }

    @classmethod
    def from_data(cls, data: dict) -> "AddXp":
        return cls(
            user_id=_require(data, "user_id", str),
            amount=_require(data, "amount", int),
            reason=_require(data, "reason", str),
            source=_require(data, "source", str),
            subject=_optional(data, "subject"),
            concept=_optional(data, "concept"),
        )

    async def send(self, remote: RemoteService) -> None:
        await remote.rpc("add_xp_to_user", {
            "p_user_id": self.user_id,
            "p_xp_amount": self.amount,
            "p_reason": self.reason,
            "p_source": self.source,
            "p_subject": self.subject,
            "p_concept": self.concept,
        })


@dataclass
class UpdateStreak(SyncAction):
    """Advance a learner's daily streak."""
    action_type: ClassVar[str] = "update_streak"

    user_id: str

    def to_data(self) -> dict:
        return {"user_id": self.user_id}

    @classmethod
    def from_data(cls, data: dict) -> "UpdateStreak":
        return cls(user_id=_require(data, "user_id", str))

    async def send(self, remote: RemoteService) -> None:
        await remote.rpc("update_learning_streak", {"p_user_id": self.user_id})


@dataclass
class _RecordInsert(SyncAction):
    """An action that inserts its record verbatim into one table."""
    table: ClassVar[str]

    record: dict = field(default_factory=dict)

    def to_data(self) -> dict:
        return dict(self.record)

    @classmethod
    def from_data(cls, data: dict) -> "_RecordInsert":
        if not isinstance(data, dict):
            raise TypeError(f"Record must be an object, got {type(data).__name__}")
        if not data:
            raise ValueError(f"Empty record for {cls.action_type}")
        return cls(record=dict(data))

    async def send(self, remote: RemoteService) -> None:
        await remote.insert(self.table, self.record)


@dataclass
class SaveLearningSession(_RecordInsert):
    action_type: ClassVar[str] = "save_learning_session"
    table: ClassVar[str] = "learning_history"


@dataclass
class SaveAssessment(_RecordInsert):
    action_type: ClassVar[str] = "save_assessment"
    table: ClassVar[str] = "assessments"


@dataclass
class SaveXpTransaction(_RecordInsert):
    action_type: ClassVar[str] = "save_xp_transaction"
    table: ClassVar[str] = "xp_transactions"


ACTION_TYPES: dict[str, type[SyncAction]] = {
    cls.action_type: cls
    for cls in (AddXp, SaveLearningSession, UpdateStreak, SaveAssessment, SaveXpTransaction)
}


def decode_action(pending: PendingAction) -> SyncAction:
    """Turn a persisted record into its typed variant.

    Raises:
        UnknownActionType: If pending.type is outside ACTION_TYPES
        ValueError, TypeError: If the payload does not fit the variant
    """
    cls = ACTION_TYPES.get(pending.type)
    if cls is None:
        raise UnknownActionType(pending.type)
    if not isinstance(pending.data, dict):
        raise TypeError(f"Payload for {pending.type} must be an object")
    return cls.from_data(pending.data)
