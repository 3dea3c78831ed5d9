# storage/transcript.py

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from storage.local_store import TRANSCRIPT_SLOT, init_db, read_slot, write_slot

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hi! I'm your GCET academic assistant. Ask me about your timetable, "
    "exam schedule or study materials."
)


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """
    One entry of the transcript. Never edited after creation.
    """
    role: Literal["user", "bot"]
    content: str
    is_markup: bool = False
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "isMarkup": self.is_markup,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        role = data["role"]
        if role not in ("user", "bot"):
            raise ValueError(f"Unknown message role: {role!r}")
        content = data["content"]
        if not isinstance(content, str):
            raise ValueError("message content must be a string")
        return cls(
            role=role,
            content=content,
            is_markup=bool(data.get("isMarkup", False)),
            id=str(data["id"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class TranscriptStore:
    """
    Append-only message log backed by the `transcript` slot.

    Every mutation is written through immediately, so the stored
    value always matches the last completed append.
    """

    def __init__(self, db_path=None):
        self.db_path = db_path
        init_db(db_path)
        self._messages = self._load()
        if not self._messages:
            self._messages = [self._welcome()]
            self._persist()

    # -------------------------------------------------
    # Read
    # -------------------------------------------------

    @property
    def messages(self):
        return tuple(self._messages)

    def __len__(self):
        return len(self._messages)

    def to_json(self):
        return [m.to_dict() for m in self._messages]

    # -------------------------------------------------
    # Write
    # -------------------------------------------------

    def append(self, message: Message) -> Message:
        self._messages.append(message)
        self._persist()
        return message

    def clear(self):
        self._messages = [self._welcome()]
        self._persist()

    # -------------------------------------------------
    # Internal
    # -------------------------------------------------

    @staticmethod
    def _welcome():
        return Message(role="bot", content=WELCOME_MESSAGE)

    def _load(self):
        raw = read_slot(TRANSCRIPT_SLOT, self.db_path)
        if raw is None:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("transcript slot is not a JSON array")
            return [Message.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable transcript: %s", e)
            return []

    def _persist(self):
        write_slot(
            TRANSCRIPT_SLOT,
            json.dumps(self.to_json(), ensure_ascii=False),
            self.db_path,
        )
