# storage/user_context.py

import json
import logging
import re
from dataclasses import asdict, dataclass
from typing import Optional

from storage.local_store import USER_CONTEXT_SLOT, init_db, read_slot, write_slot

logger = logging.getLogger(__name__)

BRANCHES = ["CSE", "ECE", "EEE", "MECH", "CIVIL", "IT"]

_BATCH_RE = re.compile(r"^\d{4}$")


class ProfileError(ValueError):
    """Raised when a profile save carries invalid values."""


@dataclass(frozen=True)
class UserContext:
    """
    Academic profile used to personalize content requests.
    Every field stays None until the first save.
    """
    branch: Optional[str] = None
    semester: Optional[int] = None
    batch: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.branch and self.semester and self.batch)

    def with_defaults(self, defaults: "UserContext") -> "UserContext":
        return UserContext(
            branch=self.branch or defaults.branch,
            semester=self.semester or defaults.semester,
            batch=self.batch or defaults.batch,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UserContext":
        """
        Build a validated context from user- or storage-supplied values.
        Blank values are treated as absent.
        """
        if not isinstance(data, dict):
            raise ProfileError("profile must be an object")

        branch = _clean(data.get("branch"))
        batch = _clean(data.get("batch"))
        semester_raw = _clean(data.get("semester"))

        semester = None
        if semester_raw is not None:
            try:
                semester = int(semester_raw)
            except (TypeError, ValueError):
                raise ProfileError(f"semester must be a number, got {semester_raw!r}")
            if not 1 <= semester <= 8:
                raise ProfileError("semester must be between 1 and 8")

        if batch is not None and not _BATCH_RE.match(batch):
            raise ProfileError("batch must be a 4-digit year, e.g. 2024")

        return cls(branch=branch, semester=semester, batch=batch)


DEFAULT_CONTEXT = UserContext(branch="CSE", semester=5, batch="2025")


def _clean(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class UserContextStore:
    """
    Durable profile backed by the `user_context` slot.
    A save always replaces the whole object.
    """

    def __init__(self, db_path=None):
        self.db_path = db_path
        init_db(db_path)
        self._context = self._load()

    @property
    def context(self) -> UserContext:
        return self._context

    def save(self, context: UserContext) -> UserContext:
        self._context = context
        write_slot(
            USER_CONTEXT_SLOT,
            json.dumps(context.to_dict(), ensure_ascii=False, sort_keys=True),
            self.db_path,
        )
        logger.info("Saved profile: %s", context)
        return context

    def _load(self) -> UserContext:
        raw = read_slot(USER_CONTEXT_SLOT, self.db_path)
        if raw is None:
            return UserContext()

        try:
            return UserContext.from_dict(json.loads(raw))
        except ValueError as e:
            logger.warning("Discarding unreadable profile: %s", e)
            return UserContext()
