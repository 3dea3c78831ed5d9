import logging
import threading
from contextlib import contextmanager

from content.resolver import ResponseResolver
from dialog.machine import DialogMachine
from intelligence.engine import build_default_chain
from session.context import SessionContext
from storage.transcript import Message, TranscriptStore
from storage.user_context import UserContext, UserContextStore

logger = logging.getLogger(__name__)

APOLOGY_REPLY = "Sorry, something went wrong on my side. Please try again in a moment."


class TurnInProgressError(Exception):
    """Raised when input arrives while a previous turn is still being processed."""


class Assistant:
    """
    Public surface for the renderer.

    - submit(text): process one user turn end to end
    - clear_transcript(): wipe history, reseed the welcome message
    - save_profile(context): replace the stored profile
    - busy: True while a turn is in flight (the UI disables input)
    """

    def __init__(self, transcript_store, context_store, dialog):
        self.transcript_store = transcript_store
        self.context_store = context_store
        self.dialog = dialog
        self._turn_lock = threading.Lock()

    @classmethod
    def create(cls, db_path=None, resolver=None, fallback_chain=None):
        resolver = resolver or ResponseResolver()
        chain = fallback_chain or build_default_chain(resolver)
        return cls(
            transcript_store=TranscriptStore(db_path),
            context_store=UserContextStore(db_path),
            dialog=DialogMachine(resolver, chain, SessionContext()),
        )

    # -------------------------------------------------
    # Read
    # -------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._turn_lock.locked()

    @property
    def messages(self):
        return self.transcript_store.messages

    @property
    def user_context(self) -> UserContext:
        return self.context_store.context

    # -------------------------------------------------
    # Operations
    # -------------------------------------------------

    def submit(self, text):
        """
        Returns the messages appended by this turn: the user message and
        exactly one bot reply. Blank input is ignored.
        """
        text = (text or "").strip()
        if not text:
            return []

        with self._exclusive("accept a new message"):
            user_message = self.transcript_store.append(Message(role="user", content=text))
            reply_message = self.transcript_store.append(self._bot_message_for(text))
            return [user_message, reply_message]

    def clear_transcript(self):
        with self._exclusive("clear the transcript"):
            self.transcript_store.clear()
        logger.info("Transcript cleared")
        return self.messages

    def save_profile(self, context: UserContext) -> UserContext:
        with self._exclusive("save the profile"):
            return self.context_store.save(context)

    # -------------------------------------------------
    # Internal
    # -------------------------------------------------

    @contextmanager
    def _exclusive(self, action):
        # Turns, clears and profile saves never interleave.
        if not self._turn_lock.acquire(blocking=False):
            raise TurnInProgressError(f"A message is still being processed, cannot {action}")
        try:
            yield
        finally:
            self._turn_lock.release()

    def _bot_message_for(self, text) -> Message:
        try:
            reply = self.dialog.handle(text, self.transcript_store.messages, self.user_context)
        except Exception:
            logger.exception("Turn processing failed for %r", text)
            return Message(role="bot", content=APOLOGY_REPLY)

        return Message(role="bot", content=reply.content, is_markup=reply.is_markup)
