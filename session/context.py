from dataclasses import dataclass


@dataclass(frozen=True)
class PendingIntent:
    """
    A clarification the bot has asked and is waiting on.
    """
    type: str                   # "timetable" | "exam" | "notes"
    clarifying_question: str


class SessionContext:
    """
    Conversation-scoped state.
    Lives in memory for the session only and is never written to storage.
    """

    def __init__(self):
        # What clarification we are waiting for:
        # None | PendingIntent
        self.pending_intent = None

    @property
    def awaiting_clarification(self) -> bool:
        return self.pending_intent is not None

    def take_pending_intent(self):
        """
        Return the pending intent and clear it in one step.
        """
        pending = self.pending_intent
        self.pending_intent = None
        return pending
