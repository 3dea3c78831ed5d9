import logging

from dialog.intents import CLARIFYING_QUESTIONS, classify
from dialog.reply import Reply
from session.context import PendingIntent, SessionContext

logger = logging.getLogger(__name__)


class DialogMachine:
    """
    Clarify-then-fulfill dialog.

    Idle + intent keyword   -> ask the clarifying question, wait.
    Waiting + any input     -> that input answers the question; resolve.
    Idle + no keyword       -> conversational fallback chain.
    """

    def __init__(self, resolver, fallback_chain, context: SessionContext = None):
        self.resolver = resolver
        self.fallback_chain = fallback_chain
        self.context = context or SessionContext()

    @property
    def state(self) -> str:
        return "awaiting_clarification" if self.context.awaiting_clarification else "idle"

    def handle(self, text, transcript, user_context) -> Reply:
        pending = self.context.take_pending_intent()

        # The clarification always wins; the answer is never re-classified.
        if pending is not None:
            logger.info("Resolving %s with answer %r", pending.type, text)
            content = self.resolver.resolve(pending.type, text, user_context)
            return Reply.from_content(content, source="resolver")

        tag = classify(text)
        if tag is not None:
            question = CLARIFYING_QUESTIONS[tag]
            self.context.pending_intent = PendingIntent(type=tag, clarifying_question=question)
            logger.info("Detected %s intent, asking for clarification", tag)
            return Reply(content=question, source="clarification")

        return self.fallback_chain.respond(text, transcript, user_context)
