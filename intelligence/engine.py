# intelligence/engine.py

import logging

import config
from intelligence.generative import GenerativeStrategy, build_client
from intelligence.heuristics import HeuristicStrategy
from intelligence.query_service import QueryServiceClient, QueryServiceStrategy

logger = logging.getLogger(__name__)


class FallbackChain:
    """
    Ordered list of reply strategies.

    Each strategy exposes `name`, `enabled` and
    `attempt(text, transcript, user_context) -> Reply | None`.
    The first Reply wins; disabled strategies are skipped.
    The last strategy must always answer.
    """

    def __init__(self, strategies):
        if not strategies:
            raise ValueError("FallbackChain needs at least one strategy")
        self.strategies = list(strategies)

    def respond(self, text, transcript, user_context):
        for strategy in self.strategies:
            if not strategy.enabled:
                logger.debug("Skipping %s (not configured)", strategy.name)
                continue

            reply = strategy.attempt(text, transcript, user_context)
            if reply is not None:
                logger.info("Reply produced by %s", strategy.name)
                return reply

            logger.info("%s gave no reply, falling through", strategy.name)

        raise RuntimeError("Fallback chain exhausted without a reply")


def build_default_chain(
    resolver,
    *,
    query_url=config.QUERY_SERVICE_URL,
    api_key=config.GEMINI_API_KEY,
    timeout_seconds=config.REQUEST_TIMEOUT_SECONDS,
):
    """
    query service -> Gemini -> offline heuristics.
    Steps without configuration stay in the list but report disabled.
    """
    query_client = QueryServiceClient(query_url, timeout_seconds) if query_url else None
    gemini_client = build_client(api_key, timeout_seconds) if api_key else None

    if not query_url:
        logger.warning("QUERY_SERVICE_URL is not set. Query service step is disabled.")
    if not api_key:
        logger.warning("GEMINI_API_KEY is not set. Generative replies are disabled.")

    return FallbackChain([
        QueryServiceStrategy(query_client, resolver),
        GenerativeStrategy(gemini_client),
        HeuristicStrategy(resolver),
    ])
