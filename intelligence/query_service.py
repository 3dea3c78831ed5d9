from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

import config
from content.models import content_from_payload
from dialog.reply import Reply

logger = logging.getLogger(__name__)

# Query-service response types mapped to local intent types.
TYPE_TO_INTENT = {
    "timetable": "timetable",
    "exam": "exam",
    "pdfs": "notes",
}


class QueryServiceError(Exception):
    """Raised when the query service is unreachable or answers with an unexpected shape."""


def _build_retry_session() -> requests.Session:
    """
    Session that never retries connect or read failures, so a slow or
    unreachable service costs at most one timeout before the next fallback.
    Other transport errors get a single retry.
    """
    session = requests.Session()

    retry = Retry(
        total=1,
        connect=0,
        read=0,
        status=0,
        backoff_factor=0.3,
        allowed_methods=frozenset({"POST"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


class QueryServiceClient:
    def __init__(
        self,
        url: str,
        timeout_seconds: float = config.REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.session = session or _build_retry_session()

    def query(self, text: str, context: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.session.post(
                self.url,
                json={"text": text, "context": context},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise QueryServiceError(f"HTTP error while calling query service: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise QueryServiceError(f"Query service returned status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            preview = (resp.text or "")[:200]
            raise QueryServiceError(f"Non-JSON response from query service. Preview: {preview}") from exc

        if not isinstance(data, dict):
            raise QueryServiceError(f"Unexpected query service response type: {type(data)}")

        return data


class QueryServiceStrategy:
    """
    First step of the fallback chain.

    Structured answers bypass intent classification and go straight to
    formatting; plain messages become a text reply.
    """

    name = "query_service"

    def __init__(self, client: Optional[QueryServiceClient], resolver):
        self.client = client
        self.resolver = resolver

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def attempt(self, text, transcript, user_context) -> Optional[Reply]:
        try:
            data = self.client.query(text, user_context.to_dict())
        except QueryServiceError as e:
            logger.warning("Query service unavailable: %s", e)
            return None

        if not data.get("ok"):
            logger.info("Query service declined: %s", data.get("message"))
            return None

        content_type = data.get("type")
        if isinstance(content_type, str) and content_type in TYPE_TO_INTENT:
            defaults = user_context.with_defaults(self.resolver.defaults)
            content = content_from_payload(content_type, data.get("data"), defaults)
            if content is None:
                content = self.resolver.resolve(TYPE_TO_INTENT[content_type], text, user_context)
            return Reply.from_content(content, source=self.name)

        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return Reply(content=message.strip(), source=self.name)

        logger.warning("Query service succeeded without usable content: %s", sorted(data))
        return None
