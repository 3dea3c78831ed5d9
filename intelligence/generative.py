import logging

from google import genai
from google.genai import types
from markupsafe import Markup

import config
from dialog.reply import Reply
from intelligence.templates import load_system_prompt

logger = logging.getLogger(__name__)

ROLE_MAP = {"user": "user", "bot": "model"}


class GenerationError(Exception):
    """Raised when Gemini fails or returns nothing we can show."""


def _get(obj, key):
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _first_text(value):
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def extract_reply_text(response):
    """
    Pull reply text out of the known response shapes, first populated wins:
    `text`, `candidates[*].content.parts[*].text`, `candidates[*].output`,
    then `output` / `content`.
    """
    try:
        text = _first_text(_get(response, "text"))
    except ValueError:
        # Some SDK versions raise on `.text` when the candidate was blocked.
        text = None
    if text:
        return text

    for candidate in _get(response, "candidates") or []:
        content = _get(candidate, "content")
        for part in _get(content, "parts") or []:
            text = _first_text(_get(part, "text"))
            if text:
                return text
        text = _first_text(_get(candidate, "output")) or _first_text(content)
        if text:
            return text

    for key in ("output", "content"):
        text = _first_text(_get(response, key))
        if text:
            return text

    return None


def build_contents(transcript):
    """
    Transcript -> ordered Gemini turns. Leading bot turns (the welcome
    message) are dropped so the conversation opens with the user.
    """
    contents = []
    for message in transcript:
        if not contents and message.role != "user":
            continue
        text = Markup(message.content).striptags() if message.is_markup else message.content
        if not text:
            continue
        contents.append(
            types.Content(role=ROLE_MAP[message.role], parts=[types.Part(text=text)])
        )
    return contents


def build_client(api_key: str, timeout_seconds: float = config.REQUEST_TIMEOUT_SECONDS):
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
    )


class GenerativeStrategy:
    """
    Second step of the fallback chain: ask Gemini with the whole transcript.
    Skipped entirely when no API key is configured.
    """

    name = "generative"

    def __init__(
        self,
        client=None,
        model: str = config.GEMINI_MODEL,
        temperature: float = config.GEMINI_TEMPERATURE,
        max_output_tokens: int = config.GEMINI_MAX_OUTPUT_TOKENS,
        top_p: float = config.GEMINI_TOP_P,
        system_prompt: str = None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.top_p = top_p
        self.system_prompt = system_prompt

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def generate(self, transcript) -> str:
        contents = build_contents(transcript)
        if not contents:
            raise GenerationError("Nothing to send: transcript has no user turns")

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config={
                    "system_instruction": self.system_prompt or load_system_prompt(),
                    "temperature": self.temperature,
                    "top_p": self.top_p,
                    "max_output_tokens": self.max_output_tokens,
                },
            )
        except Exception as e:
            raise GenerationError(f"Gemini call failed: {e}") from e

        text = extract_reply_text(response)
        if not text:
            raise GenerationError("Gemini response had no text in any known field")
        return text

    def attempt(self, text, transcript, user_context):
        try:
            reply = self.generate(transcript)
        except GenerationError as e:
            logger.warning("Generative reply unavailable: %s", e)
            return None
        return Reply(content=reply, source=self.name)
