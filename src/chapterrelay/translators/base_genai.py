"""Shared implementation for backends served by the Google GenAI (Gemini API) SDK."""

import json
import logging
import os
from abc import abstractmethod
from typing import Any

import httpx
import regex
from google import genai
from google.api_core import exceptions as api_core_exceptions
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, TypeAdapter, ValidationError

from chapterrelay.config import BackendSettings
from chapterrelay.errors import ContentPolicyError, ErrorKind, MalformedResponseError
from chapterrelay.models import TranslationRequest
from chapterrelay.prompts import BATCH_PROMPT_TEMPLATE

from .base import BaseTranslator

logger = logging.getLogger(__name__)

_HTTP_TOO_MANY_REQUESTS = 429
_HTTP_REQUEST_TIMEOUT = 408
_CODE_FENCE_PATTERN = regex.compile(r"\A\s*```(?:json)?\s*(.*?)\s*```\s*\Z", regex.DOTALL)
_BLOCKED_FINISH_REASONS = frozenset({"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII", "IMAGE_SAFETY"})
_QUOTA_EXCEPTIONS = (api_core_exceptions.ResourceExhausted, api_core_exceptions.TooManyRequests)
_TRANSIENT_EXCEPTIONS = (
    api_core_exceptions.ServiceUnavailable,
    api_core_exceptions.InternalServerError,
    api_core_exceptions.BadGateway,
    api_core_exceptions.GatewayTimeout,
    api_core_exceptions.DeadlineExceeded,
    httpx.TransportError,
)


class TranslationList(BaseModel):
    """The JSON object every GenAI backend is asked to return."""

    translations: list[str]


_STRING_LIST = TypeAdapter(list[str])


def parse_translations(response_text: str | None) -> list[str]:
    """
    Parse and validate a model response into a list of translated strings.

    This is the single place where response bodies are decoded. It accepts the
    requested `{"translations": [...]}` object, optionally wrapped in a
    markdown code fence, or a bare JSON array of strings.

    Args:
        response_text: The raw text of the model response.

    Returns:
        The translated strings. The count is not checked here.

    Raises:
        MalformedResponseError: If the body is empty or not one of the accepted shapes.

    """
    if not response_text or not response_text.strip():
        msg = "Failed to process API response: response text is empty."
        raise MalformedResponseError(msg)

    match = _CODE_FENCE_PATTERN.match(response_text)
    body = match.group(1) if match else response_text.strip()

    try:
        return TranslationList.model_validate_json(body).translations
    except ValidationError:
        logger.debug("Response is not a translations object; trying a bare JSON array.")

    try:
        return _STRING_LIST.validate_json(body)
    except ValidationError as e:
        msg = f"Response is not a JSON list of translations: {body[:200]!r}"
        raise MalformedResponseError(msg) from e


def _reason_name(reason: Any) -> str:  # noqa: ANN401
    return str(getattr(reason, "name", reason))


class BaseGenAITranslator(BaseTranslator):
    """
    Base class for translators calling models through `google-genai`.

    Subclasses choose the default model, how the prompt is laid out and the
    generation config. Sending the request, detecting policy blocks, decoding
    the body and classifying SDK errors are shared.
    """

    def __init__(self, settings: BackendSettings | None = None) -> None:
        """
        Initialize the GenAI client.

        The API key comes from the settings, falling back to the
        `GEMINI_API_KEY` environment variable.

        Raises:
            ValueError: If no API key is available.

        """
        super().__init__(settings)
        api_key = (settings.api_key if settings else None) or os.getenv("GEMINI_API_KEY")
        if not api_key:
            msg = f"API key for {self.__class__.__name__} is missing. Set it in the backend settings or the GEMINI_API_KEY environment variable."
            raise ValueError(msg)
        self.model_name = (settings.model if settings else None) or self._default_model_name()
        self.client = genai.Client(api_key=api_key)

    @property
    def name(self) -> str:
        """Return the configured name, or the model name."""
        if self.settings and self.settings.name:
            return self.settings.name
        return self.model_name

    @abstractmethod
    def _default_model_name(self) -> str:
        """Return the model used when the settings do not name one."""
        raise NotImplementedError

    def _build_contents(self, texts: list[str], request: TranslationRequest) -> str:
        """Return the user turn sent to the model."""
        _ = request
        return BATCH_PROMPT_TEMPLATE.format(
            count=len(texts),
            texts_json_array=json.dumps(texts, ensure_ascii=False, indent=2),
        )

    def _extra_config(self) -> dict[str, Any]:
        """Return the user's `extra` generation fields from the backend settings."""
        return dict(self.settings.extra or {}) if self.settings else {}

    def _get_generation_config(self, request: TranslationRequest) -> types.GenerateContentConfig | None:
        """Return the generation config for the call, or None for the model defaults."""
        _ = request
        extra = self._extra_config()
        return types.GenerateContentConfig(**extra) if extra else None

    async def translate(self, texts: list[str], request: TranslationRequest) -> list[str]:
        """
        Translate texts with one `generate_content` call.

        SDK exceptions propagate unchanged; `classify_error` understands them.

        Raises:
            ContentPolicyError: If the prompt or the answer was blocked.
            MalformedResponseError: If the answer cannot be decoded.

        """
        if not texts:
            return []

        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=self._build_contents(texts, request),
            config=self._get_generation_config(request),
        )
        self._raise_if_blocked(response)
        translations = parse_translations(response.text)
        logger.debug("[%s] Received %d translation(s) for %d text(s).", self.name, len(translations), len(texts))
        return translations

    def _raise_if_blocked(self, response: Any) -> None:  # noqa: ANN401
        """Raise ContentPolicyError when the response carries a safety or policy block."""
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None) if feedback is not None else None
        if block_reason:
            msg = f"Prompt blocked by {self.name}: {_reason_name(block_reason)}"
            raise ContentPolicyError(msg)

        for candidate in getattr(response, "candidates", None) or []:
            reason = _reason_name(getattr(candidate, "finish_reason", None))
            if reason in _BLOCKED_FINISH_REASONS:
                msg = f"Response from {self.name} stopped for policy reason: {reason}"
                raise ContentPolicyError(msg)

    def classify_error(self, error: BaseException) -> ErrorKind:
        """Map google-genai, google-api-core and httpx failures onto `ErrorKind`."""
        if isinstance(error, genai_errors.ServerError):
            return ErrorKind.TRANSIENT_SERVER_ERROR
        if isinstance(error, genai_errors.APIError):
            if error.code == _HTTP_TOO_MANY_REQUESTS:
                return ErrorKind.QUOTA_EXCEEDED
            if error.code == _HTTP_REQUEST_TIMEOUT:
                return ErrorKind.TRANSIENT_SERVER_ERROR
            return ErrorKind.OTHER
        if isinstance(error, _QUOTA_EXCEPTIONS):
            return ErrorKind.QUOTA_EXCEEDED
        if isinstance(error, _TRANSIENT_EXCEPTIONS):
            return ErrorKind.TRANSIENT_SERVER_ERROR
        return super().classify_error(error)
