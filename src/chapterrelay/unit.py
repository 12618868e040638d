"""One guarded call to one backend, with the failure reduced to an `ErrorKind`."""

import asyncio
import logging
from dataclasses import dataclass, field

from .errors import ErrorKind
from .limiter import ConcurrencyLimiter
from .models import TranslationRequest
from .translators.base import BaseTranslator

logger = logging.getLogger(__name__)


@dataclass
class UnitResult:
    """The normalized outcome of a single backend call."""

    success: bool
    backend: str
    texts: list[str] = field(default_factory=list)
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def text(self) -> str:
        """Return the single translation of a one-text call."""
        return self.texts[0] if self.texts else ""


async def translate_unit(
    translator: BaseTranslator,
    texts: list[str],
    request: TranslationRequest,
    *,
    timeout: float | None = None,
    limiter: ConcurrencyLimiter | None = None,
) -> UnitResult:
    """
    Call `translator` exactly once for `texts`.

    The call holds a limiter slot (when a limiter is given) and is abandoned
    after `timeout` seconds. Nothing is retried here. A blank translation of a
    non-blank text is reported as a malformed response, so an empty answer never
    replaces the source.

    Args:
        translator: The backend to call.
        texts: The texts to send in one request.
        request: Languages and system instructions.
        timeout: The guard timeout in seconds, or None for no limit.
        limiter: The limiter bounding in-flight calls, if any.

    Returns:
        A UnitResult; failures carry the backend's classification of the error.

    """

    async def _call() -> list[str]:
        return await asyncio.wait_for(translator.translate(texts, request), timeout=timeout)

    try:
        translations = await limiter.run(_call) if limiter else await _call()
    except asyncio.CancelledError:
        raise
    except Exception as e:  # noqa: BLE001
        kind = translator.classify_error(e)
        message = str(e) or e.__class__.__name__
        logger.debug("[%s] Call failed (%s): %s", translator.name, kind.value, message)
        return UnitResult(success=False, backend=translator.name, error=kind, message=message)

    blank = _blank_positions(texts, translations)
    if blank:
        message = f"Blank translation for non-blank input at position(s) {blank}"
        logger.debug("[%s] %s", translator.name, message)
        return UnitResult(success=False, backend=translator.name, error=ErrorKind.MALFORMED_RESPONSE, message=message)

    return UnitResult(success=True, backend=translator.name, texts=translations)


def _blank_positions(texts: list[str], translations: list[str]) -> list[int]:
    """Return the positions where a non-blank source came back blank."""
    return [index for index, (source, translation) in enumerate(zip(texts, translations, strict=False)) if source.strip() and not translation.strip()]


async def translate_unit_text(
    translator: BaseTranslator,
    text: str,
    request: TranslationRequest,
    *,
    timeout: float | None = None,
    limiter: ConcurrencyLimiter | None = None,
) -> UnitResult:
    """
    Translate a single string with one backend call.

    An answer that does not contain exactly one translation is reported as a
    malformed response.
    """
    result = await translate_unit(translator, [text], request, timeout=timeout, limiter=limiter)
    if result.success and len(result.texts) != 1:
        message = f"Expected 1 translation, got {len(result.texts)}"
        logger.debug("[%s] %s", translator.name, message)
        return UnitResult(success=False, backend=translator.name, error=ErrorKind.MALFORMED_RESPONSE, message=message)
    return result
