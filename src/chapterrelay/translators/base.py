"""Defines the base class for all translation backends."""

import asyncio
from abc import ABC, abstractmethod

from chapterrelay.config import BackendSettings
from chapterrelay.errors import BackendError, ErrorKind
from chapterrelay.models import TranslationRequest


class BaseTranslator(ABC):
    """
    Abstract base class for all backend implementations.

    A translator is a ranked, swappable unit of translation capability: it has
    a `name` recorded in results, a `priority`, an async `translate` call and
    a `classify_error` hook that maps its own failures onto `ErrorKind`.
    """

    default_name = "translator"

    def __init__(self, settings: BackendSettings | None = None) -> None:
        """
        Initialize the translator with backend-specific settings.

        Args:
            settings: A Pydantic model containing backend-specific configuration.

        """
        self.settings = settings

    @property
    def name(self) -> str:
        """Return the identifier recorded in results for this backend."""
        if self.settings and (self.settings.name or self.settings.model):
            return self.settings.display_name
        return self.default_name

    @property
    def priority(self) -> int:
        """Return the configured priority, lower meaning tried earlier."""
        if self.settings and self.settings.priority is not None:
            return self.settings.priority
        return 0

    @abstractmethod
    async def translate(self, texts: list[str], request: TranslationRequest) -> list[str]:
        """
        Translate a list of texts in one backend call.

        Implementations do not retry and do not check that the number of
        translations matches the input; callers decide what a mismatch means.

        Args:
            texts: The texts to translate.
            request: Target/source languages and the system instructions.

        Returns:
            The translated texts, in input order.

        Raises:
            BackendError: Or any library exception understood by `classify_error`.

        """
        raise NotImplementedError

    def classify_error(self, error: BaseException) -> ErrorKind:
        """Map an exception raised by `translate` onto an `ErrorKind`."""
        if isinstance(error, BackendError):
            return error.kind
        if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
            return ErrorKind.TRANSIENT_SERVER_ERROR
        if isinstance(error, ConnectionError):
            return ErrorKind.NETWORK_FAILURE
        return ErrorKind.OTHER

    def __repr__(self) -> str:
        """Return a short description including the backend name."""
        return f"{self.__class__.__name__}(name={self.name!r})"
