"""Defines the data models used throughout ChapterRelay."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from chapterrelay.errors import ErrorKind


@dataclass(frozen=True)
class TranslationItem:
    """A single record to translate. Its identity is its index in the source list."""

    title: str
    content: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TranslationItem":
        """Build an item from a decoded JSON object, treating missing keys as empty text."""
        return cls(title=str(data.get("title") or ""), content=str(data.get("content") or ""))


@dataclass
class TranslationResult:
    """
    The outcome for one input item, in the same position as the item.

    Attributes:
        title: The translated title, or the original when translation failed.
        content: The translated content. May be partially original when only some chunks failed.
        translated: True only if both title and content were fully translated.
        model: The backend(s) that produced the text, comma-separated when they differ.
        error: The failure classification when `translated` is False.

    """

    title: str
    content: str
    translated: bool
    model: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping, omitting `error` when there is none."""
        data = asdict(self)
        if data["error"] is None:
            del data["error"]
        return data


@dataclass(frozen=True)
class TranslationRequest:
    """The fixed per-run instruction context sent along with every backend call."""

    target_language: str
    source_language: str | None
    instructions: str


@dataclass
class SegmentResult:
    """Outcome of translating one piece of text through the fallback chain."""

    text: str
    translated: bool
    model: str
    error: ErrorKind | None = None
    used_last_resort: bool = False


@dataclass
class BatchState:
    """
    Mutable state scoped to one orchestration run.

    Shared by the fallback chain and the orchestrator of that run only, so
    concurrent runs never see each other's sticky backend or batch size.
    """

    batch_size: int
    backend_index: int = 0
    success_count: int = 0
    fail_count: int = 0
    fallback_count: int = 0


@dataclass
class BatchOutcome:
    """Results of a run in input order, with aggregate counters."""

    results: list[TranslationResult] = field(default_factory=list)
    success_count: int = 0
    fail_count: int = 0
    fallback_count: int = 0

    @property
    def total(self) -> int:
        """Return the number of results."""
        return len(self.results)

    def to_dicts(self) -> list[dict[str, Any]]:
        """Return all results as JSON-ready mappings."""
        return [result.to_dict() for result in self.results]
