"""Reading the items to translate and writing the results."""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx

from .errors import SourceFetchError
from .models import TranslationItem, TranslationResult

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def _decode_items(data: Any, source: str) -> list[TranslationItem]:  # noqa: ANN401
    if not isinstance(data, list):
        msg = f"Source '{source}' must contain a JSON array of objects, got {type(data).__name__}."
        raise SourceFetchError(msg)

    items = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            msg = f"Entry {index} of '{source}' is not an object."
            raise SourceFetchError(msg)
        items.append(TranslationItem.from_dict(entry))
    return items


async def fetch_items(source: str, *, client: httpx.AsyncClient | None = None, timeout: float = 30.0) -> list[TranslationItem]:
    """
    Fetch the list of items from a URL or a local JSON file.

    Args:
        source: An http(s) URL or a filesystem path.
        client: An optional HTTP client to reuse; one is created when omitted.
        timeout: The request timeout in seconds for URL sources.

    Returns:
        The decoded items, in source order.

    Raises:
        SourceFetchError: If the source cannot be read or does not hold a JSON array of objects.

    """
    if _is_url(source):
        logger.info("Fetching JSON from: %s", source)
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                    response = await own_client.get(source)
            else:
                response = await client.get(source)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            msg = f"Could not fetch items from {source}: {e}"
            raise SourceFetchError(msg) from e
    else:
        path = Path(source)
        logger.info("Reading JSON from: %s", path)
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            msg = f"Could not read items from {path}: {e}"
            raise SourceFetchError(msg) from e

    items = _decode_items(data, source)
    logger.info("Found %d item(s) to translate.", len(items))
    return items


def result_path_for(source: str, output_dir: str | Path) -> Path:
    """Return `<output_dir>/<source id>.json`, the id being the last path segment of the source."""
    raw_path = urlparse(source).path if _is_url(source) else source
    name = Path(raw_path.rstrip("/")).name or "result"
    stem = name.removesuffix(".json") or "result"
    return Path(output_dir) / f"{stem}.json"


def persist(results: Sequence[TranslationResult], destination: str | Path) -> Path:
    """
    Write results as pretty-printed UTF-8 JSON, creating parent directories.

    Returns:
        The path written to.

    """
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [result.to_dict() for result in results]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved %d result(s) to: %s", len(payload), path)
    return path
