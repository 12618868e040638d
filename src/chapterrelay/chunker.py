"""Sentence-aligned splitting of long text into bounded chunks."""

import logging

import regex

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = ".!?。！？；"
CLOSING_MARKS = "\"'”’」』)）"

# A sentence is the shortest run of text that ends with one or more terminators
# (plus any closing quotes that follow them), or the tail of the text.
_SENTENCE_PATTERN = regex.compile(
    rf".*?(?:[{regex.escape(SENTENCE_TERMINATORS)}]+[{regex.escape(CLOSING_MARKS)}]*|\Z)",
    regex.DOTALL,
)
_EDGE_WHITESPACE_PATTERN = regex.compile(r"\A(\s*).*?(\s*)\Z", regex.DOTALL)


def split_sentences(text: str) -> list[str]:
    """
    Split text into sentences, keeping each terminator with its sentence.

    Whitespace after a terminator starts the following sentence, so the
    pieces always concatenate back to `text`.
    """
    return [sentence for sentence in _SENTENCE_PATTERN.findall(text) if sentence]


def chunk_text(text: str, max_size: int) -> list[str]:
    """
    Greedily pack sentences into chunks of at most `max_size` characters.

    A sentence that is longer than `max_size` on its own is emitted whole as
    its own chunk rather than being cut. Joining the returned chunks with an
    empty string reproduces `text` exactly.

    Args:
        text: The text to split.
        max_size: The maximum chunk length, in characters.

    Returns:
        A list of non-empty chunks. Empty input yields an empty list.

    Raises:
        ValueError: If `max_size` is not positive.

    """
    if max_size <= 0:
        msg = f"max_size must be a positive integer, got {max_size}"
        raise ValueError(msg)

    chunks: list[str] = []
    buffer = ""
    for sentence in split_sentences(text):
        if buffer and len(buffer) + len(sentence) > max_size:
            chunks.append(buffer)
            buffer = ""
        buffer += sentence
    if buffer:
        chunks.append(buffer)

    oversized = sum(1 for chunk in chunks if len(chunk) > max_size)
    if oversized:
        logger.debug("%d chunk(s) exceed %d characters because a single sentence is longer than the limit.", oversized, max_size)
    return chunks


def rewrap(original: str, translated: str) -> str:
    """
    Give a translated chunk the leading and trailing whitespace of its source chunk.

    Backends usually strip surrounding whitespace; restoring it lets translated
    chunks be joined with an empty string just like the originals.
    """
    if not original.strip():
        return original
    match = _EDGE_WHITESPACE_PATTERN.fullmatch(original)
    leading, trailing = (match.group(1), match.group(2)) if match else ("", "")
    return f"{leading}{translated.strip()}{trailing}"
