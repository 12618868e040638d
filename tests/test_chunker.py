"""Tests for sentence splitting and chunking."""

import unittest

import pytest

from chapterrelay.chunker import chunk_text, rewrap, split_sentences


class TestSplitSentences(unittest.TestCase):
    """Test suite for split_sentences."""

    def test_cjk_terminators_stay_with_their_sentence(self) -> None:
        """1. CJK: Full-width terminators end a sentence and are kept with it."""
        assert split_sentences("你好。世界！再见？") == ["你好。", "世界！", "再见？"]

    def test_western_terminators_and_following_whitespace(self) -> None:
        """2. Western: Whitespace after a terminator starts the next sentence."""
        assert split_sentences("Hi. How are you? Fine!") == ["Hi.", " How are you?", " Fine!"]

    def test_terminator_runs_and_closing_quotes(self) -> None:
        """3. Runs: Repeated terminators and closing quotes belong to the sentence they end."""
        assert split_sentences("「走吧！」他说。Wait...") == ["「走吧！」", "他说。", "Wait..."]

    def test_text_without_terminators_is_one_sentence(self) -> None:
        """4. No Terminators: The whole text is a single sentence."""
        assert split_sentences("no terminator here") == ["no terminator here"]

    def test_empty_text(self) -> None:
        """5. Empty: Yields no sentences."""
        assert split_sentences("") == []


class TestChunkText(unittest.TestCase):
    """Test suite for chunk_text."""

    def test_spec_scenario(self) -> None:
        """1. Scenario: Two three-character sentences with a limit of five become two chunks."""
        assert chunk_text("你好。世界！", 5) == ["你好。", "世界！"]

    def test_sentences_are_packed_greedily(self) -> None:
        """2. Greedy: Sentences share a chunk while they fit."""
        assert chunk_text("A. B. C. D.", 6) == ["A. B.", " C. D."]

    def test_oversized_sentence_is_kept_whole(self) -> None:
        """3. Oversized: A sentence longer than the limit becomes its own chunk, untruncated."""
        long_sentence = "这是一个非常非常长的句子。"
        chunks = chunk_text(f"短。{long_sentence}短。", 5)
        assert chunks == ["短。", long_sentence, "短。"]

    def test_chunks_are_a_lossless_partition(self) -> None:
        """4. Lossless: Joining chunks reproduces the text exactly, whitespace included."""
        texts = [
            "第一章\n\n  他走了。她笑了！\n“真的吗？”他问。  ",
            "Mr. Smith went home. Then he slept!\n\nThe end",
            "   ",
            "单句没有结束符",
        ]
        for text in texts:
            for max_size in (1, 3, 10, 1000):
                assert "".join(chunk_text(text, max_size)) == text

    def test_no_chunk_exceeds_limit_unless_single_sentence(self) -> None:
        """5. Bound: Every chunk fits, or is exactly one sentence that alone does not."""
        text = "一二三。四五六七八九十。甲。乙丙。丁戊己庚辛壬癸。"
        for max_size in (2, 4, 7, 12):
            for chunk in chunk_text(text, max_size):
                assert len(chunk) <= max_size or len(split_sentences(chunk)) == 1

    def test_chunks_are_non_empty(self) -> None:
        """6. Non-empty: No chunk is an empty string."""
        assert all(chunk_text("A. B.  C.", 2))

    def test_empty_text_yields_no_chunks(self) -> None:
        """7. Empty: Empty input yields an empty list."""
        assert chunk_text("", 10) == []

    def test_deterministic(self) -> None:
        """8. Deterministic: The same input always yields the same chunks."""
        text = "一。二。三。四。"
        assert chunk_text(text, 4) == chunk_text(text, 4)

    def test_invalid_max_size_raises(self) -> None:
        """9. Validation: A non-positive max_size raises ValueError."""
        with pytest.raises(ValueError, match="max_size must be a positive integer"):
            chunk_text("text", 0)


class TestRewrap(unittest.TestCase):
    """Test suite for rewrap."""

    def test_restores_surrounding_whitespace(self) -> None:
        """1. Whitespace: The original chunk's edges are applied to the translation."""
        assert rewrap("  你好。\n", "Hello.") == "  Hello.\n"

    def test_strips_whitespace_added_by_backend(self) -> None:
        """2. Backend Padding: Whitespace the backend added is replaced."""
        assert rewrap("世界！", "  World!\n") == "World!"

    def test_whitespace_only_original_is_returned_unchanged(self) -> None:
        """3. Blank: A whitespace-only chunk is returned as is."""
        assert rewrap("\n\n", "anything") == "\n\n"
