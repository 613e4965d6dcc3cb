"""
Messenger Reply Chunking Tests

Segment sizes, word-boundary cuts, hard cuts and content preservation.
"""

import random
import re

import pytest

from transport.messenger.chunking import MAX_MESSAGE_CHARS, chunk_text


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class TestShortText:
    """Text that already fits is untouched."""

    @pytest.mark.parametrize("text", ["", "hi", "  padded  ", "x" * MAX_MESSAGE_CHARS])
    def test_fits_returns_single_unmodified_segment(self, text):
        assert chunk_text(text) == [text]

    def test_exact_limit_small_max_len(self):
        assert chunk_text("abc", 3) == ["abc"]

    def test_invalid_max_len(self):
        with pytest.raises(ValueError):
            chunk_text("abc", 0)
        with pytest.raises(ValueError):
            chunk_text("abc", -5)


class TestLongText:
    """Text over the limit is split."""

    def test_hard_cut_without_whitespace(self):
        """No whitespace: 2500 chars -> 2000 + 500."""
        segments = chunk_text("a" * 2500, 2000)

        assert [len(s) for s in segments] == [2000, 500]
        assert "".join(segments) == "a" * 2500

    def test_hard_cut_does_not_drop_characters(self):
        text = "abcdefghij"

        assert chunk_text(text, 3) == ["abc", "def", "ghi", "j"]

    def test_cut_moves_back_to_whitespace(self):
        """Space at index 1999 of a 2001-char reply."""
        text = "a" * 1999 + " " + "b"
        assert len(text) == 2001

        segments = chunk_text(text, 2000)

        assert len(segments) == 2
        assert len(segments[0]) <= 2000
        assert segments[0] == "a" * 1999
        assert segments[1] == "b"

    def test_cut_exactly_on_whitespace(self):
        """Character right after the window is a space: no retraction."""
        segments = chunk_text("aaa bbb", 3)

        assert segments == ["aaa", "bbb"]

    def test_words_are_not_split(self):
        text = "the quick brown fox jumps over the lazy dog"
        segments = chunk_text(text, 10)

        assert segments == ["the quick", "brown fox", "jumps over", "the lazy", "dog"]
        for segment in segments:
            assert len(segment) <= 10

    def test_long_word_is_hard_cut_mid_word(self):
        segments = chunk_text("hi abcdefghijklmnop", 5)

        assert segments[0] == "hi"
        assert "".join(segments[1:]) == "abcdefghijklmnop"
        assert all(len(s) <= 5 for s in segments)

    def test_segments_are_trimmed(self):
        segments = chunk_text("one  two  three  four", 6)

        for segment in segments:
            assert segment == segment.strip()
            assert segment

    def test_whitespace_only_segments_dropped(self):
        segments = chunk_text("a" * 5 + " " * 20 + "b", 5)

        assert segments == ["aaaaa", "b"]

    def test_max_len_one_terminates(self):
        segments = chunk_text("ab cd", 1)

        assert segments == ["a", "b", "c", "d"]


class TestChunkingProperties:
    """Invariants over generated inputs."""

    @staticmethod
    def _random_text(rng: random.Random, words: int, max_word: int) -> str:
        parts = []
        for _ in range(words):
            word = "".join(rng.choice("abcxyz") for _ in range(rng.randint(1, max_word)))
            parts.append(word)
            parts.append(rng.choice([" ", " ", "  ", "\n", "\t"]))
        return "".join(parts)

    @pytest.mark.parametrize("seed", range(20))
    def test_segments_within_limit_and_content_preserved(self, seed):
        rng = random.Random(seed)
        max_len = rng.randint(8, 60)
        text = self._random_text(rng, words=rng.randint(20, 200), max_word=max_len)

        segments = chunk_text(text, max_len)

        if len(text) > max_len:
            assert all(len(s) <= max_len for s in segments)
            assert all(s for s in segments)
        assert _collapse(" ".join(segments)) == _collapse(text)

    @pytest.mark.parametrize("seed", range(10))
    def test_oversized_words_lose_nothing(self, seed):
        """Words longer than max_len are cut but no character disappears."""
        rng = random.Random(1000 + seed)
        max_len = rng.randint(1, 12)
        text = self._random_text(rng, words=50, max_word=40)

        segments = chunk_text(text, max_len)

        if len(text) > max_len:
            assert all(len(s) <= max_len for s in segments)
        assert "".join(" ".join(segments).split()) == "".join(text.split())
