"""
Messenger Reply Chunking

PURE FUNCTION - NO I/O

Splits an oversized reply into segments that fit the platform's
per-message text limit, preferring to break between words.
"""

from typing import List, Optional

MAX_MESSAGE_CHARS = 2000


def _last_whitespace(text: str, start: int, end: int) -> Optional[int]:
    """Index of the last whitespace character in text[start:end], if any."""
    for i in range(end - 1, start - 1, -1):
        if text[i].isspace():
            return i
    return None


def chunk_text(text: str, max_len: int = MAX_MESSAGE_CHARS) -> List[str]:
    """
    Split text into ordered segments of at most max_len characters.

    Rules:
    - Text that already fits is returned as-is, in a single segment
    - A cut that would land inside a word is moved back to the last
      whitespace in the window
    - A word longer than max_len is hard-cut mid-word
    - Segments are stripped; whitespace-only segments are dropped

    Args:
        text: Reply text of any length
        max_len: Maximum segment length (must be positive)

    Returns:
        List of segments in delivery order

    Raises:
        ValueError: max_len is not positive
    """
    if max_len <= 0:
        raise ValueError(f"max_len must be positive, got {max_len}")

    if len(text) <= max_len:
        return [text]

    segments: List[str] = []
    length = len(text)
    start = 0

    while start < length:
        # Windows start on content; leftover separators would force mid-word cuts
        while start < length and text[start].isspace():
            start += 1
        if start >= length:
            break

        end = start + max_len

        if end >= length:
            piece = text[start:]
            next_start = length
        elif text[end].isspace():
            # Window ends right before a separator
            piece = text[start:end]
            next_start = end + 1
        else:
            boundary = _last_whitespace(text, start, end)
            if boundary is not None and boundary > start:
                piece = text[start:boundary]
                next_start = boundary + 1
            else:
                # Hard cut: nothing is skipped
                piece = text[start:end]
                next_start = end

        piece = piece.strip()
        if piece:
            segments.append(piece)
        start = next_start

    return segments
