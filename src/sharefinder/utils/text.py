"""Text helpers including word-based token windowing."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

# Words, not model tokens: roughly 3/4 of a 10k-token budget once the
# downstream tokenizer expands them, leaving room for the prompt.
DEFAULT_MAX_WINDOW_TOKENS = 7500


def tokenize(text: str) -> List[str]:
    """Split text on runs of whitespace."""
    return text.split()


def iter_token_windows(
    tokens: Sequence[str], *, max_tokens: int = DEFAULT_MAX_WINDOW_TOKENS
) -> Iterator[List[str]]:
    """Yield consecutive, non-overlapping slices of at most ``max_tokens`` tokens."""
    if max_tokens < 1:
        raise ValueError("max_tokens must be at least 1")
    for start in range(0, len(tokens), max_tokens):
        yield list(tokens[start : start + max_tokens])


def window_text(text: str, *, max_tokens: int = DEFAULT_MAX_WINDOW_TOKENS) -> List[str]:
    """Split ``text`` into windows, each rejoined with single spaces.

    Empty or whitespace-only text produces no windows.
    """
    return [" ".join(window) for window in iter_token_windows(tokenize(text), max_tokens=max_tokens)]


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())
