"""Split oversized policy documents into fixed-size chunks.

Chunking is purely length based and may cut mid-sentence; each chunk is
analyzed on its own and the results are merged afterwards.
"""

import math
from dataclasses import dataclass

MAX_TEXT_LENGTH = 50_000
# Room left in each call for the system prompt and instructions.
PROMPT_RESERVE = 5_000


@dataclass(frozen=True)
class Chunk:
    index: int
    total: int
    start: int
    text: str

    @property
    def label(self) -> str:
        return f"Part {self.index + 1} of {self.total}"


def needs_chunking(text: str, max_length: int = MAX_TEXT_LENGTH) -> bool:
    return len(text) > max_length


def chunk_budget(max_length: int = MAX_TEXT_LENGTH, reserve: int = PROMPT_RESERVE) -> int:
    budget = max_length - reserve
    if budget <= 0:
        raise ValueError(f"chunk reserve ({reserve}) must be smaller than the max text length ({max_length})")
    return budget


def plan_chunks(text: str, max_length: int = MAX_TEXT_LENGTH, reserve: int = PROMPT_RESERVE) -> list[Chunk]:
    """
    Return contiguous, non-overlapping chunks covering *text* in order.

    A text within *max_length* comes back as a single chunk; longer texts are
    cut every ``max_length - reserve`` characters. Empty text yields no chunks.
    """
    if not text:
        return []
    size = len(text) if not needs_chunking(text, max_length) else chunk_budget(max_length, reserve)
    total = math.ceil(len(text) / size)
    return [
        Chunk(index=i, total=total, start=i * size, text=text[i * size:(i + 1) * size])
        for i in range(total)
    ]
