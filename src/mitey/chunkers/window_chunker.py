"""Sliding-window chunking strategy."""

from mitey.models import Chunk


class SlidingWindowChunker:
    """Default chunking: fixed-size windows with a fixed overlap.

    - Text that fits in one window is returned as a single chunk
    - A window that stops short of the end prefers to break just after a
      newline in its second half, otherwise it cuts at the hard limit
    - Each window starts ``chunk_overlap`` characters before the previous
      one ended, so neighbours share exactly that many characters
    """

    DEFAULT_CHUNK_SIZE = 800
    DEFAULT_CHUNK_OVERLAP = 100

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, {chunk_size}), got {chunk_overlap}"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk(self, text: str, source: str) -> list[Chunk]:
        """Split text into overlapping chunks.

        Args:
            text: The text content to chunk
            source: Provenance tag copied onto every chunk

        Returns:
            List of Chunk objects in document order
        """
        if not text:
            return []

        chunks: list[Chunk] = []
        start = 0
        length = len(text)

        while True:
            end = self._window_end(text, start)
            chunks.append(
                Chunk(
                    text=text[start:end],
                    source=source,
                    chunk_index=len(chunks),
                    start_char=start,
                    end_char=end,
                )
            )
            if end >= length:
                break
            # end > start + chunk_overlap, so this always advances
            start = end - self.chunk_overlap

        return chunks

    def _window_end(self, text: str, start: int) -> int:
        hard_end = start + self.chunk_size
        if hard_end >= len(text):
            return len(text)

        floor = start + max(self.chunk_overlap, self.chunk_size // 2)
        cut = text.rfind("\n", floor, hard_end)
        if cut == -1:
            return hard_end
        return cut + 1
