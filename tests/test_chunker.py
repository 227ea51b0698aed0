"""Sliding-window chunker tests."""

import pytest

from mitey.chunkers import SlidingWindowChunker


def test_empty_text_yields_no_chunks():
    """Empty input is not an error."""
    assert SlidingWindowChunker(100, 10).chunk("", "a.md") == []


@pytest.mark.parametrize("text", ["x", "short text", "a" * 100, "   ", "line\n" * 20])
def test_short_text_is_single_chunk(text):
    """Text within the size limit comes back unchanged as one chunk."""
    chunks = SlidingWindowChunker(100, 10).chunk(text, "a.md")

    assert len(chunks) == 1
    assert chunks[0].text == text
    assert chunks[0].source == "a.md"
    assert chunks[0].start_char == 0
    assert chunks[0].end_char == len(text)


@pytest.mark.parametrize(
    "text",
    [
        "a" * 1000,  # no natural breaks
        "word " * 400,
        "".join(f"line number {i}\n" for i in range(200)),
        "para one.\n\npara two is longer than the first.\n\n" * 40,
    ],
)
@pytest.mark.parametrize("size,overlap", [(100, 10), (50, 0), (80, 79), (800, 100)])
def test_chunks_respect_size_and_overlap(text, size, overlap):
    """Every chunk fits the limit and neighbours share exactly the overlap."""
    chunks = SlidingWindowChunker(size, overlap).chunk(text, "src/f.py")

    assert chunks
    for chunk in chunks:
        assert 0 < len(chunk.text) <= size
        assert chunk.text == text[chunk.start_char : chunk.end_char]
    for left, right in zip(chunks, chunks[1:]):
        assert right.start_char == left.end_char - overlap
        if overlap:
            assert left.text[-overlap:] == right.text[:overlap]
    assert chunks[0].start_char == 0
    assert chunks[-1].end_char == len(text)


def test_text_without_breaks_splits_on_length():
    """A run with no newlines is cut at the hard limit."""
    chunks = SlidingWindowChunker(100, 10).chunk("b" * 250, "x.js")

    assert [len(c.text) for c in chunks] == [100, 100, 70]
    assert [c.start_char for c in chunks] == [0, 90, 180]


def test_prefers_newline_in_second_half():
    """Windows end after a newline when one falls in their second half."""
    text = "a" * 70 + "\n" + "b" * 100
    chunks = SlidingWindowChunker(100, 10).chunk(text, "x.md")

    assert chunks[0].text == "a" * 70 + "\n"
    assert chunks[1].start_char == 61


def test_ignores_newline_in_first_half():
    """An early newline would make tiny chunks, so it is not used."""
    text = "a" * 20 + "\n" + "b" * 200
    chunks = SlidingWindowChunker(100, 10).chunk(text, "x.md")

    assert len(chunks[0].text) == 100


def test_chunk_indexes_are_sequential():
    chunks = SlidingWindowChunker(50, 5).chunk("z" * 500, "x.md")

    assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
    assert all(c.source == "x.md" for c in chunks)


def test_chunking_is_deterministic():
    text = "".join(f"def f{i}():\n    return {i}\n" for i in range(100))
    chunker = SlidingWindowChunker(120, 15)

    assert chunker.chunk(text, "m.py") == chunker.chunk(text, "m.py")


@pytest.mark.parametrize("size,overlap", [(0, 0), (10, 10), (10, 20), (10, -1)])
def test_rejects_invalid_settings(size, overlap):
    """Overlap must be smaller than the chunk size, or chunking never ends."""
    with pytest.raises(ValueError):
        SlidingWindowChunker(size, overlap)
