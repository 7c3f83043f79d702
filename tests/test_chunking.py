"""Тесты нарезки текста на перекрывающиеся окна.

Запуск:
  pytest -q tests/test_chunking.py
"""

import pytest

from profile_qa.chunking import normalize_whitespace, segment

TEXT_25 = "abcdefghijklmnopqrstuvwxy"


def _reconstruct(chunks, overlap):
    if not chunks:
        return ""
    return chunks[0] + "".join(c[overlap:] for c in chunks[1:])


def test_segment_25_chars_size_10_overlap_3() -> None:
    chunks = segment(TEXT_25, chunk_size=10, overlap=3)

    assert chunks == ["abcdefghij", "hijklmnopq", "opqrstuvwx", "vwxy"]
    assert [len(c) for c in chunks[:2]] == [10, 10]
    assert len(chunks[-1]) < 10
    for left, right in zip(chunks, chunks[1:]):
        assert left[-3:] == right[:3]


def test_whitespace_is_normalized_before_segmenting() -> None:
    assert normalize_whitespace("  a \n\t b  ") == "a b"
    assert segment("  a \n\t b  ", chunk_size=10, overlap=2) == ["a b"]


@pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
def test_empty_input_gives_no_chunks(text: str) -> None:
    assert segment(text, chunk_size=10, overlap=3) == []


def test_segmentation_is_deterministic_and_restartable() -> None:
    text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 40
    first = segment(text, chunk_size=120, overlap=30)
    again = segment(normalize_whitespace(text), chunk_size=120, overlap=30)
    assert first == again


@pytest.mark.parametrize("size,overlap", [(1100, 200), (50, 0), (7, 6), (64, 16)])
def test_length_overlap_and_coverage_invariants(size: int, overlap: int) -> None:
    text = " ".join(f"word{i}\n" for i in range(800))
    clean = normalize_whitespace(text)
    chunks = segment(text, chunk_size=size, overlap=overlap)

    assert all(len(c) <= size for c in chunks)
    assert all(len(c) == size for c in chunks[:-1])
    for left, right in zip(chunks, chunks[1:]):
        assert left[len(left) - overlap:] == right[:overlap]
    assert _reconstruct(chunks, overlap) == clean


def test_short_text_is_a_single_unpadded_chunk() -> None:
    assert segment("hello", chunk_size=10, overlap=3) == ["hello"]


@pytest.mark.parametrize("size,overlap", [(0, 0), (10, 10), (10, 12), (10, -1)])
def test_invalid_window_parameters_are_rejected(size: int, overlap: int) -> None:
    with pytest.raises(ValueError):
        segment(TEXT_25, chunk_size=size, overlap=overlap)
