"""Unit tests for document loading, cleaning and word-window chunking."""

import math
from pathlib import Path

import pytest

from oracle.document_processing import (
    DocumentLoader,
    TextChunker,
    clean_document_text,
)

from .conftest import make_words


def test_load_txt_document(tmp_path):
    doc_path = tmp_path / "guide.txt"
    doc_path.write_text("Midnight airdrop guide", encoding="utf-8")

    assert DocumentLoader.load_document(doc_path) == "Midnight airdrop guide"


def test_load_nonexistent_file():
    with pytest.raises(FileNotFoundError):
        DocumentLoader.load_document(Path("nonexistent_file.txt"))


def test_unsupported_file_type():
    with pytest.raises(ValueError, match="Unsupported file type"):
        DocumentLoader.load_document(Path("test.invalid"))


def test_clean_document_text_normalizes_content():
    raw = "Line one\r\nLine two\n\n\n  \nLine\0 three café — end  "

    cleaned = clean_document_text(raw)

    assert cleaned == "Line one\nLine two\n\nLine three caf  end"


def test_invalid_chunker_parameters():
    with pytest.raises(ValueError, match="Invalid chunking parameters"):
        TextChunker(chunk_size=10, overlap=10)


def test_empty_text_chunking(text_chunker_factory):
    chunker = text_chunker_factory()

    assert chunker.chunk_text("", "empty.txt") == []
    assert chunker.chunk_text("   \n\t ", "blank.txt") == []


def test_short_text_single_chunk(text_chunker_factory):
    chunker = text_chunker_factory()

    chunks = chunker.chunk_text("  hello   airdrop  world  ", "short.txt")

    assert len(chunks) == 1
    assert chunks[0].content == "hello airdrop world"
    assert chunks[0].chunk_index == 0
    assert chunks[0].filename == "short.txt"
    assert chunks[0].embedding is None


def test_five_hundred_word_document_chunk_count(text_chunker_factory):
    chunker = text_chunker_factory()
    text = make_words(500)

    chunks = chunker.chunk_text(text, "doc.txt")

    expected = math.ceil((500 - 150) / 130) + 1
    assert len(chunks) == expected == 4
    assert [chunk.chunk_index for chunk in chunks] == [0, 1, 2, 3]
    assert len(chunks[-1].content.split()) == 500 - 390


@pytest.mark.parametrize("word_count", [1, 9, 10, 11, 17, 40, 101])
def test_chunking_covers_every_word(text_chunker_factory, word_count):
    chunker = text_chunker_factory("small")
    words = make_words(word_count).split()

    chunks = chunker.chunk_text(" ".join(words), "doc.txt")

    covered = {word for chunk in chunks for word in chunk.content.split()}
    assert covered == set(words)


@pytest.mark.parametrize("word_count", [11, 25, 64])
def test_consecutive_chunks_share_overlap(text_chunker_factory, word_count):
    chunker = text_chunker_factory("small")
    chunks = chunker.chunk_text(make_words(word_count), "doc.txt")

    assert len(chunks) > 1
    for previous, current in zip(chunks, chunks[1:], strict=False):
        previous_words = previous.content.split()
        current_words = current.content.split()
        assert len(previous_words) == chunker.chunk_size
        assert previous_words[-chunker.overlap :] == current_words[: chunker.overlap]


def test_chunking_is_deterministic(text_chunker_factory):
    chunker = text_chunker_factory("small")
    text = make_words(57)

    assert chunker.chunk_text(text, "doc.txt") == chunker.chunk_text(text, "doc.txt")
