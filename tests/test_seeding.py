"""Tests for seeding the vector store from a document directory."""

import pytest

from oracle.seeding import discover_documents, seed_documents

from .conftest import make_words


def test_discover_documents_filters_and_sorts(tmp_path):
    (tmp_path / "b.txt").write_text("beta", encoding="utf-8")
    (tmp_path / "a.PDF").write_bytes(b"%PDF")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")
    (tmp_path / "nested.txt").mkdir()

    assert [path.name for path in discover_documents(tmp_path)] == ["a.PDF", "b.txt"]


def test_discover_documents_missing_directory(tmp_path):
    assert discover_documents(tmp_path / "missing") == []


@pytest.mark.asyncio
async def test_seed_documents_indexes_each_file(tmp_path, rag_pipeline):
    (tmp_path / "Midnight_Airdrop.txt").write_text(make_words(200), encoding="utf-8")
    (tmp_path / "Cardano_Basics.txt").write_text(make_words(50), encoding="utf-8")

    report = await seed_documents(rag_pipeline, tmp_path)

    assert report.processed == ["Cardano_Basics.txt", "Midnight_Airdrop.txt"]
    assert report.failed == []
    assert report.document_count == 2


@pytest.mark.asyncio
async def test_seed_documents_skips_unreadable_files(tmp_path, rag_pipeline):
    (tmp_path / "broken.pdf").write_bytes(b"this is not a pdf")
    (tmp_path / "good.txt").write_text(make_words(30), encoding="utf-8")

    report = await seed_documents(rag_pipeline, tmp_path)

    assert report.processed == ["good.txt"]
    assert report.failed == ["broken.pdf"]
    assert report.document_count == 1


@pytest.mark.asyncio
async def test_seeding_twice_does_not_duplicate(tmp_path, rag_pipeline):
    (tmp_path / "doc.txt").write_text(make_words(400), encoding="utf-8")

    await seed_documents(rag_pipeline, tmp_path)
    first = rag_pipeline.vector_store.all_chunks()
    await seed_documents(rag_pipeline, tmp_path)
    second = rag_pipeline.vector_store.all_chunks()

    assert len(first) == len(second) == 3


@pytest.mark.asyncio
async def test_seed_empty_directory(tmp_path, rag_pipeline):
    report = await seed_documents(rag_pipeline, tmp_path)

    assert report.processed == []
    assert report.document_count == 0
