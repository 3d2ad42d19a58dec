import pytest

from core.aggregation import RECENT_LIMIT, AggregationEngine, compute_stats
from core.models.types import Folder
from core.repositories.document_repo import DocumentRepository

USER = "alice@example.com"


@pytest.fixture
def engine(memory_db):
    return AggregationEngine(DocumentRepository(memory_db))


def test_empty_archive(engine):
    stats = engine.refresh_aggregates(USER)
    assert stats.total_documents == 0
    assert stats.total_bytes == 0
    assert stats.formatted_total == "0 Bytes"
    assert all(stats.count_for(folder) == 0 for folder in Folder)


def test_counts_and_sizes_per_user(engine, store_document):
    store_document(folder=Folder.PENDIDIKAN, data=b"a" * 1024)
    store_document(folder=Folder.PENDIDIKAN, data=b"b" * 512)
    store_document(folder=Folder.LAINNYA, data=b"")
    store_document(user_id="bob@example.com", folder=Folder.PRIBADI, data=b"x" * 4096)

    stats = engine.refresh_aggregates(USER)
    assert stats.count_for(Folder.PENDIDIKAN) == 2
    assert stats.count_for(Folder.PRIBADI) == 0
    assert stats.count_for(Folder.LAINNYA) == 1
    assert stats.total_documents == sum(stats.folder_counts.values()) == 3
    assert stats.total_bytes == 1536
    assert stats.formatted_total == "1.5 KB"


def test_legacy_records_count_payload_length(make_document):
    legacy = make_document(data=b"12345", file_size=None)
    tracked = make_document(data=b"12345", file_size=100)
    assert compute_stats([legacy, tracked]).total_bytes == 105


def test_recent_documents_newest_first(engine, store_document):
    for day in range(1, 8):
        store_document(name=f"d{day}", upload_date=f"2024-03-0{day}T12:00:00.000Z")
    store_document(user_id="bob@example.com", name="bob", upload_date="2030-01-01T00:00:00.000Z")

    recent = engine.recent_documents(USER)
    assert len(recent) == RECENT_LIMIT
    assert [d.file_name for d in recent] == ["d7", "d6", "d5", "d4", "d3"]


def test_recent_with_fewer_documents(engine, store_document):
    store_document(name="only")
    assert [d.file_name for d in engine.recent_documents(USER, limit=5)] == ["only"]
