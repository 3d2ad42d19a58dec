from datetime import timezone

from core.document_filter import filter_and_sort, filter_documents, sort_documents, upload_timestamp
from core.models.types import SortKey, SortOrder


def _names(docs):
    return [d.file_name for d in docs]


def test_filter_is_case_insensitive_substring(make_document):
    docs = [make_document(name="Ijazah SMA"), make_document(name="KTP"), make_document(name="ijazah S1")]
    assert _names(filter_documents(docs, "IJAZAH")) == ["Ijazah SMA", "ijazah S1"]
    assert _names(filter_documents(docs, "")) == _names(docs)
    assert _names(filter_documents(docs, None)) == _names(docs)


def test_filter_ignores_original_file_name(make_document):
    doc = make_document(name="Rapor", original_file_name="scan_001.pdf")
    assert filter_documents([doc], "scan") == []


def test_sort_by_upload_date(make_document):
    docs = [
        make_document(name="mid", upload_date="2024-02-01T00:00:00.000Z"),
        make_document(name="new", upload_date="2024-03-01T00:00:00.000Z"),
        make_document(name="old", upload_date="2024-01-01T00:00:00.000Z"),
    ]
    assert _names(sort_documents(docs, SortKey.UPLOAD_DATE, SortOrder.DESC)) == ["new", "mid", "old"]
    assert _names(sort_documents(docs, "upload_date", "asc")) == ["old", "mid", "new"]


def test_sort_by_name_ignores_case(make_document):
    docs = [make_document(name="beta"), make_document(name="Alpha"), make_document(name="gamma")]
    assert _names(sort_documents(docs, SortKey.FILE_NAME, SortOrder.ASC)) == ["Alpha", "beta", "gamma"]
    assert _names(sort_documents(docs, SortKey.FILE_NAME, SortOrder.DESC)) == ["gamma", "beta", "Alpha"]


def test_sort_is_stable_for_equal_keys(make_document):
    docs = [make_document(name="same", id=i) for i in (3, 1, 2)]
    assert [d.id for d in sort_documents(docs, SortKey.FILE_NAME, SortOrder.ASC)] == [3, 1, 2]
    assert [d.id for d in sort_documents(docs, SortKey.FILE_NAME, SortOrder.DESC)] == [3, 1, 2]


def test_unparsable_dates_sort_as_oldest(make_document):
    broken = make_document(name="broken", upload_date="not a date")
    naive = make_document(name="naive", upload_date="2024-01-01T00:00:00")
    assert upload_timestamp(broken).tzinfo is timezone.utc
    assert upload_timestamp(naive).tzinfo is timezone.utc
    assert _names(sort_documents([broken, naive], SortKey.UPLOAD_DATE, SortOrder.ASC)) == ["broken", "naive"]


def test_filter_and_sort(make_document):
    docs = [
        make_document(name="Surat B", upload_date="2024-01-02T00:00:00.000Z"),
        make_document(name="Foto", upload_date="2024-01-03T00:00:00.000Z"),
        make_document(name="surat A", upload_date="2024-01-01T00:00:00.000Z"),
    ]
    assert _names(filter_and_sort(docs, "surat")) == ["Surat B", "surat A"]
    assert _names(filter_and_sort(docs, "surat", SortKey.FILE_NAME, SortOrder.ASC)) == ["surat A", "Surat B"]
