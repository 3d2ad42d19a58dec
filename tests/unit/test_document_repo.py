import os
import stat
import tempfile

import pytest

from core.database import DOCUMENTS
from core.exceptions import DocumentNotFoundError, ValidationError
from core.importer import FileBlob
from core.models.types import Folder
from core.repositories.document_repo import DOWNLOAD_FILE_MODE, DocumentRepository, parse_folder

USER = "alice@example.com"


@pytest.fixture
def repo(memory_db):
    return DocumentRepository(memory_db)


def test_parse_folder():
    assert parse_folder("Pendidikan") is Folder.PENDIDIKAN
    assert parse_folder(Folder.LAINNYA) is Folder.LAINNYA
    for bad in ("pribadi", "Work", "", None):
        with pytest.raises(ValidationError):
            parse_folder(bad)


def test_upload_stores_payload_and_metadata(repo):
    blob = FileBlob.from_bytes("Transkrip Nilai.pdf", b"%PDF-data")
    doc = repo.upload(USER, "Pendidikan", "  Transkrip  ", blob)

    assert doc.id is not None
    stored = repo.get(doc.id)
    assert stored == doc
    assert stored.file_name == "Transkrip"
    assert stored.original_file_name == "Transkrip Nilai.pdf"
    assert stored.folder is Folder.PENDIDIKAN
    assert stored.mime_type == "application/pdf"
    assert stored.file_data == b"%PDF-data"
    assert stored.file_size == 9
    assert stored.upload_date.endswith("Z")


def test_upload_accepts_empty_file(repo):
    doc = repo.upload(USER, Folder.LAINNYA, "empty", FileBlob.from_bytes("empty.txt", b""))
    assert repo.get(doc.id).file_size == 0


@pytest.mark.parametrize("user_id, folder, name, blob, field", [
    ("", Folder.PRIBADI, "x", FileBlob.from_bytes("x.txt", b"1"), "user_id"),
    (USER, Folder.PRIBADI, "   ", FileBlob.from_bytes("x.txt", b"1"), "display_name"),
    (USER, "Arbeit", "x", FileBlob.from_bytes("x.txt", b"1"), "folder"),
    (USER, None, "x", FileBlob.from_bytes("x.txt", b"1"), "folder"),
    (USER, Folder.PRIBADI, "x", None, "file"),
])
def test_upload_validation_writes_nothing(repo, memory_db, user_id, folder, name, blob, field):
    with pytest.raises(ValidationError) as exc:
        repo.upload(user_id, folder, name, blob)
    assert exc.value.details["field"] == field
    assert memory_db.count(DOCUMENTS) == 0


def test_failed_read_writes_nothing(repo, memory_db):
    def broken_reader():
        raise OSError("device not ready")

    blob = FileBlob("scan.pdf", "application/pdf", broken_reader)
    with pytest.raises(OSError):
        repo.upload(USER, Folder.PRIBADI, "scan", blob)
    assert memory_db.count(DOCUMENTS) == 0


def test_list_by_folder_is_scoped(repo, store_document):
    mine = store_document(user_id=USER, folder=Folder.PRIBADI, name="ktp")
    store_document(user_id=USER, folder=Folder.LAINNYA, name="other")
    store_document(user_id="bob@example.com", folder=Folder.PRIBADI, name="bobs")

    assert repo.list_by_folder(USER, Folder.PRIBADI) == [mine]
    assert repo.list_by_folder(USER, "Pribadi") == [mine]
    assert repo.list_by_folder(USER, Folder.PENDIDIKAN) == []
    assert len(repo.list_all(USER)) == 2


def test_rename_changes_only_display_name(repo, store_document):
    doc = store_document(name="old", data=b"abc")
    renamed = repo.rename(doc.id, "  new name ")

    assert renamed.file_name == "new name"
    stored = repo.get(doc.id)
    assert stored == renamed
    assert stored.model_dump(exclude={"file_name"}) == doc.model_dump(exclude={"file_name"})


def test_rename_rejects_empty_name(repo, store_document):
    doc = store_document(name="keep")
    with pytest.raises(ValidationError):
        repo.rename(doc.id, " ")
    assert repo.get(doc.id).file_name == "keep"


def test_rename_missing_document(repo):
    with pytest.raises(DocumentNotFoundError) as exc:
        repo.rename(404, "whatever")
    assert exc.value.details["document_id"] == 404


def test_remove(repo, store_document):
    doc = store_document()
    other = store_document(name="other")
    repo.remove(doc.id)
    repo.remove(doc.id)

    assert repo.get(doc.id) is None
    assert repo.get(other.id) == other


def test_remove_drops_document_from_listings(repo, store_document):
    keep = store_document(folder=Folder.PRIBADI, name="keep")
    gone = store_document(folder=Folder.PRIBADI, name="gone")
    store_document(folder=Folder.LAINNYA, name="elsewhere")

    repo.remove(gone.id)

    assert gone.id not in [d.id for d in repo.list_all(USER)]
    assert [d.id for d in repo.list_by_folder(USER, Folder.PRIBADI)] == [keep.id]
    assert len(repo.list_all(USER)) == 2


def test_download_writes_exact_bytes(repo, store_document, tmp_path):
    payload = bytes(range(256))
    doc = store_document(name="akta", data=payload, original_file_name="akta.pdf", mime_type="application/pdf")

    saved = repo.download(doc, tmp_path / "downloads")

    assert saved.path == tmp_path / "downloads" / "akta.pdf"
    assert saved.mime_type == "application/pdf"
    assert saved.path.read_bytes() == payload
    assert [p.name for p in (tmp_path / "downloads").iterdir()] == ["akta.pdf"]


def test_download_keeps_mime_type_for_names_without_extension(repo, store_document, tmp_path):
    legacy = store_document(name="surat", original_file_name="", mime_type="application/pdf")

    saved = repo.download(legacy, tmp_path)

    assert saved.path.name == "surat.pdf"
    assert saved.mime_type == "application/pdf"


def test_download_of_untyped_payload(repo, store_document, tmp_path):
    doc = store_document(name="blob", original_file_name="", mime_type="")

    saved = repo.download(doc, tmp_path)

    assert saved.path.name == "blob"
    assert saved.mime_type == "application/octet-stream"


def test_download_never_overwrites(repo, store_document, tmp_path):
    doc = store_document(name="akta", data=b"new", original_file_name="akta.pdf")
    (tmp_path / "akta.pdf").write_bytes(b"existing")
    (tmp_path / "akta (1).pdf").write_bytes(b"existing too")

    saved = repo.download(doc, tmp_path)

    assert saved.path.name == "akta (2).pdf"
    assert saved.path.read_bytes() == b"new"
    assert (tmp_path / "akta.pdf").read_bytes() == b"existing"
    assert (tmp_path / "akta (1).pdf").read_bytes() == b"existing too"


def test_reserved_names_are_exclusive(tmp_path):
    first = DocumentRepository._reserve_path(tmp_path / "ktp.jpg")
    second = DocumentRepository._reserve_path(tmp_path / "ktp.jpg")

    assert first.name == "ktp.jpg"
    assert second.name == "ktp (1).jpg"
    assert first.exists() and second.exists()


def test_competing_download_during_write_gets_its_own_name(repo, store_document, tmp_path, monkeypatch):
    ours = store_document(name="akta", data=b"ours", original_file_name="akta.pdf")
    theirs = store_document(name="akta", data=b"theirs", original_file_name="akta.pdf")
    real_mkstemp = tempfile.mkstemp
    competing = []
    started = []

    def mkstemp_with_competitor(*args, **kwargs):
        if not started:
            started.append(True)
            # A second export of the same name starts while ours is in flight
            competing.append(repo.download(theirs, tmp_path))
        return real_mkstemp(*args, **kwargs)

    monkeypatch.setattr("core.repositories.document_repo.tempfile.mkstemp", mkstemp_with_competitor)

    saved = repo.download(ours, tmp_path)

    assert saved.path.name == "akta.pdf"
    assert saved.path.read_bytes() == b"ours"
    assert competing[0].path.name == "akta (1).pdf"
    assert competing[0].path.read_bytes() == b"theirs"


def test_failed_write_leaves_no_files(repo, store_document, tmp_path, monkeypatch):
    doc = store_document(name="akta", original_file_name="akta.pdf")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("core.repositories.document_repo.os.replace", fail_replace)
    with pytest.raises(OSError):
        repo.download(doc, tmp_path)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_download_honors_umask(repo, store_document, tmp_path):
    doc = store_document(name="akta", original_file_name="akta.pdf")

    saved = repo.download(doc, tmp_path)

    mask = os.umask(0)
    os.umask(mask)
    assert stat.S_IMODE(saved.path.stat().st_mode) == 0o666 & ~mask
    assert DOWNLOAD_FILE_MODE == 0o666 & ~mask


def test_download_strips_directories_and_falls_back_to_display_name(repo, store_document, tmp_path):
    sneaky = store_document(name="x", original_file_name="../../etc/passwd")
    assert repo.download(sneaky, tmp_path).path.parent == tmp_path

    legacy = store_document(name="surat", original_file_name="")
    assert repo.download(legacy, tmp_path).path.name == "surat"
