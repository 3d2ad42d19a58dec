import pytest
from PyQt6.QtCore import QCoreApplication, QSettings

from core.archive import ArchiveSession
from core.config import AppConfig
from core.database import DatabaseManager, DOCUMENTS
from core.models.document import ArchiveDocument
from core.models.types import Folder


@pytest.fixture(scope="session")
def qt_core_app():
    """Event-loop-less Qt application required by QThread based workers."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def memory_db():
    db = DatabaseManager(":memory:")
    yield db
    db.close()


@pytest.fixture
def config(tmp_path):
    # Redirect QSettings to a throwaway INI file to avoid polluting real config
    app_config = AppConfig()
    app_config.settings = QSettings(str(tmp_path / "dokumini-test.ini"), QSettings.Format.IniFormat)
    return app_config


@pytest.fixture
def archive(memory_db, config):
    return ArchiveSession(memory_db, config)


@pytest.fixture
def make_document():
    """Factory for unsaved documents with sensible defaults."""
    def _make(user_id="alice@example.com", folder=Folder.PRIBADI, name="doc",
              data=b"payload", upload_date="2024-01-01T10:00:00.000Z", **extra):
        fields = dict(
            user_id=user_id,
            folder=folder,
            file_name=name,
            original_file_name=f"{name}.bin",
            upload_date=upload_date,
            file_data=data,
            mime_type="application/octet-stream",
            file_size=len(data),
        )
        fields.update(extra)
        return ArchiveDocument(**fields)
    return _make


@pytest.fixture
def store_document(memory_db, make_document):
    """Stores a document directly and returns it with its id."""
    def _store(**kwargs):
        doc = make_document(**kwargs)
        new_id = memory_db.add(DOCUMENTS, doc)
        return doc.model_copy(update={"id": new_id})
    return _store
