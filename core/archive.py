"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/archive.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    ArchiveSession facade. Wires store, session context, accounts,
                documents and aggregation together and owns the in-memory view
                state (open folder, its document list, statistics, recent
                uploads). Every mutation is followed by a full refresh.
------------------------------------------------------------------------------
"""

import threading
from pathlib import Path
from typing import List, Optional, Union

from core.accounts import AccountService
from core.aggregation import AggregationEngine
from core.config import AppConfig
from core.database import DatabaseManager
from core.document_filter import filter_and_sort
from core.exceptions import AuthFailureError, DocumentNotFoundError
from core.importer import FileBlob
from core.logger import get_logger
from core.models.document import ArchiveDocument, DownloadedFile
from core.models.stats import ArchiveStats
from core.models.types import Folder, SortKey, SortOrder
from core.models.user import AuthenticatedUser, User
from core.repositories.document_repo import DocumentRepository, parse_folder
from core.repositories.user_repo import UserRepository
from core.session import SessionContext

logger = get_logger("archive")


class ArchiveSession:
    """
    One user's working session against the archive.
    """

    def __init__(self, db: DatabaseManager, config: AppConfig) -> None:
        self.db = db
        self.config = config
        self.session = SessionContext(config)
        self.accounts = AccountService(UserRepository(db), self.session)
        self.repository = DocumentRepository(db)
        self.aggregation = AggregationEngine(self.repository)

        # Guards the view fields below; refresh() may be triggered from worker threads
        self._view_lock = threading.RLock()
        self.current_folder: Optional[Folder] = None
        self.documents: List[ArchiveDocument] = []
        self.stats: ArchiveStats = ArchiveStats()
        self.recent: List[ArchiveDocument] = []

    # --- Accounts ---

    @property
    def user(self) -> Optional[AuthenticatedUser]:
        return self.session.current_user

    def register(self, email: str, password: str) -> User:
        return self.accounts.register(email, password)

    def login(self, email: str, password: str) -> AuthenticatedUser:
        user = self.accounts.login(email, password)
        self.refresh()
        return user

    def logout(self) -> None:
        if self.user:
            logger.info(f"Logout for {self.user.id}")
        self.accounts.logout()
        with self._view_lock:
            self.current_folder = None
            self._reset_view()

    def restore_session(self) -> Optional[AuthenticatedUser]:
        user = self.accounts.restore_session()
        if user:
            self.refresh()
        return user

    def _require_user(self) -> AuthenticatedUser:
        if self.user is None:
            raise AuthFailureError("Not logged in")
        return self.user

    # --- Navigation ---

    def open_folder(self, folder: Union[Folder, str]) -> List[ArchiveDocument]:
        self._require_user()
        target = parse_folder(folder)
        with self._view_lock:
            self.current_folder = target
            self.refresh()
            return self.documents

    def close_folder(self) -> None:
        with self._view_lock:
            self.current_folder = None
            self.refresh()

    # --- Documents ---

    def upload(
        self,
        blob: Optional[FileBlob],
        display_name: str,
        folder: Union[Folder, str, None] = None
    ) -> ArchiveDocument:
        """Uploads into 'folder', defaulting to the open folder."""
        user = self._require_user()
        target = folder if folder is not None else self.current_folder
        doc = self.repository.upload(user.id, target, display_name, blob)
        self.refresh()
        return doc

    def rename(self, document_id: int, new_name: str) -> ArchiveDocument:
        self._require_owned(document_id)
        doc = self.repository.rename(document_id, new_name)
        self.refresh()
        return doc

    def delete(self, document_id: int) -> None:
        self._require_user()
        existing = self.repository.get(document_id)
        if existing is not None:
            self._require_owned(document_id, existing)
        self.repository.remove(document_id)
        self.refresh()

    def download(self, document_id: int, target_dir: Union[str, Path, None] = None) -> DownloadedFile:
        doc = self._require_owned(document_id)
        return self.repository.download(doc, target_dir or self.config.get_download_dir())

    def _require_owned(self, document_id: int, doc: Optional[ArchiveDocument] = None) -> ArchiveDocument:
        """
        Loads a document of the current user. Documents of other users are
        reported as missing.
        """
        user = self._require_user()
        doc = doc or self.repository.get(document_id)
        if doc is None or doc.user_id != user.id:
            raise DocumentNotFoundError(f"Document {document_id} does not exist", document_id=document_id)
        return doc

    # --- View state ---

    def refresh(self) -> None:
        """
        Reloads the open folder and recomputes statistics and recent uploads
        for the current user from the store. The folder is read under the
        view lock, so the list always belongs to 'current_folder'.
        """
        with self._view_lock:
            user = self.user
            if user is None:
                self._reset_view()
                return

            folder = self.current_folder
            documents = self.repository.list_by_folder(user.id, folder) if folder is not None else []
            self.documents = documents
            self.stats = self.aggregation.refresh_aggregates(user.id)
            self.recent = self.aggregation.recent_documents(user.id)
            logger.debug(
                f"View refreshed: folder={folder.value if folder else None}, "
                f"{len(documents)} listed, {self.stats.total_documents} total"
            )

    def visible_documents(
        self,
        query: Optional[str] = None,
        key: Union[SortKey, str] = SortKey.UPLOAD_DATE,
        order: Union[SortOrder, str] = SortOrder.DESC
    ) -> List[ArchiveDocument]:
        """The open folder's documents after search and sort."""
        return filter_and_sort(self.documents, query, key, order)

    def _reset_view(self) -> None:
        self.documents = []
        self.stats = ArchiveStats()
        self.recent = []

    # --- Preferences ---

    @property
    def site_name(self) -> str:
        return self.config.get_site_name()

    @site_name.setter
    def site_name(self, name: str) -> None:
        self.config.set_site_name(name)
