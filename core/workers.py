"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/workers.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Background workers for the blocking parts of the document
                flow: reading a selected file and storing it, and writing a
                stored payload back to disk. Only store and file work runs in
                the thread; the archive view is refreshed by a slot on the
                thread that owns the worker once 'completed' is delivered.
------------------------------------------------------------------------------
"""

from pathlib import Path
from typing import Optional, Union

from PyQt6.QtCore import QThread, pyqtSignal, pyqtSlot

from core.archive import ArchiveSession
from core.exceptions import AuthFailureError, DokuMiniError
from core.importer import FileBlob
from core.logger import get_logger
from core.models.types import Folder

logger = get_logger("workers")


class UploadWorker(QThread):
    """
    Worker thread to read a file and store it as a new document.
    Owner and target folder are fixed when the worker is created.
    """
    completed = pyqtSignal(object)  # ArchiveDocument
    failed = pyqtSignal(str)  # error message

    def __init__(
        self,
        archive: ArchiveSession,
        blob: Optional[FileBlob],
        display_name: str,
        folder: Union[Folder, str, None] = None
    ):
        super().__init__()
        self.archive = archive
        self.blob = blob
        self.display_name = display_name
        self.user_id = archive.user.id if archive.user else None
        self.folder = folder if folder is not None else archive.current_folder
        # Receiver is this QThread object, which lives in the creating thread
        self.completed.connect(self._refresh_view)

    def run(self):
        try:
            if self.user_id is None:
                raise AuthFailureError("Not logged in")
            doc = self.archive.repository.upload(self.user_id, self.folder, self.display_name, self.blob)
        except (DokuMiniError, OSError) as e:
            logger.warning(f"Upload failed: {e}")
            self.failed.emit(getattr(e, "message", None) or str(e))
            return
        except Exception as e:
            logger.exception("Unexpected upload error")
            self.failed.emit(str(e))
            return
        self.completed.emit(doc)

    @pyqtSlot(object)
    def _refresh_view(self, _doc):
        self.archive.refresh()


class DownloadWorker(QThread):
    """
    Worker thread to export a stored document to the download folder.
    """
    completed = pyqtSignal(str, str)  # written path, MIME type
    failed = pyqtSignal(str)

    def __init__(self, archive: ArchiveSession, document_id: int, target_dir: Union[str, Path, None] = None):
        super().__init__()
        self.archive = archive
        self.document_id = document_id
        self.target_dir = target_dir

    def run(self):
        try:
            saved = self.archive.download(self.document_id, self.target_dir)
        except (DokuMiniError, OSError) as e:
            logger.warning(f"Download failed: {e}")
            self.failed.emit(getattr(e, "message", None) or str(e))
            return
        except Exception as e:
            logger.exception("Unexpected download error")
            self.failed.emit(str(e))
            return
        self.completed.emit(str(saved.path), saved.mime_type)
