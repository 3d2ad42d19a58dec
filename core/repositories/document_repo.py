from typing import List, Optional, Union
import mimetypes
import os
import tempfile
from pathlib import Path

from .base import BaseRepository
from core.database import DOCUMENTS, BY_USER, BY_USER_FOLDER
from core.exceptions import DocumentNotFoundError, ValidationError
from core.importer import DEFAULT_MIME_TYPE, FileBlob
from core.logger import get_logger
from core.models.document import ArchiveDocument, DownloadedFile, utc_now_iso
from core.models.types import Folder

logger = get_logger("repo.documents")


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Permission bits for downloaded files, honoring the process umask
DOWNLOAD_FILE_MODE = 0o666 & ~_read_umask()


def parse_folder(folder: Union[Folder, str, None]) -> Folder:
    if folder is None or folder == "":
        raise ValidationError("A folder is required", field="folder")
    try:
        return Folder.parse(folder)
    except ValueError:
        raise ValidationError(
            f"Unknown folder '{folder}'", field="folder",
            details={"allowed": [f.value for f in Folder]}
        ) from None


class DocumentRepository(BaseRepository):
    """
    Manages access to the 'documents' table.
    """

    table = DOCUMENTS

    def get(self, document_id: int) -> Optional[ArchiveDocument]:
        return self.db.get(self.table, document_id)

    def list_by_folder(self, user_id: str, folder: Union[Folder, str]) -> List[ArchiveDocument]:
        """All documents of a user in one folder (composite index scan)."""
        return self.db.query_by_index(self.table, BY_USER_FOLDER, (user_id, parse_folder(folder)))

    def list_all(self, user_id: str) -> List[ArchiveDocument]:
        """All documents of a user across folders."""
        return self.db.query_by_index(self.table, BY_USER, user_id)

    def upload(
        self,
        user_id: str,
        folder: Union[Folder, str],
        display_name: str,
        blob: Optional[FileBlob]
    ) -> ArchiveDocument:
        """
        Validates the input, reads the file completely and stores a new document.
        Nothing is written unless the read succeeded.

        Args:
            user_id: Owner of the new document.
            folder: Target folder (member or literal name).
            display_name: Editable name shown in lists; surrounding whitespace is dropped.
            blob: The selected file.

        Returns:
            The stored document including its assigned id.

        Raises:
            ValidationError: Missing user, empty name, unknown folder or no file.
        """
        if not user_id:
            raise ValidationError("No owner given for upload", field="user_id")
        name = (display_name or "").strip()
        if not name:
            raise ValidationError("Document name must not be empty", field="display_name")
        target_folder = parse_folder(folder)
        if blob is None:
            raise ValidationError("No file selected", field="file")

        data = blob.read()

        doc = ArchiveDocument(
            user_id=user_id,
            folder=target_folder,
            file_name=name,
            original_file_name=blob.name,
            upload_date=utc_now_iso(),
            file_data=data,
            mime_type=blob.mime_type,
            file_size=len(data),
        )
        new_id = self.db.add(self.table, doc)
        logger.info(f"Stored document {new_id} ({len(data)} bytes) in {target_folder.value} for {user_id}")
        return doc.model_copy(update={"id": new_id})

    def rename(self, document_id: int, new_name: str) -> ArchiveDocument:
        """
        Changes the display name; every other field is written back unchanged.

        Raises:
            ValidationError: If the new name is empty.
            DocumentNotFoundError: If no document has this id.
        """
        name = (new_name or "").strip()
        if not name:
            raise ValidationError("Document name must not be empty", field="file_name")

        current = self.get(document_id)
        if current is None:
            raise DocumentNotFoundError(f"Document {document_id} does not exist", document_id=document_id)

        updated = current.model_copy(update={"file_name": name})
        self.db.put(self.table, updated)
        logger.info(f"Renamed document {document_id}")
        return updated

    def remove(self, document_id: int) -> None:
        """Deletes a document. Unknown ids are ignored."""
        self.db.delete(self.table, document_id)
        logger.info(f"Removed document {document_id}")

    def download(self, document: ArchiveDocument, target_dir: Union[str, Path]) -> DownloadedFile:
        """
        Writes the stored payload byte-exact into target_dir, named after the
        original file (fallback: display name). A name without extension gets
        one derived from the stored MIME type. Existing files are never
        overwritten; a ' (n)' suffix is appended instead.

        Returns:
            The written path and the document's content type.
        """
        out_dir = Path(target_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        mime_type = document.mime_type or DEFAULT_MIME_TYPE
        # Only the final path component, never a caller-controlled directory
        safe_name = Path(document.download_name).name or f"document-{document.id}"
        if not Path(safe_name).suffix and mime_type != DEFAULT_MIME_TYPE:
            safe_name += mimetypes.guess_extension(mime_type, strict=False) or ""

        target = self._reserve_path(out_dir / safe_name)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=out_dir, prefix=".dokumini-", suffix=".part")
            with os.fdopen(fd, "wb") as handle:
                handle.write(document.file_data)
            os.chmod(tmp_name, DOWNLOAD_FILE_MODE)
            # Replaces only the placeholder claimed by _reserve_path
            os.replace(tmp_name, target)
        except BaseException:
            for leftover in (tmp_name, target):
                if leftover and os.path.exists(leftover):
                    os.unlink(leftover)
            raise

        logger.info(f"Exported document {document.id} to {target} ({mime_type})")
        return DownloadedFile(target, mime_type)

    @staticmethod
    def _reserve_path(path: Path) -> Path:
        """
        Claims the first free name among 'name', 'name (1)', ... by creating
        an empty placeholder exclusively.
        """
        candidate = path
        counter = 0
        while True:
            try:
                os.close(os.open(candidate, os.O_CREAT | os.O_EXCL | os.O_WRONLY, DOWNLOAD_FILE_MODE))
                return candidate
            except FileExistsError:
                counter += 1
                candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
