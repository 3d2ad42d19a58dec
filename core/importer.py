"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/importer.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Upload input handling. Wraps a selected file (on disk or in
                memory) as a FileBlob whose bytes are only read when the
                upload actually runs, and derives the default display name.
------------------------------------------------------------------------------
"""

import mimetypes
from pathlib import Path
from typing import Callable, Optional, Union

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(file_name: str) -> str:
    """Guesses the content type from the file extension."""
    mime, _ = mimetypes.guess_type(file_name, strict=False)
    return mime or DEFAULT_MIME_TYPE


def suggest_display_name(file_name: str) -> str:
    """
    Default display name for an upload: the file name without its last
    extension. Names without a usable stem ('README', '.bashrc') are kept whole.
    """
    stem = ".".join(file_name.split(".")[:-1])
    return stem or file_name


class FileBlob:
    """
    A user-selected file: name, content type and a deferred byte reader.
    """

    def __init__(self, name: str, mime_type: str, reader: Callable[[], bytes]) -> None:
        self.name: str = name
        self.mime_type: str = mime_type
        self._reader = reader

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "FileBlob":
        """
        Wraps a file on disk.

        Raises:
            FileNotFoundError: If the path does not exist or is not a file.
        """
        src = Path(path)
        if not src.is_file():
            raise FileNotFoundError(f"Source file not found: {path}")
        return cls(src.name, mime_type or guess_mime_type(src.name), src.read_bytes)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: Optional[str] = None) -> "FileBlob":
        payload = bytes(data)
        return cls(name, mime_type or guess_mime_type(name), lambda: payload)

    def read(self) -> bytes:
        """Reads the complete payload into memory."""
        return bytes(self._reader())

    def __repr__(self) -> str:
        return f"FileBlob(name={self.name!r}, mime_type={self.mime_type!r})"
