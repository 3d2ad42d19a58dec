"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/document_filter.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Pure list operations for folder views: case-insensitive
                substring search on the display name and stable sorting by
                upload date or name. No store access.
------------------------------------------------------------------------------
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from core.models.document import ArchiveDocument
from core.models.types import SortKey, SortOrder


def upload_timestamp(doc: ArchiveDocument) -> datetime:
    """
    Parses 'upload_date' for chronological comparison.
    Naive timestamps are taken as UTC; unparsable ones sort as oldest.
    """
    try:
        dt = datetime.fromisoformat(doc.upload_date.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def filter_documents(documents: Iterable[ArchiveDocument], query: Optional[str]) -> List[ArchiveDocument]:
    """
    Keeps documents whose display name contains the query (case-insensitive).
    The original file name is not searched. Empty query keeps everything.
    """
    docs = list(documents)
    if not query:
        return docs
    needle = query.casefold()
    return [doc for doc in docs if needle in doc.file_name.casefold()]


def sort_documents(
    documents: Iterable[ArchiveDocument],
    key: Union[SortKey, str] = SortKey.UPLOAD_DATE,
    order: Union[SortOrder, str] = SortOrder.DESC
) -> List[ArchiveDocument]:
    """
    Stable sort; documents with equal keys keep their incoming order in
    both directions.
    """
    sort_key = SortKey(key)
    descending = SortOrder(order) == SortOrder.DESC

    if sort_key == SortKey.FILE_NAME:
        return sorted(documents, key=lambda d: d.file_name.casefold(), reverse=descending)
    return sorted(documents, key=upload_timestamp, reverse=descending)


def filter_and_sort(
    documents: Iterable[ArchiveDocument],
    query: Optional[str] = None,
    key: Union[SortKey, str] = SortKey.UPLOAD_DATE,
    order: Union[SortOrder, str] = SortOrder.DESC
) -> List[ArchiveDocument]:
    """Filter first, then sort."""
    return sort_documents(filter_documents(documents, query), key, order)
