"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/aggregation.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Aggregation engine. Derives per-folder counts, document total
                and storage used from the complete per-user document set, and
                the "recent documents" view. Always a full recomputation.
------------------------------------------------------------------------------
"""

from typing import Iterable, List

from core.document_filter import sort_documents
from core.logger import get_logger
from core.models.document import ArchiveDocument
from core.models.stats import ArchiveStats
from core.models.types import Folder, SortKey, SortOrder
from core.repositories.document_repo import DocumentRepository

logger = get_logger("aggregation")

RECENT_LIMIT = 5


def compute_stats(documents: Iterable[ArchiveDocument]) -> ArchiveStats:
    """
    Counts documents per folder and sums their sizes.
    Legacy records without 'file_size' contribute their payload length.
    """
    counts = {folder: 0 for folder in Folder}
    total = 0
    total_bytes = 0
    for doc in documents:
        if doc.folder in counts:
            counts[doc.folder] += 1
        total += 1
        total_bytes += doc.effective_size
    return ArchiveStats(folder_counts=counts, total_documents=total, total_bytes=total_bytes)


class AggregationEngine:
    """Computes statistics on demand from the document repository."""

    def __init__(self, documents: DocumentRepository) -> None:
        self.documents = documents

    def refresh_aggregates(self, user_id: str) -> ArchiveStats:
        """Full pass over all documents of the user."""
        stats = compute_stats(self.documents.list_all(user_id))
        logger.debug(
            f"Aggregates for {user_id}: {stats.total_documents} docs, {stats.total_bytes} bytes"
        )
        return stats

    def recent_documents(self, user_id: str, limit: int = RECENT_LIMIT) -> List[ArchiveDocument]:
        """Newest uploads first, truncated to 'limit'."""
        docs = sort_documents(self.documents.list_all(user_id), SortKey.UPLOAD_DATE, SortOrder.DESC)
        return docs[:limit]
