# file: LISTINGS/core/store.py
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional

from google.api_core import exceptions as gexc
from google.auth import exceptions as gauth_exc

from LISTINGS.core.config import COLLECTIONS, STORE_TIMEOUT_SEC
from LISTINGS.core.errors import StoreError, StoreUnavailable
from LISTINGS.core.firebase import close_firestore_client
from LISTINGS.core.logger import log_to_cloud

logger = logging.getLogger("core.store")

# Failures that mean "the store is not reachable right now"
_UNAVAILABLE = (
    gexc.ServiceUnavailable,
    gexc.DeadlineExceeded,
    gexc.RetryError,
    gauth_exc.TransportError,
    gauth_exc.RefreshError,
)
_STORE_ERRORS = (gexc.GoogleAPIError, gauth_exc.GoogleAuthError)


class ListingStore:
    """
    Firestore-backed listing collections, one per category.

    The Firestore client is created by the caller and handed in; the store
    only owns reading and writing documents.
    """

    def __init__(self, db, timeout: float = STORE_TIMEOUT_SEC):
        self.db = db
        self.timeout = timeout

    def _collection(self, category: str):
        try:
            return self.db.collection(COLLECTIONS[category])
        except KeyError:
            raise ValueError(f"Unknown category: {category}")

    def _fail(self, category: str, operation: str, exc: Exception) -> StoreError:
        unavailable = isinstance(exc, _UNAVAILABLE)
        log_to_cloud(
            category="store",
            severity="ERROR",
            message=f"{operation} failed for {category}: {exc}",
            metadata={
                "category": category,
                "operation": operation,
                "unavailable": unavailable,
            },
        )
        cls = StoreUnavailable if unavailable else StoreError
        return cls(category, operation)

    # ------------------------------
    # Writes
    # ------------------------------
    def insert(self, category: str, document: Mapping) -> Dict:
        """Insert one document and return it with its id and created_at."""
        data = dict(document)
        data["created_at"] = datetime.now(timezone.utc)
        try:
            _, doc_ref = self._collection(category).add(
                data, retry=None, timeout=self.timeout
            )
        except _STORE_ERRORS as e:
            raise self._fail(category, "insert", e) from e

        logger.debug("Inserted %s/%s", COLLECTIONS[category], doc_ref.id)
        return {"id": doc_ref.id, **data}

    # ------------------------------
    # Reads
    # ------------------------------
    def find(
        self,
        category: str,
        predicate: Optional[Callable[[Mapping], bool]] = None,
    ) -> List[Dict]:
        """
        Scan the category collection in insertion order, keeping documents
        the predicate accepts (all of them when no predicate is given).

        Ordering happens here rather than in a Firestore query so documents
        written without ``created_at`` are still returned (first).
        """
        try:
            docs = [
                {"id": doc.id, **(doc.to_dict() or {})}
                for doc in self._collection(category).stream(
                    retry=None, timeout=self.timeout
                )
            ]
        except _STORE_ERRORS as e:
            raise self._fail(category, "find", e) from e

        docs.sort(key=_created_key)
        if predicate is None:
            return docs
        return [d for d in docs if predicate(d)]

    def close(self) -> None:
        close_firestore_client(self.db)


def _created_key(doc: Mapping):
    ts = doc.get("created_at")
    if isinstance(ts, datetime):
        return (1, ts.timestamp())
    return (0, 0.0)
