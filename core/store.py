from __future__ import annotations
import threading
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: str
    body: str


class PageNotFound(KeyError):
    """Lookup for a page id that was never created."""


class StoreUnavailable(RuntimeError):
    """The process-wide store has not been initialized yet."""


class CommentStore:
    """In-memory store keyed by page_id. One lock guards the whole mapping."""
    def __init__(self) -> None:
        self._db: Dict[str, List[Comment]] = {}
        self._lock = threading.Lock()

    def lookup_comments(self, page_id: str) -> List[Comment]:
        # read never creates the page
        with self._lock:
            comments = self._db.get(page_id)
            if comments is None:
                raise PageNotFound(page_id)
            return list(comments)

    def ensure_page(self, page_id: str) -> List[Comment]:
        with self._lock:
            return list(self._db.setdefault(page_id, []))

    def append_comment(self, page_id: str, user: str, body: str) -> Comment:
        comment = Comment(user=user, body=body)
        with self._lock:
            self._db.setdefault(page_id, []).append(comment)
        return comment

    def has_page(self, page_id: str) -> bool:
        with self._lock:
            return page_id in self._db

    def page_ids(self) -> List[str]:
        with self._lock:
            return list(self._db)

    def __len__(self) -> int:
        with self._lock:
            return len(self._db)


class StoreSlot:
    """Holds the single CommentStore for the process. Writers create it lazily."""
    def __init__(self) -> None:
        self._store: Optional[CommentStore] = None
        self._lock = threading.Lock()

    def get(self) -> CommentStore:
        store = self._store
        if store is None:
            raise StoreUnavailable("comment store not initialized")
        return store

    def get_or_init(self) -> CommentStore:
        with self._lock:
            if self._store is None:
                self._store = CommentStore()
            return self._store

    def reset(self) -> None:
        with self._lock:
            self._store = None

    @property
    def ready(self) -> bool:
        return self._store is not None
