"""
Repository for editorial articles.

Articles are held in process memory and are lost on restart.
"""

import logging
import secrets
import threading
import time
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol, Union

from .errors import InvalidStatusError
from .models import Article, ArticleCreate, ArticleStatus

logger = logging.getLogger(__name__)


def parse_status(status: Union[str, ArticleStatus]) -> ArticleStatus:
    """
    Convert a status string to ArticleStatus.

    Raises:
        InvalidStatusError: If status is not draft, featured, or archived
    """
    if isinstance(status, ArticleStatus):
        return status
    try:
        return ArticleStatus(str(status).lower())
    except ValueError:
        raise InvalidStatusError(str(status)) from None


def _new_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class ArticleRepositoryProtocol(Protocol):
    """Protocol for article persistence."""

    def create(self, article: ArticleCreate) -> Article:
        ...

    def get(self, article_id: str) -> Optional[Article]:
        ...

    def list_by_status(self, status: Union[str, ArticleStatus], limit: int = 10) -> List[Article]:
        ...

    def update_status(self, article_id: str, status: Union[str, ArticleStatus]) -> bool:
        ...

    def archive_oldest_featured(self, count: int = 3) -> int:
        ...

    def stats(self) -> Dict[str, int]:
        ...


class InMemoryArticleRepository:
    """Thread-safe in-memory article store."""

    def __init__(self, seed: Optional[Iterable[Article]] = None):
        """
        Initialize repository.

        Args:
            seed: Optional articles to preload (stored as given, ids kept)
        """
        self._articles: Dict[str, Article] = {}
        self._lock = threading.Lock()
        if seed:
            self.seed(seed)

    def seed(self, articles: Iterable[Article]) -> int:
        """Preload articles; existing ids are left untouched. Returns the number added."""
        added = 0
        with self._lock:
            for article in articles:
                if article.id not in self._articles:
                    self._articles[article.id] = article.model_copy(deep=True)
                    added += 1
        logger.info(f"Seeded {added} articles")
        return added

    def create(self, article: ArticleCreate) -> Article:
        """
        Store a new article.

        Returns:
            The stored article with generated id, timestamps and reference ids
        """
        article_id = _new_id("article")
        now = datetime.now()

        references = [
            reference.model_copy(update={"id": _new_id("ref"), "article_id": article_id})
            for reference in article.references
        ]

        stored = Article(
            **article.model_dump(exclude={"references"}),
            references=references,
            id=article_id,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            self._articles[article_id] = stored

        logger.info(f"Created article {article_id} ({stored.status.value}): {stored.title}")
        return stored.model_copy(deep=True)

    def get(self, article_id: str) -> Optional[Article]:
        with self._lock:
            article = self._articles.get(article_id)
        return article.model_copy(deep=True) if article else None

    def list_by_status(self, status: Union[str, ArticleStatus], limit: int = 10) -> List[Article]:
        """
        List articles with a status, newest first.

        Raises:
            InvalidStatusError: If status is not a known status
        """
        status = parse_status(status)
        with self._lock:
            matching = [a for a in self._articles.values() if a.status == status]
        matching.sort(key=lambda a: a.created_at, reverse=True)
        return [a.model_copy(deep=True) for a in matching[:max(limit, 0)]]

    def update_status(self, article_id: str, status: Union[str, ArticleStatus]) -> bool:
        """
        Change an article's status.

        Returns:
            True if the article exists and was updated, False otherwise

        Raises:
            InvalidStatusError: If status is not a known status
        """
        status = parse_status(status)
        with self._lock:
            article = self._articles.get(article_id)
            if article is None:
                return False
            self._articles[article_id] = article.model_copy(
                update={"status": status, "updated_at": datetime.now()}
            )
        logger.info(f"Article {article_id} status -> {status.value}")
        return True

    def archive_oldest_featured(self, count: int = 3) -> int:
        """
        Archive the oldest featured articles.

        Returns:
            Number of articles archived
        """
        with self._lock:
            featured = [a for a in self._articles.values() if a.status == ArticleStatus.FEATURED]
        featured.sort(key=lambda a: a.created_at)

        archived = 0
        for article in featured[:max(count, 0)]:
            if self.update_status(article.id, ArticleStatus.ARCHIVED):
                archived += 1
        return archived

    def stats(self) -> Dict[str, int]:
        """Article counts per status (every status present, zero if none)."""
        counts = {status.value: 0 for status in ArticleStatus}
        with self._lock:
            for article in self._articles.values():
                counts[article.status.value] += 1
        return counts
