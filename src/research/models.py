"""
Research data models.

ResearchRecord is the normalized shape every source adapter maps into.
ResearchResponse is the outcome of one aggregation run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Source labels, in merge priority order
SOURCE_PUBMED = "PubMed"
SOURCE_DOAJ = "DOAJ"
SOURCE_CURATED = "Curated"


@dataclass
class ResearchRecord:
    """Research article metadata normalized from any source."""
    id: str  # Source-qualified, e.g. "pmid:12345678" or "doaj:abc..."
    title: str = ""
    abstract: str = ""
    authors: Optional[str] = None  # Always stored as string
    journal: Optional[str] = None
    year: Optional[int] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    source: str = "Unknown"

    def __post_init__(self):
        """Ensure authors is a display string and year is int."""
        if self.year is not None and not isinstance(self.year, int):
            try:
                self.year = int(str(self.year)[:4])
            except (ValueError, TypeError):
                self.year = None

        if self.authors is not None and not isinstance(self.authors, str):
            if isinstance(self.authors, list):
                names = [a.get("name", "") if isinstance(a, dict) else str(a) for a in self.authors]
                names = [name for name in names if name]
                if len(names) > 5:
                    self.authors = ", ".join(names[:5]) + " et al."
                else:
                    self.authors = ", ".join(names)
            else:
                self.authors = str(self.authors)

    @property
    def dedup_key(self) -> str:
        return self.id.strip().lower()

    @property
    def searchable_text(self) -> str:
        """Lowercased title + abstract used by the relevance filter."""
        return f"{self.title} {self.abstract}".lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "authors": self.authors or "N/A",
            "journal": self.journal or "N/A",
            "year": self.year,
            "doi": self.doi,
            "url": self.url,
            "source": self.source,
        }

    @classmethod
    def from_pubmed(cls, paper: Dict[str, Any]) -> "ResearchRecord":
        return cls(
            id=f"pmid:{paper['pmid']}",
            title=paper.get("title", ""),
            abstract=paper.get("abstract", ""),
            authors=paper.get("authors"),
            journal=paper.get("journal"),
            year=paper.get("year"),
            doi=paper.get("doi"),
            url=paper.get("url") or f"https://pubmed.ncbi.nlm.nih.gov/{paper['pmid']}/",
            source=SOURCE_PUBMED,
        )

    @classmethod
    def from_doaj(cls, article: Dict[str, Any]) -> "ResearchRecord":
        return cls(
            id=f"doaj:{article['id']}",
            title=article.get("title", ""),
            abstract=article.get("abstract", ""),
            authors=article.get("authors"),
            journal=article.get("journal"),
            year=article.get("year"),
            doi=article.get("doi"),
            url=article.get("url"),
            source=SOURCE_DOAJ,
        )


@dataclass
class ResearchResponse:
    """Result of one research aggregation run."""
    query: str
    records: List[ResearchRecord] = field(default_factory=list)
    sub_queries: List[str] = field(default_factory=list)
    fallback_message: Optional[str] = None
    total_found: int = 0
    duplicates_removed: int = 0
    filtered_out: int = 0
    failed_sources: List[str] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return not self.records

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "records": [record.to_dict() for record in self.records],
            "fallback_message": self.fallback_message,
            "total_found": self.total_found,
            "duplicates_removed": self.duplicates_removed,
            "filtered_out": self.filtered_out,
            "failed_sources": list(self.failed_sources),
        }
