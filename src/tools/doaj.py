"""
DOAJ (Directory of Open Access Journals) API wrapper.

Used as the supplementary open-access source for research search.
"""
import httpx
from typing import List, Dict, Optional, Any
from urllib.parse import quote
import logging


logger = logging.getLogger(__name__)


class DOAJAPI:
    """
    Wrapper for the DOAJ article search API.

    Documentation: https://doaj.org/api/docs

    Responses are normalized to plain dicts with the same keys the PubMed
    wrapper produces (minus pmid). Errors are logged and yield an empty list.
    """

    BASE_URL = "https://doaj.org/api/v2"

    def __init__(self, base_url: Optional[str] = None, timeout: int = 30):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = httpx.Client(timeout=timeout)

    def search_articles(self, query: str, max_results: int = 3) -> List[Dict[str, Any]]:
        """
        Search DOAJ for open-access articles.

        Args:
            query: Search query (DOAJ accepts Elasticsearch query-string syntax)
            max_results: Maximum number of results (pageSize)

        Returns:
            List of article dicts with id, title, abstract, authors, journal, year, doi, url
        """
        try:
            response = self.session.get(
                f"{self.base_url}/search/articles/{quote(query, safe='')}",
                params={"page": 1, "pageSize": max_results},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"DOAJ search error: {str(e)}")
            return []
        except ValueError as e:
            logger.error(f"Failed to parse DOAJ search JSON response: {e}")
            return []

        results = data.get("results") or []
        articles = [self._extract_article_data(item) for item in results[:max_results]]
        articles = [article for article in articles if article]

        logger.info(f"DOAJ returned {len(articles)} articles for query: {query}")
        return articles

    def close(self) -> None:
        self.session.close()

    def _extract_article_data(self, item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Flatten a DOAJ result (id + bibjson) into an article dict"""
        article_id = item.get("id")
        if not article_id:
            return None

        bibjson = item.get("bibjson") or {}

        authors = []
        for author in bibjson.get("author") or []:
            name = author.get("name") or " ".join(
                part for part in (author.get("given"), author.get("family")) if part
            )
            if name:
                authors.append(name.strip())

        links = bibjson.get("link") or []

        def _link(link_type: str) -> Optional[str]:
            for link in links:
                if link.get("type") == link_type and link.get("url"):
                    return link["url"]
                if link.get("type") == link_type and link.get("content"):
                    return link["content"]
            return None

        doi = None
        for identifier in bibjson.get("identifier") or []:
            if (identifier.get("type") or "").lower() == "doi":
                doi = identifier.get("id")
                break
        doi = doi or _link("doi")

        url = _link("fulltext") or _link("homepage")
        if not url and doi:
            url = f"https://doi.org/{doi}"

        return {
            "id": article_id,
            "title": bibjson.get("title") or "No Title",
            "abstract": bibjson.get("abstract") or "No abstract available.",
            "authors": authors,
            "journal": (bibjson.get("journal") or {}).get("title") or "N/A",
            "year": bibjson.get("year"),
            "doi": doi,
            "url": url or f"https://doaj.org/article/{article_id}",
        }
