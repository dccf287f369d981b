"""
PubMed API wrapper for searching parenting and child-development literature.
"""
import httpx
from typing import List, Dict, Optional, Any, Tuple
import logging
import threading
import time
import json
from xml.etree import ElementTree as ET


logger = logging.getLogger(__name__)

# Browse categories -> PubMed search terms
BROWSE_CATEGORIES: Dict[str, str] = {
    "Tantrums": "child behavior problems positive discipline parenting",
    "Communication": "parent child communication responsive caregiving attachment",
    "Sleep": "child sleep bedtime routines family routines",
    "Screen Time": "children screen time digital media parenting",
    "Family Time": "family meals family activities child development",
    "Emotional Health": "child emotional development emotion coaching parenting",
    "Physical Development": "child physical activity motor development",
    "Language Development": "child language development reading literacy",
}

DEFAULT_BROWSE_TERM = "parenting child development evidence based"

# Recent trials and evidence syntheses only; "3000" is PubMed's open upper date bound
QUALITY_FILTER = (
    '("{min_year}"[Date - Publication] : "3000"[Date - Publication]) AND '
    "(randomized controlled trial[Publication Type] OR systematic review[Publication Type] "
    "OR meta-analysis[Publication Type])"
)


def build_browse_query(
    category: Optional[str] = None,
    search_term: Optional[str] = None,
    min_year: int = 2018,
) -> Tuple[str, str]:
    """
    Build the filtered PubMed query for the research browser.

    An explicit search term wins over the category; "All" or an unknown
    category falls back to a general parenting query.

    Returns:
        (base term, full query with the quality filter)
    """
    term = (search_term or "").strip()
    if not term:
        term = BROWSE_CATEGORIES.get(category or "", DEFAULT_BROWSE_TERM)
    return term, f"{term} AND {QUALITY_FILTER.format(min_year=min_year)}"


class PubMedAPI:
    """
    Wrapper for NCBI PubMed E-utilities API.

    Documentation: https://www.ncbi.nlm.nih.gov/books/NBK25501/

    Searches are a two-step esearch (JSON id list) + efetch (XML records).
    HTTP and parse failures are logged and yield an empty list.
    """

    BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
    TOOL_NAME = "family-support-research"

    def __init__(self, api_key: Optional[str] = None, email: Optional[str] = None, timeout: int = 30):
        """
        Initialize PubMed API client.

        Args:
            api_key: NCBI API key (for higher rate limits)
            email: Email address (required by NCBI for tracking)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.email = email or "noreply@example.com"
        self.timeout = timeout
        self.session = httpx.Client(timeout=timeout)
        self.last_request_time = 0.0
        # Rate limit: 3 req/sec without key, 10 req/sec with key
        self.rate_limit_delay = 0.11 if api_key else 0.35
        # Sub-queries are fanned out from worker threads
        self._rate_lock = threading.Lock()

    def _rate_limit(self):
        """Enforce rate limiting between requests."""
        with self._rate_lock:
            current_time = time.time()
            time_since_last = current_time - self.last_request_time
            if time_since_last < self.rate_limit_delay:
                time.sleep(self.rate_limit_delay - time_since_last)
            self.last_request_time = time.time()

    def _base_params(self) -> Dict[str, Any]:
        params = {
            "db": "pubmed",
            "tool": self.TOOL_NAME,
            "email": self.email,
        }
        if self.api_key:
            params["api_key"] = self.api_key
        return params

    def search(
        self,
        query: str,
        max_results: int = 10,
        sort: str = "relevance"
    ) -> List[str]:
        """
        Search PubMed and return PMIDs.

        Args:
            query: Search query
            max_results: Maximum number of results
            sort: Sort order (relevance, pub_date)

        Returns:
            List of PubMed IDs (PMIDs)
        """
        pmids, _ = self._esearch(query, max_results, sort)
        return pmids

    def _esearch(self, query: str, max_results: int, sort: str) -> Tuple[List[str], int]:
        """Run esearch; returns (PMIDs, total hit count), or ([], 0) on failure."""
        try:
            self._rate_limit()

            params = self._base_params()
            params.update({
                "term": query,
                "retmax": max_results,
                "retmode": "json",
                "sort": sort,
            })

            response = self.session.get(
                f"{self.BASE_URL}/esearch.fcgi",
                params=params
            )
            response.raise_for_status()

            try:
                data = response.json()
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse PubMed search JSON response: {e}")
                return [], 0

            result = data.get("esearchresult", {})
            pmids = result.get("idlist", [])
            try:
                count = int(result.get("count", len(pmids)))
            except (TypeError, ValueError):
                count = len(pmids)

            logger.info(f"Found {len(pmids)} articles for query: {query}")
            return pmids, count

        except httpx.HTTPError as e:
            logger.error(f"PubMed search error: {str(e)}")
            return [], 0

    def fetch_abstracts(self, pmids: List[str]) -> List[Dict[str, Any]]:
        """
        Fetch article abstracts for given PMIDs.

        Args:
            pmids: List of PubMed IDs

        Returns:
            List of article details with abstracts
        """
        if not pmids:
            return []

        try:
            self._rate_limit()

            params = self._base_params()
            params.update({
                "id": ",".join(pmids),
                "retmode": "xml",
                "rettype": "abstract",
            })

            response = self.session.get(
                f"{self.BASE_URL}/efetch.fcgi",
                params=params
            )
            response.raise_for_status()

            articles = self._parse_xml_response(response.text)
            logger.info(f"Retrieved {len(articles)} article abstracts")

            return articles

        except httpx.HTTPError as e:
            logger.error(f"PubMed fetch error: {str(e)}")
            return []

    def search_papers(
        self,
        query: str,
        max_results: int = 10,
        sort: str = "relevance"
    ) -> List[Dict[str, Any]]:
        """
        Search PubMed and fetch abstracts in one call.

        Returns:
            List of paper dictionaries with pmid, title, abstract, authors, journal, year, doi, url
        """
        pmids = self.search(query, max_results, sort)
        if pmids:
            return self.fetch_abstracts(pmids)
        return []

    def browse(
        self,
        category: Optional[str] = None,
        search_term: Optional[str] = None,
        limit: int = 20,
        min_year: int = 2018,
    ) -> Dict[str, Any]:
        """
        Browse recent high-quality studies by category or free-text term.

        Args:
            category: One of BROWSE_CATEGORIES, or "All"
            search_term: Free text; takes precedence over the category
            limit: Maximum number of articles
            min_year: Earliest publication year

        Returns:
            Dict with articles, total_count and the base search_term
        """
        term, full_query = build_browse_query(category, search_term, min_year)
        pmids, count = self._esearch(full_query, limit, "relevance")
        articles = self.fetch_abstracts(pmids) if pmids else []
        return {
            "articles": articles,
            "total_count": count,
            "search_term": term,
        }

    def close(self) -> None:
        self.session.close()

    def _parse_xml_response(self, xml_text: str) -> List[Dict[str, Any]]:
        """
        Parse PubMed XML response into structured data.

        Args:
            xml_text: XML response from PubMed

        Returns:
            List of article dictionaries
        """
        try:
            root = ET.fromstring(xml_text)
            articles = []

            for article_elem in root.findall(".//PubmedArticle"):
                article = self._extract_article_data(article_elem)
                if article:
                    articles.append(article)

            return articles

        except ET.ParseError as e:
            logger.error(f"XML parsing error: {str(e)}")
            return []

    def _extract_article_data(self, article_elem) -> Optional[Dict[str, Any]]:
        """Extract article data from a PubmedArticle element"""
        pmid_elem = article_elem.find(".//PMID")
        pmid = pmid_elem.text.strip() if pmid_elem is not None and pmid_elem.text else None

        medline = article_elem.find(".//MedlineCitation")
        article_data = medline.find(".//Article") if medline is not None else None

        if article_data is None or not pmid:
            return None

        # itertext() keeps text inside inline markup such as <i> or <sup>
        title_elem = article_data.find(".//ArticleTitle")
        title = "".join(title_elem.itertext()).strip() if title_elem is not None else ""

        # Structured abstracts are split into labelled sections
        abstract_parts = []
        for section in article_data.findall(".//Abstract/AbstractText"):
            text = "".join(section.itertext()).strip()
            if not text:
                continue
            label = section.get("Label")
            abstract_parts.append(f"{label}: {text}" if label else text)
        abstract = " ".join(abstract_parts) or "No abstract available."

        authors = []
        author_list = article_data.find(".//AuthorList")
        if author_list is not None:
            for author in author_list.findall(".//Author"):
                last_name = author.find("LastName")
                fore_name = author.find("ForeName")
                if last_name is not None and last_name.text:
                    author_name = last_name.text
                    if fore_name is not None and fore_name.text:
                        author_name = f"{fore_name.text} {author_name}"
                    authors.append(author_name)
                else:
                    collective = author.find("CollectiveName")
                    if collective is not None and collective.text:
                        authors.append(collective.text)

        journal_elem = article_data.find(".//Journal/Title")
        journal = journal_elem.text if journal_elem is not None and journal_elem.text else "N/A"

        year = None
        pub_date = article_data.find(".//Journal/JournalIssue/PubDate")
        if pub_date is not None:
            year_elem = pub_date.find("Year")
            if year_elem is not None and year_elem.text:
                year = year_elem.text
            else:
                # e.g. <MedlineDate>2019 Nov-Dec</MedlineDate>
                medline_date = pub_date.find("MedlineDate")
                if medline_date is not None and medline_date.text:
                    year = medline_date.text[:4]

        doi = None
        for location_id in article_data.findall(".//ELocationID"):
            if location_id.get("EIdType") == "doi":
                doi = location_id.text
                break
        if doi is None:
            for article_id in article_elem.findall(".//ArticleId"):
                if article_id.get("IdType") == "doi":
                    doi = article_id.text
                    break

        keywords = [
            "".join(keyword.itertext()).strip()
            for keyword in medline.findall(".//KeywordList/Keyword")
        ]

        return {
            "pmid": pmid,
            "title": title or "No Title",
            "abstract": abstract,
            "authors": authors,
            "journal": journal,
            "year": year,
            "doi": doi,
            "keywords": [k for k in keywords if k][:10],
            "url": f"https://pubmed.ncbi.nlm.nih.gov/{pmid}/",
        }
