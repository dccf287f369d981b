"""
Tests for the PubMed and DOAJ HTTP clients and record normalization.

HTTP is mocked with httpx.MockTransport; nothing leaves the process.
"""

import httpx

from src.research.models import ResearchRecord, SOURCE_DOAJ, SOURCE_PUBMED
from src.tools.doaj import DOAJAPI
from src.tools.pubmed import PubMedAPI


EFETCH_XML = """<?xml version="1.0"?>
<PubmedArticleSet>
  <PubmedArticle>
    <MedlineCitation>
      <PMID>31000001</PMID>
      <Article>
        <Journal>
          <JournalIssue><PubDate><Year>2019</Year></PubDate></JournalIssue>
          <Title>Journal of Child Psychology</Title>
        </Journal>
        <ArticleTitle>Bedtime routines and <i>toddler</i> sleep</ArticleTitle>
        <Abstract>
          <AbstractText Label="BACKGROUND">Routines matter.</AbstractText>
          <AbstractText Label="RESULTS">Sleep improved.</AbstractText>
        </Abstract>
        <AuthorList>
          <Author><LastName>Mindell</LastName><ForeName>Jodi</ForeName></Author>
          <Author><CollectiveName>Sleep Study Group</CollectiveName></Author>
        </AuthorList>
        <ELocationID EIdType="doi">10.1000/sleep.1</ELocationID>
      </Article>
    </MedlineCitation>
  </PubmedArticle>
  <PubmedArticle>
    <MedlineCitation>
      <PMID>31000002</PMID>
      <Article>
        <Journal>
          <JournalIssue><PubDate><MedlineDate>2018 Nov-Dec</MedlineDate></PubDate></JournalIssue>
          <Title>Family Review</Title>
        </Journal>
        <ArticleTitle>Sibling conflict</ArticleTitle>
      </Article>
    </MedlineCitation>
  </PubmedArticle>
</PubmedArticleSet>
"""


def _pubmed_with(handler) -> PubMedAPI:
    api = PubMedAPI(email="test@example.com")
    api.session = httpx.Client(transport=httpx.MockTransport(handler))
    api.rate_limit_delay = 0
    return api


class TestPubMedAPI:
    """Tests for PubMedAPI."""

    def test_search_papers(self):
        """esearch ids are fetched and parsed into paper dicts."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path.endswith("esearch.fcgi"):
                return httpx.Response(200, json={"esearchresult": {"idlist": ["31000001", "31000002"]}})
            return httpx.Response(200, text=EFETCH_XML)

        papers = _pubmed_with(handler).search_papers("parenting AND sleep", max_results=2)

        assert seen[0].url.params["term"] == "parenting AND sleep"
        assert seen[0].url.params["retmax"] == "2"
        assert seen[1].url.params["id"] == "31000001,31000002"

        first, second = papers
        assert first["pmid"] == "31000001"
        assert first["title"] == "Bedtime routines and toddler sleep"
        assert first["abstract"] == "BACKGROUND: Routines matter. RESULTS: Sleep improved."
        assert first["authors"] == ["Jodi Mindell", "Sleep Study Group"]
        assert first["journal"] == "Journal of Child Psychology"
        assert first["year"] == "2019"
        assert first["doi"] == "10.1000/sleep.1"
        assert first["url"] == "https://pubmed.ncbi.nlm.nih.gov/31000001/"

        assert second["year"] == "2018"
        assert second["abstract"] == "No abstract available."
        assert second["doi"] is None

    def test_http_error_returns_empty(self):
        """Server errors are logged and give an empty list."""
        api = _pubmed_with(lambda request: httpx.Response(503))
        assert api.search_papers("sleep") == []

    def test_no_ids_skips_fetch(self):
        """An empty id list does not call efetch."""
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json={"esearchresult": {"idlist": []}})

        assert _pubmed_with(handler).search_papers("sleep") == []
        assert len(calls) == 1

    def test_bad_xml_returns_empty(self):
        """Malformed XML gives an empty list."""
        assert PubMedAPI()._parse_xml_response("<not-closed>") == []

    def test_record_normalization(self):
        """PubMed dicts map to source-qualified records."""
        paper = PubMedAPI()._parse_xml_response(EFETCH_XML)[0]
        record = ResearchRecord.from_pubmed(paper)

        assert record.id == "pmid:31000001"
        assert record.authors == "Jodi Mindell, Sleep Study Group"
        assert record.year == 2019
        assert record.source == SOURCE_PUBMED


DOAJ_RESPONSE = {
    "total": 1,
    "results": [
        {
            "id": "abc123",
            "bibjson": {
                "title": "Screen time in preschoolers",
                "abstract": "Preschool screen exposure and language.",
                "author": [{"name": "Ana Ruiz"}, {"name": "Ben Ode"}],
                "journal": {"title": "Open Journal of Pediatrics"},
                "year": "2021",
                "identifier": [{"type": "doi", "id": "10.1000/screen.2"}],
                "link": [{"type": "fulltext", "url": "https://example.org/screen"}],
            },
        },
        {"bibjson": {"title": "Missing id is skipped"}},
    ],
}


class TestDOAJAPI:
    """Tests for DOAJAPI."""

    def _api(self, handler) -> DOAJAPI:
        api = DOAJAPI(base_url="https://doaj.test/api")
        api.session = httpx.Client(transport=httpx.MockTransport(handler))
        return api

    def test_search_articles(self):
        """Results are flattened from bibjson."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=DOAJ_RESPONSE)

        articles = self._api(handler).search_articles("family psychology AND naps", max_results=3)

        assert "/api/search/articles/family%20psychology%20AND%20naps" in str(seen[0].url)
        assert seen[0].url.params["pageSize"] == "3"
        assert articles == [{
            "id": "abc123",
            "title": "Screen time in preschoolers",
            "abstract": "Preschool screen exposure and language.",
            "authors": ["Ana Ruiz", "Ben Ode"],
            "journal": "Open Journal of Pediatrics",
            "year": "2021",
            "doi": "10.1000/screen.2",
            "url": "https://example.org/screen",
        }]

    def test_http_error_returns_empty(self):
        """HTTP failures give an empty list."""
        assert self._api(lambda request: httpx.Response(500)).search_articles("naps") == []

    def test_record_normalization(self):
        """DOAJ dicts map to source-qualified records."""
        article = DOAJAPI()._extract_article_data(DOAJ_RESPONSE["results"][0])
        record = ResearchRecord.from_doaj(article)

        assert record.id == "doaj:abc123"
        assert record.year == 2021
        assert record.source == SOURCE_DOAJ
