"""
Weekly Article Generation

Picks parenting topics, gathers research references for each from the
primary search source, asks the LLM for a markdown article and stores the
results as drafts. After a run that produced articles, the oldest featured
articles are archived to make room for the new ones.
"""

import logging
import random
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlparse

from src.prompts import get_prompt_manager
from src.research.models import ResearchRecord
from src.research.protocols import LLMClient, PrimarySearcher
from src.research.services.relevance_filter import RelevanceFilter

from .errors import ArticleGenerationError
from .models import Article, ArticleCreate, ArticleReference, ArticleStatus
from .repository import ArticleRepositoryProtocol

logger = logging.getLogger(__name__)

SEARCH_TOPICS = (
    "child development milestones",
    "positive parenting techniques",
    "early childhood education",
    "family communication strategies",
    "child mental health",
    "developmental psychology",
    "parenting stress management",
    "child behavior management",
    "family therapy approaches",
    "child nutrition and development",
    "screen time and children",
    "sleep training methods",
    "discipline strategies",
    "emotional intelligence in children",
    "learning disabilities support",
)

# (topic keywords, category); first match wins
CATEGORY_RULES = (
    (("development", "milestone"), "Child Development"),
    (("parenting", "discipline"), "Parenting Strategies"),
    (("mental health", "stress"), "Mental Health"),
    (("education", "learning"), "Education"),
    (("family", "communication"), "Family Dynamics"),
    (("health", "nutrition"), "Health & Wellness"),
    (("behavior", "management"), "Behavior Management"),
)
DEFAULT_CATEGORY = "Communication"

COMMON_TAGS = (
    "parenting", "children", "family", "development", "psychology",
    "behavior", "communication", "education", "health", "wellness",
)
MAX_TAGS = 5
SUMMARY_CHARS = 200
QUOTE_CHARS = 240

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def determine_category(topic: str) -> str:
    topic = topic.lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in topic for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def generate_tags(topic: str, content: str) -> List[str]:
    """Topic words longer than three letters, then common tags found in the body."""
    content = content.lower()
    candidates = [word for word in topic.lower().split() if len(word) > 3]
    candidates += [tag for tag in COMMON_TAGS if tag in content]
    return list(dict.fromkeys(candidates))[:MAX_TAGS]


def extract_title(content: str, topic: str) -> str:
    match = _TITLE_RE.search(content)
    if match:
        return match.group(1).strip()
    return f"Understanding {topic}: A Parent's Guide"


def extract_summary(content: str) -> str:
    """First paragraph after the title, cut to SUMMARY_CHARS."""
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", content) if p.strip()]
    body = [p for p in paragraphs if not p.startswith("#")]
    text = body[0] if body else content.strip()
    return text[:SUMMARY_CHARS] + "..."


def reference_from_record(record: ResearchRecord) -> ArticleReference:
    """Cite a research record; the quote is the abstract's first sentence."""
    abstract = record.abstract if record.abstract != "No abstract available." else ""
    quote = re.split(r"(?<=[.!?])\s", abstract.strip(), maxsplit=1)[0] if abstract else ""
    if len(quote) > QUOTE_CHARS:
        quote = quote[:QUOTE_CHARS - 3] + "..."

    url = record.url or (f"https://doi.org/{record.doi}" if record.doi else "")
    domain = urlparse(url).netloc
    if domain.startswith("www."):
        domain = domain[4:]

    return ArticleReference(
        title=record.title,
        url=url,
        quote=quote,
        domain=domain,
        published_date=datetime(record.year, 1, 1) if record.year else None,
    )


@dataclass
class GenerationReport:
    """Outcome of one generation run."""
    articles: List[Article] = field(default_factory=list)
    archived: int = 0
    skipped_topics: List[str] = field(default_factory=list)
    token_usage: Dict[str, int] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.articles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": "Weekly article generation completed" if self.success else "No articles generated",
            "new_articles": len(self.articles),
            "archived_articles": self.archived,
            "skipped_topics": list(self.skipped_topics),
            "token_usage": dict(self.token_usage),
            "articles": [
                {"id": a.id, "title": a.title, "status": a.status.value}
                for a in self.articles
            ],
        }


class ArticleGenerator:
    """Generates draft articles from research references and an LLM."""

    def __init__(
        self,
        llm_client: LLMClient,
        searcher: PrimarySearcher,
        topics: Sequence[str] = SEARCH_TOPICS,
        references_per_article: int = 3,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        relevance_filter: Optional[RelevanceFilter] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the generator.

        Args:
            llm_client: Client used to write the article body
            searcher: Research source for references (PubMed in production)
            topics: Topic pool sampled each run
            references_per_article: References cited per article
            max_tokens: LLM output budget per article
            temperature: LLM sampling temperature
            relevance_filter: Filter applied to reference candidates
            rng: Random source for topic selection
        """
        self._llm = llm_client
        self._searcher = searcher
        self.topics = tuple(topics)
        self.references_per_article = references_per_article
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.relevance_filter = relevance_filter or RelevanceFilter()
        self._rng = rng or random.Random()

    def pick_topics(self, count: int = 3) -> List[str]:
        return self._rng.sample(list(self.topics), min(count, len(self.topics)))

    async def find_references(self, topic: str) -> List[ArticleReference]:
        """Search for references on a topic; search failures give none."""
        try:
            records = await self._searcher.search(topic, max_results=self.references_per_article * 2)
        except Exception as e:
            logger.warning(f"Reference search failed for {topic!r}: {e}")
            return []

        records = self.relevance_filter.filter(list(records or []), topic)
        return [reference_from_record(r) for r in records[:self.references_per_article]]

    async def generate_article(self, topic: str, references: List[ArticleReference]) -> ArticleCreate:
        """
        Write one draft article.

        Raises:
            ArticleGenerationError: If the LLM returns an empty body
        """
        prompts = get_prompt_manager()
        system = prompts.render(
            "articles/article_system",
            topic=topic,
            references=[r.model_dump(mode="json") for r in references],
        )
        prompt = prompts.render("articles/article_request", topic=topic)

        content = await self._llm.complete(
            prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=system,
        )
        content = (content or "").strip()
        if not content:
            raise ArticleGenerationError(f"Empty article for topic {topic!r}")

        return ArticleCreate(
            title=extract_title(content, topic),
            content=content,
            summary=extract_summary(content),
            references=references,
            status=ArticleStatus.DRAFT,
            tags=generate_tags(topic, content),
            category=determine_category(topic),
        )

    async def generate_weekly(
        self,
        repository: ArticleRepositoryProtocol,
        topic_count: int = 3,
        archive_count: int = 3,
    ) -> GenerationReport:
        """
        Run one generation cycle against a repository.

        Topics without references, or whose article fails to generate, are
        skipped. Archiving only happens when at least one draft was saved.
        """
        report = GenerationReport()

        for topic in self.pick_topics(topic_count):
            logger.info(f"Generating article for topic: {topic}")

            references = await self.find_references(topic)
            if not references:
                logger.warning(f"No references found for topic: {topic}")
                report.skipped_topics.append(topic)
                continue

            try:
                draft = await self.generate_article(topic, references)
            except Exception as e:
                logger.error(f"Article generation failed for {topic!r}: {e}")
                report.skipped_topics.append(topic)
                continue

            saved = repository.create(draft)
            report.articles.append(saved)
            logger.info(f"Generated article: {saved.title}")

        if report.articles:
            report.archived = repository.archive_oldest_featured(archive_count)

        get_usage = getattr(self._llm, "get_usage_stats", None)
        if callable(get_usage):
            report.token_usage = get_usage()

        logger.info(
            f"Generated {len(report.articles)} new articles, "
            f"archived {report.archived} old featured articles"
        )
        return report
