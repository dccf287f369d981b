"""
Family Support Backend API

FastAPI server exposing research chat, self-assessments and articles.
"""
import asyncio
import logging
from typing import Optional, List, Dict, Any
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from src.articles import (
    Article,
    ArticleCreate,
    ArticleGenerator,
    ArticleRepositoryProtocol,
    InMemoryArticleRepository,
    InvalidStatusError,
    parse_status,
    sample_articles,
)
from src.assessments import (
    AssessmentDefinition,
    AssessmentResult,
    AssessmentScorer,
    ConfigurationError,
    IncompleteAnswerSetError,
    InvalidAnswerError,
    UnknownAssessmentError,
    get_assessment,
    list_assessments,
)
from src.research.chat_session import ERROR_MESSAGE
from src.research.services.follow_up_service import FollowUpService, is_personal_query
from src.tools.pubmed import BROWSE_CATEGORIES, PubMedAPI
from src.utils.config import Settings, get_settings
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Lazily created so importing the app never touches the network or API keys
_services: Dict[str, Any] = {}


def get_answer_service():
    """Lazy load the research answer service when first needed."""
    if "answer_service" not in _services:
        from src.research.factory import create_answer_service
        _services["answer_service"] = create_answer_service(get_settings())
        logger.info("Research answer service loaded")
    return _services["answer_service"]


def get_article_repository() -> ArticleRepositoryProtocol:
    if "articles" not in _services:
        settings = get_settings()
        _services["articles"] = InMemoryArticleRepository(
            seed=sample_articles() if settings.seed_sample_articles else None
        )
    return _services["articles"]


def get_scorer() -> AssessmentScorer:
    return AssessmentScorer()


def get_pubmed_client() -> PubMedAPI:
    if "pubmed" not in _services:
        settings = get_settings()
        _services["pubmed"] = PubMedAPI(
            api_key=settings.pubmed_api_key,
            email=settings.pubmed_email,
            timeout=settings.http_timeout_seconds,
        )
    return _services["pubmed"]


def get_article_generator() -> Optional[ArticleGenerator]:
    """Lazy load the article generator; None without an Anthropic key."""
    if "article_generator" not in _services:
        from src.articles import create_article_generator
        _services["article_generator"] = create_article_generator(get_settings())
    return _services["article_generator"]


def close_services() -> None:
    """Close every created service that holds connections, then forget them."""
    for name, service in list(_services.items()):
        close = getattr(service, "close", None)
        if callable(close):
            try:
                close()
            except Exception as e:
                logger.warning(f"Failed to close {name}: {e}")
    _services.clear()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(get_settings())
    logger.info("Family Support API starting up...")
    yield
    close_services()
    logger.info("Family Support API shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Family Support API",
    description="Research-backed parenting answers, self-assessments and articles",
    version=API_VERSION,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    llm_configured: bool


class ResearchRequest(BaseModel):
    message: str = Field(..., min_length=1, description="The parent's question")


class ResearchSource(BaseModel):
    id: str
    title: str
    abstract: str
    authors: str
    journal: str
    year: Optional[int] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    source: str


class ResearchResponseModel(BaseModel):
    query: str
    answer: str
    sources: List[ResearchSource]
    follow_up_questions: List[str]
    is_personal: bool


class FollowUpResponse(BaseModel):
    query: str
    is_personal: bool
    follow_up_questions: List[str]


class AssessmentSummary(BaseModel):
    id: str
    title: str
    description: str
    question_count: int


class ScoreRequest(BaseModel):
    answers: Dict[str, int] = Field(..., description="Question id -> chosen option value")


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="draft, featured, or archived")


class StatusUpdateResponse(BaseModel):
    success: bool
    id: str
    status: str


class ArchiveResponse(BaseModel):
    archived: int


class BrowseArticle(BaseModel):
    pmid: str
    title: str
    abstract: str
    authors: List[str]
    journal: str
    year: Optional[str] = None
    doi: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    url: str


class BrowseResponse(BaseModel):
    articles: List[BrowseArticle]
    total_count: int
    search_term: str


class GeneratedArticleSummary(BaseModel):
    id: str
    title: str
    status: str


class GenerationResponse(BaseModel):
    success: bool
    message: str
    new_articles: int
    archived_articles: int
    skipped_topics: List[str]
    token_usage: Dict[str, int] = {}
    articles: List[GeneratedArticleSummary]


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=API_VERSION, llm_configured=get_settings().has_llm)


# --- Research ---

@app.post("/api/v1/research", response_model=ResearchResponseModel)
async def research(request: ResearchRequest, answer_service=Depends(get_answer_service)):
    """
    Answer a parenting question from aggregated research.

    Returns the fallback advisory (with no sources) when nothing relevant is found.
    """
    message = request.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        answer = await answer_service.answer(message)
    except Exception as e:
        logger.error(f"Research request failed for {message!r}: {e}")
        raise HTTPException(status_code=500, detail=ERROR_MESSAGE)

    return answer.to_dict()


@app.get("/api/v1/research/follow-ups", response_model=FollowUpResponse)
async def research_follow_ups(query: str = Query(..., min_length=1)):
    """Suggested follow-up questions for a query."""
    personal = is_personal_query(query)
    return FollowUpResponse(
        query=query,
        is_personal=personal,
        follow_up_questions=FollowUpService().follow_ups(query, personal),
    )


@app.get("/api/v1/research/browse/categories", response_model=List[str])
async def research_browse_categories():
    """Categories accepted by the research browser."""
    return ["All", *BROWSE_CATEGORIES]


@app.get("/api/v1/research/browse", response_model=BrowseResponse)
async def research_browse(
    category: str = "All",
    search: str = "",
    limit: int = Query(20, ge=1, le=100),
    pubmed: PubMedAPI = Depends(get_pubmed_client),
):
    """
    Browse recent randomized trials, systematic reviews and meta-analyses.

    A free-text search term takes precedence over the category.
    """
    return await asyncio.to_thread(pubmed.browse, category, search, limit)


# --- Assessments ---

@app.get("/api/v1/assessments", response_model=List[AssessmentSummary])
async def assessments_index():
    """List available self-assessments."""
    return [
        AssessmentSummary(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            question_count=definition.question_count,
        )
        for definition in list_assessments()
    ]


@app.get("/api/v1/assessments/{assessment_id}", response_model=AssessmentDefinition)
async def assessment_detail(assessment_id: str):
    """Full definition of one assessment (questions, options, bands)."""
    try:
        return get_assessment(assessment_id)
    except UnknownAssessmentError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/api/v1/assessments/{assessment_id}/score", response_model=AssessmentResult)
async def score_assessment(
    assessment_id: str,
    request: ScoreRequest,
    scorer: AssessmentScorer = Depends(get_scorer),
):
    """Score a complete answer set."""
    try:
        definition = get_assessment(assessment_id)
        return scorer.score(definition, request.answers)
    except UnknownAssessmentError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except IncompleteAnswerSetError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": str(e), "missing_question_ids": e.missing_question_ids},
        )
    except InvalidAnswerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        logger.error(f"Assessment definition error for {assessment_id}: {e}")
        raise HTTPException(status_code=500, detail="Assessment is misconfigured")


# --- Articles ---

@app.get("/api/v1/articles", response_model=List[Article])
async def articles_index(
    status: str = "featured",
    limit: int = Query(10, ge=1, le=100),
    repository: ArticleRepositoryProtocol = Depends(get_article_repository),
):
    """List articles with a status, newest first."""
    try:
        return repository.list_by_status(status, limit=limit)
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/v1/articles", response_model=Article, status_code=201)
async def create_article(
    request: ArticleCreate,
    repository: ArticleRepositoryProtocol = Depends(get_article_repository),
):
    """Create an article."""
    return repository.create(request)


@app.get("/api/v1/articles/stats", response_model=Dict[str, int])
async def article_stats(repository: ArticleRepositoryProtocol = Depends(get_article_repository)):
    """Article counts per status."""
    return repository.stats()


@app.post("/api/v1/articles/archive-oldest", response_model=ArchiveResponse)
async def archive_oldest(
    count: int = Query(3, ge=0, le=100),
    repository: ArticleRepositoryProtocol = Depends(get_article_repository),
):
    """Archive the oldest featured articles."""
    return ArchiveResponse(archived=repository.archive_oldest_featured(count))


@app.post("/api/v1/articles/generate", response_model=GenerationResponse)
async def generate_articles(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    generator: Optional[ArticleGenerator] = Depends(get_article_generator),
    repository: ArticleRepositoryProtocol = Depends(get_article_repository),
):
    """
    Run the weekly generation job: new drafts, then archive the oldest featured.

    When CRON_SECRET is configured the request must carry it as a bearer token.
    """
    if settings.cron_secret and authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")
    if generator is None:
        raise HTTPException(status_code=503, detail="Article generation requires ANTHROPIC_API_KEY")

    logger.info("Starting weekly article generation...")
    report = await generator.generate_weekly(
        repository,
        topic_count=settings.article_topics_per_run,
        archive_count=settings.article_archive_count,
    )
    return report.to_dict()


@app.get("/api/v1/articles/{article_id}", response_model=Article)
async def article_detail(
    article_id: str,
    repository: ArticleRepositoryProtocol = Depends(get_article_repository),
):
    """Get one article by id."""
    article = repository.get(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@app.patch("/api/v1/articles/{article_id}/status", response_model=StatusUpdateResponse)
async def update_article_status(
    article_id: str,
    request: StatusUpdateRequest,
    repository: ArticleRepositoryProtocol = Depends(get_article_repository),
):
    """Move an article between draft, featured and archived."""
    try:
        status = parse_status(request.status)
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not repository.update_status(article_id, status):
        raise HTTPException(status_code=404, detail="Article not found")

    return StatusUpdateResponse(success=True, id=article_id, status=status.value)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
