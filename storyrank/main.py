"""
storyrank - FastAPI application for relevance-ranked Hacker News stories

Takes a free-text bio, fetches the current top stories (cached for
5 minutes, stale copy served if Hacker News is unreachable) and returns
them ranked by lexical overlap with the bio.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

from .logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/storyrank.log"),
    console_level=getattr(logging, log_level, logging.INFO),
    file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
)

logger = logging.getLogger(__name__)


from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .cache import CollectionCache, TokenCache
from .exceptions import InvalidQueryError, StoryFetchError
from .ranking import SortKey, StoryRanker
from .service import StoryRankingService
from .sources import HackerNewsSource
from .sources.hacker_news import DEFAULT_BASE_URL
from .text.keywords import matching_keywords
from .text.tokenizer import Tokenizer

# Configuration from environment variables
PORT = int(os.getenv("PORT", "8080"))
HN_API_BASE = os.getenv("HN_API_BASE", DEFAULT_BASE_URL)
MAX_STORIES = int(os.getenv("MAX_STORIES", "100"))
FETCH_BATCH_SIZE = int(os.getenv("FETCH_BATCH_SIZE", "20"))
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "10"))
CACHE_EXPIRY_SECONDS = float(os.getenv("CACHE_EXPIRY_SECONDS", "300"))
TOKEN_CACHE_SIZE = int(os.getenv("TOKEN_CACHE_SIZE", "100"))
MATCHING_KEYWORDS_LIMIT = 10

APP_START_TIME = datetime.utcnow().isoformat() + "Z"


def build_ranking_service() -> StoryRankingService:
    """Wire source, caches and ranker from environment configuration"""
    tokenizer = Tokenizer(cache=TokenCache(max_size=TOKEN_CACHE_SIZE))
    return StoryRankingService(
        source=HackerNewsSource(
            base_url=HN_API_BASE,
            batch_size=FETCH_BATCH_SIZE,
            timeout=FETCH_TIMEOUT,
        ),
        collection_cache=CollectionCache(expiry_seconds=CACHE_EXPIRY_SECONDS),
        ranker=StoryRanker(tokenizer=tokenizer),
        max_stories=MAX_STORIES,
    )


ranking_service = build_ranking_service()


def get_ranking_service() -> StoryRankingService:
    return ranking_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup, release HTTP session on shutdown"""
    logger.info(
        f"storyrank {__version__} starting (source={ranking_service.source.get_source_info()}, "
        f"max_stories={MAX_STORIES}, cache_expiry={CACHE_EXPIRY_SECONDS}s)"
    )
    yield
    logger.info("Shutting down...")
    ranking_service.source.close()


app = FastAPI(
    title="storyrank API",
    description="Hacker News top stories ranked by relevance to your bio",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    stories_cached: bool
    token_cache_entries: int


class RankStoriesRequest(BaseModel):
    # Optional so a missing bio gets the same 400 as an empty one
    bio: Optional[str] = Field(default=None, description="Free-text description of your interests")
    sort_by: SortKey = Field(default=SortKey.RELEVANCE, description="relevance | score | date")
    min_relevance: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Minimum relevance percentage (0-100). Stories below this are filtered out."
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "bio": "I build data pipelines in Python and follow climate science.",
                "sort_by": "relevance",
                "min_relevance": 10,
            }
        }
    }


class StoryItem(BaseModel):
    id: int
    title: str
    url: Optional[str] = None
    text: Optional[str] = None
    by: str
    time: int
    score: int
    kids: Optional[List[int]] = None
    descendants: Optional[int] = None
    type: str
    relevance_score: float
    matching_keywords: List[str] = Field(default_factory=list)


class RankStoriesResponse(BaseModel):
    stories: List[StoryItem]
    user_keywords: List[str]
    processing_time: int = Field(..., description="Server-side processing time in milliseconds")
    cache_hit: bool
    stale: bool = Field(default=False, description="True when Hacker News was unreachable and an expired batch was served")


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "storyrank API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health(service: StoryRankingService = Depends(get_ranking_service)):
    """Health check endpoint"""
    start_time = datetime.fromisoformat(APP_START_TIME.rstrip('Z'))
    uptime = (datetime.utcnow() - start_time).total_seconds()

    return HealthResponse(
        status="healthy",
        version=__version__,
        started_at=APP_START_TIME,
        uptime_seconds=round(uptime, 2),
        stories_cached=service.collection_cache.peek() is not None,
        token_cache_entries=len(service.ranker.tokenizer.cache),
    )


@app.post("/v1/rank-stories", response_model=RankStoriesResponse)
async def rank_stories(
    request: RankStoriesRequest,
    service: StoryRankingService = Depends(get_ranking_service),
):
    """
    Rank current Hacker News top stories by relevance to a bio.

    **Process:**
    1. Fetch top stories (cached for 5 minutes; expired cache served if HN is down)
    2. Extract bio keywords (top 20 by frequency)
    3. Score each story: matches / sqrt(story token count)
    4. Sort, then apply `sort_by` and `min_relevance`

    **Errors:**
    - 400: bio missing or blank
    - 502: Hacker News unreachable and nothing cached
    """
    try:
        result = await asyncio.to_thread(
            service.rank_for_query,
            request.bio,
            request.sort_by,
            request.min_relevance,
        )
    except InvalidQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoryFetchError as e:
        logger.error(f"Error ranking stories: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch stories from Hacker News",
        )
    except Exception as e:
        logger.exception(f"Error ranking stories: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to rank stories",
        )

    tokenizer = service.ranker.tokenizer
    stories = [
        StoryItem(
            **story.to_dict(),
            matching_keywords=matching_keywords(
                story.content, result.keywords, limit=MATCHING_KEYWORDS_LIMIT, tokenizer=tokenizer
            ),
        )
        for story in result.stories
    ]

    return RankStoriesResponse(
        stories=stories,
        user_keywords=result.keywords,
        processing_time=result.processing_time_ms,
        cache_hit=result.cache_hit,
        stale=result.stale,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storyrank.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )
