"""Analysis API endpoints."""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas import (
    AnalysisCreateRequest,
    AnalysisListResponse,
    TrendResponse,
)
from db.models import Analysis
from db.repositories import AnalysisRepository
from db.session import get_db_session
from history.trends import trend_from_history, trend_history
from orchestrator import AnalysisInputError, normalize_url, run_complete_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyses", tags=["Analyses"])


def get_analysis_repository(
    db: AsyncSession = Depends(get_db_session),
) -> AnalysisRepository:
    return AnalysisRepository(db)


def get_analysis_runner():
    """The callable that performs a complete analysis. Overridable in tests."""
    return run_complete_analysis


def _stored_document(analysis: Analysis) -> dict:
    return {
        **analysis.result,
        "id": str(analysis.id),
        "createdAt": analysis.created_at.isoformat(),
    }


@router.post(
    "",
    summary="Analyze a page",
    description="Fetch and score a page, store the result and return it.",
    responses={502: {"description": "The page could not be fetched or analyzed"}},
)
async def create_analysis(
    request: AnalysisCreateRequest,
    repo: AnalysisRepository = Depends(get_analysis_repository),
    run_analysis=Depends(get_analysis_runner),
):
    """
    Run a complete analysis.

    The analysis is CPU- and network-bound, so it runs in the thread
    pool rather than on the event loop. Failed analyses are stored too
    and returned with status 502.
    """
    document = await run_in_threadpool(run_analysis, request.url, request.target_keywords)
    analysis = await repo.create(document)
    body = _stored_document(analysis)

    if not document.get("success"):
        logger.info(f"Analysis {analysis.id} failed: {document.get('error')}")
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=body)

    return body


@router.get(
    "",
    response_model=AnalysisListResponse,
    summary="List recent analyses",
    description="Get a list of recent analyses, newest first.",
)
async def list_analyses(
    limit: int = Query(20, ge=1, le=100),
    repo: AnalysisRepository = Depends(get_analysis_repository),
) -> AnalysisListResponse:
    """List recent analyses."""
    analyses = await repo.list_recent(limit=limit)
    return AnalysisListResponse(analyses=analyses, count=len(analyses))


# Must be registered before /{analysis_id}
@router.get(
    "/trend",
    response_model=TrendResponse,
    summary="Score trend for a URL",
    description="Compare the latest two completed analyses of a URL and list its score history.",
)
async def get_trend(
    url: str,
    days: int = Query(30, ge=1, le=365),
    repo: AnalysisRepository = Depends(get_analysis_repository),
) -> TrendResponse:
    try:
        url = normalize_url(url)
    except AnalysisInputError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e),
        )

    latest = await repo.list_for_url(url, limit=2)
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    window = await repo.list_for_url(url, since=cutoff)

    return TrendResponse(
        url=url.lower(),
        days=days,
        trend=trend_from_history(latest),
        history=trend_history(window),
    )


@router.get(
    "/{analysis_id}",
    summary="Get an analysis",
    description="Get the stored result document of an analysis.",
)
async def get_analysis(
    analysis_id: uuid.UUID,
    repo: AnalysisRepository = Depends(get_analysis_repository),
) -> dict:
    """Get an analysis by ID."""
    analysis = await repo.get_by_id(analysis_id)

    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analysis {analysis_id} not found",
        )

    return _stored_document(analysis)
