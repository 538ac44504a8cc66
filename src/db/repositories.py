"""Repository pattern for database operations."""

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Analysis, AnalysisStatus


def normalize_history_url(url: str) -> str:
    return url.strip().lower()


class AnalysisRepository:
    """Handles all Analysis-related database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: dict) -> Analysis:
        """
        Store an orchestrator result document.

        Successful documents are stored as completed with their score;
        error documents as failed with the error message.
        """
        succeeded = bool(document.get("success"))
        analysis = Analysis(
            url=normalize_history_url(str(document.get("url") or "")),
            target_keywords=list(document.get("targetKeywords") or []),
            status=AnalysisStatus.COMPLETED if succeeded else AnalysisStatus.FAILED,
            overall_score=document.get("overallScore") if succeeded else None,
            overall_grade=document.get("overallGrade") if succeeded else None,
            error_message=None if succeeded else document.get("error"),
            result=document,
        )
        self.session.add(analysis)
        await self.session.flush()  # Assigns the ID without committing
        return analysis

    async def get_by_id(self, analysis_id: uuid.UUID) -> Analysis | None:
        """Retrieve an analysis by its ID."""
        result = await self.session.execute(
            select(Analysis).where(Analysis.id == analysis_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int = 20) -> list[Analysis]:
        """Get the most recent analyses."""
        result = await self.session.execute(
            select(Analysis).order_by(Analysis.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_for_url(
        self,
        url: str,
        limit: int | None = None,
        since: datetime | None = None,
    ) -> list[Analysis]:
        """Completed analyses of one URL, newest first."""
        query = select(Analysis).where(
            Analysis.url == normalize_history_url(url),
            Analysis.status == AnalysisStatus.COMPLETED,
        )
        if since is not None:
            query = query.where(Analysis.created_at >= since)
        query = query.order_by(Analysis.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
