"""SQLAlchemy database models for Citewise."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AnalysisStatus(str, enum.Enum):
    """Outcome of an analysis run."""

    COMPLETED = "completed"  # Result document stored
    FAILED = "failed"        # Fetch, block or input error


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Analysis(Base):
    """
    One analysis run for a URL.

    The complete result document is stored verbatim in `result`; the
    score and grade columns duplicate it for listing and trend queries.
    """

    __tablename__ = "analyses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Lower-cased so repeat analyses of one page group together
    url: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)

    target_keywords: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    status: Mapped[AnalysisStatus] = mapped_column(
        Enum(AnalysisStatus),
        nullable=False,
        index=True,
    )

    overall_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    overall_grade: Mapped[str | None] = mapped_column(String(4), nullable=True)

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    result: Mapped[dict] = mapped_column(JSONB, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
        index=True,
    )
