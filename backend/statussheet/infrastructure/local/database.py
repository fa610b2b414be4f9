"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    JSON,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from statussheet.core.config import get_settings


def utcnow() -> datetime:
    # SQLite stores naive datetimes; keep them in UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class ProjectORM(Base):
    """Project ORM model."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    value_statement = Column(Text, nullable=True)
    department = Column(String(200), nullable=True, index=True)
    status = Column(String(20), default="active", index=True)

    budget_total = Column(Float, default=0)
    budget_actuals = Column(Float, default=0)
    budget_forecast = Column(Float, default=0)

    accomplishments = Column(JSON, nullable=True, default=list)
    risks = Column(JSON, nullable=True, default=list)
    next_period_activities = Column(JSON, nullable=True, default=list)

    # Health
    health_calculation_type = Column(String(20), default="automatic")
    manual_status_color = Column(String(10), nullable=True)
    computed_status_color = Column(String(10), nullable=True, index=True)

    # Derived duration (cache of the milestone dates)
    calculated_start_date = Column(Date, nullable=True)
    calculated_end_date = Column(Date, nullable=True)
    total_days = Column(Integer, nullable=True)
    working_days = Column(Integer, nullable=True)
    total_days_remaining = Column(Integer, nullable=True)
    working_days_remaining = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class MilestoneORM(Base):
    """Milestone ORM model."""

    __tablename__ = "milestones"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(Date, nullable=True)
    milestone = Column(String(500), nullable=False)
    owner = Column(String(200), nullable=True)
    completion = Column(Integer, default=0)
    weight = Column(Integer, default=3)
    status = Column(String(10), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


# ===========================================
# Database Session Management
# ===========================================


def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=False)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()

