"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from datetime import date
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Query, status

from statussheet.core.config import get_settings
from statussheet.core.exceptions import AuthenticationError
from statussheet.interfaces.auth_provider import IAuthProvider, User
from statussheet.interfaces.llm_provider import ILLMProvider
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.interfaces.project_repository import IProjectRepository
from statussheet.services.content_generation_service import ContentGenerationService
from statussheet.services.health_calculator import HealthThresholds
from statussheet.services.project_duration_service import ProjectDurationService
from statussheet.services.project_health_service import ProjectHealthService
from statussheet.utils.datetime_utils import get_user_today


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_project_repository() -> IProjectRepository:
    """Get project repository instance."""
    settings = get_settings()
    if settings.is_gcp:
        raise NotImplementedError("Firestore not implemented yet")
    else:
        from statussheet.infrastructure.local.project_repository import SqliteProjectRepository
        return SqliteProjectRepository()


@lru_cache()
def get_milestone_repository() -> IMilestoneRepository:
    """Get milestone repository instance."""
    settings = get_settings()
    if settings.is_gcp:
        raise NotImplementedError("Firestore not implemented yet")
    else:
        from statussheet.infrastructure.local.milestone_repository import SqliteMilestoneRepository
        return SqliteMilestoneRepository()


# ===========================================
# Provider Dependencies
# ===========================================


@lru_cache()
def get_llm_provider() -> ILLMProvider:
    """
    Get LLM provider instance based on LLM_PROVIDER setting.

    Supported providers:
    - gemini-api: Gemini API with API Key
    - litellm: LiteLLM (OpenAI, Bedrock, proxies, etc.)
    """
    settings = get_settings()

    if settings.LLM_PROVIDER == "gemini-api":
        from statussheet.infrastructure.local.gemini_api_provider import GeminiAPIProvider
        return GeminiAPIProvider(settings.GEMINI_MODEL)

    elif settings.LLM_PROVIDER == "litellm":
        from statussheet.infrastructure.local.litellm_provider import LiteLLMProvider
        return LiteLLMProvider(settings.LITELLM_MODEL)

    else:
        raise ValueError(f"Unknown LLM_PROVIDER: {settings.LLM_PROVIDER}")


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    if settings.AUTH_PROVIDER == "oidc":
        from statussheet.infrastructure.auth.oidc_auth import OidcAuthProvider

        return OidcAuthProvider(settings)

    from statussheet.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider(enabled=True)


# ===========================================
# Service Dependencies
# ===========================================


def get_duration_service(
    project_repo: IProjectRepository = Depends(get_project_repository),
    milestone_repo: IMilestoneRepository = Depends(get_milestone_repository),
) -> ProjectDurationService:
    return ProjectDurationService(project_repo, milestone_repo)


def get_health_service(
    project_repo: IProjectRepository = Depends(get_project_repository),
    milestone_repo: IMilestoneRepository = Depends(get_milestone_repository),
) -> ProjectHealthService:
    return ProjectHealthService(
        project_repo, milestone_repo, HealthThresholds.from_settings(get_settings())
    )


def get_content_service(
    llm_provider: ILLMProvider = Depends(get_llm_provider),
) -> ContentGenerationService:
    return ContentGenerationService(llm_provider, get_settings())


# ===========================================
# Request Context
# ===========================================


def get_today(
    today: Annotated[
        Optional[date],
        Query(description="Evaluate as of this date (defaults to today in APP_TIMEZONE)"),
    ] = None,
) -> date:
    """Resolve the "today" passed into duration and health calculations."""
    if today is not None:
        return today
    return get_user_today(get_settings().APP_TIMEZONE)


# ===========================================
# User Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    Without an enabled provider, returns the development user.
    """
    if not auth_provider.is_enabled():
        from statussheet.infrastructure.local.mock_auth import DEV_USER
        return DEV_USER

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        )


async def get_admin_user(user: User = Depends(get_current_user)) -> User:
    """
    Require an administrator.

    Admins are listed in ADMIN_EMAILS. With an empty list every user is an
    admin in local mode and nobody is elsewhere.
    """
    settings = get_settings()
    admin_emails = {email.lower() for email in settings.ADMIN_EMAILS}
    if not admin_emails and settings.is_local:
        return user
    if user.email and user.email.lower() in admin_emails:
        return user
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Admin access required",
    )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

ProjectRepo = Annotated[IProjectRepository, Depends(get_project_repository)]
MilestoneRepo = Annotated[IMilestoneRepository, Depends(get_milestone_repository)]
LLMProvider = Annotated[ILLMProvider, Depends(get_llm_provider)]
DurationService = Annotated[ProjectDurationService, Depends(get_duration_service)]
HealthService = Annotated[ProjectHealthService, Depends(get_health_service)]
ContentService = Annotated[ContentGenerationService, Depends(get_content_service)]
Today = Annotated[date, Depends(get_today)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_admin_user)]
