"""Abstract interfaces for infrastructure abstraction."""

from statussheet.interfaces.auth_provider import IAuthProvider, User
from statussheet.interfaces.llm_provider import ILLMProvider
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.interfaces.project_repository import IProjectRepository

__all__ = [
    "IProjectRepository",
    "IMilestoneRepository",
    "ILLMProvider",
    "IAuthProvider",
    "User",
]
