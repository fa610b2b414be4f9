"""API routers."""

from statussheet.api import admin, ai, milestones, projects

__all__ = [
    "admin",
    "ai",
    "milestones",
    "projects",
]
