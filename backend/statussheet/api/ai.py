"""
AI content generation endpoint.
"""

from fastapi import APIRouter, HTTPException, status

from statussheet.api.deps import ContentService, CurrentUser, MilestoneRepo, ProjectRepo, Today
from statussheet.api.projects import require_project
from statussheet.models.content import ContentGenerationRequest, GeneratedContent
from statussheet.models.enums import ContentType

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate", response_model=GeneratedContent)
async def generate_content(
    request: ContentGenerationRequest,
    user: CurrentUser,
    project_repo: ProjectRepo,
    milestone_repo: MilestoneRepo,
    content_service: ContentService,
    today: Today,
) -> GeneratedContent:
    """
    Generate a description, value statement, milestone suggestions or an
    executive summary. Provider failures return fallback content with
    success=false rather than an error status.
    """
    project = None
    milestones = []
    if request.type == ContentType.ANALYSIS:
        if not request.project_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="project_id is required for analysis",
            )
        project = await require_project(user, request.project_id, project_repo)
        milestones = await milestone_repo.list_by_project(request.project_id)

    return await content_service.generate(request, today, project=project, milestones=milestones)
