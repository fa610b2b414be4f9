"""
AI content generation for status sheets.

Generates project descriptions, value statements, milestone suggestions and
the executive summary ("analysis") through the configured LLM provider.
Every content type has a fallback so callers always get usable content.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections import Counter
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from statussheet.agents.prompts.content_prompts import (
    ANALYSIS_FALLBACK,
    ANALYSIS_PROMPT,
    COMPLETION_AUTHORITY_NOTE,
    DESCRIPTION_PROMPT,
    MILESTONES_PROMPT,
    TEXT_FALLBACK,
    VALUE_PROMPT,
)
from statussheet.core.config import Settings, get_settings
from statussheet.core.exceptions import ValidationError
from statussheet.core.logger import setup_logger
from statussheet.interfaces.llm_provider import ILLMProvider
from statussheet.models.content import (
    ContentGenerationRequest,
    GeneratedContent,
    MilestoneQualityReport,
)
from statussheet.models.enums import ContentType, StatusColor
from statussheet.models.milestone import SuggestedMilestone
from statussheet.models.project import Project
from statussheet.services.duration_calculator import coerce_date
from statussheet.services.health_calculator import weighted_completion
from statussheet.services.llm_utils import generate_text_with_status

logger = setup_logger(__name__)

MAX_TOKENS = {
    ContentType.DESCRIPTION: 500,
    ContentType.VALUE: 500,
    ContentType.MILESTONES: 1000,
    ContentType.ANALYSIS: 1500,
}

DEFAULT_OWNER = "Project Manager"
KICKOFF_NAME = "Project Kickoff"
CLOSEOUT_NAME = "Project Closeout"

# First suggested milestone lands a week out, the rest every two weeks
FIRST_MILESTONE_OFFSET_DAYS = 7
MILESTONE_SPACING_DAYS = 14

_JSON_ARRAY_PATTERN = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)


def _name(entry: dict) -> str:
    value = entry.get("milestone")
    return value.strip() if isinstance(value, str) else ""


def _is_kickoff(entry: dict) -> bool:
    return "kickoff" in _name(entry).lower()


def _is_closeout(entry: dict) -> bool:
    name = _name(entry).lower()
    return "closeout" in name or "closure" in name


def validate_milestone_quality(milestones: Sequence[dict]) -> MilestoneQualityReport:
    """
    Check suggested milestones for short names, missing owners, bad dates
    and duplicate names. Each issue costs 20 points of a 100 score.
    """
    issues: list[str] = []
    name_counts = Counter(_name(m).lower() for m in milestones if _name(m))

    for index, milestone in enumerate(milestones, start=1):
        name = _name(milestone)
        if len(name) < 5:
            issues.append(f"Milestone {index}: Name too short or empty")

        owner = milestone.get("owner")
        if not isinstance(owner, str) or len(owner.strip()) < 2:
            issues.append(f"Milestone {index}: Missing or invalid owner")

        raw_date = milestone.get("date")
        if raw_date and coerce_date(raw_date) is None:
            issues.append(f"Milestone {index}: Invalid date format")

        if name and name_counts[name.lower()] > 1:
            issues.append(f'Milestone "{name}": Duplicate milestone name')

    if issues:
        logger.warning(f"Milestone quality issues detected: {issues}")

    return MilestoneQualityReport(
        is_valid=not issues,
        issues=issues,
        score=max(0, 100 - len(issues) * 20),
    )


def ensure_mandatory_milestones(milestones: Sequence[dict]) -> list[dict]:
    """Guarantee a kickoff milestone first and a closeout milestone last."""
    processed = list(milestones)

    if not any(_is_kickoff(m) for m in processed):
        processed.insert(0, {"milestone": KICKOFF_NAME, "owner": DEFAULT_OWNER})
    if not any(_is_closeout(m) for m in processed):
        processed.append({"milestone": CLOSEOUT_NAME, "owner": DEFAULT_OWNER})

    kickoff_index = next(i for i, m in enumerate(processed) if _is_kickoff(m))
    if kickoff_index > 0:
        processed.insert(0, processed.pop(kickoff_index))

    closeout_index = next(i for i, m in enumerate(processed) if _is_closeout(m))
    if closeout_index < len(processed) - 1:
        processed.append(processed.pop(closeout_index))

    return processed


def default_milestones(today: date) -> list[SuggestedMilestone]:
    """Generic plan used when the model response cannot be parsed."""
    first = today + timedelta(days=FIRST_MILESTONE_OFFSET_DAYS)
    plan = [
        (KICKOFF_NAME, DEFAULT_OWNER),
        ("Requirements Gathering", "Business Analyst"),
        ("Design Phase Complete", "Design Lead"),
        (CLOSEOUT_NAME, DEFAULT_OWNER),
    ]
    return [
        SuggestedMilestone(
            date=first + timedelta(days=index * MILESTONE_SPACING_DAYS),
            milestone=name,
            owner=owner,
        )
        for index, (name, owner) in enumerate(plan)
    ]


def _completion(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, min(100, int(value)))


def process_milestones(
    content: str, today: date
) -> tuple[list[SuggestedMilestone], Optional[MilestoneQualityReport]]:
    """
    Turn a model response into suggested milestones.

    Extracts the JSON array (also when wrapped in prose), reorders kickoff
    and closeout, fills missing dates, owners and completion, and forces
    every status to green. Unparseable content yields the default plan and
    no quality report.
    """
    match = _JSON_ARRAY_PATTERN.search(content or "")
    json_content = match.group(0) if match else content
    try:
        parsed = json.loads(json_content)
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not parse milestone suggestions: {e}")
        return default_milestones(today), None

    if not isinstance(parsed, list):
        logger.warning("Milestone suggestions are not a JSON array")
        return default_milestones(today), None

    entries = [entry for entry in parsed if isinstance(entry, dict)]
    quality = validate_milestone_quality(entries)
    entries = ensure_mandatory_milestones(entries)

    first = today + timedelta(days=FIRST_MILESTONE_OFFSET_DAYS)
    milestones = []
    for index, entry in enumerate(entries):
        owner = entry.get("owner")
        milestones.append(
            SuggestedMilestone(
                date=coerce_date(entry.get("date"))
                or first + timedelta(days=index * MILESTONE_SPACING_DAYS),
                milestone=_name(entry) or f"Milestone {index + 1}",
                owner=owner.strip() if isinstance(owner, str) and owner.strip() else DEFAULT_OWNER,
                completion=_completion(entry.get("completion")),
                status=StatusColor.GREEN,
            )
        )

    logger.info(
        f"Processed {len(milestones)} milestone suggestions "
        f"(quality score {quality.score})"
    )
    return milestones, quality


def build_analysis_payload(project: Project, milestones: Sequence[Any]) -> dict:
    """Project data sent with analysis requests."""
    return {
        "title": project.title,
        "status": project.status.value,
        "description": project.description,
        "budget": {
            "total": project.budget.total,
            "actuals": project.budget.actuals,
            "forecast": project.budget.forecast,
            "note": "Zero actuals may indicate a new project, not necessarily a problem",
        },
        "weighted_completion": weighted_completion(milestones),
        "milestones": [
            {
                "milestone": m.milestone,
                "completion": m.completion,
                "status": m.status.value if m.status else None,
                "date": m.date.isoformat() if m.date else None,
                "owner": m.owner,
            }
            for m in milestones
        ],
        "accomplishments": project.accomplishments,
        "risks": project.risks,
        "next_period_activities": project.next_period_activities,
    }


class ContentGenerationService:
    """Generates status sheet content with the configured LLM."""

    def __init__(self, llm_provider: ILLMProvider, settings: Optional[Settings] = None):
        self.llm_provider = llm_provider
        self.settings = settings or get_settings()

    def _system_prompt(self, content_type: ContentType, today: date) -> str:
        if content_type == ContentType.DESCRIPTION:
            return DESCRIPTION_PROMPT
        if content_type == ContentType.VALUE:
            return VALUE_PROMPT
        if content_type == ContentType.MILESTONES:
            return MILESTONES_PROMPT.replace("{today}", today.isoformat())
        return ANALYSIS_PROMPT

    def _user_content(
        self,
        request: ContentGenerationRequest,
        project: Optional[Project],
        milestones: Sequence[Any],
    ) -> str:
        content = request.title
        if request.description:
            content += f"\n\nProject Description: {request.description}"
        if request.type == ContentType.ANALYSIS:
            payload = build_analysis_payload(project, milestones)
            content += f"\n\nProject Data: {json.dumps(payload, indent=2, ensure_ascii=False)}"
            content += f"\n\n{COMPLETION_AUTHORITY_NOTE}"
        return content

    def _fallback(self, content_type: ContentType, today: date) -> GeneratedContent:
        if content_type == ContentType.ANALYSIS:
            return GeneratedContent(type=content_type, content=ANALYSIS_FALLBACK, success=False)
        if content_type == ContentType.MILESTONES:
            milestones = [
                SuggestedMilestone(date=today, milestone=KICKOFF_NAME),
                SuggestedMilestone(date=today + timedelta(days=14), milestone=CLOSEOUT_NAME),
            ]
            return GeneratedContent(
                type=content_type,
                content=json.dumps([m.model_dump(mode="json") for m in milestones]),
                milestones=milestones,
                success=False,
            )
        return GeneratedContent(type=content_type, content=TEXT_FALLBACK, success=False)

    async def generate(
        self,
        request: ContentGenerationRequest,
        today: date,
        project: Optional[Project] = None,
        milestones: Optional[Sequence[Any]] = None,
    ) -> GeneratedContent:
        """
        Generate content for a request.

        Analysis requests need the project (and its milestones). Provider
        failures never raise: a fallback with success=False is returned.
        """
        if request.type == ContentType.ANALYSIS and project is None:
            raise ValidationError("Analysis generation requires a project")

        milestones = list(milestones or [])
        logger.info(f"Processing {request.type.value} generation request for: {request.title}")

        text, error_code, error_detail = await asyncio.to_thread(
            generate_text_with_status,
            self.llm_provider,
            self._user_content(request, project, milestones),
            temperature=self.settings.AI_TEMPERATURE,
            max_output_tokens=MAX_TOKENS[request.type],
            system_instruction=self._system_prompt(request.type, today),
            timeout=self.settings.AI_REQUEST_TIMEOUT_SECONDS,
        )

        if not text:
            logger.warning(
                f"Content generation failed for {request.type.value}: {error_code}"
            )
            result = self._fallback(request.type, today)
            result.error_code = error_code
            result.error_detail = error_detail
            return result

        model_name = self.llm_provider.get_model_name()
        if request.type == ContentType.MILESTONES:
            suggestions, quality = process_milestones(text, today)
            return GeneratedContent(
                type=request.type,
                content=json.dumps([m.model_dump(mode="json") for m in suggestions]),
                milestones=suggestions,
                quality=quality,
                model=model_name,
            )

        return GeneratedContent(type=request.type, content=text, model=model_name)
