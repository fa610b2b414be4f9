"""
Tests for AI content generation.

The LLM call is patched; these tests cover prompt selection, milestone
post-processing and the fallbacks.
"""

import json
from datetime import date, datetime
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from statussheet.agents.prompts.content_prompts import (
    ANALYSIS_FALLBACK,
    COMPLETION_AUTHORITY_NOTE,
    DESCRIPTION_PROMPT,
    TEXT_FALLBACK,
)
from statussheet.core.config import Settings
from statussheet.core.exceptions import ValidationError
from statussheet.models.content import ContentGenerationRequest
from statussheet.models.enums import ContentType, StatusColor
from statussheet.models.milestone import Milestone
from statussheet.models.project import Project
from statussheet.services.content_generation_service import (
    ContentGenerationService,
    ensure_mandatory_milestones,
    process_milestones,
    validate_milestone_quality,
)

TODAY = date(2025, 3, 1)
GENERATE = "statussheet.services.content_generation_service.generate_text_with_status"


@pytest.fixture
def llm_provider():
    provider = MagicMock()
    provider.get_model_name.return_value = "test-model"
    return provider


@pytest.fixture
def service(llm_provider):
    return ContentGenerationService(llm_provider, settings=Settings())


def _project() -> Project:
    now = datetime(2025, 1, 1)
    return Project(
        id=uuid4(),
        user_id="test_user",
        title="CRM Migration",
        description="Move customer data to the new CRM",
        accomplishments=["Vendor selected"],
        risks=["Data quality"],
        created_at=now,
        updated_at=now,
    )


def _milestone(project_id, completion: int) -> Milestone:
    now = datetime(2025, 1, 1)
    return Milestone(
        id=uuid4(),
        project_id=project_id,
        date=date(2025, 4, 1),
        milestone="Data mapping",
        owner="Analyst",
        completion=completion,
        status=StatusColor.GREEN,
        created_at=now,
        updated_at=now,
    )


class TestValidateMilestoneQuality:
    def test_valid_milestones(self):
        report = validate_milestone_quality(
            [
                {"milestone": "Project Kickoff", "owner": "Project Manager", "date": "2025-03-08"},
                {"milestone": "Design Review", "owner": "Design Lead", "date": "2025-03-22"},
            ]
        )

        assert report.is_valid is True
        assert report.issues == []
        assert report.score == 100

    def test_each_issue_costs_twenty_points(self):
        report = validate_milestone_quality(
            [
                {"milestone": "Kick", "owner": "Project Manager"},
                {"milestone": "Design Review", "owner": "", "date": "someday"},
            ]
        )

        assert report.is_valid is False
        assert report.issues == [
            "Milestone 1: Name too short or empty",
            "Milestone 2: Missing or invalid owner",
            "Milestone 2: Invalid date format",
        ]
        assert report.score == 40

    def test_duplicate_names(self):
        report = validate_milestone_quality(
            [
                {"milestone": "Design Review", "owner": "Lead"},
                {"milestone": "design review", "owner": "Lead"},
            ]
        )

        assert 'Milestone "Design Review": Duplicate milestone name' in report.issues
        assert 'Milestone "design review": Duplicate milestone name' in report.issues

    def test_score_never_negative(self):
        report = validate_milestone_quality([{}, {}, {}])

        assert report.score == 0


class TestEnsureMandatoryMilestones:
    def test_adds_kickoff_and_closeout(self):
        result = ensure_mandatory_milestones([{"milestone": "Build"}])

        assert [m["milestone"] for m in result] == ["Project Kickoff", "Build", "Project Closeout"]

    def test_moves_existing_kickoff_and_closure(self):
        result = ensure_mandatory_milestones(
            [
                {"milestone": "Closure report"},
                {"milestone": "Build"},
                {"milestone": "Kickoff workshop"},
            ]
        )

        assert [m["milestone"] for m in result] == ["Kickoff workshop", "Build", "Closure report"]


class TestProcessMilestones:
    def test_extracts_json_from_prose(self):
        content = (
            "Here are the milestones:\n"
            + json.dumps(
                [
                    {
                        "date": "2025-03-10",
                        "milestone": "Requirements Review",
                        "owner": "Analyst",
                        "completion": 150,
                        "status": "red",
                    },
                    {"date": "2025-03-03", "milestone": "Project Kickoff", "owner": "PM"},
                ]
            )
            + "\nLet me know if you need changes."
        )

        milestones, quality = process_milestones(content, TODAY)

        assert [m.milestone for m in milestones] == [
            "Project Kickoff",
            "Requirements Review",
            "Project Closeout",
        ]
        assert milestones[0].date == date(2025, 3, 3)
        assert milestones[1].completion == 100
        # Closeout had no date: first offset plus two spacings
        assert milestones[2].date == date(2025, 4, 5)
        assert milestones[2].owner == "Project Manager"
        assert all(m.status == StatusColor.GREEN for m in milestones)
        assert quality.is_valid is True

    def test_unparseable_content_uses_default_plan(self):
        milestones, quality = process_milestones("I cannot help with that.", TODAY)

        assert quality is None
        assert [m.milestone for m in milestones] == [
            "Project Kickoff",
            "Requirements Gathering",
            "Design Phase Complete",
            "Project Closeout",
        ]
        assert [m.date for m in milestones] == [
            date(2025, 3, 8),
            date(2025, 3, 22),
            date(2025, 4, 5),
            date(2025, 4, 19),
        ]

    def test_non_array_json_uses_default_plan(self):
        milestones, quality = process_milestones('{"milestone": "Only one"}', TODAY)

        assert quality is None
        assert len(milestones) == 4


class TestContentGenerationService:
    @pytest.mark.asyncio
    async def test_generates_description(self, service):
        request = ContentGenerationRequest(type=ContentType.DESCRIPTION, title="CRM Migration")

        with patch(GENERATE, return_value=("A focused migration.", None, None)) as generate:
            result = await service.generate(request, TODAY)

        assert result.success is True
        assert result.content == "A focused migration."
        assert result.model == "test-model"
        kwargs = generate.call_args.kwargs
        assert kwargs["system_instruction"] == DESCRIPTION_PROMPT
        assert kwargs["max_output_tokens"] == 500
        assert generate.call_args.args[1] == "CRM Migration"

    @pytest.mark.asyncio
    async def test_generates_milestones(self, service):
        request = ContentGenerationRequest(type=ContentType.MILESTONES, title="CRM Migration")
        response = json.dumps(
            [
                {"date": "2025-03-03", "milestone": "Project Kickoff", "owner": "Project Manager"},
                {"date": "2025-05-01", "milestone": "Project Closeout", "owner": "Project Manager"},
            ]
        )

        with patch(GENERATE, return_value=(response, None, None)) as generate:
            result = await service.generate(request, TODAY)

        assert result.success is True
        assert [m.milestone for m in result.milestones] == ["Project Kickoff", "Project Closeout"]
        assert json.loads(result.content)[0]["date"] == "2025-03-03"
        assert result.quality.score == 100
        kwargs = generate.call_args.kwargs
        assert "2025-03-01" in kwargs["system_instruction"]
        assert kwargs["max_output_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_milestone_fallback_on_failure(self, service):
        request = ContentGenerationRequest(type=ContentType.MILESTONES, title="CRM Migration")

        with patch(GENERATE, return_value=(None, "litellm_request_failed", None)):
            result = await service.generate(request, TODAY)

        assert result.success is False
        assert result.error_code == "litellm_request_failed"
        assert [(m.milestone, m.date) for m in result.milestones] == [
            ("Project Kickoff", TODAY),
            ("Project Closeout", date(2025, 3, 15)),
        ]

    @pytest.mark.asyncio
    async def test_text_fallback_on_failure(self, service):
        request = ContentGenerationRequest(type=ContentType.VALUE, title="CRM Migration")

        with patch(GENERATE, return_value=(None, "litellm_empty_response", None)):
            result = await service.generate(request, TODAY)

        assert result.success is False
        assert result.content == TEXT_FALLBACK

    @pytest.mark.asyncio
    async def test_analysis_requires_project(self, service):
        request = ContentGenerationRequest(type=ContentType.ANALYSIS, title="CRM Migration")

        with pytest.raises(ValidationError):
            await service.generate(request, TODAY)

    @pytest.mark.asyncio
    async def test_analysis_sends_project_data(self, service):
        project = _project()
        milestones = [_milestone(project.id, 40)]
        request = ContentGenerationRequest(
            type=ContentType.ANALYSIS, title=project.title, project_id=project.id
        )

        with patch(GENERATE, return_value=("<p>On track.</p>", None, None)) as generate:
            result = await service.generate(request, TODAY, project=project, milestones=milestones)

        assert result.content == "<p>On track.</p>"
        prompt = generate.call_args.args[1]
        assert '"weighted_completion": 40' in prompt
        assert "Data mapping" in prompt
        assert "Vendor selected" in prompt
        assert COMPLETION_AUTHORITY_NOTE in prompt
        assert generate.call_args.kwargs["max_output_tokens"] == 1500

    @pytest.mark.asyncio
    async def test_analysis_fallback_on_failure(self, service):
        project = _project()
        request = ContentGenerationRequest(
            type=ContentType.ANALYSIS, title=project.title, project_id=project.id
        )

        with patch(GENERATE, return_value=(None, "missing_google_api_key", None)):
            result = await service.generate(request, TODAY, project=project)

        assert result.success is False
        assert result.content == ANALYSIS_FALLBACK
        assert result.error_code == "missing_google_api_key"
