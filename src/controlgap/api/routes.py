"""Top-level API routes for ControlGap."""

from fastapi import APIRouter
from pydantic import BaseModel

from controlgap import __version__
from controlgap.config import get_org_settings
from controlgap.engine.profile import derive_profile
from controlgap.models.profile import MaturityAnswers, ProfileTag

router = APIRouter()


class ApiInfo(BaseModel):
    """Response model for the API root."""

    name: str
    version: str
    organization: str
    partial_coverage: str


class ProfileResponse(BaseModel):
    """Response model for profile derivation."""

    answers: dict
    maturity_profile: list[ProfileTag]


@router.get("/", response_model=ApiInfo)
async def api_info() -> ApiInfo:
    """Describe the running API and its active organization settings."""
    settings = get_org_settings()
    return ApiInfo(
        name="ControlGap API",
        version=__version__,
        organization=settings.organization.name,
        partial_coverage=settings.gap_analysis.partial_coverage.value,
    )


@router.post("/profile", response_model=ProfileResponse)
async def preview_profile(answers: MaturityAnswers) -> ProfileResponse:
    """Derive the maturity profile of a set of answers without storing them."""
    return ProfileResponse(answers=answers.to_dict(), maturity_profile=derive_profile(answers))
