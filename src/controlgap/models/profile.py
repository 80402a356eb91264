"""Maturity questionnaire answers and the profile tag vocabulary."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ProfileTag(StrEnum):
    """Closed vocabulary of maturity profile tags."""

    # Automation tier
    MANUAL = "manual"
    ERP_ENABLED = "erp-enabled"
    AUTOMATED = "automated"

    # Process structure
    CENTRALIZED = "centralized"
    DECENTRALIZED = "decentralized"

    # Severity
    HIGH_RISK = "high-risk"


class MaturityAnswers(BaseModel):
    """Raw answers of a process maturity questionnaire.

    Only ``automation``, ``processStructure`` and ``failureImpact`` drive the
    derived profile. Any other question ids are kept verbatim so the stored
    submission matches what the user answered.
    """

    automation: str | None = Field(None, description="manual, erp or automated")
    process_structure: str | None = Field(
        None, alias="processStructure", description="centralized or decentralized"
    )
    failure_impact: str | None = Field(
        None, alias="failureImpact", description="Impact of a control failure (e.g. high)"
    )

    model_config = {"extra": "allow", "populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        """Return the answers keyed by their questionnaire ids."""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_profile(value: str | list[str] | None) -> list[ProfileTag]:
    """Parse a profile given as tag list or comma-separated string.

    Unknown tags are dropped and duplicates collapsed, keeping first-seen order.
    """
    if value is None:
        return []
    raw = value.split(",") if isinstance(value, str) else value

    tags: list[ProfileTag] = []
    for item in raw:
        item = item.strip()
        if item in ProfileTag._value2member_map_:
            tag = ProfileTag(item)
            if tag not in tags:
                tags.append(tag)
    return tags
