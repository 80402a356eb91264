"""Applicability rules for standard controls.

A rule is a closed tagged union with one variant per kind. Stored rules are
JSON blobs in the original catalog shape (``{"always": true}``,
``{"maturityProfile": [...]}``, ``{"regulated": true}``); ``parse_rule``
converts them into the union.
"""

import json
import logging
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from controlgap.models.profile import ProfileTag

logger = logging.getLogger(__name__)


class OrgFlag(StrEnum):
    """Organizational context flags referenced by applicability rules."""

    REGULATED = "regulated"
    INVENTORY_HEAVY = "inventory_heavy"
    DATA_INTENSIVE = "data_intensive"
    HIGH_RISK = "high_risk"


# Legacy JSON keys of the stored catalog mapped to flags
_LEGACY_FLAG_KEYS: dict[str, OrgFlag] = {
    "regulated": OrgFlag.REGULATED,
    "inventoryHeavy": OrgFlag.INVENTORY_HEAVY,
    "inventory_heavy": OrgFlag.INVENTORY_HEAVY,
    "dataIntensive": OrgFlag.DATA_INTENSIVE,
    "data_intensive": OrgFlag.DATA_INTENSIVE,
    "high_risk": OrgFlag.HIGH_RISK,
    "highRisk": OrgFlag.HIGH_RISK,
}


class AlwaysRule(BaseModel):
    """Applies unconditionally."""

    kind: Literal["always"] = "always"

    model_config = {"extra": "forbid", "frozen": True}


class MaturityProfileRule(BaseModel):
    """Applies when the profile shares at least one tag with ``tags``."""

    kind: Literal["maturity_profile"] = "maturity_profile"
    tags: frozenset[ProfileTag] = Field(..., min_length=1)

    model_config = {"extra": "forbid", "frozen": True}


class OrgFlagRule(BaseModel):
    """Applies when the organizational flag is asserted."""

    kind: Literal["org_flag"] = "org_flag"
    flag: OrgFlag

    model_config = {"extra": "forbid", "frozen": True}


ApplicabilityRule = Annotated[
    AlwaysRule | MaturityProfileRule | OrgFlagRule,
    Field(discriminator="kind"),
]

_rule_adapter: TypeAdapter = TypeAdapter(ApplicabilityRule)

ALWAYS = AlwaysRule()


def _from_legacy(data: dict[str, Any]) -> ApplicabilityRule | None:
    """Translate the legacy catalog shape; None when it is not recognized."""
    if data.get("always") is True:
        return ALWAYS
    if "maturityProfile" in data:
        return MaturityProfileRule(tags=frozenset(data["maturityProfile"]))
    for key, flag in _LEGACY_FLAG_KEYS.items():
        if data.get(key) is True:
            return OrgFlagRule(flag=flag)
    return None


def parse_rule(raw: str | dict[str, Any] | None) -> ApplicabilityRule:
    """Parse a stored rule into the tagged union.

    A missing, unparseable or unrecognized rule falls back to ``AlwaysRule``:
    an unreadable rule must never hide a control from gap analysis.
    """
    if raw is None or raw == "":
        return ALWAYS

    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        if not isinstance(data, dict):
            raise ValueError(f"rule must be an object, got {type(data).__name__}")
        if "kind" in data:
            return _rule_adapter.validate_python(data)
        rule = _from_legacy(data)
    except (ValueError, TypeError, PydanticValidationError) as e:
        logger.warning("Unparseable applicability rule %r, treating as always: %s", raw, e)
        return ALWAYS

    if rule is None:
        logger.warning("Unrecognized applicability rule %r, treating as always", raw)
        return ALWAYS
    return rule


def dump_rule(rule: ApplicabilityRule) -> str:
    """Serialize a rule for storage."""
    data = rule.model_dump(mode="json")
    if "tags" in data:
        data["tags"] = sorted(data["tags"])
    return json.dumps(data)
