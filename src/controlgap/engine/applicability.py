"""Applicability matching of standard controls against a maturity profile."""

from collections.abc import Iterable
from typing import TypeVar

from controlgap.models.profile import ProfileTag
from controlgap.models.rules import (
    AlwaysRule,
    ApplicabilityRule,
    MaturityProfileRule,
    OrgFlag,
    OrgFlagRule,
)

T = TypeVar("T")


def applies(
    rule: ApplicabilityRule,
    profile: Iterable[ProfileTag],
    org_flags: Iterable[OrgFlag] = (),
) -> bool:
    """Decide whether a rule makes its control relevant.

    Args:
        rule: The parsed applicability rule.
        profile: Derived maturity tags of the process.
        org_flags: Organizational flags asserted for the process.

    Returns:
        True if the control applies.
    """
    if isinstance(rule, AlwaysRule):
        return True
    if isinstance(rule, MaturityProfileRule):
        return not rule.tags.isdisjoint(set(profile))
    if isinstance(rule, OrgFlagRule):
        return rule.flag in set(org_flags)
    # Unknown rule kinds fail open like unparseable stored rules
    return True


def filter_applicable(
    entries: Iterable[T],
    profile: Iterable[ProfileTag],
    org_flags: Iterable[OrgFlag] = (),
    rule_of=lambda entry: entry.rule,
) -> list[T]:
    """Return the entries whose rule applies, preserving catalog order."""
    profile = set(profile)
    org_flags = set(org_flags)
    return [e for e in entries if applies(rule_of(e), profile, org_flags)]
