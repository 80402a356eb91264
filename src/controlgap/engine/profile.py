"""Maturity profile derivation from questionnaire answers."""

from typing import Any

from controlgap.models.profile import MaturityAnswers, ProfileTag


def derive_profile(answers: MaturityAnswers | dict[str, Any]) -> list[ProfileTag]:
    """Derive the ordered maturity tag list from assessment answers.

    Always yields exactly one automation tag followed by one structure tag,
    then ``high-risk`` when the failure impact is ``high``. Missing or
    unexpected answers fall back silently to the lowest tag of their
    category (manual, decentralized, no severity tag).

    Args:
        answers: Questionnaire answers, as model or raw mapping.

    Returns:
        Deduplicated list of profile tags.
    """
    if not isinstance(answers, MaturityAnswers):
        answers = MaturityAnswers.model_validate(answers)

    if answers.automation == "automated":
        tags = [ProfileTag.AUTOMATED]
    elif answers.automation == "erp":
        tags = [ProfileTag.ERP_ENABLED]
    else:
        tags = [ProfileTag.MANUAL]

    if answers.process_structure == "centralized":
        tags.append(ProfileTag.CENTRALIZED)
    else:
        tags.append(ProfileTag.DECENTRALIZED)

    if answers.failure_impact == "high":
        tags.append(ProfileTag.HIGH_RISK)

    return tags
