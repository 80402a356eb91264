"""Organization settings loaded from YAML.

The settings file is located via the CONTROLGAP_ORG_CONFIG environment
variable (default ``controlgap.yaml`` in the working directory). Example::

    organization:
      name: Acme Corp
      flags:
        regulated: true
        data_intensive: true
    gap_analysis:
      partial_coverage: as_missing
"""

import logging
import os
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from controlgap.models.controls import GapType
from controlgap.models.rules import OrgFlag

logger = logging.getLogger(__name__)


class PartialCoveragePolicy(StrEnum):
    """How an as-is control with ``partial`` status is treated by gap detection."""

    AS_MISSING = "as_missing"
    WEAK_OPERATION = "weak_operation"
    SUPPRESS = "suppress"


class OrganizationFlags(BaseModel):
    """Organization-wide context flags."""

    regulated: bool = False
    inventory_heavy: bool = False
    data_intensive: bool = False
    high_risk: bool = False

    model_config = {"extra": "forbid"}

    def asserted(self) -> set[OrgFlag]:
        """Return the set of flags that are switched on."""
        return {OrgFlag(name) for name, value in self.model_dump().items() if value}


class OrganizationInfo(BaseModel):
    """Organization section of the settings file."""

    name: str = "Default Organization"
    flags: OrganizationFlags = Field(default_factory=OrganizationFlags)


class GapAnalysisSettings(BaseModel):
    """Policy knobs of the gap detector."""

    partial_coverage: PartialCoveragePolicy = PartialCoveragePolicy.AS_MISSING

    @property
    def partial_gap_type(self) -> GapType | None:
        """Gap type recorded for partially covered controls, None when suppressed."""
        if self.partial_coverage == PartialCoveragePolicy.SUPPRESS:
            return None
        if self.partial_coverage == PartialCoveragePolicy.WEAK_OPERATION:
            return GapType.WEAK_OPERATION
        return GapType.MISSING


class OrganizationSettings(BaseModel):
    """Root settings object."""

    organization: OrganizationInfo = Field(default_factory=OrganizationInfo)
    gap_analysis: GapAnalysisSettings = Field(default_factory=GapAnalysisSettings)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_yaml(cls, path: Path | str) -> "OrganizationSettings":
        """Load settings from a YAML file."""
        path = Path(path)
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def to_yaml(self, path: Path | str) -> None:
        """Save settings to a YAML file."""
        path = Path(path)
        data = self.model_dump(mode="json")
        with path.open("w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


_settings: OrganizationSettings | None = None


def get_settings_path() -> Path:
    """Get the organization settings path from environment or default."""
    return Path(os.environ.get("CONTROLGAP_ORG_CONFIG", "controlgap.yaml"))


def get_org_settings(reload: bool = False) -> OrganizationSettings:
    """Return the organization settings, loading them on first use."""
    global _settings

    if _settings is None or reload:
        path = get_settings_path()
        if path.exists():
            _settings = OrganizationSettings.from_yaml(path)
            logger.info("Loaded organization settings from %s", path)
        else:
            _settings = OrganizationSettings()
            logger.debug("No organization settings at %s, using defaults", path)
    return _settings


def set_org_settings(settings: OrganizationSettings | None) -> None:
    """Replace the active settings (None forces a reload on next access)."""
    global _settings
    _settings = settings
