"""Repository layer for database operations."""

from controlgap.db.repositories.assessment_repository import MaturityAssessmentRepository
from controlgap.db.repositories.control_repository import (
    AsIsControlRepository,
    ToBeControlRepository,
)
from controlgap.db.repositories.gap_repository import GapRepository
from controlgap.db.repositories.process_repository import ProcessRepository
from controlgap.db.repositories.section2_repository import Section2Repository
from controlgap.db.repositories.standard_control_repository import StandardControlRepository

__all__ = [
    "AsIsControlRepository",
    "GapRepository",
    "MaturityAssessmentRepository",
    "ProcessRepository",
    "Section2Repository",
    "StandardControlRepository",
    "ToBeControlRepository",
]
