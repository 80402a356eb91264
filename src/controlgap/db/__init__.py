"""Database layer for ControlGap."""

from controlgap.db.database import close_db, get_db, get_engine, init_db, session_scope
from controlgap.db.models import (
    AsIsControlDB,
    Base,
    GapAnalysisSnapshot,
    GapDB,
    MaturityAssessmentDB,
    MaturitySelection,
    ProcessDB,
    Section2Control,
    StandardControlDB,
    ToBeControlDB,
)

__all__ = [
    "AsIsControlDB",
    "Base",
    "GapAnalysisSnapshot",
    "GapDB",
    "MaturityAssessmentDB",
    "MaturitySelection",
    "ProcessDB",
    "Section2Control",
    "StandardControlDB",
    "ToBeControlDB",
    "close_db",
    "get_db",
    "get_engine",
    "init_db",
    "session_scope",
]
