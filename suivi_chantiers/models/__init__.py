"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour qu'ils soient enregistrés sur Base.metadata.
Import all models here so they are registered on Base.metadata.
"""

from suivi_chantiers.models.chantier import Chantier, Floor, Room
from suivi_chantiers.models.catalog import CatalogEntry
from suivi_chantiers.models.intervention import Intervention, InterventionStatus
from suivi_chantiers.models.intervention_history import HistoryEventType, InterventionHistory
from suivi_chantiers.models.user import User, UserRole

__all__ = [
    "Chantier",
    "Floor",
    "Room",
    "CatalogEntry",
    "Intervention",
    "InterventionStatus",
    "HistoryEventType",
    "InterventionHistory",
    "User",
    "UserRole",
]
