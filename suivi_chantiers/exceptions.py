"""
Erreurs métier / Domain errors.
Levées par les services, traduites en réponses HTTP par main.py.
Raised by services, turned into HTTP responses by main.py.
"""


class ChantierError(Exception):
    """Erreur métier de base / Base domain error."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ChantierError):
    """Ligne cible absente / Target row absent."""

    status_code = 404


class ValidationError(ChantierError):
    """Champ obligatoire manquant ou invalide / Missing or invalid required field."""


class InvalidStatusError(ChantierError):
    """Statut hors de l'ensemble fixe / Status outside the fixed set."""


class InvalidScopeError(ChantierError):
    """Étage/pièce n'appartenant pas au parent annoncé / Floor/room outside the claimed parent."""


class StoreFailureError(ChantierError):
    """Erreur de la base pendant une transaction / Data-store error during a transaction."""

    status_code = 500
