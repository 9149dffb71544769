"""
Exceptions applicatives / Application exceptions.
Le moteur de calcul ne leve rien : seules la source de donnees et le cycle de vie
des trajets peuvent echouer.
The computation engine never raises: only the data source and the trip
lifecycle can fail.
"""


class FleetOpsError(Exception):
    """Base de toutes les erreurs / Base of all errors."""


class TripSourceError(FleetOpsError):
    """Echec de recuperation des donnees amont / Upstream data fetch failure."""


class TripNotFoundError(FleetOpsError):
    """Trajet introuvable / Trip not found."""

    def __init__(self, trip_id: int):
        super().__init__(f"Trip {trip_id} not found")
        self.trip_id = trip_id


class TripStateError(FleetOpsError):
    """Transition de statut invalide / Invalid status transition."""


class TripValidationError(FleetOpsError):
    """Saisie de retour incoherente / Inconsistent return entry."""
