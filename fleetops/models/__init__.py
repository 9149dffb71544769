"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour que Base.metadata les connaisse.
Import all models here so Base.metadata knows about them.
"""

from fleetops.models.driver import Driver, DriverStatus
from fleetops.models.vehicle import Vehicle, VehicleStatus, FuelType
from fleetops.models.locality import Locality
from fleetops.models.container_type import ContainerType
from fleetops.models.trip import Trip, TripFee, TripContainer, TripStatus, DeliveryStatus
from fleetops.models.mission import SubcontractMission

__all__ = [
    "Driver",
    "DriverStatus",
    "Vehicle",
    "VehicleStatus",
    "FuelType",
    "Locality",
    "ContainerType",
    "Trip",
    "TripFee",
    "TripContainer",
    "TripStatus",
    "DeliveryStatus",
    "SubcontractMission",
]
