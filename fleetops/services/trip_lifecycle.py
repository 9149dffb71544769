"""
Service de cycle de vie des trajets / Trip lifecycle service.

Retour du vehicule : releve du compteur de fin, carburant achete, frais, puis
cloture. Le compteur du vehicule et le statut du chauffeur suivent.
Vehicle return: end odometer, purchased fuel and fees are recorded, then the
trip is closed. The vehicle odometer and the driver status follow.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.exceptions import TripNotFoundError, TripStateError, TripValidationError
from fleetops.models.driver import Driver, DriverStatus
from fleetops.models.trip import Trip, TripFee, TripStatus
from fleetops.models.vehicle import Vehicle
from fleetops.schemas.records import TripRecord
from fleetops.schemas.trip import TripClose, TripClosed
from fleetops.services.trip_metrics import TripMetricsService
from fleetops.services.trip_source import trip_query

logger = logging.getLogger(__name__)


class TripLifecycleService:
    """Transitions de statut des trajets / Trip status transitions."""

    @staticmethod
    async def close_trip(db: AsyncSession, trip_id: int, data: TripClose) -> TripClosed:
        """Enregistrer le retour et clore le trajet / Record the return and close the trip."""
        result = await db.execute(trip_query().where(Trip.id == trip_id))
        trip = result.scalar_one_or_none()
        if trip is None:
            raise TripNotFoundError(trip_id)
        if trip.status != TripStatus.OPEN:
            raise TripStateError(f"Trip {trip_id} is {trip.status.value}, only open trips can be closed")
        if data.end_km <= trip.start_km:
            raise TripValidationError(
                f"End odometer ({data.end_km}) must be greater than start odometer ({trip.start_km})"
            )

        trip.end_km = data.end_km
        trip.purchased_fuel_l = data.purchased_fuel_l
        trip.price_per_liter = data.price_per_liter
        if data.notes is not None:
            trip.notes = data.notes
        if data.fees is not None:
            trip.fees = [TripFee(label=f.label, amount=f.amount) for f in data.fees]
        trip.status = TripStatus.CLOSED

        # Le compteur vehicule ne recule jamais / The vehicle odometer never goes back
        vehicle = await db.get(Vehicle, trip.vehicle_id)
        if vehicle is not None:
            vehicle.current_km = max(vehicle.current_km or 0, data.end_km)

        driver = await db.get(Driver, trip.driver_id)
        if driver is not None and driver.status == DriverStatus.ON_TRIP:
            driver.status = DriverStatus.ACTIVE

        await db.flush()

        record = TripRecord.model_validate(trip)
        metrics = TripMetricsService.compute(record)
        logger.info(
            "Trip %s closed: %s km, %s L, fuel cost %.2f",
            trip_id, metrics.distance_km, data.purchased_fuel_l, metrics.fuel_cost,
        )
        return TripClosed(trip=record, metrics=metrics)
