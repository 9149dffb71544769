"""Routes trajets : alertes et retour / Trip routes: alerts and return."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.api.deps import get_trip_source
from fleetops.database import get_db
from fleetops.exceptions import TripNotFoundError
from fleetops.schemas.alert import AlertResult, FleetBaselines
from fleetops.schemas.trip import TripClose, TripClosed
from fleetops.services.alert_evaluator import AlertEvaluatorService
from fleetops.services.trip_lifecycle import TripLifecycleService
from fleetops.services.trip_metrics import TripMetricsService
from fleetops.services.trip_source import TripSource

router = APIRouter()


@router.get("/{trip_id}/alerts", response_model=AlertResult)
async def trip_alerts(
    trip_id: int,
    source: TripSource = Depends(get_trip_source),
):
    """
    Alertes d'un trajet : consommation vs moyenne du vehicule, prix vs moyenne flotte.
    Trip alerts: consumption against the vehicle average, price against the fleet average.
    """
    trip = await source.get_trip(trip_id)
    if trip is None:
        raise TripNotFoundError(trip_id)

    history = await source.fetch_trips()
    fleet = AlertEvaluatorService.fleet_baselines(history)
    per_vehicle = AlertEvaluatorService.vehicle_consumption_baselines(history)
    baselines = FleetBaselines(
        consumption_l_100km=per_vehicle.get(trip.vehicle_id),
        price_per_liter=fleet.price_per_liter,
    )
    return AlertEvaluatorService.evaluate(
        TripMetricsService.compute(trip), trip.price_per_liter, baselines, trip_id=trip.id
    )


@router.post("/{trip_id}/close", response_model=TripClosed)
async def close_trip(
    trip_id: int,
    data: TripClose,
    db: AsyncSession = Depends(get_db),
):
    """Retour du vehicule, cloture du trajet / Vehicle return, trip closing."""
    return await TripLifecycleService.close_trip(db, trip_id, data)
