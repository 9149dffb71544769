"""
Endpoints de rapports flotte / Fleet report endpoints.
Lecture seule : resume executif, performance, analyse financiere, export.
Read-only: executive summary, performance, financial analysis, export.
"""

import datetime as dt
import io

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from fleetops.api.deps import get_trip_source, report_period
from fleetops.config import settings
from fleetops.rate_limit import limiter
from fleetops.schemas.report import Report
from fleetops.services.export_service import ExportService
from fleetops.services.report_builder import ReportBuilderService
from fleetops.services.trip_source import TripSource

router = APIRouter()


async def build_report(
    source: TripSource,
    date_from: dt.date,
    date_to: dt.date,
    include_trips: bool = False,
) -> Report:
    """Charger puis construire le rapport / Fetch then build the report."""
    prev_from, prev_to = ReportBuilderService.previous_period(date_from, date_to)
    trips = await source.fetch_trips(date_from, date_to)
    previous_trips = await source.fetch_trips(prev_from, prev_to)
    drivers = await source.fetch_drivers()
    vehicles = await source.fetch_vehicles()
    missions = await source.fetch_missions(date_from, date_to)

    return ReportBuilderService().build(
        date_from,
        date_to,
        trips,
        previous_trips=previous_trips,
        drivers=drivers,
        vehicles=vehicles,
        missions=missions,
        include_trips=include_trips,
    )


@router.get("/monthly", response_model=Report)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def monthly_report(
    request: Request,
    period: tuple[dt.date, dt.date] = Depends(report_period),
    include_trips: bool = Query(default=False),
    source: TripSource = Depends(get_trip_source),
):
    """Rapport de la periode / Period report."""
    date_from, date_to = period
    return await build_report(source, date_from, date_to, include_trips)


@router.get("/monthly/export")
@limiter.limit(settings.RATE_LIMIT_EXPORT)
async def export_monthly_report(
    request: Request,
    period: tuple[dt.date, dt.date] = Depends(report_period),
    format: str = Query("xlsx", pattern="^(csv|xlsx)$"),
    source: TripSource = Depends(get_trip_source),
):
    """Exporter le rapport en XLSX (complet) ou CSV (trajets) / Export the report as XLSX or CSV."""
    date_from, date_to = period
    report = await build_report(source, date_from, date_to, include_trips=True)

    stem = f"fleet-report-{date_from.isoformat()}-{date_to.isoformat()}"
    if format == "csv":
        content = ExportService.trips_to_csv(report)
        media_type = "text/csv; charset=utf-8"
        filename = f"{stem}.csv"
    else:
        content = ExportService.report_to_xlsx(report)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        filename = f"{stem}.xlsx"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
