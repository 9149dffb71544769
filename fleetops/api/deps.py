"""
Dependances partagees des routes / Shared route dependencies.
Injectées dans les routes via Depends().
"""

import datetime as dt

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.services.trip_source import SqlTripSource, TripSource


async def get_trip_source(db: AsyncSession = Depends(get_db)) -> TripSource:
    """Source des trajets de la requete / Per-request trip source."""
    return SqlTripSource(db)


def _check_order(date_from: dt.date | None, date_to: dt.date | None) -> None:
    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from must be on or before date_to",
        )


def report_period(
    date_from: dt.date = Query(..., description="YYYY-MM-DD"),
    date_to: dt.date = Query(..., description="YYYY-MM-DD"),
) -> tuple[dt.date, dt.date]:
    """Periode obligatoire / Required period."""
    _check_order(date_from, date_to)
    return date_from, date_to


def optional_period(
    date_from: dt.date | None = Query(default=None),
    date_to: dt.date | None = Query(default=None),
) -> tuple[dt.date | None, dt.date | None]:
    """Periode facultative, bornes ouvertes / Optional period, open bounds."""
    _check_order(date_from, date_to)
    return date_from, date_to
