"""
Service d'export CSV/Excel du rapport / Report CSV/Excel export service.
Consomme uniquement un Report deja construit, ne recalcule rien.
Consumes a finished Report only, recomputes nothing.
"""

import csv
import io
from typing import Any

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from fleetops.config import settings
from fleetops.schemas.report import Report, ReportTrip

TRIP_FIELDS = [
    "number", "date", "driver", "vehicle", "departure", "destination", "km",
    "containers", "fuel_liters", "fuel_variance", "consumption", "fuel_cost",
    "fee_cost", "total_cost", "status", "alerts",
]
DRIVER_FIELDS = [
    "rank", "last_name", "first_name", "total_trips", "total_containers",
    "total_km", "average_consumption", "total_cost", "efficiency",
]
VEHICLE_FIELDS = [
    "rank", "plate", "make", "model", "total_trips", "total_km",
    "average_consumption", "total_fuel_cost", "alert_count", "efficiency",
]
MONTH_FIELDS = ["month", "fuel", "fees", "subcontracting", "total"]
DESTINATION_FIELDS = ["destination", "trips", "total_cost", "average_cost", "containers"]


def _cell(value: Any) -> Any:
    """Valeur compatible tableur / Spreadsheet-friendly value."""
    if isinstance(value, tuple):
        return ", ".join(str(v) for v in value)
    if hasattr(value, "value"):
        return value.value
    return value


def trip_row(trip: ReportTrip) -> dict[str, Any]:
    return {f: _cell(getattr(trip, f)) for f in TRIP_FIELDS}


class ExportService:
    """Export du rapport vers CSV/XLSX / Report export to CSV/XLSX."""

    @staticmethod
    def to_csv(rows: list[dict], fields: list[str]) -> bytes:
        """Générer un CSV UTF-8 BOM avec séparateur ';' / Generate UTF-8 BOM CSV with ';' separator."""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=fields, delimiter=";", extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({f: row.get(f, "") for f in fields})
        return ("\ufeff" + output.getvalue()).encode("utf-8")

    @staticmethod
    def write_sheet(ws: Worksheet, rows: list[dict], fields: list[str], start_row: int = 1) -> int:
        """Ecrire un tableau, retourne la ligne suivante / Write a table, return the next free row."""
        # En-têtes / Headers
        for col_idx, field in enumerate(fields, 1):
            cell = ws.cell(row=start_row, column=col_idx, value=field)
            cell.font = cell.font.copy(bold=True)

        # Données / Data rows
        for row_idx, row in enumerate(rows, start_row + 1):
            for col_idx, field in enumerate(fields, 1):
                ws.cell(row=row_idx, column=col_idx, value=row.get(field))
        return start_row + len(rows) + 1

    @classmethod
    def report_to_xlsx(cls, report: Report) -> bytes:
        """
        Classeur complet : Summary, Drivers, Vehicles, Costs, Destinations, Trips.
        Full workbook; the Trips sheet only when the report carries trip rows.
        """
        wb = Workbook()
        summary = report.executive_summary
        kpis = summary.kpis

        ws = wb.active
        ws.title = "Summary"
        ws.append(["Period", summary.period.label])
        ws.append(["Previous period", summary.previous_period.label])
        ws.append(["Generated at", report.generated_at.strftime("%Y-%m-%d %H:%M")])
        ws.append([])
        kpi_rows = [
            {"kpi": "Trips", "value": kpis.total_trips, "change_pct": kpis.trips_change},
            {"kpi": "Containers", "value": kpis.total_containers, "change_pct": kpis.containers_change},
            {"kpi": f"Total cost ({settings.CURRENCY_LABEL})", "value": kpis.total_cost,
             "change_pct": kpis.cost_change},
            {"kpi": f"Fuel cost ({settings.CURRENCY_LABEL})", "value": kpis.total_fuel_cost,
             "change_pct": kpis.fuel_cost_change},
            {"kpi": f"Fees ({settings.CURRENCY_LABEL})", "value": kpis.total_fee_cost,
             "change_pct": kpis.fee_cost_change},
            {"kpi": "Average consumption (L/100km)", "value": kpis.average_consumption,
             "change_pct": kpis.consumption_change},
            {"kpi": "Trips with alerts", "value": kpis.active_alerts, "change_pct": kpis.alerts_change},
        ]
        next_row = cls.write_sheet(ws, kpi_rows, ["kpi", "value", "change_pct"], start_row=5)
        if summary.highlights:
            cell = ws.cell(row=next_row + 1, column=1, value="Highlights")
            cell.font = cell.font.copy(bold=True)
            for offset, line in enumerate(summary.highlights, next_row + 2):
                ws.cell(row=offset, column=1, value=line)

        fleet = report.fleet_performance
        ws = wb.create_sheet("Drivers")
        next_row = cls.write_sheet(ws, [d.model_dump() for d in fleet.top_drivers], DRIVER_FIELDS)
        ws.cell(row=next_row + 1, column=1, value="Lowest volume")
        cls.write_sheet(ws, [d.model_dump() for d in fleet.bottom_drivers], DRIVER_FIELDS, start_row=next_row + 2)

        ws = wb.create_sheet("Vehicles")
        next_row = cls.write_sheet(ws, [v.model_dump() for v in fleet.top_vehicles], VEHICLE_FIELDS)
        ws.cell(row=next_row + 1, column=1, value="Least economical")
        cls.write_sheet(ws, [v.model_dump() for v in fleet.bottom_vehicles], VEHICLE_FIELDS, start_row=next_row + 2)

        financial = report.financial_analysis
        ws = wb.create_sheet("Costs")
        next_row = cls.write_sheet(
            ws,
            [c.model_dump() for c in financial.costs_by_category],
            ["category", "amount", "percentage"],
        )
        cls.write_sheet(
            ws,
            [m.model_dump() for m in financial.costs_by_month],
            MONTH_FIELDS,
            start_row=next_row + 1,
        )
        cls.write_sheet(
            wb.create_sheet("Destinations"),
            [d.model_dump() for d in financial.costs_by_destination],
            DESTINATION_FIELDS,
        )

        if report.detailed_trips is not None:
            cls.write_sheet(
                wb.create_sheet("Trips"),
                [trip_row(t) for t in report.detailed_trips],
                TRIP_FIELDS,
            )

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    @classmethod
    def trips_to_csv(cls, report: Report) -> bytes:
        """Trajets detailles en CSV / Detailed trips as CSV."""
        rows = [trip_row(t) for t in report.detailed_trips or ()]
        return cls.to_csv(rows, TRIP_FIELDS)
