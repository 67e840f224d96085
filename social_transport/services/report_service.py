from __future__ import annotations

from datetime import date as date_type
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from social_transport.errors import ValidationError
from social_transport.models.registry import Destination, Driver, Person
from social_transport.services.recurrence import format_date, parse_date
from social_transport.services.registry_service import RegistryService
from social_transport.services.transport_service import TransportService

REPORT_KINDS = ("persons", "drivers", "destinations")

ZERO = Decimal("0.00")


class ReportService:
    """Cost and trip aggregates over a date range, plus dashboard counts."""

    def __init__(
        self,
        transports: TransportService,
        persons: RegistryService[Person],
        drivers: RegistryService[Driver],
        destinations: RegistryService[Destination],
    ) -> None:
        self._transports = transports
        self._persons = persons
        self._drivers = drivers
        self._destinations = destinations

    def _load(self, date_from: Optional[str], date_to: Optional[str]):
        if date_from and date_to and parse_date(date_from, "dateFrom") > parse_date(date_to, "dateTo"):
            raise ValidationError("dateFrom must not be after dateTo")
        transports = self._transports.list(date_from=date_from, date_to=date_to)
        persons = {p.id: p for p in self._persons.list()}
        drivers = {d.id: d for d in self._drivers.list()}
        destinations = {d.id: d for d in self._destinations.list()}
        return transports, persons, drivers, destinations

    def person_report(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[Dict[str, Any]]:
        """Per recipient: each trip with its cost, and the total. Recipients without trips are left out."""
        transports, persons, drivers, destinations = self._load(date_from, date_to)
        reports = []
        for person in persons.values():
            lines = []
            total = ZERO
            for t in transports:
                if t.user_id != person.id:
                    continue
                destination = destinations.get(t.destination_id)
                driver = drivers.get(t.driver_id)
                cost = destination.cost if destination else ZERO
                total += cost
                lines.append(
                    {
                        "transport_id": t.id,
                        "date": t.date,
                        "start_time": t.start_time,
                        "destination_name": destination.name if destination else "",
                        "driver_name": driver.name if driver else "",
                        "cost": cost,
                    }
                )
            if lines:
                reports.append(
                    {
                        "person_id": person.id,
                        "person_name": person.name,
                        "total_cost": total,
                        "transports": lines,
                    }
                )
        return reports

    def driver_report(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[Dict[str, Any]]:
        transports, persons, drivers, destinations = self._load(date_from, date_to)
        reports = []
        for driver in drivers.values():
            lines = []
            for t in transports:
                if t.driver_id != driver.id:
                    continue
                destination = destinations.get(t.destination_id)
                person = persons.get(t.user_id)
                lines.append(
                    {
                        "transport_id": t.id,
                        "date": t.date,
                        "start_time": t.start_time,
                        "person_name": person.name if person else "",
                        "destination_name": destination.name if destination else "",
                        "cost": destination.cost if destination else ZERO,
                    }
                )
            if lines:
                reports.append(
                    {
                        "driver_id": driver.id,
                        "driver_name": driver.name,
                        "total_trips": len(lines),
                        "transports": lines,
                    }
                )
        return reports

    def destination_report(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[Dict[str, Any]]:
        """Trips and revenue per destination, busiest first."""
        transports, _, _, destinations = self._load(date_from, date_to)
        reports = []
        for destination in destinations.values():
            trips = sum(1 for t in transports if t.destination_id == destination.id)
            if trips:
                reports.append(
                    {
                        "destination_id": destination.id,
                        "destination_name": destination.name,
                        "unit_cost": destination.cost,
                        "total_trips": trips,
                        "total_revenue": destination.cost * trips,
                    }
                )
        reports.sort(key=lambda r: r["total_trips"], reverse=True)
        return reports

    def summary(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> Dict[str, Any]:
        transports, _, _, destinations = self._load(date_from, date_to)
        total_cost = ZERO
        for t in transports:
            destination = destinations.get(t.destination_id)
            if destination:
                total_cost += destination.cost
        return {
            "date_from": date_from,
            "date_to": date_to,
            "total_transports": len(transports),
            "distinct_users": len({t.user_id for t in transports}),
            "distinct_drivers": len({t.driver_id for t in transports}),
            "total_cost": total_cost,
        }

    def dashboard(self, today: Optional[str] = None) -> Dict[str, Any]:
        day = format_date(parse_date(today)) if today else format_date(date_type.today())
        todays = self._transports.list(date_from=day, date_to=day)
        return {
            "date": day,
            "users": self._persons.count(),
            "drivers": self._drivers.count(),
            "destinations": self._destinations.count(),
            "transports": len(self._transports.list()),
            "transports_today": len(todays),
        }

    def export_rows(
        self, kind: str, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> Tuple[List[str], List[List[Any]]]:
        """Flat table (headers, rows) of one report, for CSV or spreadsheet export."""
        if kind == "persons":
            headers = ["User", "Date", "Time", "Destination", "Cost", "Driver"]
            rows = [
                [r["person_name"], line["date"], line["start_time"], line["destination_name"], line["cost"], line["driver_name"]]
                for r in self.person_report(date_from, date_to)
                for line in r["transports"]
            ]
        elif kind == "drivers":
            headers = ["Driver", "Date", "Time", "User", "Destination", "Cost"]
            rows = [
                [r["driver_name"], line["date"], line["start_time"], line["person_name"], line["destination_name"], line["cost"]]
                for r in self.driver_report(date_from, date_to)
                for line in r["transports"]
            ]
        elif kind == "destinations":
            headers = ["Destination", "Trips", "Total Revenue", "Cost per Trip"]
            rows = [
                [r["destination_name"], r["total_trips"], r["total_revenue"], r["unit_cost"]]
                for r in self.destination_report(date_from, date_to)
            ]
        else:
            raise ValidationError(f"invalid report '{kind}', expected one of: {', '.join(REPORT_KINDS)}")
        return headers, rows
