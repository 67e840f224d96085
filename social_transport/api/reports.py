"""Reports, dashboard counts and the full data export."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from social_transport.api.deps import get_current_account, get_services
from social_transport.api.schemas import (
    DashboardResponse,
    DataExportResponse,
    DestinationReport,
    DestinationResponse,
    DriverReport,
    DriverResponse,
    PersonReport,
    PersonResponse,
    ReportSummary,
    TransportResponse,
)
from social_transport.container import Services
from social_transport.errors import ValidationError
from social_transport.storage.exports import CSV_MEDIA_TYPE, EXPORT_FORMATS, XLSX_MEDIA_TYPE
from social_transport.utils.timeutil import utc_now

router = APIRouter(tags=["reports"], dependencies=[Depends(get_current_account)])


@router.get("/reports/summary", response_model=ReportSummary)
def report_summary(
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: Services = Depends(get_services),
):
    return ReportSummary.model_validate(services.reports.summary(date_from, date_to))


@router.get("/reports/persons", response_model=List[PersonReport])
def report_persons(
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: Services = Depends(get_services),
):
    """Trips and total cost per recipient."""
    return [PersonReport.model_validate(r) for r in services.reports.person_report(date_from, date_to)]


@router.get("/reports/drivers", response_model=List[DriverReport])
def report_drivers(
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: Services = Depends(get_services),
):
    return [DriverReport.model_validate(r) for r in services.reports.driver_report(date_from, date_to)]


@router.get("/reports/destinations", response_model=List[DestinationReport])
def report_destinations(
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: Services = Depends(get_services),
):
    return [DestinationReport.model_validate(r) for r in services.reports.destination_report(date_from, date_to)]


@router.get("/reports/{kind}/export")
def export_report(
    kind: str,
    fmt: str = Query("csv", alias="format", description="csv or xlsx"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: Services = Depends(get_services),
):
    """Download one report as CSV or as an Excel workbook."""
    if fmt not in EXPORT_FORMATS:
        raise ValidationError(f"invalid format '{fmt}', expected csv or xlsx")
    headers, rows = services.reports.export_rows(kind, date_from, date_to)
    if fmt == "csv":
        content = services.exporter.to_csv(headers, rows)
        media_type = CSV_MEDIA_TYPE
    else:
        content = services.exporter.to_xlsx(kind, headers, rows)
        media_type = XLSX_MEDIA_TYPE
    filename = services.exporter.filename(kind, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    day: Optional[str] = Query(None, alias="date", description="defaults to today"),
    services: Services = Depends(get_services),
):
    return DashboardResponse.model_validate(services.reports.dashboard(day))


@router.get("/export", response_model=DataExportResponse)
def export_data(services: Services = Depends(get_services)):
    """Snapshot of every recipient, driver, destination and transport."""
    return DataExportResponse(
        exported_at=utc_now(),
        users=[PersonResponse.model_validate(p) for p in services.persons.list()],
        drivers=[DriverResponse.model_validate(d) for d in services.drivers.list()],
        destinations=[DestinationResponse.model_validate(d) for d in services.destinations.list()],
        transports=[TransportResponse.model_validate(t) for t in services.transports.list()],
    )
