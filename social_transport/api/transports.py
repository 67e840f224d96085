from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status

from social_transport.api.deps import get_current_account, get_services
from social_transport.api.schemas import TransportPayload, TransportResponse
from social_transport.container import Services

router = APIRouter(prefix="/transports", tags=["transports"], dependencies=[Depends(get_current_account)])


@router.get("", response_model=List[TransportResponse])
def list_transports(
    date_from: Optional[str] = Query(None, alias="dateFrom", description="inclusive, YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="inclusive, YYYY-MM-DD"),
    user_id: Optional[str] = Query(None, alias="userId"),
    driver_id: Optional[str] = Query(None, alias="driverId"),
    destination_id: Optional[str] = Query(None, alias="destinationId"),
    services: Services = Depends(get_services),
):
    """Transports ordered by date and start time, latest first."""
    transports = services.transports.list(
        date_from=date_from,
        date_to=date_to,
        user_id=user_id,
        driver_id=driver_id,
        destination_id=destination_id,
    )
    return [TransportResponse.model_validate(t) for t in transports]


@router.post(
    "",
    response_model=Union[TransportResponse, List[TransportResponse]],
    status_code=status.HTTP_201_CREATED,
)
def create_transport(payload: TransportPayload, services: Services = Depends(get_services)):
    """Create a transport, expanding recurring ones into one row per date.

    A single occurrence is returned as an object, a series as a list.
    """
    created = services.transports.create(**payload.model_dump())
    items = [TransportResponse.model_validate(t) for t in created]
    return items[0] if len(items) == 1 else items


@router.get("/{transport_id}", response_model=TransportResponse)
def get_transport(transport_id: str, services: Services = Depends(get_services)):
    return TransportResponse.model_validate(services.transports.get(transport_id))


@router.put("/{transport_id}", response_model=TransportResponse)
def update_transport(transport_id: str, payload: TransportPayload, services: Services = Depends(get_services)):
    """Edit one occurrence only; other occurrences of its series are unchanged."""
    transport = services.transports.update(transport_id, **payload.model_dump())
    return TransportResponse.model_validate(transport)


@router.delete("/{transport_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transport(transport_id: str, services: Services = Depends(get_services)):
    services.transports.delete(transport_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
