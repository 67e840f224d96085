from typing import List

from fastapi import APIRouter, Depends, Response, status

from social_transport.api.deps import get_current_account, get_services
from social_transport.api.schemas import DestinationPayload, DestinationResponse
from social_transport.container import Services

router = APIRouter(prefix="/destinations", tags=["destinations"], dependencies=[Depends(get_current_account)])


@router.get("", response_model=List[DestinationResponse])
def list_destinations(services: Services = Depends(get_services)):
    return [DestinationResponse.model_validate(d) for d in services.destinations.list()]


@router.post("", response_model=DestinationResponse, status_code=status.HTTP_201_CREATED)
def create_destination(payload: DestinationPayload, services: Services = Depends(get_services)):
    destination = services.destinations.create(**payload.model_dump())
    return DestinationResponse.model_validate(destination)


@router.get("/{destination_id}", response_model=DestinationResponse)
def get_destination(destination_id: str, services: Services = Depends(get_services)):
    return DestinationResponse.model_validate(services.destinations.get(destination_id))


@router.put("/{destination_id}", response_model=DestinationResponse)
def update_destination(destination_id: str, payload: DestinationPayload, services: Services = Depends(get_services)):
    destination = services.destinations.update(destination_id, **payload.model_dump())
    return DestinationResponse.model_validate(destination)


@router.delete("/{destination_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_destination(destination_id: str, services: Services = Depends(get_services)):
    """Delete a destination and every transport going there."""
    services.destinations.delete(destination_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
