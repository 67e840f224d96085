from typing import List

from fastapi import APIRouter, Depends, Response, status

from social_transport.api.deps import get_current_account, get_services
from social_transport.api.schemas import DriverPayload, DriverResponse
from social_transport.container import Services

router = APIRouter(prefix="/drivers", tags=["drivers"], dependencies=[Depends(get_current_account)])


@router.get("", response_model=List[DriverResponse])
def list_drivers(services: Services = Depends(get_services)):
    return [DriverResponse.model_validate(d) for d in services.drivers.list()]


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
def create_driver(payload: DriverPayload, services: Services = Depends(get_services)):
    return DriverResponse.model_validate(services.drivers.create(**payload.model_dump()))


@router.get("/{driver_id}", response_model=DriverResponse)
def get_driver(driver_id: str, services: Services = Depends(get_services)):
    return DriverResponse.model_validate(services.drivers.get(driver_id))


@router.put("/{driver_id}", response_model=DriverResponse)
def update_driver(driver_id: str, payload: DriverPayload, services: Services = Depends(get_services)):
    return DriverResponse.model_validate(services.drivers.update(driver_id, **payload.model_dump()))


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_driver(driver_id: str, services: Services = Depends(get_services)):
    services.drivers.delete(driver_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
