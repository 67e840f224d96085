"""Ride recipients. Exposed as ``/users``; stored as ``Person``."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from social_transport.api.deps import get_current_account, get_services
from social_transport.api.schemas import PersonPayload, PersonResponse
from social_transport.container import Services

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(get_current_account)])


@router.get("", response_model=List[PersonResponse])
def list_users(services: Services = Depends(get_services)):
    return [PersonResponse.model_validate(p) for p in services.persons.list()]


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: PersonPayload, services: Services = Depends(get_services)):
    person = services.persons.create(**payload.model_dump())
    return PersonResponse.model_validate(person)


@router.get("/{user_id}", response_model=PersonResponse)
def get_user(user_id: str, services: Services = Depends(get_services)):
    return PersonResponse.model_validate(services.persons.get(user_id))


@router.put("/{user_id}", response_model=PersonResponse)
def update_user(user_id: str, payload: PersonPayload, services: Services = Depends(get_services)):
    person = services.persons.update(user_id, **payload.model_dump())
    return PersonResponse.model_validate(person)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, services: Services = Depends(get_services)):
    """Delete a recipient together with all of their transports."""
    services.persons.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
