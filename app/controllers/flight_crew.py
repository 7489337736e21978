"""Endpoints for crew assignments, availability and crew analytics."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.controllers.dependencies import FlightCrewServiceDep
from app.views import (
    CrewAvailabilityRequest,
    CrewAvailabilityResponse,
    CrewStatisticsFilters,
    CrewStatisticsResponse,
    FlightCrewCreateRequest,
    FlightCrewFilters,
    FlightCrewResponse,
    FlightCrewUpdateRequest,
    PaginatedResponse,
    PaginationParams,
)

router = APIRouter(prefix="/flight-crew", tags=["flight-crew"])


@router.post(
    "", response_model=FlightCrewResponse, status_code=status.HTTP_201_CREATED
)
async def create_assignment(
    payload: FlightCrewCreateRequest,
    service: FlightCrewServiceDep,
) -> FlightCrewResponse:
    return await service.create(payload)


@router.get("", response_model=PaginatedResponse[FlightCrewResponse])
async def list_assignments(
    filters: Annotated[FlightCrewFilters, Depends()],
    pagination: Annotated[PaginationParams, Depends()],
    service: FlightCrewServiceDep,
) -> PaginatedResponse[FlightCrewResponse]:
    return await service.search(filters, pagination)


@router.get("/statistics", response_model=CrewStatisticsResponse)
async def crew_statistics(
    filters: Annotated[CrewStatisticsFilters, Depends()],
    service: FlightCrewServiceDep,
) -> CrewStatisticsResponse:
    return await service.statistics(filters)


@router.post("/check-availability", response_model=CrewAvailabilityResponse)
async def check_availability(
    payload: CrewAvailabilityRequest,
    service: FlightCrewServiceDep,
) -> CrewAvailabilityResponse:
    """Report whether a crew member is free and how much rest they still need."""

    return await service.check_availability(payload.user_id)


@router.get("/flight/{flight_id}", response_model=list[FlightCrewResponse])
async def crew_for_flight(
    flight_id: int,
    service: FlightCrewServiceDep,
) -> list[FlightCrewResponse]:
    return await service.crew_for_flight(flight_id)


@router.get("/user/{user_id}", response_model=list[FlightCrewResponse])
async def assignments_for_user(
    user_id: int,
    service: FlightCrewServiceDep,
) -> list[FlightCrewResponse]:
    return await service.assignments_for_user(user_id)


@router.get("/{assignment_id}", response_model=FlightCrewResponse)
async def get_assignment(
    assignment_id: int,
    service: FlightCrewServiceDep,
) -> FlightCrewResponse:
    return await service.get(assignment_id)


@router.put("/{assignment_id}", response_model=FlightCrewResponse)
async def update_assignment(
    assignment_id: int,
    payload: FlightCrewUpdateRequest,
    service: FlightCrewServiceDep,
) -> FlightCrewResponse:
    return await service.update(assignment_id, payload)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    assignment_id: int,
    service: FlightCrewServiceDep,
) -> Response:
    await service.delete(assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
