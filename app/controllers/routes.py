"""Endpoints for route management and route analytics."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.controllers.dependencies import RouteServiceDep
from app.views import (
    PaginatedResponse,
    PaginationParams,
    PopularRouteResponse,
    PopularRoutesFilters,
    RouteCreateRequest,
    RouteFilters,
    RouteResponse,
    RouteStatisticsFilters,
    RouteStatisticsResponse,
    RouteUpdateRequest,
)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
async def create_route(
    payload: RouteCreateRequest,
    service: RouteServiceDep,
) -> RouteResponse:
    return await service.create(payload)


@router.get("", response_model=PaginatedResponse[RouteResponse])
async def list_routes(
    filters: Annotated[RouteFilters, Depends()],
    pagination: Annotated[PaginationParams, Depends()],
    service: RouteServiceDep,
) -> PaginatedResponse[RouteResponse]:
    return await service.search(filters, pagination)


@router.get("/statistics", response_model=list[RouteStatisticsResponse])
async def route_statistics(
    filters: Annotated[RouteStatisticsFilters, Depends()],
    service: RouteServiceDep,
) -> list[RouteStatisticsResponse]:
    """Per-route flight, passenger, revenue and punctuality figures."""

    return await service.statistics(filters)


@router.get("/popular", response_model=list[PopularRouteResponse])
async def popular_routes(
    filters: Annotated[PopularRoutesFilters, Depends()],
    service: RouteServiceDep,
) -> list[PopularRouteResponse]:
    return await service.popular(filters)


@router.get("/departure/{airport_id}", response_model=list[RouteResponse])
async def routes_from_airport(
    airport_id: int,
    service: RouteServiceDep,
) -> list[RouteResponse]:
    return await service.by_departure_airport(airport_id)


@router.get("/arrival/{airport_id}", response_model=list[RouteResponse])
async def routes_to_airport(
    airport_id: int,
    service: RouteServiceDep,
) -> list[RouteResponse]:
    return await service.by_arrival_airport(airport_id)


@router.get("/{route_id}", response_model=RouteResponse)
async def get_route(
    route_id: int,
    service: RouteServiceDep,
) -> RouteResponse:
    return await service.get(route_id)


@router.patch("/{route_id}", response_model=RouteResponse)
async def update_route(
    route_id: int,
    payload: RouteUpdateRequest,
    service: RouteServiceDep,
) -> RouteResponse:
    return await service.update(route_id, payload)


@router.delete("/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_route(
    route_id: int,
    service: RouteServiceDep,
) -> Response:
    await service.delete(route_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
