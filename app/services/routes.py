"""Route management and route analytics."""

from __future__ import annotations

import calendar
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.config.settings import OperationsConfig, settings
from app.models import Airport, City, Flight, Route, RouteStatus, Ticket, TicketStatus
from app.models.flight import COMPLETED_STATUSES
from app.services.errors import ConflictError, NotFoundError
from app.views import (
    AirportSummary,
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

logger = logging.getLogger(__name__)

MONTH_NAMES = tuple(calendar.month_name[1:])
WEEKDAY_NAMES = tuple(calendar.day_name)


def load_factor(passengers: int, flights: int, seat_capacity: int) -> float:
    """Share of assumed seat capacity sold, as a percentage."""

    if flights <= 0:
        return 0.0
    return round(passengers / (flights * seat_capacity) * 100, 2)


def popularity_score(
    flights: int,
    passengers: int,
    flight_weight: float,
    passenger_weight: float,
) -> float:
    return round(flights * flight_weight + passengers * passenger_weight, 2)


def on_time_performance(flights: Iterable[Any], tolerance: timedelta) -> float:
    """Percentage of completed flights that departed within ``tolerance``."""

    completed = [flight for flight in flights if flight.status in COMPLETED_STATUSES]
    if not completed:
        return 0.0
    on_time = sum(
        1
        for flight in completed
        if flight.actual_departure is not None
        and flight.actual_departure <= flight.scheduled_departure + tolerance
    )
    return round(on_time / len(completed) * 100, 2)


def busiest_label(labels: Iterable[str], calendar_order: Sequence[str]) -> Optional[str]:
    """Most frequent label; ties go to whichever comes first in ``calendar_order``."""

    counts = Counter(labels)
    if not counts:
        return None
    return min(counts, key=lambda label: (-counts[label], calendar_order.index(label)))


def most_popular_month(departures: Iterable[datetime]) -> Optional[str]:
    return busiest_label((MONTH_NAMES[d.month - 1] for d in departures), MONTH_NAMES)


def busiest_weekday(departures: Iterable[datetime]) -> Optional[str]:
    return busiest_label((WEEKDAY_NAMES[d.weekday()] for d in departures), WEEKDAY_NAMES)


@dataclass
class RouteActivity:
    """Flights and active-ticket totals gathered for one route."""

    route_id: int
    route_name: str
    departure_iata: str
    arrival_iata: str
    flights: list[Any] = field(default_factory=list)
    passengers: int = 0
    revenue: float = 0.0

    @property
    def flight_count(self) -> int:
        return len(self.flights)

    @property
    def average_price(self) -> float:
        if not self.passengers:
            return 0.0
        return round(self.revenue / self.passengers, 2)

    def statistics(self, ops: OperationsConfig) -> RouteStatisticsResponse:
        departures = [flight.scheduled_departure for flight in self.flights]
        return RouteStatisticsResponse(
            route_id=self.route_id,
            route_name=self.route_name,
            departure_airport=self.departure_iata,
            arrival_airport=self.arrival_iata,
            total_flights=self.flight_count,
            total_passengers=self.passengers,
            average_load_factor=load_factor(
                self.passengers, self.flight_count, ops.seat_capacity
            ),
            average_price=self.average_price,
            total_revenue=round(self.revenue, 2),
            on_time_performance=on_time_performance(
                self.flights,
                timedelta(minutes=ops.on_time_tolerance_minutes),
            ),
            most_popular_month=most_popular_month(departures),
            busiest_day_of_week=busiest_weekday(departures),
        )

    def popularity(self, ops: OperationsConfig) -> PopularRouteResponse:
        return PopularRouteResponse(
            route_id=self.route_id,
            route_name=self.route_name,
            departure_airport=self.departure_iata,
            arrival_airport=self.arrival_iata,
            flight_count=self.flight_count,
            passenger_count=self.passengers,
            average_load_factor=load_factor(
                self.passengers, self.flight_count, ops.seat_capacity
            ),
            total_revenue=round(self.revenue, 2),
            popularity_score=popularity_score(
                self.flight_count,
                self.passengers,
                ops.popularity_flight_weight,
                ops.popularity_passenger_weight,
            ),
        )


def _airport_summary(airport: Airport) -> AirportSummary:
    return AirportSummary(
        airport_id=airport.id,
        iata_code=airport.iata_code,
        airport_name=airport.name,
        city_name=airport.city.name,
        country=airport.city.country,
    )


def _serialize(route: Route) -> RouteResponse:
    return RouteResponse(
        id=route.id,
        name=route.name,
        departure_airport_id=route.departure_airport_id,
        departure_airport=_airport_summary(route.departure_airport),
        arrival_airport_id=route.arrival_airport_id,
        arrival_airport=_airport_summary(route.arrival_airport),
        distance=route.distance,
        duration=route.duration,
        status=route.status,
        base_price=float(route.base_price) if route.base_price is not None else None,
        description=route.description,
        created_at=route.created_at,
        updated_at=route.updated_at,
    )


class RouteService:
    """Route CRUD with airport-pair validation, plus per-route analytics."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_route_or_404(self, route_id: int) -> Route:
        result = await self.session.execute(
            select(Route)
            .where(Route.id == route_id)
            .execution_options(populate_existing=True)
        )
        route = result.unique().scalar_one_or_none()
        if route is None:
            raise NotFoundError("Route not found", context={"route_id": route_id})
        return route

    async def _ensure_airports_exist(self, *airport_ids: int) -> None:
        wanted = set(airport_ids)
        result = await self.session.execute(
            select(func.count(Airport.id)).where(Airport.id.in_(wanted))
        )
        if result.scalar_one() != len(wanted):
            raise NotFoundError("One or both airports not found")

    async def _ensure_pair_is_free(
        self,
        departure_airport_id: int,
        arrival_airport_id: int,
        exclude_id: Optional[int] = None,
    ) -> None:
        query = select(Route.id).where(
            Route.departure_airport_id == departure_airport_id,
            Route.arrival_airport_id == arrival_airport_id,
        )
        if exclude_id is not None:
            query = query.where(Route.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        if result.first() is not None:
            raise ConflictError("Route between these airports already exists")

    async def _validate_pair(
        self,
        departure_airport_id: int,
        arrival_airport_id: int,
        exclude_id: Optional[int] = None,
    ) -> None:
        await self._ensure_airports_exist(departure_airport_id, arrival_airport_id)
        await self._ensure_pair_is_free(departure_airport_id, arrival_airport_id, exclude_id)
        if departure_airport_id == arrival_airport_id:
            raise ConflictError("Cannot create route from airport to itself")

    async def _commit_or_conflict(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConflictError("Route between these airports already exists") from exc

    async def create(self, payload: RouteCreateRequest) -> RouteResponse:
        await self._validate_pair(payload.departure_airport_id, payload.arrival_airport_id)

        route = Route(
            name=payload.name,
            departure_airport_id=payload.departure_airport_id,
            arrival_airport_id=payload.arrival_airport_id,
            distance=payload.distance,
            duration=payload.duration,
            status=payload.status,
            base_price=payload.base_price,
            description=payload.description,
        )
        self.session.add(route)
        await self._commit_or_conflict()

        logger.info(
            "Created route %s (%s -> %s)",
            route.id,
            payload.departure_airport_id,
            payload.arrival_airport_id,
        )
        return await self.get(route.id)

    async def update(self, route_id: int, payload: RouteUpdateRequest) -> RouteResponse:
        route = await self._get_route_or_404(route_id)
        provided = payload.model_fields_set
        if not provided:
            return _serialize(route)

        departure_id = payload.departure_airport_id or route.departure_airport_id
        arrival_id = payload.arrival_airport_id or route.arrival_airport_id
        if payload.departure_airport_id is not None or payload.arrival_airport_id is not None:
            await self._validate_pair(departure_id, arrival_id, exclude_id=route_id)

        route.departure_airport_id = departure_id
        route.arrival_airport_id = arrival_id
        if payload.name is not None:
            route.name = payload.name
        if payload.status is not None:
            route.status = payload.status
        if "distance" in provided:
            route.distance = payload.distance
        if "duration" in provided:
            route.duration = payload.duration
        if "base_price" in provided:
            route.base_price = payload.base_price
        if "description" in provided:
            route.description = payload.description

        await self._commit_or_conflict()
        return await self.get(route_id)

    async def delete(self, route_id: int) -> None:
        route = await self._get_route_or_404(route_id)

        result = await self.session.execute(
            select(func.count(Flight.id)).where(Flight.route_id == route_id)
        )
        if result.scalar_one() > 0:
            raise ConflictError("Cannot delete route that is used in flights")

        await self.session.delete(route)
        await self.session.commit()
        logger.info("Deleted route %s", route_id)

    async def get(self, route_id: int) -> RouteResponse:
        return _serialize(await self._get_route_or_404(route_id))

    async def search(
        self,
        filters: RouteFilters,
        pagination: PaginationParams,
    ) -> PaginatedResponse[RouteResponse]:
        departure = aliased(Airport)
        arrival = aliased(Airport)

        conditions = []
        if filters.name:
            conditions.append(Route.name.ilike(f"%{filters.name}%"))
        if filters.departure_airport:
            conditions.append(departure.iata_code.ilike(f"%{filters.departure_airport}%"))
        if filters.arrival_airport:
            conditions.append(arrival.iata_code.ilike(f"%{filters.arrival_airport}%"))
        if filters.departure_airport_id is not None:
            conditions.append(Route.departure_airport_id == filters.departure_airport_id)
        if filters.arrival_airport_id is not None:
            conditions.append(Route.arrival_airport_id == filters.arrival_airport_id)
        if filters.status is not None:
            conditions.append(Route.status == filters.status)
        if filters.min_distance is not None:
            conditions.append(Route.distance >= filters.min_distance)
        if filters.max_distance is not None:
            conditions.append(Route.distance <= filters.max_distance)

        count_result = await self.session.execute(
            select(func.count(Route.id))
            .select_from(Route)
            .join(departure, Route.departure_airport_id == departure.id)
            .join(arrival, Route.arrival_airport_id == arrival.id)
            .where(*conditions)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(Route)
            .join(departure, Route.departure_airport_id == departure.id)
            .join(arrival, Route.arrival_airport_id == arrival.id)
            .where(*conditions)
            .order_by(Route.name, Route.id)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        routes = result.unique().scalars().all()

        return PaginatedResponse[RouteResponse].build(
            [_serialize(route) for route in routes],
            total,
            pagination,
        )

    async def by_departure_airport(self, airport_id: int) -> list[RouteResponse]:
        result = await self.session.execute(
            select(Route)
            .where(Route.departure_airport_id == airport_id)
            .order_by(Route.name, Route.id)
        )
        return [_serialize(route) for route in result.unique().scalars().all()]

    async def by_arrival_airport(self, airport_id: int) -> list[RouteResponse]:
        result = await self.session.execute(
            select(Route)
            .where(Route.arrival_airport_id == airport_id)
            .order_by(Route.name, Route.id)
        )
        return [_serialize(route) for route in result.unique().scalars().all()]

    async def _collect_activity(
        self,
        departure_country: Optional[str] = None,
        arrival_country: Optional[str] = None,
        status: Optional[RouteStatus] = None,
    ) -> list[RouteActivity]:
        departure = aliased(Airport)
        arrival = aliased(Airport)
        departure_city = aliased(City)
        arrival_city = aliased(City)

        query = (
            select(
                Route.id,
                Route.name,
                departure.iata_code.label("departure_iata"),
                arrival.iata_code.label("arrival_iata"),
            )
            .join(departure, Route.departure_airport_id == departure.id)
            .join(arrival, Route.arrival_airport_id == arrival.id)
            .join(departure_city, departure.city_id == departure_city.id)
            .join(arrival_city, arrival.city_id == arrival_city.id)
        )
        if departure_country:
            query = query.where(departure_city.country == departure_country)
        if arrival_country:
            query = query.where(arrival_city.country == arrival_country)
        if status is not None:
            query = query.where(Route.status == status)

        route_rows = (await self.session.execute(query.order_by(Route.id))).all()
        activity = {
            row.id: RouteActivity(
                route_id=row.id,
                route_name=row.name,
                departure_iata=row.departure_iata,
                arrival_iata=row.arrival_iata,
            )
            for row in route_rows
        }
        if not activity:
            return []

        flight_rows = await self.session.execute(
            select(
                Flight.id,
                Flight.route_id,
                Flight.status,
                Flight.scheduled_departure,
                Flight.actual_departure,
            )
            .where(Flight.route_id.in_(activity.keys()))
            .order_by(Flight.scheduled_departure, Flight.id)
        )
        for flight in flight_rows.all():
            activity[flight.route_id].flights.append(flight)

        ticket_rows = await self.session.execute(
            select(
                Flight.route_id,
                func.count(Ticket.id).label("passengers"),
                func.coalesce(func.sum(Ticket.price), 0).label("revenue"),
            )
            .join(Flight, Ticket.flight_id == Flight.id)
            .where(
                Flight.route_id.in_(activity.keys()),
                Ticket.status == TicketStatus.ACTIVE,
            )
            .group_by(Flight.route_id)
        )
        for row in ticket_rows.all():
            entry = activity[row.route_id]
            entry.passengers = int(row.passengers)
            entry.revenue = float(row.revenue)

        return list(activity.values())

    async def statistics(
        self,
        filters: RouteStatisticsFilters,
    ) -> list[RouteStatisticsResponse]:
        activity = await self._collect_activity(
            filters.departure_country,
            filters.arrival_country,
            filters.status,
        )
        ops = settings.operations
        stats = [entry.statistics(ops) for entry in activity]
        stats.sort(key=lambda item: (-item.total_flights, item.route_id))
        return stats

    async def popular(self, filters: PopularRoutesFilters) -> list[PopularRouteResponse]:
        activity = await self._collect_activity(
            filters.departure_country,
            filters.arrival_country,
        )
        ops = settings.operations
        ranked = [entry.popularity(ops) for entry in activity]
        ranked.sort(
            key=lambda item: (-item.popularity_score, -item.flight_count, item.route_id)
        )
        return ranked[: filters.limit]


__all__ = [
    "RouteService",
    "RouteActivity",
    "load_factor",
    "popularity_score",
    "on_time_performance",
    "busiest_label",
    "most_popular_month",
    "busiest_weekday",
]
