"""Crew assignment management, availability checks and crew analytics."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models import CrewPosition, Flight, FlightCrew, FlightStatus, User
from app.models.base import utcnow
from app.models.flight import COMPLETED_STATUSES
from app.services.errors import BadRequestError, ConflictError, NotFoundError
from app.telemetry import increment_crew_assignment, increment_crew_unavailable
from app.views import (
    ActiveCrewMember,
    CrewAvailabilityResponse,
    CrewEfficiency,
    CrewStatisticsFilters,
    CrewStatisticsResponse,
    CurrentFlight,
    FlightCrewCreateRequest,
    FlightCrewFilters,
    FlightCrewResponse,
    FlightCrewUpdateRequest,
    PaginatedResponse,
    PaginationParams,
)

logger = logging.getLogger(__name__)

# Flights in these states keep their crew busy.
ACTIVE_STATUSES = (FlightStatus.SCHEDULED, FlightStatus.BOARDING, FlightStatus.DEPARTED)

# Legs counted towards the rest-hour budget.
FLOWN_STATUSES = (FlightStatus.DEPARTED, FlightStatus.ARRIVED, FlightStatus.COMPLETED)

# Crew cannot be removed once the flight is under way.
LOCKED_STATUSES = frozenset({FlightStatus.DEPARTED, *COMPLETED_STATUSES})

POSITION_ORDER = (
    CrewPosition.PILOT,
    CrewPosition.CO_PILOT,
    CrewPosition.FLIGHT_ENGINEER,
    CrewPosition.PURSER,
    CrewPosition.FLIGHT_ATTENDANT,
)

TOP_CREW_LIMIT = 10


def total_flight_hours(legs: Iterable[tuple[datetime, datetime]]) -> float:
    """Sum scheduled block time, in hours, over (departure, arrival) pairs."""

    seconds = sum((arrival - departure).total_seconds() for departure, arrival in legs)
    return seconds / 3600


def rest_hours_required(flight_hours: float, rest_policy_hours: float) -> float:
    """Remaining rest owed under the rest-hour policy, never negative."""

    return max(0.0, rest_policy_hours - flight_hours)


def next_available_at(
    current_arrivals: Sequence[datetime],
    now: datetime,
    rest_policy_hours: float,
) -> datetime:
    """Arrival of the last current flight plus the rest period, or now when idle."""

    if not current_arrivals:
        return now
    return current_arrivals[-1] + timedelta(hours=rest_policy_hours)


def is_on_time(
    scheduled: datetime,
    actual: Optional[datetime],
    tolerance: timedelta,
) -> bool:
    return actual is not None and actual <= scheduled + tolerance


def rank_crew_efficiency(
    rows: Iterable[Any],
    tolerance: timedelta,
    limit: int = TOP_CREW_LIMIT,
) -> list[CrewEfficiency]:
    """Rank crew by on-time arrival rate over completed legs.

    Each row exposes ``user_id``, ``first_name``, ``last_name``, ``position``,
    ``status``, ``scheduled_arrival`` and ``actual_arrival``. Crew without a
    completed leg are left out.
    """

    buckets: dict[tuple[int, CrewPosition], dict[str, Any]] = {}
    for row in rows:
        key = (row.user_id, row.position)
        bucket = buckets.setdefault(
            key,
            {"name": f"{row.first_name} {row.last_name}", "completed": 0, "on_time": 0},
        )
        if row.status not in COMPLETED_STATUSES:
            continue
        bucket["completed"] += 1
        if is_on_time(row.scheduled_arrival, row.actual_arrival, tolerance):
            bucket["on_time"] += 1

    ranked = []
    for (user_id, position), bucket in buckets.items():
        if bucket["completed"] == 0:
            continue
        performance = round(bucket["on_time"] / bucket["completed"] * 100, 2)
        ranked.append(
            CrewEfficiency(
                user_id=user_id,
                name=bucket["name"],
                position=position,
                efficiency_score=performance,
                on_time_performance=performance,
            )
        )

    ranked.sort(key=lambda item: (-item.on_time_performance, item.user_id))
    return ranked[:limit]


def _serialize(assignment: FlightCrew) -> FlightCrewResponse:
    return FlightCrewResponse(
        id=assignment.id,
        flight_id=assignment.flight_id,
        flight_number=assignment.flight.flight_number if assignment.flight else None,
        user_id=assignment.user_id,
        first_name=assignment.user.first_name if assignment.user else None,
        last_name=assignment.user.last_name if assignment.user else None,
        email=assignment.user.email if assignment.user else None,
        position=assignment.position,
        notes=assignment.notes,
        assigned_at=assignment.assigned_at,
        updated_at=assignment.updated_at,
    )


class FlightCrewService:
    """Crew assignment CRUD plus the availability gate guarding it."""

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.clock = clock

    async def _get_user_or_404(self, user_id: int) -> User:
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found", context={"user_id": user_id})
        return user

    async def _get_flight_or_404(self, flight_id: int) -> Flight:
        result = await self.session.execute(select(Flight).where(Flight.id == flight_id))
        flight = result.scalar_one_or_none()
        if flight is None:
            raise NotFoundError("Flight not found", context={"flight_id": flight_id})
        return flight

    async def _get_assignment_or_404(self, assignment_id: int) -> FlightCrew:
        result = await self.session.execute(
            select(FlightCrew)
            .where(FlightCrew.id == assignment_id)
            .execution_options(populate_existing=True)
        )
        assignment = result.unique().scalar_one_or_none()
        if assignment is None:
            raise NotFoundError("Flight crew assignment not found")
        return assignment

    async def _position_taken(
        self,
        flight_id: int,
        position: CrewPosition,
        exclude_id: Optional[int] = None,
    ) -> bool:
        query = select(FlightCrew.id).where(
            FlightCrew.flight_id == flight_id,
            FlightCrew.position == position,
        )
        if exclude_id is not None:
            query = query.where(FlightCrew.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None

    async def _user_on_flight(
        self,
        flight_id: int,
        user_id: int,
        exclude_id: Optional[int] = None,
    ) -> bool:
        query = select(FlightCrew.id).where(
            FlightCrew.flight_id == flight_id,
            FlightCrew.user_id == user_id,
        )
        if exclude_id is not None:
            query = query.where(FlightCrew.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None

    async def create(self, payload: FlightCrewCreateRequest) -> FlightCrewResponse:
        await self._get_user_or_404(payload.user_id)
        await self._get_flight_or_404(payload.flight_id)

        if await self._position_taken(payload.flight_id, payload.position):
            raise ConflictError(
                f"{payload.position.value} position is already assigned for this flight"
            )

        if await self._user_on_flight(payload.flight_id, payload.user_id):
            raise ConflictError("User is already assigned to this flight")

        availability = await self.check_availability(payload.user_id)
        if not availability.is_available:
            increment_crew_unavailable()
            raise BadRequestError(
                "Crew member is not available for this flight",
                context={"next_available": availability.next_available.isoformat()},
            )

        assignment = FlightCrew(
            flight_id=payload.flight_id,
            user_id=payload.user_id,
            position=payload.position,
            notes=payload.notes,
        )
        self.session.add(assignment)
        await self._commit_or_conflict()

        increment_crew_assignment(payload.position.value)
        logger.info(
            "Assigned user %s to flight %s as %s",
            payload.user_id,
            payload.flight_id,
            payload.position.value,
        )
        return await self.get(assignment.id)

    async def update(
        self,
        assignment_id: int,
        payload: FlightCrewUpdateRequest,
    ) -> FlightCrewResponse:
        assignment = await self._get_assignment_or_404(assignment_id)
        if not payload.model_fields_set:
            return _serialize(assignment)

        target_flight_id = payload.flight_id or assignment.flight_id
        target_user_id = payload.user_id or assignment.user_id
        target_position = payload.position or assignment.position

        if target_user_id != assignment.user_id:
            await self._get_user_or_404(target_user_id)
        if target_flight_id != assignment.flight_id:
            await self._get_flight_or_404(target_flight_id)

        if (
            target_flight_id != assignment.flight_id
            or target_position != assignment.position
        ) and await self._position_taken(target_flight_id, target_position, assignment_id):
            raise ConflictError(
                f"{target_position.value} position is already assigned for this flight"
            )

        reassigned = (
            target_flight_id != assignment.flight_id
            or target_user_id != assignment.user_id
        )
        if reassigned and await self._user_on_flight(
            target_flight_id, target_user_id, assignment_id
        ):
            raise ConflictError("User is already assigned to this flight")

        if reassigned:
            availability = await self.check_availability(
                target_user_id, exclude_assignment_id=assignment_id
            )
            if not availability.is_available:
                increment_crew_unavailable()
                raise BadRequestError("Crew member is not available for this flight")

        assignment.flight_id = target_flight_id
        assignment.user_id = target_user_id
        assignment.position = target_position
        if "notes" in payload.model_fields_set:
            assignment.notes = payload.notes

        await self._commit_or_conflict()
        return await self.get(assignment_id)

    async def delete(self, assignment_id: int) -> None:
        assignment = await self._get_assignment_or_404(assignment_id)

        if assignment.flight is not None and assignment.flight.status in LOCKED_STATUSES:
            raise BadRequestError("Cannot remove crew from completed or departed flight")

        await self.session.delete(assignment)
        await self.session.commit()
        logger.info("Removed crew assignment %s", assignment_id)

    async def _commit_or_conflict(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConflictError("Crew assignment conflicts with an existing one") from exc

    async def get(self, assignment_id: int) -> FlightCrewResponse:
        return _serialize(await self._get_assignment_or_404(assignment_id))

    async def search(
        self,
        filters: FlightCrewFilters,
        pagination: PaginationParams,
    ) -> PaginatedResponse[FlightCrewResponse]:
        conditions = []
        if filters.flight_id is not None:
            conditions.append(FlightCrew.flight_id == filters.flight_id)
        if filters.user_id is not None:
            conditions.append(FlightCrew.user_id == filters.user_id)
        if filters.position is not None:
            conditions.append(FlightCrew.position == filters.position)
        if filters.flight_number:
            conditions.append(Flight.flight_number.ilike(f"%{filters.flight_number}%"))
        if filters.crew_name:
            pattern = f"%{filters.crew_name}%"
            conditions.append(
                or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern))
            )

        count_result = await self.session.execute(
            select(func.count(FlightCrew.id))
            .select_from(FlightCrew)
            .join(User, FlightCrew.user_id == User.id)
            .join(Flight, FlightCrew.flight_id == Flight.id)
            .where(*conditions)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(FlightCrew)
            .join(User, FlightCrew.user_id == User.id)
            .join(Flight, FlightCrew.flight_id == Flight.id)
            .where(*conditions)
            .order_by(FlightCrew.assigned_at.desc(), FlightCrew.id.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        assignments = result.unique().scalars().all()

        return PaginatedResponse[FlightCrewResponse].build(
            [_serialize(assignment) for assignment in assignments],
            total,
            pagination,
        )

    async def crew_for_flight(self, flight_id: int) -> list[FlightCrewResponse]:
        result = await self.session.execute(
            select(FlightCrew).where(FlightCrew.flight_id == flight_id)
        )
        assignments = sorted(
            result.unique().scalars().all(),
            key=lambda item: (POSITION_ORDER.index(item.position), item.id),
        )
        return [_serialize(assignment) for assignment in assignments]

    async def assignments_for_user(self, user_id: int) -> list[FlightCrewResponse]:
        result = await self.session.execute(
            select(FlightCrew)
            .join(Flight, FlightCrew.flight_id == Flight.id)
            .where(FlightCrew.user_id == user_id)
            .order_by(Flight.scheduled_departure.desc(), FlightCrew.id.desc())
        )
        return [_serialize(assignment) for assignment in result.unique().scalars().all()]

    async def check_availability(
        self,
        user_id: int,
        exclude_assignment_id: Optional[int] = None,
    ) -> CrewAvailabilityResponse:
        user = await self._get_user_or_404(user_id)
        ops = settings.operations
        now = self.clock()

        current_query = (
            select(
                FlightCrew.position,
                Flight.id.label("flight_id"),
                Flight.flight_number,
                Flight.scheduled_departure,
                Flight.scheduled_arrival,
            )
            .join(Flight, FlightCrew.flight_id == Flight.id)
            .where(
                FlightCrew.user_id == user_id,
                Flight.status.in_(ACTIVE_STATUSES),
                Flight.scheduled_departure >= now - timedelta(hours=ops.active_window_hours),
            )
            .order_by(Flight.scheduled_departure, Flight.id)
        )
        if exclude_assignment_id is not None:
            current_query = current_query.where(FlightCrew.id != exclude_assignment_id)
        current_flights = (await self.session.execute(current_query)).all()

        flown_result = await self.session.execute(
            select(Flight.scheduled_departure, Flight.scheduled_arrival)
            .join(FlightCrew, FlightCrew.flight_id == Flight.id)
            .where(
                FlightCrew.user_id == user_id,
                Flight.status.in_(FLOWN_STATUSES),
                Flight.scheduled_departure >= now - timedelta(hours=ops.flight_hours_lookback),
            )
        )
        flight_hours = total_flight_hours(flown_result.all())

        first = current_flights[0] if current_flights else None
        return CrewAvailabilityResponse(
            user_id=user.id,
            name=user.full_name,
            position=first.position if first else CrewPosition.FLIGHT_ATTENDANT,
            is_available=not current_flights,
            current_flight=(
                CurrentFlight(
                    flight_id=first.flight_id,
                    flight_number=first.flight_number,
                    scheduled_departure=first.scheduled_departure,
                    scheduled_arrival=first.scheduled_arrival,
                )
                if first
                else None
            ),
            next_available=next_available_at(
                [row.scheduled_arrival for row in current_flights],
                now,
                ops.rest_hours,
            ),
            total_flight_hours=round(flight_hours, 2),
            rest_hours_required=round(rest_hours_required(flight_hours, ops.rest_hours), 2),
        )

    async def statistics(self, filters: CrewStatisticsFilters) -> CrewStatisticsResponse:
        conditions = []
        if filters.user_id is not None:
            conditions.append(FlightCrew.user_id == filters.user_id)
        if filters.position is not None:
            conditions.append(FlightCrew.position == filters.position)
        if filters.flight_id is not None:
            conditions.append(FlightCrew.flight_id == filters.flight_id)

        totals = (
            await self.session.execute(
                select(
                    func.count(func.distinct(FlightCrew.user_id)),
                    func.count(FlightCrew.id),
                ).where(*conditions)
            )
        ).one()
        crew_members, assignments = int(totals[0] or 0), int(totals[1] or 0)

        position_rows = await self.session.execute(
            select(FlightCrew.position, func.count(FlightCrew.id))
            .where(*conditions)
            .group_by(FlightCrew.position)
        )
        by_position = {position: 0 for position in POSITION_ORDER}
        for position, count in position_rows.all():
            by_position[CrewPosition(position)] = int(count)

        flight_count = func.count(FlightCrew.id).label("flight_count")
        active_rows = await self.session.execute(
            select(
                FlightCrew.user_id,
                User.first_name,
                User.last_name,
                FlightCrew.position,
                flight_count,
            )
            .join(User, FlightCrew.user_id == User.id)
            .where(*conditions)
            .group_by(FlightCrew.user_id, User.first_name, User.last_name, FlightCrew.position)
            .order_by(flight_count.desc(), FlightCrew.user_id)
            .limit(TOP_CREW_LIMIT)
        )
        most_active = [
            ActiveCrewMember(
                user_id=row.user_id,
                name=f"{row.first_name} {row.last_name}",
                position=row.position,
                flight_count=int(row.flight_count),
            )
            for row in active_rows.all()
        ]

        leg_rows = await self.session.execute(
            select(
                FlightCrew.user_id,
                User.first_name,
                User.last_name,
                FlightCrew.position,
                Flight.status,
                Flight.scheduled_arrival,
                Flight.actual_arrival,
            )
            .join(User, FlightCrew.user_id == User.id)
            .join(Flight, FlightCrew.flight_id == Flight.id)
            .where(*conditions)
        )
        tolerance = timedelta(minutes=settings.operations.on_time_tolerance_minutes)

        return CrewStatisticsResponse(
            total_crew_members=crew_members,
            total_flights_served=assignments,
            average_flights_per_crew=(
                round(assignments / crew_members, 2) if crew_members else 0.0
            ),
            crew_by_position=by_position,
            most_active_crew=most_active,
            crew_efficiency=rank_crew_efficiency(leg_rows.all(), tolerance),
        )


__all__ = [
    "FlightCrewService",
    "ACTIVE_STATUSES",
    "FLOWN_STATUSES",
    "LOCKED_STATUSES",
    "POSITION_ORDER",
    "total_flight_hours",
    "rest_hours_required",
    "next_available_at",
    "is_on_time",
    "rank_crew_efficiency",
]
