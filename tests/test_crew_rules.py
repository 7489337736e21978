"""Pure crew scheduling rules."""

from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

from app.models import CrewPosition, FlightStatus
from app.services.flight_crew import (
    is_on_time,
    next_available_at,
    rank_crew_efficiency,
    rest_hours_required,
    total_flight_hours,
)

NOW = datetime(2025, 6, 15, 12, 0)
TOLERANCE = timedelta(minutes=15)


def test_rest_hours_required_is_never_negative():
    assert rest_hours_required(0, 12) == 12
    assert rest_hours_required(4.5, 12) == 7.5
    assert rest_hours_required(12, 12) == 0
    assert rest_hours_required(15, 12) == 0


def test_total_flight_hours_sums_block_time():
    legs = [
        (NOW, NOW + timedelta(hours=1, minutes=30)),
        (NOW + timedelta(hours=3), NOW + timedelta(hours=5)),
    ]

    assert total_flight_hours(legs) == 3.5
    assert total_flight_hours([]) == 0


def test_next_available_uses_last_current_arrival():
    arrivals = [NOW + timedelta(hours=2), NOW + timedelta(hours=8)]

    assert next_available_at(arrivals, NOW, 12) == NOW + timedelta(hours=20)
    assert next_available_at([], NOW, 12) == NOW


def test_on_time_tolerance_is_inclusive():
    assert is_on_time(NOW, NOW + TOLERANCE, TOLERANCE)
    assert not is_on_time(NOW, NOW + TOLERANCE + timedelta(seconds=1), TOLERANCE)
    assert not is_on_time(NOW, None, TOLERANCE)


def _leg(user_id, status, delay_minutes=0, position=CrewPosition.PILOT):
    return SimpleNamespace(
        user_id=user_id,
        first_name="Crew",
        last_name=str(user_id),
        position=position,
        status=status,
        scheduled_arrival=NOW,
        actual_arrival=NOW + timedelta(minutes=delay_minutes),
    )


def test_rank_crew_efficiency_skips_crew_without_completed_legs():
    rows = [
        _leg(1, FlightStatus.ARRIVED, 5),
        _leg(1, FlightStatus.ARRIVED, 40),
        _leg(2, FlightStatus.COMPLETED, 0),
        _leg(3, FlightStatus.SCHEDULED),
    ]

    ranked = rank_crew_efficiency(rows, TOLERANCE)

    assert [(item.user_id, item.on_time_performance) for item in ranked] == [
        (2, 100.0),
        (1, 50.0),
    ]


def test_rank_crew_efficiency_respects_limit():
    rows = [_leg(user_id, FlightStatus.ARRIVED) for user_id in range(1, 15)]

    assert len(rank_crew_efficiency(rows, TOLERANCE, limit=10)) == 10


def test_rest_hours_use_unrounded_flight_time():
    hours = total_flight_hours([(NOW, NOW + timedelta(hours=12) - timedelta(seconds=1))])

    assert hours < 12
    assert rest_hours_required(hours, 12) > 0
