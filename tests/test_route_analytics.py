"""Pure route analytics helpers."""

from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

from app.models import FlightStatus
from app.services.routes import (
    busiest_weekday,
    load_factor,
    most_popular_month,
    on_time_performance,
    popularity_score,
)

TOLERANCE = timedelta(minutes=15)


def test_popularity_score_weights_flights_and_passengers():
    assert popularity_score(10, 100, 0.4, 0.6) == 64.0
    assert popularity_score(0, 0, 0.4, 0.6) == 0.0


def test_load_factor():
    assert load_factor(30, 2, 150) == 10.0
    assert load_factor(1, 3, 150) == 0.22
    assert load_factor(5, 0, 150) == 0.0


def _flight(status, delay_minutes):
    scheduled = datetime(2025, 1, 6, 9, 0)
    actual = None if delay_minutes is None else scheduled + timedelta(minutes=delay_minutes)
    return SimpleNamespace(
        status=status,
        scheduled_departure=scheduled,
        actual_departure=actual,
    )


def test_on_time_performance_counts_completed_flights_only():
    flights = [
        _flight(FlightStatus.ARRIVED, 0),
        _flight(FlightStatus.ARRIVED, 15),
        _flight(FlightStatus.COMPLETED, 16),
        _flight(FlightStatus.ARRIVED, None),
        _flight(FlightStatus.SCHEDULED, 0),
        _flight(FlightStatus.CANCELLED, None),
    ]

    assert on_time_performance(flights, TOLERANCE) == 50.0


def test_on_time_performance_without_completed_flights():
    assert on_time_performance([_flight(FlightStatus.SCHEDULED, 0)], TOLERANCE) == 0.0


def test_most_popular_month_breaks_ties_in_calendar_order():
    departures = [datetime(2025, 2, 1), datetime(2025, 1, 20)]

    assert most_popular_month(departures) == "January"
    assert most_popular_month(departures + [datetime(2024, 2, 3)]) == "February"
    assert most_popular_month([]) is None


def test_busiest_weekday_breaks_ties_in_calendar_order():
    sunday, tuesday = datetime(2025, 6, 15), datetime(2025, 6, 10)

    assert busiest_weekday([sunday, tuesday]) == "Tuesday"
    assert busiest_weekday([sunday, sunday, tuesday]) == "Sunday"
    assert busiest_weekday([]) is None
