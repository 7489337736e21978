"""Route management endpoints and route analytics."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.models import Flight, FlightStatus, Passenger, Route, Ticket, TicketStatus
from app.services import RouteService


def _new_route(world, **overrides):
    body = {
        "name": "Oslo - Stockholm",
        "departure_airport_id": world.osl,
        "arrival_airport_id": world.arn,
        "distance": 416,
        "duration": "1h5m",
        "base_price": "149.90",
    }
    body.update(overrides)
    return body


def test_create_route_embeds_airport_summaries(client, world):
    response = client.post("/routes", json=_new_route(world))

    assert response.status_code == 201
    payload = response.json()
    assert payload["status"] == "active"
    assert payload["base_price"] == 149.9
    assert payload["departure_airport"] == {
        "airport_id": world.osl,
        "iata_code": "OSL",
        "airport_name": "Oslo Gardermoen",
        "city_name": "Oslo",
        "country": "Norway",
    }
    assert payload["arrival_airport"]["iata_code"] == "ARN"


def test_routes_are_directional(client, world):
    assert client.post("/routes", json=_new_route(world)).status_code == 201

    reverse = client.post(
        "/routes",
        json=_new_route(
            world,
            name="Stockholm - Oslo",
            departure_airport_id=world.arn,
            arrival_airport_id=world.osl,
        ),
    )
    assert reverse.status_code == 201

    duplicate = client.post("/routes", json=_new_route(world, name="Again"))
    assert duplicate.status_code == 409
    assert duplicate.json() == {"detail": "Route between these airports already exists"}


def test_duplicate_pair_race_is_caught_by_unique_constraint(
    client, world, run_db, monkeypatch
):
    async def pair_free(self, *args, **kwargs):
        return None

    monkeypatch.setattr(RouteService, "_ensure_pair_is_free", pair_free)

    response = client.post(
        "/routes",
        json=_new_route(
            world,
            name="Oslo - Bergen again",
            departure_airport_id=world.osl,
            arrival_airport_id=world.bgo,
        ),
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Route between these airports already exists"}

    async def _pair_count(session):
        result = await session.execute(
            select(func.count(Route.id)).where(
                Route.departure_airport_id == world.osl,
                Route.arrival_airport_id == world.bgo,
            )
        )
        return result.scalar_one()

    assert run_db(_pair_count) == 1


def test_route_to_same_airport_conflicts(client, world):
    response = client.post(
        "/routes",
        json=_new_route(world, arrival_airport_id=world.osl),
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Cannot create route from airport to itself"}


def test_route_with_unknown_airport_is_not_found(client, world):
    response = client.post("/routes", json=_new_route(world, arrival_airport_id=999))

    assert response.status_code == 404
    assert response.json() == {"detail": "One or both airports not found"}


def test_get_missing_route(client, world):
    response = client.get("/routes/999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Route not found"}


def test_list_routes_filters_by_departure_code(client, world):
    client.post("/routes", json=_new_route(world))

    response = client.get("/routes", params={"departure_airport": "osl"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 2
    assert [item["name"] for item in payload["data"]] == ["Oslo - Bergen", "Oslo - Stockholm"]
    assert all(item["departure_airport"]["iata_code"] == "OSL" for item in payload["data"])


def test_list_routes_filters_by_distance(client, world):
    client.post("/routes", json=_new_route(world))

    response = client.get("/routes", params={"min_distance": 400})

    assert [item["name"] for item in response.json()["data"]] == ["Oslo - Stockholm"]


def test_list_routes_pagination_envelope(client, world):
    response = client.get("/routes", params={"page": 2, "limit": 1})

    payload = response.json()
    assert payload["page"] == 2
    assert payload["limit"] == 1
    assert payload["total"] == 2
    assert payload["totalPages"] == 2
    assert payload["hasNext"] is False
    assert payload["hasPrev"] is True
    assert [item["name"] for item in payload["data"]] == ["Oslo - Bergen"]


def test_list_routes_rejects_oversized_page(client, world):
    assert client.get("/routes", params={"limit": 101}).status_code == 422


def test_routes_by_departure_and_arrival_airport(client, world):
    departures = client.get(f"/routes/departure/{world.osl}").json()
    arrivals = client.get(f"/routes/arrival/{world.osl}").json()

    assert [item["id"] for item in departures] == [world.osl_bgo]
    assert [item["id"] for item in arrivals] == [world.bgo_osl]
    assert client.get(f"/routes/departure/{world.arn}").json() == []


def test_partial_update_keeps_untouched_fields(client, world):
    before = client.get(f"/routes/{world.osl_bgo}").json()

    response = client.patch(
        f"/routes/{world.osl_bgo}",
        json={"name": "Oslo - Bergen Express", "description": None},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "Oslo - Bergen Express"
    assert payload["distance"] == 305
    assert payload["base_price"] == 120.0
    assert payload["arrival_airport"]["iata_code"] == "BGO"
    assert payload["updated_at"] >= before["updated_at"]


def test_update_can_move_route_to_new_airport(client, world):
    response = client.patch(f"/routes/{world.osl_bgo}", json={"arrival_airport_id": world.arn})

    assert response.status_code == 200
    assert response.json()["arrival_airport"]["iata_code"] == "ARN"


def test_update_into_existing_pair_conflicts(client, world):
    response = client.patch(
        f"/routes/{world.osl_bgo}",
        json={"departure_airport_id": world.bgo, "arrival_airport_id": world.osl},
    )

    assert response.status_code == 409


def test_route_used_by_flights_cannot_be_deleted(client, world):
    response = client.delete(f"/routes/{world.osl_bgo}")

    assert response.status_code == 409
    assert response.json() == {"detail": "Cannot delete route that is used in flights"}
    assert client.get(f"/routes/{world.osl_bgo}").status_code == 200


def test_unused_route_can_be_deleted(client, world):
    created = client.post("/routes", json=_new_route(world)).json()

    response = client.delete(f"/routes/{created['id']}")

    assert response.status_code == 204
    assert client.get(f"/routes/{created['id']}").status_code == 404


@pytest.fixture
def stockholm_route(world, run_db):
    """ARN -> OSL with two arrived flights, three sold seats and one cancellation."""

    async def _build(session):
        route = Route(
            name="Stockholm - Oslo",
            departure_airport_id=world.arn,
            arrival_airport_id=world.osl,
            distance=416,
        )
        session.add(route)
        await session.flush()

        monday = datetime(2025, 3, 3, 8, 0)
        wednesday = datetime(2025, 3, 5, 8, 0)
        on_time = Flight(
            route_id=route.id,
            flight_number="AO300",
            scheduled_departure=monday,
            scheduled_arrival=monday + timedelta(hours=1),
            actual_departure=monday + timedelta(minutes=10),
            actual_arrival=monday + timedelta(hours=1, minutes=10),
            status=FlightStatus.ARRIVED,
        )
        late = Flight(
            route_id=route.id,
            flight_number="AO302",
            scheduled_departure=wednesday,
            scheduled_arrival=wednesday + timedelta(hours=1),
            actual_departure=wednesday + timedelta(minutes=30),
            actual_arrival=wednesday + timedelta(hours=1, minutes=30),
            status=FlightStatus.COMPLETED,
        )
        passenger = Passenger(first_name="Nils", last_name="Holgersson")
        session.add_all([on_time, late, passenger])
        await session.flush()

        session.add_all(
            [
                Ticket(flight_id=on_time.id, passenger_id=passenger.id, price=Decimal("100.00")),
                Ticket(flight_id=on_time.id, passenger_id=passenger.id, price=Decimal("100.00")),
                Ticket(flight_id=late.id, passenger_id=passenger.id, price=Decimal("100.00")),
                Ticket(
                    flight_id=late.id,
                    passenger_id=passenger.id,
                    price=Decimal("999.00"),
                    status=TicketStatus.CANCELLED,
                ),
            ]
        )
        await session.commit()
        return route.id

    return run_db(_build)


def test_route_statistics(client, world, stockholm_route):
    response = client.get("/routes/statistics")

    assert response.status_code == 200
    stats = response.json()
    assert [item["total_flights"] for item in stats] == sorted(
        (item["total_flights"] for item in stats), reverse=True
    )

    arn_osl = next(item for item in stats if item["route_id"] == stockholm_route)
    assert arn_osl["departure_airport"] == "ARN"
    assert arn_osl["arrival_airport"] == "OSL"
    assert arn_osl["total_flights"] == 2
    assert arn_osl["total_passengers"] == 3
    assert arn_osl["average_load_factor"] == 1.0
    assert arn_osl["average_price"] == 100.0
    assert arn_osl["total_revenue"] == 300.0
    assert arn_osl["on_time_performance"] == 50.0
    assert arn_osl["most_popular_month"] == "March"
    assert arn_osl["busiest_day_of_week"] == "Monday"


def test_route_statistics_without_flights(client, world):
    client.post("/routes", json=_new_route(world))

    stats = client.get("/routes/statistics", params={"arrival_country": "Sweden"}).json()

    assert len(stats) == 1
    assert stats[0]["total_flights"] == 0
    assert stats[0]["average_load_factor"] == 0.0
    assert stats[0]["on_time_performance"] == 0.0
    assert stats[0]["most_popular_month"] is None


def test_route_statistics_filtered_by_country(client, world, stockholm_route):
    stats = client.get("/routes/statistics", params={"departure_country": "Sweden"}).json()

    assert [item["route_id"] for item in stats] == [stockholm_route]


def test_popular_routes_ranked_by_score(client, world, stockholm_route):
    response = client.get("/routes/popular", params={"limit": 2})

    assert response.status_code == 200
    ranked = response.json()
    assert len(ranked) == 2
    assert ranked[0]["route_id"] == stockholm_route
    assert ranked[0]["popularity_score"] == 2.6
    assert ranked[0]["passenger_count"] == 3
    assert ranked[1]["route_id"] == world.osl_bgo
    assert ranked[1]["popularity_score"] == 0.8
