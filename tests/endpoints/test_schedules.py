from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from grelibre.schemas.schedules import (
    Direction,
    DirectionStop,
    Passage,
    TransitLine,
    TransitLines,
)
from grelibre.services.planner_service import PlannerDataError, PlannerNetworkError
from grelibre.services.schedule_service import schedule_service


def test_list_lines(client: TestClient):
    lines = TransitLines(
        trams=[
            TransitLine(id="SEM:A", unique_id="SEM:A-A", short_name="A", color="3376B8", type=0)
        ],
        buses=[TransitLine(id="SEM:C1", unique_id="SEM:C1-C1", short_name="C1")],
    )

    with patch(
        "grelibre.services.schedule_service.schedule_service.list_lines",
        new_callable=AsyncMock,
        return_value=lines,
    ):
        response = client.get("/api/v1/schedules/lines")

    assert response.status_code == 200
    data = response.json()
    assert data["trams"][0]["color"] == "3376B8"
    assert data["buses"][0]["short_name"] == "C1"


def test_list_lines_unavailable(client: TestClient):
    with patch(
        "grelibre.services.schedule_service.schedule_service.list_lines",
        new_callable=AsyncMock,
        side_effect=PlannerNetworkError("Request timed out"),
    ):
        response = client.get("/api/v1/schedules/lines")

    assert response.status_code == 503


def test_list_lines_malformed_index(client: TestClient):
    with patch.object(
        schedule_service,
        "_get_json",
        new_callable=AsyncMock,
        return_value=[{"id": None, "shortName": "A"}],
    ):
        response = client.get("/api/v1/schedules/lines")

    assert response.status_code == 502


def test_line_directions(client: TestClient):
    directions = [
        Direction(
            index=0,
            name="La Poya → Denis Papin",
            stops=[DirectionStop(stop_id="SEM:GENLAPOYA", stop_name="La Poya")],
        )
    ]

    with patch(
        "grelibre.services.schedule_service.schedule_service.line_directions",
        new_callable=AsyncMock,
        return_value=directions,
    ):
        response = client.get("/api/v1/schedules/lines/SEM:A/directions")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "La Poya → Denis Papin"


def test_line_directions_not_found(client: TestClient):
    with patch(
        "grelibre.services.schedule_service.schedule_service.line_directions",
        new_callable=AsyncMock,
        return_value=[],
    ):
        response = client.get("/api/v1/schedules/lines/SEM:ZZ/directions")

    assert response.status_code == 404


def test_stop_passages(client: TestClient):
    arrival = datetime(2025, 3, 14, 7, 7, tzinfo=timezone.utc)
    passages = [
        Passage(
            scheduled_arrival=arrival,
            realtime_arrival=arrival,
            pattern_desc="A to Denis Papin",
            trip_id="SEM:A2",
            wait="7 min",
        )
    ]

    with patch(
        "grelibre.services.schedule_service.schedule_service.stop_passages",
        new_callable=AsyncMock,
        return_value=passages,
    ) as mock_passages:
        response = client.get(
            "/api/v1/schedules/stops/SEM:GENGARE", params={"route_id": "SEM:A"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["stop_id"] == "SEM:GENGARE"
    assert data["route_id"] == "SEM:A"
    assert data["passages"][0]["wait"] == "7 min"
    mock_passages.assert_awaited_once_with("SEM:GENGARE", route_id="SEM:A")


def test_stop_passages_bad_payload(client: TestClient):
    with patch(
        "grelibre.services.schedule_service.schedule_service.stop_passages",
        new_callable=AsyncMock,
        side_effect=PlannerDataError("Stop times response is not a list"),
    ):
        response = client.get("/api/v1/schedules/stops/SEM:NOPE")

    assert response.status_code == 502
