import pytest
from fastapi.testclient import TestClient

from grelibre.main import app

# 2025-03-14T09:00:00Z
START_MS = 1741942800000


@pytest.fixture(scope="function")
def client():
    """Provides a FastAPI test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sample_plan_response():
    """Sample OTP plan response with a walk leg and a tram leg."""
    return {
        "requestParameters": {"mode": "TRANSIT,WALK"},
        "plan": {
            "date": START_MS,
            "from": {"name": "Origin", "lat": 45.191458, "lon": 5.714722},
            "to": {"name": "Destination", "lat": 45.19262, "lon": 5.76829},
            "itineraries": [
                {
                    "duration": 1500,
                    "startTime": START_MS,
                    "endTime": START_MS + 1500 * 1000,
                    "walkTime": 480,
                    "walkDistance": 640.2,
                    "transfers": 0,
                    "legs": [
                        {
                            "mode": "WALK",
                            "startTime": START_MS,
                            "endTime": START_MS + 480 * 1000,
                            "duration": 480.0,
                            "distance": 640.2,
                            "transitLeg": False,
                            "from": {"name": "Origin", "lat": 45.191458, "lon": 5.714722},
                            "to": {
                                "name": "Gares",
                                "stopId": "SEM:GENGARES",
                                "lat": 45.19146,
                                "lon": 5.71472,
                            },
                            "legGeometry": {"points": "_p~iF~ps|U_ulLnnqC", "length": 2},
                        },
                        {
                            "mode": "TRAM",
                            "startTime": START_MS + 480 * 1000,
                            "endTime": START_MS + 1500 * 1000,
                            "duration": 1020.0,
                            "distance": 4300.5,
                            "transitLeg": True,
                            "routeShortName": "B",
                            "routeLongName": "Grenoble Presqu'île / Gières Plaine des Sports",
                            "from": {
                                "name": "Gares",
                                "stopId": "SEM:GENGARES",
                                "lat": 45.19146,
                                "lon": 5.71472,
                                "departure": START_MS + 480 * 1000,
                            },
                            "to": {
                                "name": "Bibliothèques Universitaires",
                                "stopId": "SEM:GENBIBUNI",
                                "lat": 45.19262,
                                "lon": 5.76829,
                                "arrival": START_MS + 1500 * 1000,
                            },
                            "intermediateStops": [
                                {
                                    "name": "Victor Hugo",
                                    "lat": 45.1893,
                                    "lon": 5.7253,
                                    "arrival": START_MS + 780 * 1000,
                                    "departure": START_MS + 800 * 1000,
                                },
                                {
                                    "name": "Notre-Dame Musée",
                                    "lat": 45.1923,
                                    "lon": 5.7322,
                                    "arrival": START_MS + 960 * 1000,
                                    "departure": START_MS + 980 * 1000,
                                },
                            ],
                            "legGeometry": {"points": "_mqNvxq`@", "length": 1},
                        },
                    ],
                }
            ],
        },
    }
