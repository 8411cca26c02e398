from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "GreLibre"
    PROJECT_DESCRIPTION: str = "Itineraries and schedules for the Grenoble transit network"
    VERSION: str = "0.3.0"
    API_V1_STR: str = "/api/v1"

    LOG_LEVEL: str = "INFO"

    # Local time used for planner requests and displayed clock times
    TIMEZONE: str = "Europe/Paris"

    # Trip planner (OpenTripPlanner hosted by the SMMAG)
    PLANNER_API_URL: str = "https://data.mobilites-m.fr/api"
    PLANNER_ORIGIN_HEADER: str = "GreLibre"
    PLANNER_TIMEOUT: float = 30.0

    # Geocoding (Mapbox)
    GEOCODING_API_URL: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    MAPBOX_ACCESS_TOKEN: str = ""
    GEOCODING_CITY: str = "Grenoble"
    CITY_CENTER_LON: float = 5.724524
    CITY_CENTER_LAT: float = 45.188529

    # GTFS routes.txt used to enrich lines with colors and types
    GTFS_ROUTES_PATH: str = "data/txt/routes.txt"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
