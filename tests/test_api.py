import datetime as dt
import unittest
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from runcast.data_sources import CallableForecastDataSource
from runcast.data_sources.open_meteo_client import CurrentWeather, ForecastPayload, HourlyForecast
from runcast.domain import Location, PrecipitationUnit
from runcast.errors import ForecastUnavailableError, GeocodingUnavailableError
from runcast.main import app as fastapi_app

TZ = ZoneInfo("Europe/Amsterdam")


def _payload() -> ForecastPayload:
    start = dt.datetime(2024, 7, 1, 0, 0, tzinfo=TZ)
    return ForecastPayload(
        latitude=52.37,
        longitude=4.9,
        timezone="Europe/Amsterdam",
        current=CurrentWeather(
            time=dt.datetime(2024, 7, 1, 14, 0, tzinfo=TZ),
            temperature=27.0,
            apparent_temperature=28.5,
            relative_humidity=60.0,
            is_day=True,
            weather_code=1,
            wind_speed=12.0,
            wind_direction=90.0,
        ),
        hourly=HourlyForecast(
            time=[start + dt.timedelta(hours=i) for i in range(48)],
            temperature=[20.0 + (i % 24) * 0.3 for i in range(48)],
            weather_code=[1] * 48,
            dew_point=[19.0] * 48,
            precipitation=[0.0] * 48,
            precipitation_unit=PrecipitationUnit.AMOUNT_MM,
        ),
    )


class TestApi(unittest.TestCase):
    def setUp(self):
        import runcast.api as api_mod
        from runcast.config import settings

        self.api_mod = api_mod
        self.settings = settings
        self._orig_data_source = api_mod.DATA_SOURCE
        self._orig_api_key = settings.api_key
        settings.api_key = None

        self.forecast_error = None
        self.geocode_error = None
        self.geocode_result = Location(name="Utrecht", latitude=52.09, longitude=5.12)
        self.forecast_calls = []

        def forecast(lat, lon, **kwargs):
            self.forecast_calls.append((lat, lon))
            if self.forecast_error:
                raise self.forecast_error
            return _payload()

        def geocode(name, **kwargs):
            if self.geocode_error:
                raise self.geocode_error
            return self.geocode_result

        api_mod.DATA_SOURCE = CallableForecastDataSource(
            forecast=forecast,
            geocode=geocode,
            reverse=lambda lat, lon: "Zandvoort",
        )
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        self.api_mod.DATA_SOURCE = self._orig_data_source
        self.settings.api_key = self._orig_api_key

    def test_advisory_for_city(self):
        resp = self.client.get("/v1/advisory", params={"city": "Utrecht"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["location"]["name"], "Utrecht")
        self.assertEqual(self.forecast_calls, [(52.09, 5.12)])
        self.assertEqual(body["wind"]["force"], 3)
        self.assertEqual(body["wind"]["compass"], "E")
        self.assertEqual(body["recommendation"]["clothing_tier"], "warm")
        hazard_codes = [h["code"] for h in body["recommendation"]["hazards"]]
        self.assertEqual(hazard_codes, ["heat", "humidity"])
        self.assertEqual(body["hourly"]["start_index"], 14)
        self.assertEqual(len(body["hourly"]["entries"]), 24)

    def test_advisory_for_coordinates_is_reverse_named(self):
        resp = self.client.get("/v1/advisory", params={"latitude": 52.37, "longitude": 4.53})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["location"]["name"], "Zandvoort")

    def test_advisory_without_location_uses_default(self):
        resp = self.client.get("/v1/advisory")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["location"]["name"], self.settings.default_city)

    def test_only_latitude_is_rejected(self):
        resp = self.client.get("/v1/advisory", params={"latitude": 52.0})
        self.assertEqual(resp.status_code, 400)

    def test_city_not_found(self):
        self.geocode_result = None
        resp = self.client.get("/v1/advisory", params={"city": "Atlantis"})
        self.assertEqual(resp.status_code, 404)
        self.assertIn("Atlantis", resp.json()["detail"])

    def test_forecast_failure_maps_to_bad_gateway(self):
        self.forecast_error = ForecastUnavailableError("provider down")
        resp = self.client.get("/v1/advisory", params={"city": "Utrecht"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], self.api_mod.FORECAST_UNAVAILABLE_DETAIL)

    def test_geocoding_failure_maps_to_bad_gateway(self):
        self.geocode_error = GeocodingUnavailableError("geocoder down")
        resp = self.client.get("/v1/locations/search", params={"name": "Utrecht"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], self.api_mod.GEOCODING_UNAVAILABLE_DETAIL)

    def test_location_search(self):
        resp = self.client.get("/v1/locations/search", params={"name": "Utrecht"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["location"]["latitude"], 52.09)

    def test_wind_force_scale(self):
        resp = self.client.get("/v1/scales/wind-force", params={"speed_kmh": 55})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["force"], 7)

    def test_comfort_scale(self):
        resp = self.client.get("/v1/scales/comfort", params={"temperature": 30, "dew_point": 20})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertAlmostEqual(body["comfort_index_f"], 154.0)
        self.assertEqual(body["rating"]["tier"], 7)

    def test_comfort_scale_rejects_nan(self):
        resp = self.client.get("/v1/scales/comfort", params={"temperature": 20, "dew_point": "nan"})
        self.assertEqual(resp.status_code, 422)

    def test_api_key_enforced_when_configured(self):
        self.settings.api_key = "sekrit"
        resp = self.client.get("/v1/scales/wind-force", params={"speed_kmh": 10})
        self.assertEqual(resp.status_code, 401)

        resp = self.client.get("/v1/scales/wind-force", params={"speed_kmh": 10}, headers={"X-API-Key": "wrong"})
        self.assertEqual(resp.status_code, 401)

        resp = self.client.get("/v1/scales/wind-force", params={"speed_kmh": 10}, headers={"X-API-Key": "sekrit"})
        self.assertEqual(resp.status_code, 200)

    def test_healthz_is_open_with_api_key(self):
        self.settings.api_key = "sekrit"
        self.assertEqual(self.client.get("/healthz").status_code, 200)


class _StubResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self._payload


class _StubSession:
    def __init__(self, payload):
        self.payload = payload

    def get(self, url, **kwargs):
        return _StubResponse(self.payload)


def _provider_json(hours: int = 48) -> dict:
    times = [
        (dt.datetime(2024, 7, 1, 0, 0) + dt.timedelta(hours=i)).isoformat(timespec="minutes")
        for i in range(hours)
    ]
    return {
        "latitude": 52.37,
        "longitude": 4.9,
        "timezone": "Europe/Amsterdam",
        "utc_offset_seconds": 7200,
        "current": {
            "time": "2024-07-01T14:00",
            "temperature_2m": 18.0,
            "apparent_temperature": 17.5,
            "relative_humidity_2m": 55,
            "is_day": 1,
            "weather_code": 2,
            "wind_speed_10m": 9.0,
            "wind_direction_10m": 200,
        },
        "hourly": {
            "time": times,
            "temperature_2m": [15.0] * hours,
            "weather_code": [2] * hours,
            "dew_point_2m": [10.0] * hours,
            "precipitation": [0.0] * hours,
        },
    }


class TestApiWithProviderPayload(unittest.TestCase):
    """Runs the real Open-Meteo client against canned provider JSON."""

    def setUp(self):
        import runcast.api as api_mod
        from runcast.config import settings
        from runcast.data_sources import build_data_source, open_meteo_client

        self.api_mod = api_mod
        self.client_mod = open_meteo_client
        self.settings = settings
        self._orig_data_source = api_mod.DATA_SOURCE
        self._orig_session = open_meteo_client.session
        self._orig_api_key = settings.api_key
        settings.api_key = None
        api_mod.DATA_SOURCE = build_data_source(settings)
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        self.api_mod.DATA_SOURCE = self._orig_data_source
        self.client_mod.session = self._orig_session
        self.settings.api_key = self._orig_api_key

    def _advisory_with(self, payload):
        self.client_mod.session = _StubSession(payload)
        return self.client.get("/v1/advisory")

    def test_well_formed_payload(self):
        resp = self._advisory_with(_provider_json())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["hourly"]["start_index"], 14)

    def test_short_hourly_array_is_bad_gateway(self):
        payload = _provider_json()
        payload["hourly"]["dew_point_2m"] = payload["hourly"]["dew_point_2m"][:47]
        resp = self._advisory_with(payload)
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], self.api_mod.FORECAST_UNAVAILABLE_DETAIL)

    def test_null_current_temperature_is_bad_gateway(self):
        payload = _provider_json()
        payload["current"]["temperature_2m"] = None
        resp = self._advisory_with(payload)
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], self.api_mod.FORECAST_UNAVAILABLE_DETAIL)


if __name__ == "__main__":
    unittest.main()
