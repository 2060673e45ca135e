"""Tests for the Home Assistant sensor client.

The requests.Session is replaced with a MagicMock; no real network calls.
"""
from unittest.mock import MagicMock

import pytest
import requests

from healthnotes.config import Settings
from healthnotes.hass.client import NoNewDataError, SensorClient, SensorFetchError
from healthnotes.models.readings import SensorData


def _response(status_code: int, body=None, json_error: bool = False) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return SensorClient("http://ha.local:8123", "secret", session=session)


class TestSensorUrl:
    def test_adds_separator_and_prefix(self):
        client = SensorClient("http://ha.local:8123", "t", "health_connect")
        assert client.sensor_url() == "http://ha.local:8123/api/states/sensor.health_connect"

    def test_keeps_existing_separator_and_prefix(self):
        client = SensorClient("http://ha.local:8123/", "t", "sensor.phone")
        assert client.sensor_url() == "http://ha.local:8123/api/states/sensor.phone"

    def test_from_settings(self):
        settings = Settings(_env_file=None, instance_uri="https://ha", token="abc", sensor="hc", request_timeout=5)
        client = SensorClient.from_settings(settings)
        assert client.sensor_url() == "https://ha/api/states/sensor.hc"
        assert client.timeout == 5


class TestFetchSnapshot:
    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, client, session):
        session.get.return_value = _response(200, {"state": "ok", "attributes": {}})
        await client.fetch_snapshot()
        _, kwargs = session.get.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 30.0
        assert session.get.call_args[0][0] == "http://ha.local:8123/api/states/sensor.health_connect"

    @pytest.mark.asyncio
    async def test_200_parses_attributes(self, client, session, snapshot_attributes):
        session.get.return_value = _response(200, {"state": "ok", "attributes": snapshot_attributes})
        data = await client.fetch_snapshot()
        assert isinstance(data, SensorData)
        assert data.steps["2024-01-20"]["count"] == 8123

    @pytest.mark.asyncio
    async def test_null_attributes_is_empty_snapshot(self, client, session):
        session.get.return_value = _response(200, {"state": "ok", "attributes": None})
        data = await client.fetch_snapshot()
        assert data.calories is None

    @pytest.mark.asyncio
    async def test_404_is_no_new_data(self, client, session):
        session.get.return_value = _response(404)
        with pytest.raises(NoNewDataError):
            await client.fetch_snapshot()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 500, 502])
    async def test_other_status_is_fetch_error(self, client, session, status):
        session.get.return_value = _response(status)
        with pytest.raises(SensorFetchError):
            await client.fetch_snapshot()

    @pytest.mark.asyncio
    async def test_network_error_is_fetch_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(SensorFetchError):
            await client.fetch_snapshot()

    @pytest.mark.asyncio
    async def test_invalid_json_is_fetch_error(self, client, session):
        session.get.return_value = _response(200, json_error=True)
        with pytest.raises(SensorFetchError):
            await client.fetch_snapshot()

    @pytest.mark.asyncio
    async def test_non_mapping_attributes_is_fetch_error(self, client, session):
        session.get.return_value = _response(200, {"attributes": ["steps"]})
        with pytest.raises(SensorFetchError):
            await client.fetch_snapshot()

    @pytest.mark.asyncio
    async def test_malformed_day_is_left_for_projection(self, client, session):
        session.get.return_value = _response(200, {"attributes": {
            "steps": {"2024-01-20": {"count": 5}},
            "calories": {"2024-01-19": None, "2024-01-20": {"energy": 10}},
        }})
        data = await client.fetch_snapshot()
        assert data.steps == {"2024-01-20": {"count": 5}}
        assert data.calories["2024-01-19"] is None
