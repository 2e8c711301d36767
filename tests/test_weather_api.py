import pytest
from httpx import AsyncClient, ASGITransport

from conftest import encode, observation_message
from tempest.repositories.observation_repository import ObservationRepository
from tempest.services.decoder import decode
from tempest.services.normalizer import normalize


async def store_observations(db_session, *epochs):
    repo = ObservationRepository(db_session)
    for epoch in epochs:
        message = observation_message()
        message["obs"][0][0] = epoch
        await repo.insert(normalize(decode(encode(message))))


@pytest.mark.asyncio
async def test_latest_weather_not_found(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/weather/latest")

    assert r.status_code == 404
    assert r.json()["detail"] == "No weather observations found."


@pytest.mark.asyncio
async def test_latest_weather_returns_newest_observation(test_app, db_session):
    await store_observations(db_session, 1588186800, 1588186860)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/weather/latest")

    assert r.status_code == 200
    data = r.json()
    assert data["time_epoch"] == 1588186860
    assert data["wind_avg"] == 2.6
    assert data["precip_type"] == 0
    assert data["report_interval"] == 1


@pytest.mark.asyncio
async def test_list_weather_respects_limit(test_app, db_session):
    await store_observations(db_session, 100, 200, 300)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/weather", params={"limit": 2})

    assert r.status_code == 200
    assert [item["time_epoch"] for item in r.json()] == [300, 200]


@pytest.mark.asyncio
async def test_post_weather_stores_observation(test_app, db_session):
    transport = ASGITransport(app=test_app)
    payload = normalize(decode(encode(observation_message()))).model_dump(mode="json")
    payload["precip_type"] = 1

    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        created = await ac.post("/weather", json=payload)
        latest = await ac.get("/weather/latest")

    assert created.status_code == 201
    assert created.json() == payload
    assert latest.json() == payload


@pytest.mark.asyncio
async def test_post_weather_rejects_unknown_precipitation_type(test_app):
    transport = ASGITransport(app=test_app)
    payload = normalize(decode(encode(observation_message()))).model_dump(mode="json")
    payload["precip_type"] = 4

    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.post("/weather", json=payload)
        latest = await ac.get("/weather/latest")

    assert r.status_code == 422
    assert r.json()["detail"][0]["loc"] == ["body", "precip_type"]
    assert latest.status_code == 404
