"""Tests for Redis caching implementation."""

import json
from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.redis_client import CacheManager
from app.models.locations import districts, upazilas
from app.services.location_service import LocationService


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    result = cache_manager.get_json("test_key")
    assert result is None
    mock_redis.get.assert_called_once_with("test_key")

    # Test cache hit
    mock_redis.reset_mock()
    mock_redis.get.return_value = '{"name": "Dhaka", "id": 1}'
    result = cache_manager.get_json("test_key")
    assert result == {"name": "Dhaka", "id": 1}
    mock_redis.get.assert_called_once_with("test_key")


def test_cache_manager_set_json():
    """Test CacheManager set_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    test_data = {"name": "Dhaka", "id": 1}

    # Test without TTL
    result = cache_manager.set_json("test_key", test_data)
    assert result is True
    mock_redis.set.assert_called_once()

    # Test with TTL
    mock_redis.reset_mock()
    result = cache_manager.set_json("test_key", test_data, ttl=300)
    assert result is True
    mock_redis.setex.assert_called_once_with("test_key", 300, json.dumps(test_data))


def test_cache_manager_delete():
    """Test CacheManager delete method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    result = cache_manager.delete("test_key")
    assert result is True
    mock_redis.delete.assert_called_once_with("test_key")


def test_cache_manager_fails_open():
    """An unreachable Redis behaves like an empty cache."""
    mock_redis = MagicMock()
    mock_redis.get.side_effect = RedisConnectionError("down")
    mock_redis.set.side_effect = RedisConnectionError("down")
    mock_redis.delete.side_effect = RedisConnectionError("down")
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.get_json("test_key") is None
    assert cache_manager.set_json("test_key", {"a": 1}) is False
    assert cache_manager.delete("test_key") is False


async def _seed_locations(db_session) -> None:
    await db_session.execute(
        districts.insert(),
        [
            {"id": 1, "name": "Dhaka", "bn_name": "ঢাকা"},
            {"id": 2, "name": "Barishal", "bn_name": None},
        ],
    )
    await db_session.execute(
        upazilas.insert(),
        [{"id": 10, "district_id": 1, "name": "Savar", "bn_name": None}],
    )
    await db_session.commit()


@pytest.mark.asyncio
async def test_location_cache_miss_reads_store_and_fills_cache(db_session):
    """Test location lists are loaded from the store and cached."""
    await _seed_locations(db_session)
    mock_redis = MagicMock()
    mock_redis.get.return_value = None

    data = await LocationService(CacheManager(mock_redis)).get_locations(db_session)

    assert [d["name"] for d in data["districts"]] == ["Barishal", "Dhaka"]
    assert data["upazilas"][0]["name"] == "Savar"
    key, ttl, payload = mock_redis.setex.call_args.args
    assert key == LocationService.CACHE_KEY
    assert ttl == 86400
    assert json.loads(payload) == data


@pytest.mark.asyncio
async def test_location_cache_hit_skips_store(db_session):
    """Test a cached location list is returned as is."""
    cached = {"districts": [{"id": 7, "name": "Cached", "bn_name": None}], "upazilas": []}
    mock_redis = MagicMock()
    mock_redis.get.return_value = json.dumps(cached)

    data = await LocationService(CacheManager(mock_redis)).get_locations(db_session)

    assert data == cached
    mock_redis.setex.assert_not_called()


@pytest.mark.asyncio
async def test_location_endpoint(
    client: AsyncClient,
    redis_mock: MagicMock,
    db_session,
):
    """Test the public location endpoint caches its first answer."""
    await _seed_locations(db_session)

    response = await client.get("/api/v1/location")

    assert response.status_code == 200
    data = response.json()
    assert len(data["districts"]) == 2
    assert data["upazilas"][0]["district_id"] == 1
    redis_mock.setex.assert_called_once()


def test_location_invalidate_drops_cached_lists():
    """Test reloading reference data clears the cached lists."""
    mock_redis = MagicMock()

    assert LocationService(CacheManager(mock_redis)).invalidate() is True
    mock_redis.delete.assert_called_once_with(LocationService.CACHE_KEY)

    assert LocationService().invalidate() is False
