import pytest


@pytest.mark.asyncio
async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_metrics_reports_host_and_database(client):
    res = await client.get("/api/metrics")
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "Online"
    assert data["database"] == "Connected"
    for key in ("cpu", "ram", "disk", "uptime", "db_latency"):
        assert key in data


@pytest.mark.asyncio
async def test_health_without_smtp(client):
    res = await client.get("/api/metrics/health")
    assert res.status_code == 200
    assert res.json()["smtp_server"] == "Not Configured"


@pytest.mark.asyncio
async def test_redis_stats_disabled_without_redis(client, admin):
    res = await client.get("/api/metrics/redis-stats", headers=admin["headers"])
    assert res.status_code == 200
    assert res.json()["status"] == "Disabled"


@pytest.mark.asyncio
async def test_redis_stats_admin_only(client, male_warden):
    res = await client.get("/api/metrics/redis-stats", headers=male_warden["headers"])
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_clear_rate_limits_needs_redis(client, admin):
    res = await client.post("/api/metrics/clear-rate-limits", headers=admin["headers"])
    assert res.status_code == 400
    assert res.json()["detail"] == "Redis not configured."


@pytest.mark.asyncio
async def test_clear_rate_limits_admin_only(client, male_warden):
    res = await client.post("/api/metrics/clear-rate-limits", headers=male_warden["headers"])
    assert res.status_code == 403
