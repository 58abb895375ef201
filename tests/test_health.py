"""Liveness endpoints."""


def test_root(client):
    assert client.get("/").json() == {"message": "SalonX API is running"}


def test_health_checks_database(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"]["status"] == "healthy"
    assert "uptime" in body


def test_redis_health_without_redis(client):
    body = client.get("/health/redis").json()
    assert body == {"status": "unavailable", "redis": {"connected": False, "fallback": "memory"}}


def test_security_headers_are_set(client):
    response = client.get("/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_malformed_json_is_400(salon_client):
    response = salon_client.post(
        "/api/customers", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid JSON body"
