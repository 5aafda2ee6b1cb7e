"""
Integration tests for health and monitoring routes.
"""


class TestHealthRoutes:
    """Tests for health, root and metrics endpoints."""

    async def test_liveness(self, client):
        """Test liveness endpoint."""
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_health_with_database(self, client):
        """Test health check reports database status."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"]["status"] == "healthy"

    async def test_health_database_down(self, client, test_db):
        """Test disconnected database reports 503."""
        await test_db.disconnect()

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    async def test_root(self, client):
        """Test root endpoint."""
        response = await client.get("/")

        assert response.json()["service"] == "Huissier"

    async def test_metrics(self, client):
        """Test Prometheus metrics are exposed."""
        await client.get("/health/live")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "huissier_http_requests_total" in response.text
        assert "huissier_auth_attempts_total" in response.text

    async def test_metrics_use_route_template(self, client):
        """Test unknown paths share one metrics label."""
        await client.get("/no/such/path-1")
        await client.get("/no/such/path-2")

        response = await client.get("/metrics")

        assert 'endpoint="unmatched"' in response.text
        assert "path-1" not in response.text


class TestRequestId:
    """Tests for request id propagation."""

    async def test_generated_when_absent(self, client):
        """Test a request id is generated."""
        response = await client.get("/health/live")

        assert len(response.headers["X-Request-ID"]) == 36

    async def test_client_id_echoed(self, client):
        """Test a well-formed client request id is kept."""
        response = await client.get(
            "/health/live", headers={"X-Request-ID": "attempt-42"}
        )

        assert response.headers["X-Request-ID"] == "attempt-42"

    async def test_unsafe_client_id_replaced(self, client):
        """Test request ids with unsafe characters are replaced."""
        response = await client.get(
            "/health/live", headers={"X-Request-ID": "bad id\twith spaces"}
        )

        assert response.headers["X-Request-ID"] != "bad id\twith spaces"
