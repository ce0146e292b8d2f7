"""Tests for application wiring and shared helpers."""

import pytest

from schedule_platform.errors import ValidationError
from schedule_platform.utils import parse_date, positive_int, total_pages


class TestApp:
    def test_health_check(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "Server is running"}

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_cors_headers(self, client):
        response = client.get("/", headers={"Origin": "http://example.com"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_unhandled_error_uses_envelope_and_cors(self, app, client):
        async def boom():
            raise RuntimeError("boom")

        app.add_api_route("/boom", boom)

        response = client.get("/boom", headers={"Origin": "http://example.com"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "boom"}
        assert response.headers["access-control-allow-origin"] == "*"


class TestParseDate:
    def test_valid(self):
        assert parse_date("2024-02-29").isoformat() == "2024-02-29"

    @pytest.mark.parametrize("value", [None, "", "2024-13-01", "2023-02-29", "yesterday"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError) as excinfo:
            parse_date(value)
        assert excinfo.value.status_code == 400


class TestPaging:
    @pytest.mark.parametrize(
        "value,expected",
        [(None, 1), ("3", 3), ("0", 1), ("-2", 1), ("abc", 1), ("999", 50)],
    )
    def test_positive_int(self, value, expected):
        assert positive_int(value, default=1, maximum=50) == expected

    @pytest.mark.parametrize("total,limit,expected", [(0, 10, 0), (25, 10, 3), (30, 10, 3), (1, 50, 1)])
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected
