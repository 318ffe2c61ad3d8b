"""Tests for the global API exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sellerfees.core.exceptions import (
    InvalidRulesError,
    PlanInputError,
    SellerFeesError,
    UnsupportedPolicyError,
)
from sellerfees.middleware.exception_handler import register_exception_handlers

ERRORS = {
    "plan-input": PlanInputError("Batch input is not a JSON object"),
    "policy": UnsupportedPolicyError("Unsupported rule policy: '2020-01-01'"),
    "rules": InvalidRulesError("Rule set has no price brackets"),
    "base": SellerFeesError("Something went wrong"),
}


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()

    @app.get("/raise/{name}")
    async def raise_error(name: str):
        raise ERRORS[name]

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    register_exception_handlers(app)
    return TestClient(app, raise_server_exceptions=False)


class TestSellerFeesErrors:

    @pytest.mark.parametrize(
        "name, status_code",
        [("plan-input", 400), ("policy", 400), ("rules", 500), ("base", 500)],
    )
    def test_status_mapping(self, client, name, status_code):
        response = client.get(f"/raise/{name}")

        assert response.status_code == status_code
        assert response.json() == {
            "detail": ERRORS[name].message,
            "error_type": type(ERRORS[name]).__name__,
        }


class TestUnhandled:

    def test_internal_error_with_id(self, client):
        response = client.get("/crash")
        body = response.json()

        assert response.status_code == 500
        assert body["detail"] == "Internal server error"
        assert len(body["error_id"]) == 8
        assert "boom" not in response.text
