"""Tests for the FastAPI surface: handlers, dependencies and dashboard routes."""

import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from lexdesk.api import create_app, register_exception_handlers
from lexdesk.bootstrap import build_container
from lexdesk.config.settings import LexdeskSettings
from lexdesk.core.exceptions import (
    ConflictError,
    EntityNotFoundError,
    StoreError,
    TenantNotInitializedError,
    ValidationError,
)


def _identity_from_headers(app: FastAPI) -> None:
    """Stand-in for the authentication layer."""

    @app.middleware("http")
    async def set_identity(request: Request, call_next):
        for header, attribute in (("x-tenant", "tenant_id"), ("x-user", "user_id"), ("x-account", "account_type")):
            if header in request.headers:
                setattr(request.state, attribute, request.headers[header])
        return await call_next(request)


@pytest.fixture
def api_store(store):
    store.add_tenant("acme")
    return store


@pytest.fixture
def client(api_store):
    settings = LexdeskSettings(environment="production")
    app = create_app(container=build_container(settings, store=api_store))
    _identity_from_headers(app)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def error_app():
    app = FastAPI()
    register_exception_handlers(app)

    errors = {
        "not-found": EntityNotFoundError("Client", "client_1"),
        "conflict": ConflictError("duplicate"),
        "invalid": ValidationError("bad input", field_errors=[{"field": "email", "message": "invalid"}]),
        "store": StoreError("password=secret host=db"),
        "uninitialized": TenantNotInitializedError("acme", "schema missing"),
    }

    @app.get("/raise/{name}")
    async def raise_error(name: str):
        if name == "crash":
            raise RuntimeError("stack details")
        raise errors[name]

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:

    @pytest.mark.parametrize("name,status_code", [
        ("not-found", 404),
        ("conflict", 409),
        ("invalid", 422),
        ("uninitialized", 409),
    ])
    def test_client_errors_are_structured(self, error_app, name, status_code):
        response = error_app.get(f"/raise/{name}")

        assert response.status_code == status_code
        assert response.json()["error"]["code"]
        assert "message" in response.json()["error"]

    def test_validation_error_keeps_field_errors(self, error_app):
        body = error_app.get("/raise/invalid").json()

        assert body["error"]["details"]["field_errors"] == [{"field": "email", "message": "invalid"}]

    def test_store_error_is_generic(self, error_app):
        response = error_app.get("/raise/store")

        assert response.status_code == 500
        assert "secret" not in response.text
        assert response.json()["error"]["message"] == "An unexpected error occurred"

    def test_unexpected_exception_is_generic(self, error_app):
        response = error_app.get("/raise/crash")

        assert response.status_code == 500
        assert "stack details" not in response.text

    def test_debug_exposes_exception_text(self):
        app = FastAPI()
        register_exception_handlers(app, debug=True)

        @app.get("/crash")
        async def crash():
            raise RuntimeError("stack details")

        response = TestClient(app, raise_server_exceptions=False).get("/crash")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "stack details"


class TestDashboardRoutes:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_identity(self, client):
        response = client.get("/api/v1/dashboard/metrics")

        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["error"]["details"]["field_errors"]}
        assert fields == {"tenant_id", "user_id"}

    def test_unknown_account_type(self, client):
        response = client.get(
            "/api/v1/dashboard/metrics",
            headers={"x-tenant": "acme", "x-user": "u1", "x-account": "PLATINUM"},
        )

        assert response.status_code == 422

    def test_uninitialized_tenant_is_409(self, client):
        response = client.get("/api/v1/dashboard/metrics", headers={"x-tenant": "acme", "x-user": "u1"})

        assert response.status_code == 409
        assert response.json()["error"]["type"] == "TenantNotInitializedError"

    def test_metrics_for_provisioned_tenant(self, client):
        container = client.app.state.container
        client.portal.call(container.provisioner.provision, "acme")

        response = client.get(
            "/api/v1/dashboard/metrics",
            headers={"x-tenant": "acme", "x-user": "u1", "x-account": "GERENCIAL"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["clients"]["total"] == 0
        assert body["financial"] is not None
        assert body["degraded_modules"] == []

    def test_recent_activity_limit_bounds(self, client):
        response = client.get(
            "/api/v1/dashboard/recent-activity",
            params={"limit": 100},
            headers={"x-tenant": "acme", "x-user": "u1"},
        )

        assert response.status_code == 422


class TestAppFactory:

    @pytest.fixture
    def make_client(self, store):
        store.add_tenant("acme")
        clients = []

        def make(**overrides):
            settings = LexdeskSettings(_env_file=None, **overrides)
            app = create_app(container=build_container(settings, store=store))
            _identity_from_headers(app)

            @app.get("/crash")
            async def crash():
                raise RuntimeError("connection string postgres://admin:secret@db")

            client = TestClient(app, raise_server_exceptions=False)
            clients.append(client.__enter__())
            return client

        yield make
        for client in clients:
            client.__exit__(None, None, None)

    def test_development_defaults_hide_server_errors(self, make_client):
        response = make_client().get("/crash")

        assert response.status_code == 500
        assert "secret" not in response.text

    def test_debug_is_ignored_in_production(self, make_client):
        response = make_client(debug=True, environment="production").get("/crash")

        assert "secret" not in response.text

    def test_debug_outside_production_exposes_text(self, make_client):
        response = make_client(debug=True).get("/crash")

        assert "secret" in response.json()["error"]["message"]

    def test_log_level_comes_from_settings(self, make_client):
        make_client(log_level="ERROR")

        assert logging.getLogger().level == logging.ERROR

    def test_corrupt_tenant_record_is_a_generic_500(self, make_client, store):
        store.add_tenant("broken", schema_name="public")

        response = make_client().get(
            "/api/v1/dashboard/metrics",
            headers={"x-tenant": "broken", "x-user": "u1"},
        )

        assert response.status_code == 500
        assert "public" not in response.json()["error"]["message"]
        assert response.json()["error"]["message"] == "An unexpected error occurred"
