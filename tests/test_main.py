"""End-to-end tests: local FastAPI server → handlers → mock Tienda Nube API."""

import logging

import pytest
from fastapi.testclient import TestClient

from liters_service import main
from liters_service.clients import TiendaNubeClient
from liters_service.logging_config import setup_logging
from liters_service.workflow import GetUserLitersHandler, SetUserLitersHandler
from mock_services import mock_tienda_nube


@pytest.fixture
def app_client(config, mock_upstream):
    factory = lambda: TiendaNubeClient(config, http_client=mock_upstream)
    main.app.dependency_overrides[main.get_read_handler] = lambda: GetUserLitersHandler(config, factory)
    main.app.dependency_overrides[main.get_write_handler] = lambda: SetUserLitersHandler(config, factory)
    try:
        yield TestClient(main.app)
    finally:
        main.app.dependency_overrides.clear()


def test_health(app_client):
    response = app_client.get("/health")
    assert response.json() == {"status": "ok"}


def test_get_liters_by_query(app_client):
    response = app_client.get("/get-user-liters", params={"userId": "9"})

    assert response.status_code == 200
    assert response.json() == {"message": "Customer 9 has 150 liters.", "liters": 150}
    assert response.headers["access-control-allow-origin"] == "*"


def test_get_liters_by_path(app_client):
    response = app_client.get("/litros/11")
    assert response.json()["liters"] == 0


def test_get_liters_by_body(app_client):
    response = app_client.post("/get-user-liters", json={"id": "10"})
    assert response.json() == {"message": "Customer 10 has 0 liters.", "liters": 0}


def test_get_liters_unknown_customer(app_client):
    response = app_client.get("/litros/12345")

    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}


def test_preflight(app_client):
    response = app_client.options("/set-user-liters")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


def test_set_liters_scenario(app_client):
    response = app_client.post("/set-user-liters", json={"orderId": "55"})

    assert response.status_code == 200
    assert response.json() == "Customer 9 liters where updated from 150 to 200"
    assert mock_tienda_nube.CUSTOMERS["9"]["note"] == "200"

    followup = app_client.get("/get-user-liters", params={"userId": "9"})
    assert followup.json()["liters"] == 200


def test_set_liters_only_counts_first_product(app_client):
    app_client.post("/set-user-liters", json={"id": "56"})
    assert mock_tienda_nube.CUSTOMERS["10"]["note"] == "10"


def test_set_liters_webhook(app_client):
    payload = {"event": "order/paid", "data": {"id": 55, "customer": {"id": 9}}}

    response = app_client.post("/set-user-liters", json=payload)

    assert response.status_code == 200
    assert response.json() == {
        "message": "Customer 9 liters where updated from 150 to 200",
        "orderId": "55",
        "customerId": "9",
        "liters": 200,
    }


def test_set_liters_rejects_get(app_client):
    response = app_client.get("/set-user-liters")
    assert response.status_code == 405


def test_order_without_customer(app_client):
    response = app_client.post("/set-user-liters", json={"orderId": "57"})

    assert response.status_code == 400
    assert response.json() == {"error": "Order has no associated customer"}


def test_order_customer_missing_upstream(app_client):
    response = app_client.post("/set-user-liters", json={"orderId": "58"})

    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}
    assert "404" not in mock_tienda_nube.CUSTOMERS


def test_upstream_server_error_passes_through(app_client):
    response = app_client.post("/set-user-liters", json={"orderId": "error_1"})

    assert response.status_code == 500
    assert response.json() == {"error": "External API error: 500"}


def test_wrong_token_is_401(mock_upstream, config):
    bad_config = config.model_copy(update={"auth_token": "wrong"})
    handler = GetUserLitersHandler(bad_config, lambda: TiendaNubeClient(bad_config, http_client=mock_upstream))

    response = handler.handle({"httpMethod": "GET", "queryStringParameters": {"userId": "9"}})

    assert response["statusCode"] == 401
    assert response["body"] == '{"error": "Authentication failed"}'


def test_undecodable_body_is_a_400_with_cors(app_client):
    response = app_client.post(
        "/set-user-liters",
        content=b"\xff\xfe{",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing or invalid order ID"}
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.fixture
def server_environment(monkeypatch):
    main.get_config.cache_clear()
    yield monkeypatch
    main.get_config.cache_clear()
    setup_logging()


def test_missing_configuration_is_a_json_500(server_environment):
    server_environment.delenv("TIENDA_NUBE_EXTERNAL_API_URL", raising=False)

    response = TestClient(main.app).get("/get-user-liters", params={"userId": "9"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"


def test_missing_configuration_on_write_route(server_environment):
    server_environment.delenv("TIENDA_NUBE_EXTERNAL_API_URL", raising=False)

    response = TestClient(main.app).post("/set-user-liters", json={"orderId": "55"})

    assert response.status_code == 500
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


def test_server_applies_configured_log_level(server_environment):
    server_environment.setenv("TIENDA_NUBE_EXTERNAL_API_URL", "http://tiendanube.test")
    server_environment.setenv("LOG_LEVEL", "debug")

    config = main.get_config()

    assert config.log_level == "DEBUG"
    assert logging.getLogger().level == logging.DEBUG
