import logging

import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock

from promoted_python_delivery_client.client.delivery_response import DeliveryResponse
from promoted_python_delivery_client.model.execution_server import ExecutionServer
from promoted_python_delivery_client.model.insertion import Insertion
from promoted_python_delivery_client.model.response import Response

from promoted_demo.infrastructure.config import settings
from promoted_demo.infrastructure.config.settings import AppConfig
from promoted_demo.infrastructure.cli.display import ConsoleDisplay

CONFIG_ENV_VARS = [
    "METRICS_API_ENDPOINT_URL",
    "METRICS_API_KEY",
    "DELIVERY_API_ENDPOINT_URL",
    "DELIVERY_API_KEY",
    "ONLY_LOG",
    "SHADOW_TRAFFIC_DELIVERY_RATE",
    "BLOCKING_SHADOW_TRAFFIC",
    "DELIVERY_TIMEOUT_MILLIS",
    "METRICS_TIMEOUT_MILLIS",
    "PERFORM_CHECKS",
    "LOG_LEVEL",
    "LOG_FILE",
    "LOG_FORMAT",
]


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clears config env vars and marks config sources as already loaded,
    so a developer's .env or YAML file never leaks into tests.
    """
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings, "_config", {})
    monkeypatch.setattr(settings, "_loaded", True)
    settings.clear_test_config()
    yield
    settings.clear_test_config()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging replaces root handlers; put the originals back after each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def valid_env(monkeypatch):
    """Sets the four required settings."""
    values = {
        "METRICS_API_ENDPOINT_URL": "https://metrics.example.com/log",
        "METRICS_API_KEY": "metrics-key-1234",
        "DELIVERY_API_ENDPOINT_URL": "https://delivery.example.com/deliver",
        "DELIVERY_API_KEY": "delivery-key-5678",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def app_config():
    return AppConfig(
        metrics_api_endpoint_url="https://metrics.example.com/log",
        metrics_api_key="metrics-key-1234",
        delivery_api_endpoint_url="https://delivery.example.com/deliver",
        delivery_api_key="delivery-key-5678",
    )


def make_delivery_response(content_ids, execution_server=ExecutionServer.API, client_request_id="client-req-1"):
    """Builds a library DeliveryResponse listing the given content ids in order."""
    insertions = [
        Insertion(content_id=content_id, position=position, insertion_id=f"ins-{content_id}")
        for position, content_id in enumerate(content_ids)
    ]
    return DeliveryResponse(
        response=Response(request_id="req-1", insertion=insertions),
        client_request_id=client_request_id,
        execution_server=execution_server,
    )


@pytest.fixture
def delivery_response_factory():
    return make_delivery_response


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily.
    Patches the ConsoleDisplay where main.py uses it.
    """
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('promoted_demo.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture
def mock_gateway(mocker):
    """Patches PromotedDeliveryGateway in main.py with an async-capable mock."""
    gateway = MagicMock()
    gateway.deliver = mocker.AsyncMock(return_value=make_delivery_response(["2", "1"]))
    gateway_cls = mocker.patch('promoted_demo.main.PromotedDeliveryGateway', return_value=gateway)
    gateway.constructor = gateway_cls
    return gateway
