from unittest.mock import MagicMock

from typer.testing import CliRunner

from promoted_python_delivery_client.model.execution_server import ExecutionServer

from promoted_demo.domain.interfaces.delivery_gateway import DeliveryCallError, DeliveryClientError
from promoted_demo.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# valid_env: sets the four required settings
# mock_gateway: MagicMock (patches PromotedDeliveryGateway in main)
# mock_console_display: MagicMock (patches ConsoleDisplay in main)


def test_deliver_prints_reranked_products(runner: CliRunner, valid_env, mock_gateway: MagicMock):
    """Full flow with the real ConsoleDisplay and a mocked gateway."""
    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    lines = result.stdout.splitlines()
    assert lines == [
        "Promoted Delivery Client",
        "https://metrics.example.com/log",
        "Execution server: API",
        "Client request ID: client-req-1",
        "Response",
        "{2 Product 2 200}",
        "{1 Product 1 100}",
    ]
    mock_gateway.deliver.assert_awaited_once()
    mock_gateway.shutdown.assert_called_once()


def test_no_subcommand_runs_deliver(runner: CliRunner, valid_env, mock_gateway: MagicMock):
    result = runner.invoke(app, [])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert "Execution server: API" in result.stdout
    mock_gateway.deliver.assert_awaited_once()


def test_deliver_prints_unknown_content_ids(
    runner: CliRunner, valid_env, mock_gateway: MagicMock, delivery_response_factory
):
    mock_gateway.deliver.return_value = delivery_response_factory(["1", "cached-42"], ExecutionServer.SDK)

    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert result.stdout.splitlines()[-3:] == ["Response", "{1 Product 1 100}", "cached-42"]
    assert "Execution server: SDK" in result.stdout


def test_only_log_flag_overrides_environment(runner: CliRunner, valid_env, monkeypatch, mock_gateway: MagicMock):
    monkeypatch.setenv("ONLY_LOG", "false")

    result = runner.invoke(app, ["deliver", "--only-log", "--query", "shoes", "--page-size", "2"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    sent = mock_gateway.deliver.await_args.args[0]
    assert sent.only_log is True
    assert sent.request.search_query == "shoes"
    assert sent.request.paging.size == 2
    config = mock_gateway.constructor.call_args.args[0]
    assert config.only_log is True


def test_only_log_read_from_environment(runner: CliRunner, valid_env, monkeypatch, mock_gateway: MagicMock):
    monkeypatch.setenv("ONLY_LOG", "T")
    monkeypatch.setenv("SHADOW_TRAFFIC_DELIVERY_RATE", "0.25")

    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert mock_gateway.deliver.await_args.args[0].only_log is True
    config = mock_gateway.constructor.call_args.args[0]
    assert config.shadow_traffic_delivery_rate == 0.25


def test_missing_config_exits_with_error(runner: CliRunner, mock_console_display: MagicMock, mock_gateway: MagicMock):
    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 1
    mock_console_display.display_banner.assert_called_once_with("")
    mock_console_display.display_error.assert_called_once_with("metricsApiEndpointUrl needs to be specified")
    mock_gateway.constructor.assert_not_called()


def test_missing_delivery_key_exits_with_error(
    runner: CliRunner, valid_env, monkeypatch, mock_console_display: MagicMock, mock_gateway: MagicMock
):
    monkeypatch.delenv("DELIVERY_API_KEY")

    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 1
    mock_console_display.display_banner.assert_called_once_with(valid_env["METRICS_API_ENDPOINT_URL"])
    mock_console_display.display_error.assert_called_once_with("deliveryApiKey needs to be specified")


def test_client_init_failure_exits_with_error(
    runner: CliRunner, valid_env, mock_console_display: MagicMock, mock_gateway: MagicMock
):
    mock_gateway.constructor.side_effect = DeliveryClientError("bad settings")

    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once_with(
        "Failed to initialize PromotedDeliveryClient: bad settings"
    )


def test_delivery_failure_exits_with_error(
    runner: CliRunner, valid_env, mock_console_display: MagicMock, mock_gateway: MagicMock
):
    mock_gateway.deliver.side_effect = DeliveryCallError("Delivery call failed", RuntimeError("timeout"))

    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once_with("Delivery call failed: timeout")
    mock_console_display.display_outcome.assert_not_called()
    mock_gateway.shutdown.assert_called_once()


def test_show_config_masks_keys(runner: CliRunner, valid_env, mock_console_display: MagicMock):
    result = runner.invoke(app, ["show-config"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    shown = mock_console_display.display_config.call_args.args[0]
    assert shown["delivery_api_key"].endswith("5678")
    assert "delivery-key" not in shown["delivery_api_key"]
    assert shown["only_log"] is False


def test_show_config_invalid_exits_with_error(runner: CliRunner, mock_console_display: MagicMock):
    result = runner.invoke(app, ["show-config"])
    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once_with("metricsApiEndpointUrl needs to be specified")


def test_long_lines_are_printed_unwrapped(
    runner: CliRunner, valid_env, monkeypatch, mock_gateway: MagicMock, delivery_response_factory
):
    long_url = "https://metrics.example.com/" + "x" * 100
    long_id = "cached-" + "9" * 100
    monkeypatch.setenv("METRICS_API_ENDPOINT_URL", long_url)
    mock_gateway.deliver.return_value = delivery_response_factory(["1", long_id])

    result = runner.invoke(app, ["deliver"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    lines = result.stdout.splitlines()
    assert lines[1] == long_url
    assert lines[-1] == long_id
