"""Smoke tests for CLI commands.

Tests that CLI commands parse correctly and don't crash. Uses Click's
CliRunner and the simulated device, so no Bluetooth adapter is needed.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest
from click.testing import CliRunner

from haptiknit.cli.main import cli, resolve_log_path
from haptiknit.transport.ble import ScanResult


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Path for a config file that does not exist yet."""
    return tmp_path / "config.json"


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'HaptiKnit' in result.output
        assert '--simulate' in result.output
        assert '--address' in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert '0.1.0' in result.output

    @pytest.mark.parametrize("group", ["ble", "config"])
    def test_group_help(self, runner, group):
        result = runner.invoke(cli, [group, '--help'])
        assert result.exit_code == 0

    def test_send_help_lists_modes(self, runner):
        result = runner.invoke(cli, ['ble', 'send', '--help'])
        assert result.exit_code == 0
        assert 'direct' in result.output
        assert 'offset' in result.output


@pytest.mark.integration
class TestBleCommands:
    """Test one-shot device commands against the simulator."""

    def test_stop(self, runner, config_file):
        result = runner.invoke(cli, ['--simulate', '--config', str(config_file), 'ble', 'stop'])
        assert result.exit_code == 0
        assert 'Connected to PortFlow8 (simulated)' in result.output
        assert 'Stop-all sent (payload 100)' in result.output

    def test_inflate(self, runner, config_file):
        result = runner.invoke(cli, ['--simulate', '--config', str(config_file), 'ble', 'inflate'])
        assert result.exit_code == 0
        assert 'Inflate-all sent (payload 11)' in result.output

    def test_send_offset(self, runner, config_file):
        result = runner.invoke(
            cli, ['--simulate', '--config', str(config_file), 'ble', 'send', '4', '--mode', 'offset']
        )
        assert result.exit_code == 0
        assert 'Sent 4 (payload 5)' in result.output

    def test_send_out_of_range(self, runner, config_file):
        result = runner.invoke(cli, ['--simulate', '--config', str(config_file), 'ble', 'send', '300'])
        assert result.exit_code == 1
        assert 'cannot be sent' in result.output

    def test_battery(self, runner, config_file):
        result = runner.invoke(cli, ['--simulate', '--config', str(config_file), 'ble', 'battery'])
        assert result.exit_code == 0
        assert 'Battery: 87' in result.output

    def test_simulated_scan(self, runner):
        result = runner.invoke(cli, ['--simulate', 'ble', 'scan'])
        assert result.exit_code == 0
        assert 'PortFlow8 (simulated)' in result.output

    def test_scan_marks_service(self, runner, config_file):
        service = "00002a6a-0000-1000-8000-00805f9b34fb"
        results = [
            ScanResult(device=Mock(), name="PortFlow8", address="AA", rssi=-50, service_uuids=(service,)),
            ScanResult(device=Mock(), name=None, address="BB", rssi=None),
        ]
        with patch("haptiknit.transport.ble.scan", AsyncMock(return_value=results)):
            result = runner.invoke(cli, ['--config', str(config_file), 'ble', 'scan', '-t', '1'])

        assert result.exit_code == 0
        assert '[0] PortFlow8  AA  -50 dBm *' in result.output
        assert '[1] (unnamed)  BB  n/a' in result.output

    def test_connect_failure_exits_1(self, runner, config_file):
        with patch("haptiknit.transport.SimulatedBackend.open", AsyncMock(side_effect=OSError("adapter off"))):
            result = runner.invoke(cli, ['--simulate', '--config', str(config_file), 'ble', 'stop'])

        assert result.exit_code == 1
        assert 'Could not connect' in result.output


@pytest.mark.integration
class TestConfigCommands:
    """Test config show/path/init."""

    def test_init_then_show(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'init'])
        assert result.exit_code == 0
        assert config_file.exists()

        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show'])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['commands']['stop_all_value'] == 100
        assert data['drop_policy'] == 'overwrite'

    def test_init_refuses_overwrite(self, runner, config_file):
        config_file.write_text("{}")
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'init'])
        assert result.exit_code == 1
        assert config_file.read_text() == "{}"

        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'init', '--force'])
        assert result.exit_code == 0

    def test_show_field(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show', '-f', 'grid_rows'])
        assert result.exit_code == 0
        assert 'grid_rows: 4' in result.output

    def test_show_unknown_field(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show', '-f', 'nope'])
        assert result.exit_code == 1

    def test_show_applies_overrides(self, runner, config_file):
        result = runner.invoke(
            cli, ['--config', str(config_file), '--address', 'AA:BB', 'config', 'show', '-f', 'ble']
        )
        assert result.exit_code == 0
        assert json.loads(result.output)['device_address'] == 'AA:BB'

    def test_show_invalid_config(self, runner, config_file):
        config_file.write_text('{"grid_rows": 0}')
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show'])
        assert result.exit_code == 1
        assert 'grid_rows' in result.output

    def test_path(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'path'])
        assert result.exit_code == 0
        assert str(config_file) in result.output


@pytest.mark.unit
class TestLogPath:
    """Test log file resolution."""

    def test_custom_file_wins(self, tmp_path):
        assert resolve_log_path(True, tmp_path / "x.log") == tmp_path / "x.log"

    def test_debug_logs_to_cwd(self):
        assert resolve_log_path(True, None) == Path.cwd() / "haptiknit-debug.log"

    def test_default_location(self):
        assert resolve_log_path(False, None).name == "haptiknit.log"


@pytest.mark.integration
class TestConsoleLaunch:
    """Test that the default command starts the console."""

    def test_launches_console(self, runner, config_file, tmp_path):
        with patch("haptiknit.tui.HaptiKnitConsole") as mock_console:
            result = runner.invoke(
                cli,
                ['--simulate', '--config', str(config_file), '--log-file', str(tmp_path / "h.log")],
            )

        assert result.exit_code == 0
        mock_console.return_value.run.assert_called_once()
        assert config_file.exists()
