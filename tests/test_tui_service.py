"""Unit tests for TUIService."""

from unittest.mock import Mock

import pytest

from haptiknit.exceptions import LinkLostError
from haptiknit.models import Channel, CommandKind, ConnectionState
from haptiknit.orchestration import DispatchResult
from haptiknit.protocols import (
    ConnectionEvent,
    ConnectionObserver,
    DispatchEvent,
    DispatchObserver,
    PlacementEvent,
    PlacementObserver,
    PressureEvent,
    PressureObserver,
)
from haptiknit.tui.services import TUIService
from haptiknit.tui.widgets import ActuatorGrid, PressurePanel, RosterBar, StatusBar


class TestTUIServiceObserver:
    """Test TUIService as an observer of every console service."""

    @pytest.fixture
    def widgets(self):
        return {
            ActuatorGrid: Mock(),
            RosterBar: Mock(),
            PressurePanel: Mock(),
            StatusBar: Mock(),
        }

    @pytest.fixture
    def mock_app(self, orchestrator, widgets):
        """Create a mock console app over a real orchestrator."""
        app = Mock()
        app.orchestrator = orchestrator
        app.console_mode = "arrange"
        app.query_one = Mock(side_effect=lambda widget_type: widgets[widget_type])
        return app

    @pytest.fixture
    def service(self, mock_app):
        return TUIService(mock_app)

    @pytest.mark.unit
    def test_implements_observer_protocols(self, service):
        assert isinstance(service, PlacementObserver)
        assert isinstance(service, PressureObserver)
        assert isinstance(service, ConnectionObserver)
        assert isinstance(service, DispatchObserver)

    @pytest.mark.unit
    def test_sync_draws_every_widget(self, service, orchestrator, widgets):
        orchestrator.select_count(2)
        orchestrator.drop((0, 1), 1)

        service.sync()

        grid = widgets[ActuatorGrid].update_grid.call_args.args[0]
        assert grid[0][1] == 1
        widgets[RosterBar].update_roster.assert_called_with(2, [0])
        widgets[PressurePanel].update_slots.assert_called_with([None, None])
        assert widgets[StatusBar].update_state.call_args.kwargs["placed"] == 1

    @pytest.mark.unit
    def test_drag_started_only_marks_picks(self, service, orchestrator, widgets):
        orchestrator.select_count(2)
        orchestrator.begin_drag(0)

        service.on_placement_event(PlacementEvent.DRAG_STARTED, [])

        widgets[ActuatorGrid].update_grid.assert_not_called()
        widgets[ActuatorGrid].mark_picked.assert_called_with(None)
        widgets[RosterBar].mark_picked.assert_called_with(0)

    @pytest.mark.unit
    def test_placement_event_redraws(self, service, widgets):
        service.on_placement_event(PlacementEvent.ACTUATOR_PLACED, [])
        widgets[ActuatorGrid].update_grid.assert_called_once()
        widgets[RosterBar].update_roster.assert_called_once()

    @pytest.mark.unit
    def test_single_pressure_edit_not_redrawn(self, service, widgets):
        service.on_pressure_event(PressureEvent.VALUE_CHANGED, 1, 20)
        widgets[PressurePanel].update_slots.assert_not_called()

    @pytest.mark.unit
    def test_pressure_cleared_redraws_panel(self, service, orchestrator, widgets):
        orchestrator.select_count(3)
        service.on_pressure_event(PressureEvent.CLEARED, None, None)
        widgets[PressurePanel].update_slots.assert_called_with([None, None, None])

    @pytest.mark.unit
    def test_link_lost_warns(self, service, mock_app):
        service.on_connection_event(ConnectionEvent.LINK_LOST, ConnectionState.DISCONNECTED, "PortFlow8")

        message = mock_app.notify.call_args.args[0]
        assert "PortFlow8" in message
        assert mock_app.notify.call_args.kwargs["severity"] == "warning"

    @pytest.mark.unit
    def test_fired_actuator_flashes(self, service, widgets):
        result = DispatchResult(kind=CommandKind.SELECT, channel=Channel.COMMAND, value=2, payload=3)
        service.on_dispatch_event(DispatchEvent.SENT, result)
        widgets[ActuatorGrid].flash_actuator.assert_called_once_with(2)

    @pytest.mark.unit
    def test_failed_command_notifies(self, service, mock_app):
        result = DispatchResult(
            kind=CommandKind.STOP_ALL, channel=Channel.COMMAND, value=100, error=LinkLostError()
        )
        service.on_dispatch_event(DispatchEvent.FAILED, result)
        assert mock_app.notify.call_args.kwargs["severity"] == "error"

    @pytest.mark.unit
    def test_failed_pressure_left_to_summary(self, service, mock_app):
        result = DispatchResult(
            kind=CommandKind.PRESSURE, channel=Channel.COMMAND, value=20, index=1, error=LinkLostError()
        )
        service.on_dispatch_event(DispatchEvent.FAILED, result)
        mock_app.notify.assert_not_called()

    @pytest.mark.unit
    def test_widget_errors_are_contained(self, service, widgets):
        widgets[ActuatorGrid].update_grid.side_effect = RuntimeError("not mounted")
        # Must not raise
        service.on_placement_event(PlacementEvent.RESET, [])
