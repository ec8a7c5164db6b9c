"""Tests for the exception hierarchy and error handling utilities."""

from unittest.mock import Mock

import pytest

from haptiknit.exceptions import (
    AlreadyConfiguredError,
    ChannelNotFoundError,
    DeviceConnectionError,
    ErrorContext,
    HaptiKnitError,
    LinkLostError,
    OutOfRangeError,
    PlacementError,
    TransportError,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_ble_error,
)


@pytest.mark.unit
class TestHierarchy:
    """Test exception types and messages."""

    def test_transport_family(self):
        assert issubclass(DeviceConnectionError, TransportError)
        assert issubclass(ChannelNotFoundError, TransportError)
        assert issubclass(LinkLostError, TransportError)
        assert issubclass(TransportError, HaptiKnitError)

    def test_device_connection_error_does_not_shadow_builtin(self):
        assert not issubclass(DeviceConnectionError, ConnectionError)

    def test_already_configured_is_placement_error(self):
        error = AlreadyConfiguredError(3)
        assert isinstance(error, PlacementError)
        assert str(error) == error.user_message

    def test_full_message_includes_hint(self):
        error = OutOfRangeError(1, 300)
        full = error.get_full_message()
        assert full.startswith("Value cannot exceed 255 kPa")
        assert "Suggestion: Enter a pressure between 0 and 255 kPa." in full

    def test_channel_not_found_not_recoverable(self):
        error = ChannelNotFoundError("battery")
        assert not error.recoverable
        assert error.channel == "battery"

    def test_technical_message_defaults_to_user_message(self):
        error = HaptiKnitError("Something broke")
        assert error.technical_message == "Something broke"
        assert error.get_full_message() == "Something broke"

    def test_log_message_names_failing_action(self):
        error = LinkLostError(channel="command")
        assert error.log_message == error.technical_message

        error.during("fire actuator")
        assert error.operation == "fire actuator"
        assert error.log_message.startswith("Failed to fire actuator: ")

    def test_innermost_action_wins(self):
        error = OutOfRangeError(1, 300).during("set pressure")
        error.during("console action")
        assert error.operation == "set pressure"


@pytest.mark.unit
class TestWrapBleError:
    """Test translation of backend errors."""

    def test_transport_errors_pass_through(self):
        original = LinkLostError()
        assert wrap_ble_error(original) is original

    def test_connecting(self):
        error = wrap_ble_error(OSError("adapter off"), connecting=True, device_name="PortFlow8")
        assert isinstance(error, DeviceConnectionError)
        assert error.user_message == "Could not connect to PortFlow8"
        assert error.reason == "adapter off"

    def test_backend_reports_link_down(self):
        error = wrap_ble_error(OSError("write failed"), channel="command", connected=False)
        assert isinstance(error, LinkLostError)
        assert error.channel == "command"

    def test_not_connected_message(self):
        error = wrap_ble_error(RuntimeError("Not connected"), channel="command")
        assert isinstance(error, LinkLostError)

    def test_other_failure(self):
        error = wrap_ble_error(OSError("GATT error 0x0e"), channel="command")
        assert type(error) is TransportError
        assert "GATT error 0x0e" in error.user_message

    def test_empty_message_uses_type_name(self):
        error = wrap_ble_error(TimeoutError(), connecting=True)
        assert error.reason == "TimeoutError"


@pytest.mark.unit
class TestHandlers:
    """Test handle_errors, ErrorContext, collect_errors and formatting."""

    def test_handle_errors_notifies_and_swallows(self):
        notify = Mock()

        @handle_errors(operation_name="select count", user_notification=notify, re_raise=False, fallback_value=-1)
        def select():
            raise AlreadyConfiguredError(2)

        assert select() == -1
        assert "Press RESET" in notify.call_args.args[0]

    def test_handle_errors_reraises(self):
        @handle_errors(operation_name="place")
        def place():
            raise ValueError("bad")

        with pytest.raises(ValueError):
            place()

    @pytest.mark.asyncio
    async def test_handle_errors_on_coroutine(self):
        notify = Mock()

        @handle_errors(operation_name="connect", user_notification=notify, re_raise=False)
        async def connect():
            raise DeviceConnectionError("timeout")

        assert await connect() is None
        notify.assert_called_once()

    def test_handle_errors_stamps_operation(self):
        error = DeviceConnectionError("timeout")

        @handle_errors(operation_name="connect", re_raise=False)
        def connect():
            raise error

        connect()
        assert error.operation == "connect"

    def test_collector_stamps_sub_operation(self):
        collector = collect_errors("submit pressures")
        with collector.try_operation("actuator 2 (20 kPa)"):
            raise LinkLostError()
        _, error = collector.errors[0]
        assert error.operation == "actuator 2 (20 kPa)"

    def test_error_context_suppresses(self):
        with ErrorContext("close link", re_raise=False) as ctx:
            raise OSError("boom")
        assert isinstance(ctx.error, OSError)

    def test_error_context_reraises(self):
        with pytest.raises(LinkLostError):
            with ErrorContext("write"):
                raise LinkLostError()

    def test_collector_keeps_going(self):
        collector = collect_errors("submit pressures")
        for i in range(3):
            with collector.try_operation(f"slot {i}"):
                if i == 1:
                    raise LinkLostError()

        assert collector.error_count == 1
        assert collector.success_count == 2
        summary = collector.get_summary()
        assert summary.startswith("Failed 1 of 3 operations:")
        assert "slot 1: Connection to the device was lost" in summary

    def test_collector_lets_defects_through(self):
        collector = collect_errors("batch")
        with pytest.raises(KeyError):
            with collector.try_operation("lookup"):
                raise KeyError("x")

    def test_collector_success_summary(self):
        collector = collect_errors("batch")
        with collector.try_operation("one"):
            pass
        assert collector.get_summary() == "All operations completed successfully (1 total)"

    def test_format_error_for_display(self):
        assert format_error_for_display(AlreadyConfiguredError(2)) == (
            "You already have 2 actuators selected. Reset to choose a different number.",
            "Press RESET to clear the layout and pick again.",
        )
        assert format_error_for_display(ValueError("x")) == ("ValueError: x", None)
