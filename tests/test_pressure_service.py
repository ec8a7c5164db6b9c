"""Unit tests for PressureService."""

from unittest.mock import Mock

import pytest

from haptiknit.exceptions import OutOfRangeError
from haptiknit.protocols import PressureEvent
from haptiknit.services import PressureService


class TestSetValue:
    """Test parsing and validation of setpoints."""

    @pytest.fixture
    def service(self, placement, pressure):
        placement.select_count(4)
        return pressure

    @pytest.mark.unit
    def test_register_follows_count(self, service):
        assert service.slots == [None, None, None, None]

    @pytest.mark.unit
    def test_accepts_max(self, service):
        assert service.set_value(2, "255") == 255
        assert service.slots[2] == 255

    @pytest.mark.unit
    def test_strips_whitespace(self, service):
        assert service.set_value(1, "  42 ") == 42

    @pytest.mark.unit
    def test_over_max_rejected(self, service):
        service.set_value(2, "100")
        with pytest.raises(OutOfRangeError) as exc_info:
            service.set_value(2, "300")

        assert service.slots[2] == 100
        assert exc_info.value.user_message == "Value cannot exceed 255 kPa"
        assert exc_info.value.index == 2

    @pytest.mark.unit
    def test_negative_rejected(self, service):
        with pytest.raises(OutOfRangeError) as exc_info:
            service.set_value(0, "-5")
        assert exc_info.value.user_message == "Value cannot be negative"
        assert service.slots[0] is None

    @pytest.mark.unit
    def test_non_numeric_is_ignored(self, service):
        service.set_value(3, "40")
        assert service.set_value(3, "abc") == 40
        assert service.slots[3] == 40

    @pytest.mark.unit
    def test_empty_text_unsets(self, service):
        service.set_value(1, "20")
        assert service.set_value(1, "") is None
        assert service.slots[1] is None

    @pytest.mark.unit
    def test_index_outside_active_slots(self, service):
        with pytest.raises(IndexError):
            service.set_value(4, "10")

    @pytest.mark.unit
    def test_custom_maximum(self):
        service = PressureService(max_pressure=120)
        service.resize(2)
        with pytest.raises(OutOfRangeError) as exc_info:
            service.set_value(0, "121")
        assert "120 kPa" in exc_info.value.user_message


class TestStagedValues:
    """Test staged_values and resizing."""

    @pytest.fixture
    def service(self, placement, pressure):
        placement.select_count(4)
        for index, raw in enumerate(["10", "20", "", "40"]):
            pressure.set_value(index, raw)
        return pressure

    @pytest.mark.unit
    def test_skips_first_slot_by_default(self, service):
        assert service.staged_values() == [(1, 20), (3, 40)]

    @pytest.mark.unit
    def test_include_first_slot(self, service):
        assert service.staged_values(include_first_slot=True) == [(0, 10), (1, 20), (3, 40)]

    @pytest.mark.unit
    def test_reset_empties_register(self, placement, service):
        placement.reset()
        assert service.slots == []
        assert service.staged_values() == []

    @pytest.mark.unit
    def test_new_count_after_reset_starts_unset(self, placement, service):
        placement.reset()
        placement.select_count(2)
        assert service.slots == [None, None]

    @pytest.mark.unit
    def test_clear_keeps_size(self, service):
        service.clear()
        assert service.slots == [None, None, None, None]

    @pytest.mark.unit
    def test_slots_is_a_copy(self, service):
        service.slots[1] = 99
        assert service.slots[1] == 20


class TestPressureEvents:
    """Test observer notifications."""

    @pytest.fixture
    def observer(self, placement, pressure):
        placement.select_count(2)
        mock = Mock()
        mock.on_pressure_event = Mock()
        pressure.register_observer(mock)
        return mock

    @pytest.mark.unit
    def test_value_changed(self, pressure, observer):
        pressure.set_value(1, "30")
        observer.on_pressure_event.assert_called_once_with(PressureEvent.VALUE_CHANGED, 1, 30)

    @pytest.mark.unit
    def test_unchanged_value_not_notified(self, pressure, observer):
        pressure.set_value(1, "30")
        pressure.set_value(1, "30")
        pressure.set_value(1, "x")
        assert observer.on_pressure_event.call_count == 1

    @pytest.mark.unit
    def test_rejected_value_not_notified(self, pressure, observer):
        with pytest.raises(OutOfRangeError):
            pressure.set_value(0, "256")
        observer.on_pressure_event.assert_not_called()

    @pytest.mark.unit
    def test_reset_notifies_cleared(self, placement, pressure, observer):
        placement.reset()
        observer.on_pressure_event.assert_called_once_with(PressureEvent.CLEARED, None, None)
