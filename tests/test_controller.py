# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from modeswitch.core.controller import ModeController
from modeswitch.core.models import Notification, OutputMode

A1 = "Strip[3].A1"
A2 = "Strip[3].A2"


@pytest.fixture
def connected(transport, controller) -> ModeController:
    transport.open()
    return controller


# ---------------------------------------------------------------------
# set_mode
# ---------------------------------------------------------------------

@pytest.mark.parametrize(
    "mode,a1,a2",
    [(OutputMode.A, 1.0, 0.0), (OutputMode.B, 1.0, 1.0), (OutputMode.C, 0.0, 1.0)],
)
def test_set_mode_writes_both_flags(connected, library, mode, a1, a2):
    assert connected.set_mode(mode) is True

    assert library.parameters[A1] == a1
    assert library.parameters[A2] == a2
    assert connected.current_mode is mode
    assert connected.last_applied_mode is mode


@pytest.mark.parametrize("mode", list(OutputMode))
def test_set_then_sync_round_trip(connected, mode):
    connected.set_mode(mode)
    connected.current_mode = None

    assert connected.sync_from_engine() is mode
    assert connected.current_mode is mode


def test_set_mode_requires_connection(controller, library, recorder):
    assert controller.set_mode(OutputMode.B) is False

    assert library.writes == []
    assert controller.last_applied_mode is None
    assert recorder.events == []


def test_same_mode_twice_notifies_once(connected, recorder):
    assert connected.set_mode(OutputMode.A) is True
    assert connected.set_mode(OutputMode.A) is True

    assert recorder.of(Notification.MODE_CHANGED) == [(OutputMode.A,)]


def test_failed_first_write_still_attempts_second(connected, library):
    library.rejected_parameters.add(A1)

    assert connected.set_mode(OutputMode.B) is False

    assert (A2, 1.0) in library.writes


def test_partial_failure_keeps_last_applied_mode(connected, library, recorder):
    connected.set_mode(OutputMode.A)
    library.rejected_parameters.add(A2)

    assert connected.set_mode(OutputMode.C) is False

    # A1 was switched off, A2 could not be switched on: no rollback
    assert library.parameters[A1] == 0.0
    assert connected.last_applied_mode is OutputMode.A
    assert connected.current_mode is OutputMode.A
    assert recorder.of(Notification.MODE_CHANGED) == [(OutputMode.A,)]


# ---------------------------------------------------------------------
# toggle_mode
# ---------------------------------------------------------------------

def test_toggle_alternates_between_a_and_b(connected):
    connected.set_mode(OutputMode.A)

    connected.toggle_mode()
    assert connected.current_mode is OutputMode.B

    connected.toggle_mode()
    assert connected.current_mode is OutputMode.A


def test_toggle_from_c_goes_to_a(connected):
    connected.set_mode(OutputMode.C)

    assert connected.toggle_mode() is True
    assert connected.current_mode is OutputMode.A


def test_toggle_without_mode_goes_to_a(connected):
    assert connected.toggle_mode() is True
    assert connected.current_mode is OutputMode.A


# ---------------------------------------------------------------------
# sync_from_engine
# ---------------------------------------------------------------------

def test_sync_keeps_mode_for_unmapped_flags(connected, library, recorder):
    connected.set_mode(OutputMode.B)
    library.parameters[A1] = 0.0
    library.parameters[A2] = 0.0

    assert connected.sync_from_engine() is OutputMode.B
    assert connected.current_mode is OutputMode.B
    assert len(recorder.of(Notification.MODE_CHANGED)) == 1


def test_sync_keeps_mode_for_unreadable_flags(connected, library):
    connected.set_mode(OutputMode.A)
    library.parameters[A1] = 0.0
    library.rejected_parameters.add(A2)

    assert connected.sync_from_engine() is OutputMode.A


def test_sync_picks_up_external_change(connected, library):
    connected.set_mode(OutputMode.A)
    library.parameters[A1] = 0.0
    library.parameters[A2] = 1.0

    assert connected.sync_from_engine() is OutputMode.C
    # Sync does not count as an applied mode
    assert connected.last_applied_mode is OutputMode.A


def test_poll_engine_changes_syncs_when_dirty(connected, library):
    connected.set_mode(OutputMode.A)

    assert connected.poll_engine_changes() is False

    library.external_change(A1, 1.0)
    library.external_change(A2, 1.0)
    assert connected.poll_engine_changes() is True
    assert connected.current_mode is OutputMode.B


# ---------------------------------------------------------------------
# restore_mode / strip settings
# ---------------------------------------------------------------------

def test_restore_uses_default_then_last_applied(transport, notifier, library):
    controller = ModeController(transport, notifier, strip_index=3, default_mode=OutputMode.C)
    transport.open()

    assert controller.restore_mode() is True
    assert controller.current_mode is OutputMode.C

    controller.set_mode(OutputMode.B)
    library.writes.clear()
    assert controller.restore_mode() is True
    assert library.writes == [(A1, 1.0), (A2, 1.0)]


def test_mute_and_gain(connected, library):
    assert connected.set_mute(True) is True
    assert connected.set_gain(-6.0) is True

    assert library.parameters["Strip[3].Mute"] == 1.0
    assert library.parameters["Strip[3].Gain"] == -6.0


def test_mute_requires_connection(controller, library):
    assert controller.set_mute(True) is False
    assert controller.set_gain(0.0) is False
    assert library.writes == []
