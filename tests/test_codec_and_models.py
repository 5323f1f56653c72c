# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from modeswitch.core.codec import ModeCodec
from modeswitch.core.models import (
    EngineVariant,
    OutputMode,
    ReconnectPolicy,
    RoutingFlags,
    StripParameter,
    strip_parameter,
)


# ---------------------------------------------------------------------
# ModeCodec
# ---------------------------------------------------------------------

def test_mode_to_flags_lookup():
    codec = ModeCodec()

    assert codec.to_flags(OutputMode.A) == RoutingFlags(primary=True, secondary=False)
    assert codec.to_flags(OutputMode.B) == RoutingFlags(primary=True, secondary=True)
    assert codec.to_flags(OutputMode.C) == RoutingFlags(primary=False, secondary=True)


def test_mapping_is_a_bijection_on_used_flag_pairs():
    codec = ModeCodec()

    flags = {codec.to_flags(mode) for mode in OutputMode}
    assert len(flags) == len(OutputMode)

    for mode in OutputMode:
        assert codec.from_flags(codec.to_flags(mode)) is mode


def test_both_outputs_off_has_no_mode():
    assert ModeCodec().from_flags(RoutingFlags(primary=False, secondary=False)) is None


# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------

@pytest.mark.parametrize("text,expected", [("a", OutputMode.A), (" B ", OutputMode.B), ("c", OutputMode.C)])
def test_output_mode_parse(text, expected):
    assert OutputMode.parse(text) is expected


def test_output_mode_parse_rejects_unknown():
    with pytest.raises(ValueError):
        OutputMode.parse("D")


def test_strip_parameter_name():
    assert strip_parameter(3, StripParameter.A1) == "Strip[3].A1"
    assert strip_parameter(0, StripParameter.MUTE) == "Strip[0].Mute"
    assert strip_parameter(5, StripParameter.GAIN) == "Strip[5].Gain"


def test_engine_variant_names():
    assert EngineVariant.from_id(2).display_name == "VoiceMeeter Banana"
    assert EngineVariant.from_id(3).display_name == "VoiceMeeter Potato"
    assert EngineVariant.from_id(42).display_name == "Unknown"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"probe_interval": 0},
        {"retry_interval": -1.0},
        {"max_attempts": -1},
    ],
)
def test_reconnect_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ReconnectPolicy(**kwargs)


def test_reconnect_policy_is_immutable():
    policy = ReconnectPolicy(max_attempts=3)

    assert policy.bounded
    with pytest.raises(AttributeError):
        policy.max_attempts = 5  # type: ignore[misc]
