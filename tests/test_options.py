#
# Inspecto - Options Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import dataclasses
import importlib.util
import math

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
import inspecto.options

from inspecto.options import InspectOptions, configure, get_options
from inspecto.sentinels import UNSET


# Tests ----------------------------------------------------------------------------------------------------------------

class TestInspectOptions:
    def test_defaults(self):
        """Match the documented defaults."""
        opts = InspectOptions()
        assert opts.colors is False
        assert opts.depth == 2
        assert opts.break_length == 80
        assert opts.stylize is None
        assert opts.max_array_length == 40
        assert opts.max_map_length is UNSET
        assert opts.include_private is True
        assert opts.on_error == "mark"

    def test_frozen(self):
        """Reject mutation."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            InspectOptions().depth = 3

    def test_bool_cast(self):
        """Cast flag fields to bool."""
        opts = InspectOptions(colors=1, include_private=0)
        assert opts.colors is True
        assert opts.include_private is False

    @pytest.mark.parametrize(
        "kwargs, error, match",
        [
            pytest.param({"depth": -1}, ValueError, r"depth must be non-negative", id="negative-depth"),
            pytest.param({"depth": 1.5}, TypeError, r"depth must be an int", id="float-depth"),
            pytest.param({"depth": True}, TypeError, r"depth must be an int", id="bool-depth"),
            pytest.param({"break_length": 0}, ValueError, r"break_length must be positive", id="zero-break"),
            pytest.param({"break_length": "80"}, TypeError, r"break_length must be a number", id="str-break"),
            pytest.param({"stylize": "red"}, TypeError, r"stylize must be callable", id="stylize"),
            pytest.param({"max_array_length": -2}, ValueError, r"max_array_length", id="negative-limit"),
            pytest.param({"max_set_length": "5"}, TypeError, r"max_set_length", id="str-set-limit"),
            pytest.param({"on_error": "ignore"}, ValueError, r"on_error must be one of", id="on-error"),
        ],
    )
    def test_validation(self, kwargs, error, match):
        """Validate option values at construction."""
        with pytest.raises(error, match=match):
            InspectOptions(**kwargs)

    def test_unlimited(self):
        """Accept None limits and an infinite break length."""
        opts = InspectOptions(depth=None, break_length=math.inf, max_array_length=None)
        assert opts.depth is None
        assert opts.limit("max_map_length") is None

    def test_merge_validates(self):
        """Return a validated copy from merge()."""
        opts = InspectOptions()
        merged = opts.merge(depth=5)
        assert merged.depth == 5
        assert opts.depth == 2
        with pytest.raises(ValueError):
            opts.merge(depth=-1)
        with pytest.raises(TypeError):
            opts.merge(no_such_option=1)

    @pytest.mark.parametrize(
        "kwargs, name, expected",
        [
            pytest.param({}, "max_set_length", 40, id="inherit-default"),
            pytest.param({"max_array_length": 3}, "max_buffer_length", 3, id="inherit-custom"),
            pytest.param({"max_array_length": 3, "max_buffer_length": 7}, "max_buffer_length", 7, id="own"),
            pytest.param({"max_map_length": None}, "max_map_length", None, id="own-unlimited"),
        ],
    )
    def test_limit(self, kwargs, name, expected):
        """Resolve per-kind limits against max_array_length."""
        assert InspectOptions(**kwargs).limit(name) == expected

    @pytest.mark.parametrize(
        "preset, depth, colors",
        [
            pytest.param(InspectOptions.compact, 1, False, id="compact"),
            pytest.param(InspectOptions.debug, 6, True, id="debug"),
            pytest.param(InspectOptions.logging, 3, False, id="logging"),
        ],
    )
    def test_presets(self, preset, depth, colors):
        """Build presets as valid options."""
        opts = preset()
        assert isinstance(opts, InspectOptions)
        assert opts.depth == depth
        assert opts.colors is colors


class TestConfigure:
    def test_get_options_default(self):
        """Start from the default options."""
        assert get_options() == InspectOptions()

    def test_fresh_import(self):
        """Build the module defaults while the module is first executed."""
        spec = importlib.util.spec_from_file_location("inspecto._options_fresh", inspecto.options.__file__)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        assert module.get_options() == module.InspectOptions()

    def test_preset_and_overrides(self):
        """Apply a preset, then overrides."""
        opts = configure(preset="logging", depth=5)
        assert opts.depth == 5
        assert opts.break_length == 120
        assert get_options() is opts

    def test_incremental(self):
        """Build on the current defaults without a preset."""
        configure(depth=4)
        configure(max_array_length=3)
        assert get_options().depth == 4
        assert get_options().max_array_length == 3

    def test_unknown_preset(self):
        """Reject unknown preset names."""
        with pytest.raises(ValueError, match=r"preset must be one of"):
            configure(preset="verbose")
