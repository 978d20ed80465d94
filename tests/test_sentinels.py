#
# Inspecto - Sentinels Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import copy
import pickle

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from inspecto.sentinels import UNSET, UnsetType, ifunset


# Tests ----------------------------------------------------------------------------------------------------------------

class TestUnset:
    def test_singleton_identity(self):
        """Ensure UNSET is a singleton object."""
        assert UNSET is UnsetType()

    def test_repr(self):
        """Assert repr shows the bare name."""
        assert repr(UNSET) == "UNSET"

    def test_falsy(self):
        """Check boolean conversion semantics."""
        assert bool(UNSET) is False

    def test_equality_is_identity(self):
        """Ensure equality with anything but itself is false."""
        assert UNSET == UNSET
        assert (UNSET == None) is False  # noqa: E711
        assert (UNSET == object()) is False

    def test_copy_keeps_identity(self):
        """Ensure copies are the singleton itself."""
        assert copy.copy(UNSET) is UNSET
        assert copy.deepcopy({"limit": UNSET})["limit"] is UNSET

    def test_pickle_roundtrip(self):
        """Ensure pickling preserves singleton identity."""
        data = pickle.dumps(UNSET, protocol=pickle.HIGHEST_PROTOCOL)
        assert pickle.loads(data) is UNSET


class TestIfUnset:
    @pytest.mark.parametrize(
        "value, default, expected",
        [
            pytest.param(UNSET, 40, 40, id="unset-default"),
            pytest.param(10, 40, 10, id="value"),
            pytest.param(0, 40, 0, id="falsy-value"),
            pytest.param(None, 40, None, id="none-kept"),
        ],
    )
    def test_core_behavior(self, value, default, expected):
        """Return default only for UNSET."""
        assert ifunset(value, default=default) == expected
