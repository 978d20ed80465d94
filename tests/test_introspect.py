#
# Inspecto - Introspect Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import asyncio
import concurrent.futures
import ctypes

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from inspecto.introspect import (
    FutureState, external_address, future_result, future_state, instance_dict, own_attr_names, read_attr,
    slot_names,
)


# Local Classes & Methods ----------------------------------------------------------------------------------------------

class Slotted:
    __slots__ = ("a", "b")

    def __init__(self):
        self.a = 1


class SlottedChild(Slotted):
    __slots__ = ("c",)


class Tagged(list):
    pass


# Tests ----------------------------------------------------------------------------------------------------------------

class TestFutureState:
    def test_concurrent_future(self):
        """Track a concurrent.futures.Future through its states."""
        fut = concurrent.futures.Future()
        assert future_state(fut) is FutureState.PENDING
        assert future_result(fut) is None
        fut.set_result(42)
        assert future_state(fut) is FutureState.FULFILLED
        assert future_result(fut) == 42

    def test_rejected(self):
        """Report the exception of a failed future."""
        fut = concurrent.futures.Future()
        error = ValueError("boom")
        fut.set_exception(error)
        assert future_state(fut) is FutureState.REJECTED
        assert future_result(fut) is error

    def test_cancelled(self):
        """Report cancelled futures."""
        fut = concurrent.futures.Future()
        fut.cancel()
        assert future_state(fut) is FutureState.CANCELLED

    def test_asyncio_future(self):
        """Read asyncio futures without a running loop."""
        loop = asyncio.new_event_loop()
        try:
            fut = loop.create_future()
            assert future_state(fut) is FutureState.PENDING
            fut.set_exception(KeyError("k"))
            assert future_state(fut) is FutureState.REJECTED
            assert isinstance(future_result(fut), KeyError)
            # Retrieve it so the loop does not log "exception was never retrieved"
            fut.exception()
        finally:
            loop.close()


class TestExternalAddress:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(ctypes.c_void_p(0x1000), 0x1000, id="void-pointer"),
            pytest.param(ctypes.c_void_p(None), 0, id="null"),
        ],
    )
    def test_void_pointer(self, value, expected):
        """Read the address of void pointers."""
        assert external_address(value) == expected

    def test_typed_pointer(self):
        """Read the address of typed pointers."""
        target = ctypes.c_int(7)
        assert external_address(ctypes.pointer(target)) == ctypes.addressof(target)

    def test_not_a_handle(self):
        """Return None for values without an address."""
        assert external_address(object()) is None


class TestOwnAttrs:
    def test_instance_dict(self):
        """List __dict__ entries in insertion order."""

        class Obj:
            def __init__(self):
                self.b = 1
                self.a = 2

        assert own_attr_names(Obj()) == ["b", "a"]

    def test_slots_across_mro(self):
        """List slot names of the whole hierarchy, set or not."""
        assert slot_names(SlottedChild()) == ["a", "b", "c"]
        assert own_attr_names(Slotted()) == ["a", "b"]

    def test_collection_subclass(self):
        """List only named attributes of indexed collections."""
        t = Tagged([1, 2])
        t.label = "x"
        assert own_attr_names(t) == ["label"]
        assert own_attr_names([1, 2]) == []

    @pytest.mark.parametrize(
        "include_private, expected",
        [
            pytest.param(True, ["public", "_private"], id="include"),
            pytest.param(False, ["public"], id="exclude"),
        ],
    )
    def test_private_filter(self, include_private, expected):
        """Filter underscore names on request; never list dunders."""

        class Obj:
            pass

        obj = Obj()
        obj.public = 1
        obj._private = 2
        obj.__dict__["__dunder__"] = 3
        assert own_attr_names(obj, include_private) == expected

    def test_instance_dict_bypasses_getattr(self):
        """Read __dict__ without triggering __getattr__."""

        class Lazy:
            def __getattr__(self, name):
                raise RuntimeError(name)

        assert instance_dict(Lazy()) == {}
        assert instance_dict(1) is None


class TestReadAttr:
    def test_dict_and_slot(self):
        """Read dict entries and set slots."""
        assert read_attr(Slotted(), "a") == 1

    def test_unset_slot(self):
        """Raise AttributeError for unset slots."""
        with pytest.raises(AttributeError):
            read_attr(Slotted(), "b")
