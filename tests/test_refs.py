#
# Inspecto - Reference Tracking Tests
#

# Local ----------------------------------------------------------------------------------------------------------------
from inspecto.refs import RefTracker


# Local Classes & Methods ----------------------------------------------------------------------------------------------

class Weakrefable:
    pass


# Tests ----------------------------------------------------------------------------------------------------------------

class TestRefTracker:
    def test_ensure_is_stable(self, opts):
        """Return one slot per object identity."""
        tracker = RefTracker(opts)
        obj = Weakrefable()
        ref = tracker.ensure(obj)
        assert tracker.ensure(obj) is ref
        assert tracker.get(obj) is ref

    def test_get_unseen(self, opts):
        """Return None for objects never seen."""
        assert RefTracker(opts).get(Weakrefable()) is None

    def test_non_weakrefable(self, opts):
        """Track lists and dicts, which cannot be weakly referenced."""
        tracker = RefTracker(opts)
        items = [1, 2]
        ref = tracker.ensure(items)
        assert tracker.get(items) is ref
        assert tracker.get([1, 2]) is None

    def test_set_binds_substitute(self, opts):
        """Bind a second object to an existing slot."""
        tracker = RefTracker(opts)
        original, substitute = Weakrefable(), {"x": 1}
        ref = tracker.ensure(original)
        tracker.set(substitute, ref)
        assert tracker.get(substitute) is ref

    def test_ids_are_lazy_and_sequential(self, opts):
        """Assign display ids in order of first use, starting at 1."""
        tracker = RefTracker(opts)
        first = tracker.ensure(Weakrefable())
        second = tracker.ensure([])
        assert second.id == 1
        assert first.id == 2
        assert second.id == 1

    def test_fresh_tracker_restarts_ids(self, opts):
        """Never share ids between trackers."""
        obj = Weakrefable()
        assert RefTracker(opts).ensure(obj).id == 1
        assert RefTracker(opts).ensure(obj).id == 1


class TestRef:
    def test_counter(self, opts):
        """Count active visits."""
        ref = RefTracker(opts).ensure(Weakrefable())
        assert ref.count == 0
        assert ref.increment() == 1
        assert ref.increment() == 2
        assert ref.decrement() == 1

    def test_circular_latch(self, opts):
        """Stay circular once marked."""
        ref = RefTracker(opts).ensure(Weakrefable())
        assert ref.circular is False
        ref.mark_circular()
        ref.increment()
        ref.decrement()
        assert ref.circular is True

    def test_closed_per_visit(self, opts):
        """Flag only the visit a cycle closed on."""
        ref = RefTracker(opts).ensure(Weakrefable())
        ref.increment()
        assert ref.closed is False
        ref.decrement()

        ref.increment()
        ref.mark_circular()
        assert ref.closed is True
        ref.decrement()

        ref.increment()
        assert ref.closed is False
        assert ref.circular is True

    def test_placeholder(self, opts):
        """Render as a circular placeholder of fixed reserved width."""
        ref = RefTracker(opts).ensure(Weakrefable())
        assert ref.length == len("[circular *]")
        assert ref.to_string(offset=4) == "[circular *1]"
        assert ref.to_string(indent=1) == "  [circular *1]"
