"""Unit tests for sort modes, ordering and QueryViewManager subscriptions."""

import pytest

from domain.services.query_view import QueryViewManager, SortMode, order_records
from tests.factories import make_record


class FakeSubscription:
    def __init__(self, kind: str, callback, query: str | None = None):
        self.kind = kind
        self.callback = callback
        self.query = query
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True


class FakeStore:
    """Records every live view request instead of running queries."""

    def __init__(self):
        self.subscriptions: list[FakeSubscription] = []

    def _add(self, kind, callback, query=None) -> FakeSubscription:
        subscription = FakeSubscription(kind, callback, query)
        self.subscriptions.append(subscription)
        return subscription

    def observe_by_recency(self, callback):
        return self._add("recency", callback)

    def observe_by_name(self, callback):
        return self._add("name", callback)

    def observe_by_location(self, callback):
        return self._add("location", callback)

    def observe_search(self, query, callback):
        return self._add("search", callback, query)

    @property
    def active(self) -> list[FakeSubscription]:
        return [s for s in self.subscriptions if s.active]

    @property
    def latest(self) -> FakeSubscription:
        return self.subscriptions[-1]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


# --- SortMode / order_records ---


class TestSortMode:
    def test_families(self):
        assert SortMode.NEWEST_FIRST.family == "recency"
        assert SortMode.OLDEST_FIRST.family == "recency"
        assert SortMode.NAME_Z_TO_A.family == "name"
        assert SortMode.LOCATION_A_TO_Z.family == "location"

    def test_reversed_modes(self):
        reversed_modes = {mode for mode in SortMode if mode.is_reversed}
        assert reversed_modes == {
            SortMode.OLDEST_FIRST,
            SortMode.NAME_Z_TO_A,
            SortMode.LOCATION_Z_TO_A,
        }


class TestOrderRecords:
    def test_presorted_forward_mode_is_untouched(self):
        records = [make_record(3), make_record(1), make_record(2)]

        assert order_records(records, SortMode.NAME_A_TO_Z) == records

    def test_presorted_reverse_mode_reverses(self):
        records = [make_record(3), make_record(1), make_record(2)]

        assert order_records(records, SortMode.OLDEST_FIRST) == records[::-1]

    def test_unsorted_recency_is_newest_first(self):
        records = [make_record(1), make_record(3), make_record(2)]

        ordered = order_records(records, SortMode.NEWEST_FIRST, presorted=False)

        assert [r.created_at for r in ordered] == sorted(
            (r.created_at for r in records), reverse=True
        )

    def test_unsorted_name_ties_break_on_identifier(self):
        a = make_record(1, first_name="Sam", last_name="Lee")
        b = make_record(2, first_name="Sam", last_name="Lee")

        forward = order_records([b, a], SortMode.NAME_A_TO_Z, presorted=False)
        backward = order_records([a, b], SortMode.NAME_Z_TO_A, presorted=False)

        assert forward == [a, b]
        assert backward == [b, a]

    def test_does_not_mutate_input(self):
        records = [make_record(1), make_record(2)]
        snapshot = list(records)

        order_records(records, SortMode.LOCATION_Z_TO_A, presorted=False)

        assert records == snapshot


# --- QueryViewManager ---


class TestSubscriptions:
    @pytest.mark.asyncio
    async def test_subscribes_to_recency_on_creation(self, store: FakeStore):
        QueryViewManager(store)

        assert [s.kind for s in store.active] == ["recency"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("mode", "kind"),
        [
            (SortMode.OLDEST_FIRST, "recency"),
            (SortMode.NAME_A_TO_Z, "name"),
            (SortMode.NAME_Z_TO_A, "name"),
            (SortMode.LOCATION_A_TO_Z, "location"),
            (SortMode.LOCATION_Z_TO_A, "location"),
        ],
    )
    async def test_mode_selects_store_view(self, store: FakeStore, mode: SortMode, kind: str):
        view = QueryViewManager(store)

        view.set_sort_mode(mode)

        assert [s.kind for s in store.active] == [kind]

    @pytest.mark.asyncio
    async def test_exactly_one_active_subscription(self, store: FakeStore):
        view = QueryViewManager(store)

        view.set_sort_mode(SortMode.NAME_A_TO_Z)
        view.set_search_text("ann")
        view.set_sort_mode(SortMode.LOCATION_Z_TO_A)
        view.clear_search()

        assert len(store.subscriptions) == 5
        assert store.active == [store.latest]
        assert store.latest.kind == "location"

    @pytest.mark.asyncio
    async def test_unchanged_values_do_not_resubscribe(self, store: FakeStore):
        view = QueryViewManager(store)

        view.set_sort_mode(SortMode.NEWEST_FIRST)
        view.set_search_text("")

        assert len(store.subscriptions) == 1

    @pytest.mark.asyncio
    async def test_search_passes_text_as_typed(self, store: FakeStore):
        view = QueryViewManager(store)

        view.set_search_text("  ann ")

        assert store.latest.kind == "search"
        assert store.latest.query == "  ann "
        assert view.search_text == "  ann "

    @pytest.mark.asyncio
    async def test_whitespace_search_uses_plain_view(self, store: FakeStore):
        view = QueryViewManager(store)
        view.set_sort_mode(SortMode.NAME_A_TO_Z)

        view.set_search_text("   ")

        assert store.latest.kind == "name"
        assert not view.is_searching

    @pytest.mark.asyncio
    async def test_close_cancels_and_keeps_last_results(self, store: FakeStore):
        view = QueryViewManager(store)
        records = [make_record(1)]
        store.latest.callback(records)

        view.close()

        assert store.active == []
        assert view.results.value == records


class TestSnapshots:
    @pytest.mark.asyncio
    async def test_snapshot_replaces_results(self, store: FakeStore):
        view = QueryViewManager(store)

        store.latest.callback([make_record(2), make_record(1)])
        store.latest.callback([make_record(3)])

        assert view.results.value == [make_record(3)]

    @pytest.mark.asyncio
    async def test_stale_subscription_snapshot_is_ignored(self, store: FakeStore):
        view = QueryViewManager(store)
        stale = store.latest
        view.set_sort_mode(SortMode.NAME_A_TO_Z)
        fresh = [make_record(1)]
        store.latest.callback(fresh)

        stale.callback([make_record(5), make_record(6)])

        assert view.results.value == fresh

    @pytest.mark.asyncio
    async def test_reverse_mode_reverses_store_order(self, store: FakeStore):
        view = QueryViewManager(store)
        view.set_sort_mode(SortMode.NAME_Z_TO_A)
        forward = [
            make_record(1, first_name="Ann"),
            make_record(2, first_name="Bob"),
            make_record(3, first_name="Cy"),
        ]

        store.latest.callback(forward)

        assert [r.first_name for r in view.results.value] == ["Cy", "Bob", "Ann"]

    @pytest.mark.asyncio
    async def test_search_snapshot_is_filtered_and_sorted(self, store: FakeStore):
        view = QueryViewManager(store)
        view.set_sort_mode(SortMode.LOCATION_A_TO_Z)
        view.set_search_text("an")
        ann = make_record(1, first_name="Ann", country="Sweden")
        dan = make_record(2, first_name="Dan", country="Austria")
        bob = make_record(3, first_name="Bob", last_name="Stone", email="bob@x.io")

        store.latest.callback([ann, dan, bob])

        assert view.results.value == [dan, ann]

    @pytest.mark.asyncio
    async def test_surrounding_spaces_are_part_of_the_match(self, store: FakeStore):
        view = QueryViewManager(store)
        view.set_search_text("ann ")
        ann = make_record(1, first_name="Ann", last_name="Lee")
        joann = make_record(2, first_name="Joann", last_name="Ann ")

        store.latest.callback([ann, joann])

        assert view.results.value == [joann]
