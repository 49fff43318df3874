"""Tests for the query engine."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from ledger.analytics import InvalidSnapshotError
from ledger.models.transaction import QueryOptions
from ledger.queries import InvalidQueryError, QueryExecutor, execute_query


@pytest.fixture
def executor():
    return QueryExecutor()


class TestFiltering:
    """Tests for search, type and category filters."""

    def test_scenario_expense_by_amount_desc(self, executor, scenario_snapshot):
        """Test expenses sorted largest first."""
        result = executor.execute(
            scenario_snapshot,
            QueryOptions(type_filter="expense", sort_by="amount", sort_order="desc"),
        )
        assert [t.category for t in result.transactions] == ["Housing", "Food"]
        assert [t.amount for t in result.transactions] == [Decimal("1200"), Decimal("350")]
        assert result.match_count == 2
        assert result.total_count == 3

    def test_search_is_case_insensitive(self, executor, scenario_snapshot):
        """Test 'grocery' finds 'Grocery Shopping'."""
        result = executor.execute(scenario_snapshot, QueryOptions(search_term="grocery"))
        assert [t.description for t in result.transactions] == ["Grocery Shopping"]

    def test_search_uses_simple_lowercasing(self, executor, txn):
        """Test matching lowercases both sides without case folding."""
        street = txn(5, description="Straße parking")
        result = executor.execute([street], QueryOptions(search_term="STRASSE"))
        assert result.match_count == 0
        result = executor.execute([street], QueryOptions(search_term="STRAßE"))
        assert result.transactions == (street,)

    def test_search_matches_category(self, executor, scenario_snapshot):
        """Test the search term also matches the category."""
        result = executor.execute(scenario_snapshot, QueryOptions(search_term="HOUS"))
        assert [t.category for t in result.transactions] == ["Housing"]

    def test_empty_search_matches_everything(self, executor, scenario_snapshot):
        """Test an empty term filters nothing."""
        result = executor.execute(scenario_snapshot, QueryOptions(search_term=""))
        assert result.match_count == 3

    def test_category_filter_exact(self, executor, txn):
        """Test category filter is an exact match, not a substring."""
        records = [txn(1, category="Food"), txn(2, category="Food & Drink")]
        result = executor.execute(records, QueryOptions(category_filter="Food"))
        assert [t.category for t in result.transactions] == ["Food"]

    def test_filters_are_anded(self, executor, txn):
        """Test a record must satisfy every active filter."""
        records = [
            txn(1, "income", "Gift", "Birthday gift"),
            txn(2, "expense", "Gift", "Gift for Sam"),
            txn(3, "expense", "Food", "Gift card lunch"),
        ]
        result = executor.execute(
            records,
            QueryOptions(search_term="gift", type_filter="expense", category_filter="Gift"),
        )
        assert [t.amount for t in result.transactions] == [Decimal("2")]

    def test_filtering_is_a_fixed_point(self, executor, scenario_snapshot, txn):
        """Test re-applying options to a result returns the same result."""
        records = scenario_snapshot + [txn(350, category="Food", description="Grocery run")]
        options = QueryOptions(search_term="o", sort_by="amount", sort_order="asc")
        first = executor.execute(records, options)
        second = executor.execute(first.transactions, options)
        assert second.transactions == first.transactions

    def test_empty_snapshot(self, executor):
        """Test zero of zero."""
        result = executor.execute([], QueryOptions())
        assert result.transactions == ()
        assert (result.match_count, result.total_count) == (0, 0)


class TestSorting:
    """Tests for sort order and stability."""

    def test_date_desc_by_default(self, executor, scenario_snapshot):
        """Test newest first when no options are given."""
        result = executor.execute(scenario_snapshot)
        assert [t.date.day for t in result.transactions] == [3, 2, 1]

    def test_date_asc(self, executor, scenario_snapshot):
        """Test oldest first."""
        result = executor.execute(scenario_snapshot, QueryOptions(sort_order="asc"))
        assert [t.date.day for t in result.transactions] == [1, 2, 3]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_amount_sort_is_stable(self, executor, txn, order):
        """Test equal amounts keep snapshot order in either direction."""
        first = txn(50, description="first")
        second = txn(50, description="second")
        records = [txn(10), first, txn(90), second]
        result = executor.execute(records, QueryOptions(sort_by="amount", sort_order=order))
        same = [t for t in result.transactions if t.amount == 50]
        assert same == [first, second]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_date_sort_is_stable(self, executor, txn, order):
        """Test equal dates keep snapshot order in either direction."""
        when = datetime(2024, 2, 2, 9, 0)
        a = txn(1, date=when)
        b = txn(2, date=when)
        result = executor.execute([b, a], QueryOptions(sort_order=order))
        assert list(result.transactions) == [b, a]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_date_sort_handles_range_extremes(self, executor, txn, order):
        """Test the earliest and latest representable dates sort without error."""
        earliest = txn(1, date=datetime.min)
        middle = txn(2, date=datetime(2024, 1, 1))
        latest = txn(3, date=datetime.max)
        result = executor.execute([middle, latest, earliest], QueryOptions(sort_order=order))
        expected = [earliest, middle, latest]
        if order == "desc":
            expected.reverse()
        assert list(result.transactions) == expected

    def test_date_sort_handles_aware_extremes(self, executor, txn):
        """Test offsets at the edges of the range do not overflow."""
        east = timezone(timedelta(hours=5))
        west = timezone(timedelta(hours=-5))
        early = txn(1, date=datetime(1, 1, 1, tzinfo=east))
        late = txn(2, date=datetime(9999, 12, 31, 23, tzinfo=west))
        result = executor.execute([late, early], QueryOptions(sort_order="asc"))
        assert list(result.transactions) == [early, late]

    def test_aware_dates_compare_in_utc(self, executor, txn):
        """Test aware dates order by instant, not by wall clock."""
        plus_two = timezone(timedelta(hours=2))
        # 10:00+02:00 is 08:00 UTC, earlier than 09:00 UTC
        earlier = txn(1, date=datetime(2024, 1, 5, 10, tzinfo=plus_two))
        later = txn(2, date=datetime(2024, 1, 5, 9, tzinfo=timezone.utc))
        result = executor.execute([later, earlier], QueryOptions(sort_order="asc"))
        assert list(result.transactions) == [earlier, later]

    def test_mixed_naive_and_aware_dates(self, executor, txn):
        """Test naive dates are read as UTC wall clock alongside aware ones."""
        naive = txn(1, date=datetime(2024, 1, 5, 9, 30))
        aware_before = txn(2, date=datetime(2024, 1, 5, 9, tzinfo=timezone.utc))
        plus_two = timezone(timedelta(hours=2))
        aware_after = txn(3, date=datetime(2024, 1, 5, 12, tzinfo=plus_two))
        result = executor.execute(
            [aware_after, naive, aware_before], QueryOptions(sort_order="asc")
        )
        assert list(result.transactions) == [aware_before, naive, aware_after]

    def test_result_references_snapshot_records(self, executor, scenario_snapshot):
        """Test results hold the snapshot's own records."""
        result = executor.execute(scenario_snapshot)
        assert all(any(t is s for s in scenario_snapshot) for t in result.transactions)


class TestOptionsBoundary:
    """Tests for configuration handling."""

    def test_accepts_mapping(self, executor, scenario_snapshot):
        """Test options can arrive as a plain mapping."""
        result = executor.execute(scenario_snapshot, {"type_filter": "income"})
        assert [t.category for t in result.transactions] == ["Salary"]

    def test_rejects_bad_mapping(self, executor, scenario_snapshot):
        """Test unknown values are rejected at the boundary."""
        with pytest.raises(InvalidQueryError):
            executor.execute(scenario_snapshot, {"sort_by": "category"})

    def test_rejects_unknown_key(self, executor, scenario_snapshot):
        """Test unknown keys are rejected at the boundary."""
        with pytest.raises(InvalidQueryError):
            executor.execute(scenario_snapshot, {"sortBy": "amount"})

    def test_rejects_malformed_snapshot(self, executor):
        """Test malformed records fail fast."""
        with pytest.raises(InvalidSnapshotError):
            executor.execute([object()])

    def test_execute_query_shortcut(self, scenario_snapshot):
        """Test the module-level shortcut."""
        assert execute_query(scenario_snapshot).match_count == 3


class TestCategoryEnumeration:
    """Tests for list_categories."""

    def test_sorted_distinct(self, executor, txn):
        """Test categories are distinct and lexicographic."""
        records = [
            txn(1, category="Transportation"),
            txn(1, "income", "Salary"),
            txn(1, category="Food"),
            txn(1, category="Food"),
        ]
        assert executor.list_categories(records) == ["Food", "Salary", "Transportation"]

    def test_only_present_categories(self, executor):
        """Test an empty snapshot offers no categories."""
        assert executor.list_categories([]) == []
