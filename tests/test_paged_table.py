"""Unit tests for the paged table model."""

import pytest

from auction_console.core.paged_table import (
    LoadStatus,
    PageResult,
    PagedTable,
    PagingPolicy,
    row_matches,
)
from auction_console.errors import ConfigurationError, FetchError
from auction_console.models.entities import Region


def loaded(table, rows, total):
    """Issue a refresh and apply a result to it."""
    request = table.refresh()
    assert table.apply_result(request, PageResult(rows=rows, total_count=total))
    return table


class TestConstruction:
    @pytest.mark.parametrize("size", [0, -1, 2.5, None, True])
    def test_non_positive_page_size_is_rejected(self, size):
        """Invalid page sizes fail at construction, not at render time."""
        with pytest.raises(ConfigurationError):
            PagedTable(page_size=size)

    def test_unknown_policy_is_rejected(self):
        with pytest.raises(ConfigurationError):
            PagedTable(policy="infinite")

    def test_server_search_requires_server_policy(self):
        with pytest.raises(ConfigurationError):
            PagedTable(policy=PagingPolicy.CLIENT, server_search=True)

    def test_set_page_size_validates(self):
        table = PagedTable(page_size=10)
        with pytest.raises(ConfigurationError):
            table.set_page_size(0)


class TestTotalPages:
    @pytest.mark.parametrize(
        "total,size,pages",
        [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3), (100, 7, 15)],
    )
    def test_derived_total_pages(self, total, size, pages):
        """derived_total_pages is max(1, ceil(total / size))."""
        table = loaded(PagedTable(page_size=size), [], total)
        assert table.derived_total_pages() == pages


class TestGoToPage:
    def test_clamps_above_and_below(self):
        """With 25 rows of 10 per page, 99 clamps to 3 and -5 clamps to 1."""
        table = loaded(PagedTable(page_size=10), [], 25)
        request = table.go_to_page(99)
        assert table.current_page == 3
        assert request.page == 3
        table.go_to_page(-5)
        assert table.current_page == 1

    def test_out_of_range_before_first_load_clamps_to_one(self):
        table = PagedTable(page_size=10)
        assert table.go_to_page(4).page == 1

    def test_later_request_wins(self):
        """A response for page 2 arriving after page 3 was requested is discarded."""
        table = loaded(PagedTable(page_size=10), [{"id": 1}], 30)
        page2 = table.go_to_page(2)
        page3 = table.go_to_page(3)
        assert table.apply_result(page3, PageResult(rows=[{"id": 3}], total_count=30))
        assert not table.apply_result(page2, PageResult(rows=[{"id": 2}], total_count=30))
        assert table.current_page == 3
        assert table.rows == ({"id": 3},)

    def test_stale_response_before_current_arrives_is_discarded(self):
        table = loaded(PagedTable(page_size=10), [{"id": 1}], 30)
        page2 = table.go_to_page(2)
        table.go_to_page(3)
        assert not table.apply_result(page2, PageResult(rows=[{"id": 2}], total_count=30))
        assert table.rows == ({"id": 1},)
        assert table.status is LoadStatus.LOADING

    def test_client_policy_pages_in_memory(self):
        """Once the full set is held, page changes need no fetch."""
        rows = [{"id": i, "name": f"r{i}"} for i in range(1, 26)]
        table = loaded(PagedTable(page_size=10, policy=PagingPolicy.CLIENT), rows, 25)
        assert table.go_to_page(3) is None
        assert [r["id"] for r in table.visible_rows()] == [21, 22, 23, 24, 25]
        assert table.status is LoadStatus.LOADED

    def test_pagination_controls(self):
        table = loaded(PagedTable(page_size=10), [], 80)
        table.go_to_page(1)
        assert table.page_window() == [1, 2, 3, 4, 5]
        assert table.show_pagination()
        assert not table.has_previous
        assert table.has_next

    def test_single_page_hides_pagination(self):
        table = loaded(PagedTable(page_size=10), [], 4)
        assert not table.show_pagination()
        assert table.page_window() == [1]


class TestSearch:
    def test_case_insensitive_substring(self):
        """'jed' matches Jeddah and nothing else."""
        rows = [{"name": "Riyadh"}, {"name": "Jeddah"}]
        table = loaded(PagedTable(page_size=10), rows, 2)
        assert table.set_search_term("jed") is None
        assert table.visible_rows() == [{"name": "Jeddah"}]

    def test_matches_any_field_and_keeps_order(self):
        rows = [
            Region(id=1, name="Olaya", parentName="Riyadh"),
            Region(id=2, name="Jeddah", parentName="Makkah"),
            Region(id=3, name="Riyadh"),
        ]
        table = loaded(PagedTable(page_size=10, policy="client"), rows, 3)
        table.set_search_term("RIYADH")
        assert [r.id for r in table.visible_rows()] == [1, 3]

    def test_server_policy_filters_current_page_only(self):
        """Local search keeps the backend total; it does not search other pages."""
        rows = [{"name": "Riyadh"}, {"name": "Jeddah"}]
        table = loaded(PagedTable(page_size=2), rows, 40)
        table.set_search_term("jed")
        assert len(table.visible_rows()) == 1
        assert table.total_count() == 40
        assert table.total_count_source == "backend"

    def test_client_policy_total_is_filtered_count(self):
        rows = [{"id": i, "name": "Jeddah" if i % 2 else "Riyadh"} for i in range(30)]
        table = loaded(PagedTable(page_size=10, policy="client"), rows, 30)
        table.go_to_page(3)
        table.set_search_term("jeddah")
        assert table.total_count() == 15
        assert table.current_page == 1
        assert table.derived_total_pages() == 2
        assert table.total_count_source == "filtered"

    def test_server_search_forwards_term_without_local_filter(self):
        table = loaded(PagedTable(page_size=10, server_search=True), [], 50)
        table.go_to_page(4)
        request = table.set_search_term("jed")
        assert request.search == "jed"
        assert request.page == 1
        table.apply_result(request, PageResult(rows=[{"name": "Riyadh"}], total_count=1))
        assert table.visible_rows() == [{"name": "Riyadh"}]

    def test_nested_values_are_ignored(self):
        assert not row_matches({"name": "x", "tags": ["jeddah"]}, "jed")

    def test_booleans_match_lowercase_text(self):
        assert row_matches({"isActive": True}, "true")


class TestErrors:
    def test_error_keeps_previous_rows(self):
        table = loaded(PagedTable(page_size=10), [{"id": 1}], 1)
        request = table.refresh()
        assert table.apply_error(request, FetchError("down"))
        assert table.status is LoadStatus.ERROR
        assert table.error == "down"
        assert table.rows == ({"id": 1},)

    def test_stale_error_is_ignored(self):
        table = loaded(PagedTable(page_size=10), [{"id": 1}], 30)
        old = table.go_to_page(2)
        table.go_to_page(3)
        assert not table.apply_error(old, FetchError("late"))
        assert table.error is None


class TestLanguage:
    """Rows are localized by the backend, so a language switch refetches."""

    def test_first_language_does_not_fetch_by_itself(self):
        table = PagedTable(page_size=10)
        assert table.set_language("ar") is None
        request = table.go_to_page(1)
        assert request.language == "ar"

    def test_switch_refetches_current_page(self):
        table = PagedTable(page_size=10)
        table.set_language("ar")
        loaded(table, [{"id": 1, "name": "فئة"}], 30)
        table.go_to_page(2)
        request = table.set_language("en")
        assert request is not None
        assert (request.page, request.language) == (2, "en")
        assert table.status is LoadStatus.LOADING

    def test_same_language_is_a_no_op(self):
        table = PagedTable(page_size=10)
        table.set_language("ar")
        loaded(table, [{"id": 1}], 1)
        assert table.set_language("ar") is None

    def test_switch_supersedes_in_flight_request(self):
        table = PagedTable(page_size=10)
        table.set_language("ar")
        old = table.go_to_page(1)
        new = table.set_language("en")
        assert not table.apply_result(old, PageResult(rows=[{"id": 1}], total_count=1))
        assert table.apply_result(new, PageResult(rows=[{"id": 2}], total_count=1))
        assert table.rows == ({"id": 2},)

    def test_client_policy_refetches_full_set(self):
        table = PagedTable(page_size=10, policy=PagingPolicy.CLIENT)
        table.set_language("ar")
        loaded(table, [{"id": 1}], 1)
        assert table.go_to_page(1) is None
        assert table.set_language("en") is not None
