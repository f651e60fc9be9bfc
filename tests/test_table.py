"""
tests/test_table.py — Table search/sort/paginate state and CSV export
Run: python -m pytest tests/test_table.py -v
"""
from datetime import date

import pytest

from sitedesk.core.csv_export import BOM, build_csv, export_filename
from sitedesk.core.errors import ValidationError
from sitedesk.core.table import TableState, order_by_created, page_count

ROWS = [{"id": str(i), "name": f"Row {i:02d}", "code": f"C{i}"} for i in range(1, 24)]


# ─── Pagination ─────────────────────────────────────────────────────────────

class TestPagination:

    def test_first_page(self):
        page = TableState().apply(ROWS, ("name",))
        assert page.total == 23
        assert page.page_count == 3
        assert [r["id"] for r in page.rows] == [str(i) for i in range(1, 11)]
        assert page.start_index == 1

    def test_last_page_is_partial(self):
        state = TableState()
        state.apply(ROWS, ("name",))
        state.set_page(3)
        page = state.apply(ROWS, ("name",))
        assert len(page.rows) == 3
        assert page.start_index == 21

    def test_page_clamped_to_range(self):
        state = TableState()
        state.apply(ROWS, ("name",))
        state.set_page(99)
        assert state.page == 3
        state.set_page(-4)
        assert state.page == 1

    def test_page_count_never_below_one(self):
        assert page_count(0, 10) == 1
        page = TableState().apply([], ("name",))
        assert page.page_count == 1
        assert page.start_index == 0

    @pytest.mark.parametrize("total,size,expected", [(10, 10, 1), (11, 10, 2), (100, 25, 4)])
    def test_page_count(self, total, size, expected):
        assert page_count(total, size) == expected

    def test_page_size_resets_page(self):
        state = TableState(page=3)
        state.set_page_size(25)
        assert state.page == 1
        assert state.apply(ROWS, ("name",)).page_count == 1

    def test_invalid_page_size(self):
        with pytest.raises(ValidationError):
            TableState().set_page_size(7)
        with pytest.raises(ValidationError):
            TableState().set_page_size("lots")


# ─── Search ─────────────────────────────────────────────────────────────────

class TestSearch:

    def test_case_insensitive_across_fields(self):
        state = TableState()
        state.set_search("c2")
        page = state.apply(ROWS, ("name", "code"))
        assert {r["code"] for r in page.rows} == {"C2", "C20", "C21", "C22", "C23"}

    def test_search_resets_page(self):
        state = TableState(page=2)
        state.set_search("row")
        assert state.page == 1

    def test_none_values_never_match(self):
        state = TableState()
        state.set_search("none")
        assert state.apply([{"name": None}], ("name",)).total == 0


# ─── Sorting ────────────────────────────────────────────────────────────────

class TestSorting:

    def test_three_state_cycle(self):
        state = TableState()
        state.toggle_sort("name")
        assert (state.sort_key, state.sort_dir) == ("name", "asc")
        state.toggle_sort("name")
        assert state.sort_dir == "desc"
        state.toggle_sort("name")
        assert (state.sort_key, state.sort_dir) == (None, None)

    def test_other_column_starts_ascending(self):
        state = TableState()
        state.toggle_sort("name")
        state.toggle_sort("name")
        state.toggle_sort("code")
        assert (state.sort_key, state.sort_dir) == ("code", "asc")

    def test_unsorted_keeps_source_order(self):
        rows = [{"name": "b"}, {"name": "a"}]
        assert TableState().sort(rows) == rows

    def test_descending(self):
        state = TableState(sort_key="name", sort_dir="desc")
        page = state.apply(ROWS, ("name",))
        assert page.rows[0]["name"] == "Row 23"

    def test_ties_keep_original_order(self):
        rows = [{"id": "1", "s": "x"}, {"id": "2", "s": "x"}, {"id": "3", "s": "a"}]
        state = TableState(sort_key="s", sort_dir="asc")
        assert [r["id"] for r in state.sort(rows)] == ["3", "1", "2"]

    def test_dates_sort_chronologically(self):
        rows = [{"date": "2025-10-01"}, {"date": "2025-08-31"}, {"date": "2025-9-5"}]
        state = TableState(sort_key="date", sort_dir="asc")
        assert [r["date"] for r in state.sort(rows, date_fields=("date",))] == [
            "2025-08-31", "2025-9-5", "2025-10-01"]

    def test_order_by_created(self):
        rows = [{"n": 1, "createdAt": "2024-02-01T00:00:00.000Z"},
                {"n": 2, "createdAt": "2024-03-01T00:00:00.000Z"},
                {"n": 3, "createdAt": "2024-01-01T00:00:00.000Z"}]
        assert [r["n"] for r in order_by_created(rows, "recent")] == [2, 1, 3]
        assert [r["n"] for r in order_by_created(rows, "oldest")] == [3, 1, 2]
        assert [r["n"] for r in order_by_created(rows)] == [1, 2, 3]


# ─── Query args ─────────────────────────────────────────────────────────────

class TestFromArgs:

    def test_defaults(self):
        state = TableState.from_args({})
        assert (state.search, state.sort_key, state.page, state.page_size) == ("", None, 1, 10)

    def test_all_params(self):
        state = TableState.from_args({"search": "hv", "sort": "date", "dir": "DESC",
                                      "page": "2", "page_size": "25"})
        assert state.search == "hv"
        assert (state.sort_key, state.sort_dir) == ("date", "desc")
        assert state.page == 2
        assert state.page_size == 25

    def test_bad_direction(self):
        with pytest.raises(ValidationError):
            TableState.from_args({"sort": "name", "dir": "sideways"})

    def test_bad_page_falls_back(self):
        assert TableState.from_args({"page": "abc"}).page == 1


# ─── CSV ────────────────────────────────────────────────────────────────────

class TestCsv:

    def test_bom_header_and_quoting(self):
        body = build_csv(["#", "Name"], [[1, 'Say "hi"'], [2, None]])
        assert body.startswith(BOM)
        lines = body[len(BOM):].split("\n")
        assert lines[0] == "#,Name"
        assert lines[1] == '"1","Say ""hi"""'
        assert lines[2] == '"2",""'

    def test_commas_stay_inside_quotes(self):
        body = build_csv(["A"], [["Pune, MH"]])
        assert body.endswith('"Pune, MH"')

    def test_export_filename(self):
        assert export_filename("user-roles", date(2025, 3, 9)) == "user-roles_2025-03-09.csv"
