"""
test_render.py - Renderer dispatch and highlight addressing.

Tests cover:
1. Display order per container family
2. Highlight keys resolved by index, value, key or role, never by display position
3. Per-object failure containment (placeholder vs skipped)
4. Purity: no mutation, no aliasing, idempotent output
"""

import copy

import pytest

from algoviz.errors import ErrorCode
from algoviz.replay.display import Layout
from algoviz.replay.frames import Frame, HighlightState, VisualObject
from algoviz.replay.render import EMPTY_HISTORY_MESSAGE, render_frame, render_object

D = HighlightState.DEFAULT


def _render(type_tag, data, highlights=None):
    return render_object("x", VisualObject(type=type_tag, data=data, highlights=highlights or {}))


def _values(rendered):
    return [cell.value for cell in rendered.cells]


def _states(rendered):
    return [cell.state for cell in rendered.cells]


class TestSingleCells:
    def test_scalar_uses_key_zero(self):
        rendered = _render("scalar", 7, {"0": "active"})

        assert rendered.layout == Layout.CELL
        assert _values(rendered) == [7]
        assert _states(rendered) == [HighlightState.ACTIVE]

    def test_string_shown_quoted(self):
        rendered = _render("string", "abc")

        assert rendered.cells[0].text == '"abc"'
        assert rendered.cells[0].value == "abc"

    def test_bool_shown_as_literal(self):
        rendered = _render("bool", False, {"0": "found"})

        assert rendered.cells[0].text == "false"
        assert rendered.cells[0].state == HighlightState.FOUND

    def test_title_includes_type(self):
        assert _render("scalar", 1).title == "x (scalar)"


class TestSequences:
    @pytest.mark.parametrize("tag", ["vector", "list", "deque"])
    def test_storage_order_with_index_labels(self, tag):
        rendered = _render(tag, [30, 10, 20], {"1": "visited"})

        assert _values(rendered) == [30, 10, 20]
        assert [cell.label for cell in rendered.cells] == ["0", "1", "2"]
        assert _states(rendered) == [D, HighlightState.VISITED, D]

    def test_tuple_keys_by_index(self):
        rendered = _render("tuple", ["a", 2, True], {"2": "read"})

        assert _values(rendered) == ["a", 2, True]
        assert _states(rendered) == [D, D, HighlightState.READ]

    def test_pair_keys_zero_and_one(self):
        rendered = _render("pair", [5, "five"], {"0": "write", "1": "read"})

        assert _states(rendered) == [HighlightState.WRITE, HighlightState.READ]

    def test_matrix_keys_row_dash_col(self):
        rendered = _render("matrix", [[1, 2], [3, 4]], {"1-0": "found"})

        assert rendered.layout == Layout.GRID
        assert [[cell.value for cell in row] for row in rendered.rows] == [[1, 2], [3, 4]]
        assert rendered.rows[1][0].state == HighlightState.FOUND
        assert [cell.state for cell in rendered.cells].count(D) == 3


class TestSets:
    def test_sorted_ascending_highlight_by_value(self):
        rendered = _render("set", [3, 1, 2], {"2": "found"})

        assert _values(rendered) == [1, 2, 3]
        assert _states(rendered) == [D, HighlightState.FOUND, D]

    @pytest.mark.parametrize("tag", ["multiset", "unordered_set", "unordered_multiset"])
    def test_whole_family_sorts(self, tag):
        rendered = _render(tag, [9, 4, 7])

        assert _values(rendered) == [4, 7, 9]

    def test_duplicates_share_highlight(self):
        rendered = _render("multiset", [2, 1, 2], {"2": "visited"})

        assert _values(rendered) == [1, 2, 2]
        assert _states(rendered) == [D, HighlightState.VISITED, HighlightState.VISITED]

    def test_mixed_types_sort_numbers_first(self):
        rendered = _render("set", ["b", 3, "a", 1])

        assert _values(rendered) == [1, 3, "a", "b"]

    def test_integral_float_key(self):
        rendered = _render("set", [2.0, 1.5], {"2": "found", "1.5": "active"})

        assert _states(rendered) == [HighlightState.ACTIVE, HighlightState.FOUND]

    def test_string_values_keyed_verbatim(self):
        rendered = _render("set", ["pear", "apple"], {"pear": "found"})

        assert _values(rendered) == ["apple", "pear"]
        assert _states(rendered) == [D, HighlightState.FOUND]


class TestMaps:
    def test_sorted_by_key_highlight_on_value(self):
        data = [{"key": "b", "value": 2}, {"key": "a", "value": 1}]
        rendered = _render("map", data, {"a": "found"})

        assert rendered.layout == Layout.MAPPING
        assert [cell.label for cell in rendered.cells] == ["a", "b"]
        assert _values(rendered) == [1, 2]
        assert _states(rendered) == [HighlightState.FOUND, D]

    def test_numeric_keys_sort_numerically(self):
        data = [{"key": 10, "value": "ten"}, {"key": 2, "value": "two"}]
        rendered = _render("unordered_map", data, {"10": "active"})

        assert [cell.label for cell in rendered.cells] == ["2", "10"]
        assert _states(rendered) == [D, HighlightState.ACTIVE]

    def test_multimap_keeps_duplicate_keys(self):
        data = [{"key": 1, "value": "x"}, {"key": 1, "value": "y"}]
        rendered = _render("multimap", data)

        assert _values(rendered) == ["x", "y"]


class TestRoleAddressedContainers:
    def test_stack_top_first(self):
        rendered = _render("stack", [1, 2, 3], {"top": "active"})

        assert rendered.captions == ("TOP",)
        assert _values(rendered) == [3, 2, 1]
        assert _states(rendered) == [HighlightState.ACTIVE, D, D]

    def test_stack_ignores_index_keys(self):
        rendered = _render("stack", [1, 2, 3], {"0": "active", "2": "found"})

        assert _states(rendered) == [D, D, D]

    def test_queue_front_and_back(self):
        rendered = _render("queue", [1, 2, 3], {"front": "read", "back": "write"})

        assert rendered.captions == ("FRONT", "BACK")
        assert _values(rendered) == [1, 2, 3]
        assert _states(rendered) == [HighlightState.READ, D, HighlightState.WRITE]

    def test_single_element_queue_front_wins(self):
        rendered = _render("queue", [1], {"front": "read", "back": "write"})

        assert _states(rendered) == [HighlightState.READ]

    def test_priority_queue_descending_top_first(self):
        rendered = _render("priority_queue", [3, 9, 1], {"top": "found"})

        assert rendered.captions == ("MAX HEAP (TOP)",)
        assert _values(rendered) == [9, 3, 1]
        assert _states(rendered) == [HighlightState.FOUND, D, D]

    def test_empty_containers_render_no_cells(self):
        for tag in ("stack", "queue", "priority_queue"):
            assert _render(tag, []).cells == ()


class TestFailureContainment:
    def test_malformed_vector_is_placeholder_siblings_render(self):
        frame = Frame(objects={
            "bad": {"type": "vector", "data": "not-an-array"},
            "good": {"type": "vector", "data": [1, 2]},
        })

        rendered = render_frame(frame)

        bad, good = rendered.objects
        assert bad.placeholder
        assert bad.layout == Layout.PLACEHOLDER
        assert bad.cells == ()
        assert bad.error.code == ErrorCode.SCHEMA_VIOLATION
        assert not good.placeholder
        assert _values(good) == [1, 2]

    def test_unknown_type_is_skipped(self):
        frame = Frame(objects={
            "g": {"type": "graph", "data": {"nodes": []}},
            "n": {"type": "scalar", "data": 1},
        })

        rendered = render_frame(frame)

        assert [obj.name for obj in rendered.objects] == ["n"]
        assert rendered.skipped == ("g",)

    def test_missing_type_is_placeholder(self):
        rendered = render_object("v", VisualObject(data=[1]))

        assert rendered.placeholder
        assert rendered.type == "unknown"

    @pytest.mark.parametrize("tag,data", [
        ("scalar", "7"),
        ("scalar", True),
        ("string", 5),
        ("bool", 1),
        ("matrix", [1, 2]),
        ("map", [1, 2]),
        ("map", [{"key": 1}]),
        ("pair", [1, 2, 3]),
        ("set", None),
    ])
    def test_shape_mismatch_is_placeholder(self, tag, data):
        rendered = _render(tag, data)

        assert rendered.placeholder
        assert rendered.type == tag


class TestPurity:
    def _frame(self):
        return Frame(message="m", objects={
            "s": {"type": "set", "data": [3, 1, 2], "highlights": {"2": "found"}},
            "m": {"type": "map", "data": [{"key": 2, "value": [1]}, {"key": 1, "value": [2]}]},
            "st": {"type": "stack", "data": [1, 2, 3], "highlights": {"top": "active"}},
            "pq": {"type": "priority_queue", "data": [1, 5, 3]},
        })

    def test_render_does_not_mutate_frame(self):
        frame = self._frame()
        before = copy.deepcopy(frame.model_dump())

        render_frame(frame)
        render_frame(frame)

        assert frame.model_dump() == before
        assert frame.objects["s"].data == [3, 1, 2]
        assert frame.objects["st"].data == [1, 2, 3]

    def test_render_is_idempotent(self):
        frame = self._frame()

        assert render_frame(frame) == render_frame(frame)

    def test_cells_do_not_alias_frame_data(self):
        frame = self._frame()

        rendered = render_frame(frame)
        mapping = rendered.objects[1]
        mapping.cells[0].value.append(99)

        assert frame.objects["m"].data[1]["value"] == [2]

    def test_no_frame_shows_welcome_message(self):
        rendered = render_frame(None)

        assert rendered.message == EMPTY_HISTORY_MESSAGE
        assert rendered.objects == ()
