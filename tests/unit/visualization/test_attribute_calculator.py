"""Tests for the encoding operations of AttributeCalculator."""
import pytest

from graph_encoding.core.exceptions import ConfigurationError, GraphReferenceError
from graph_encoding.visualization import AttributeCalculator, GraphSnapshot, StyleAccumulator
from graph_encoding.visualization.scale_mappers import resolve_palette


def sizes(acc):
    return {node_id: style.size for node_id, style in acc.node_styles.items()}


def colors(acc):
    return {node_id: style.color for node_id, style in acc.node_styles.items()}


class TestSizeNodes:
    def test_size_by_degree(self, accumulator, calculator):
        result = calculator.size_nodes_by(accumulator, metric="degree", size_range=(2, 10))
        assert sizes(result) == {"a": 2.0, "b": 10.0, "c": 6.0}

    def test_degree_is_the_default_source(self, accumulator, calculator):
        result = calculator.size_nodes_by(accumulator, size_range=(2, 10))
        assert result.node_style("b").size == 10.0
        assert result.legends["node_size"]["source"] == "degree"

    def test_missing_attribute_gets_min_size(self, accumulator, calculator):
        result = calculator.size_nodes_by(accumulator, attribute="score", size_range=(2, 10))
        assert sizes(result) == {"a": 2.0, "b": 10.0, "c": 2.0}

    def test_attribute_absent_everywhere(self, accumulator, calculator):
        with pytest.raises(ConfigurationError) as exc_info:
            calculator.size_nodes_by(accumulator, attribute="nope")
        assert exc_info.value.field == "nope"
        assert "nope" in str(exc_info.value)

    def test_non_numeric_attribute(self, accumulator, calculator):
        with pytest.raises(ConfigurationError) as exc_info:
            calculator.size_nodes_by(accumulator, attribute="group")
        assert exc_info.value.field == "group"

    def test_failed_operation_leaves_accumulator_untouched(self, accumulator, calculator):
        before = dict(accumulator.node_styles)
        with pytest.raises(ConfigurationError):
            calculator.size_nodes_by(accumulator, attribute="nope")
        assert dict(accumulator.node_styles) == before

    def test_supplied_values(self, accumulator, calculator):
        centrality = {"a": 0.0, "b": 1.0, "c": 0.5}
        result = calculator.size_nodes_by(accumulator, values=centrality, size_range=(4, 8))
        assert sizes(result) == {"a": 4.0, "b": 8.0, "c": 6.0}
        assert result.legends["node_size"]["source"] == "values"

    def test_only_targeted_nodes_change(self, accumulator, calculator):
        result = calculator.size_nodes_by(accumulator, size_range=(2, 10), ids=["a", "b"])
        assert sizes(result) == {"a": 2.0, "b": 10.0, "c": 10.0}

    def test_empty_target_set_is_a_no_op(self, accumulator, calculator):
        assert calculator.size_nodes_by(accumulator, ids=[]) is accumulator

    def test_unknown_target(self, accumulator, calculator):
        with pytest.raises(GraphReferenceError):
            calculator.size_nodes_by(accumulator, ids=["ghost"])

    def test_one_source_only(self, accumulator, calculator):
        with pytest.raises(ConfigurationError):
            calculator.size_nodes_by(accumulator, attribute="score", metric="degree")

    def test_unknown_metric(self, accumulator, calculator):
        with pytest.raises(ConfigurationError):
            calculator.size_nodes_by(accumulator, metric="betweenness")

    def test_directed_in_degree(self, calculator, defaults):
        snapshot = GraphSnapshot.from_records(
            [("a", {}), ("b", {}), ("c", {})], [("a", "b", {}), ("c", "b", {})], directed=True)
        acc = StyleAccumulator.initial(snapshot, defaults)
        result = calculator.size_nodes_by(acc, metric="in_degree", size_range=(1, 5))
        assert sizes(result) == {"a": 1.0, "b": 5.0, "c": 1.0}

    def test_fixed_size_drops_legend(self, accumulator, calculator):
        sized = calculator.size_nodes_by(accumulator)
        assert "node_size" in sized.legends
        fixed = calculator.size_nodes(sized, 12.0)
        assert set(sizes(fixed).values()) == {12.0}
        assert "node_size" not in fixed.legends


class TestColorNodes:
    def test_categorical_in_sorted_order(self, accumulator, calculator):
        result = calculator.color_nodes_by(accumulator, attribute="group")
        assert colors(result) == {"a": "#e41a1c", "b": "#377eb8", "c": "#e41a1c"}
        legend = result.legends["node_color"]
        assert legend["type"] == "categorical"
        assert [entry["value"] for entry in legend["entries"]] == ["A", "B"]

    def test_numeric_ramp_with_neutral_fallback(self, accumulator, calculator):
        viridis = resolve_palette("Viridis")
        result = calculator.color_nodes_by(accumulator, attribute="score")
        assert colors(result) == {"a": viridis[0], "b": viridis[-1], "c": "#cccccc"}
        assert result.legends["node_color"]["type"] == "continuous"

    def test_forced_categorical_kind(self, accumulator, calculator):
        result = calculator.color_nodes_by(
            accumulator, attribute="score", kind="categorical", palette=["#111111", "#222222"])
        assert colors(result) == {"a": "#111111", "b": "#222222", "c": "#cccccc"}

    def test_invalid_kind(self, accumulator, calculator):
        with pytest.raises(ConfigurationError):
            calculator.color_nodes_by(accumulator, attribute="group", kind="fancy")

    def test_requires_a_source(self, accumulator, calculator):
        with pytest.raises(ConfigurationError):
            calculator.color_nodes_by(accumulator)

    def test_custom_neutral_color(self, accumulator):
        calculator = AttributeCalculator(neutral_color="#000000")
        result = calculator.color_nodes_by(accumulator, attribute="score")
        assert result.node_style("c").color == "#000000"

    def test_fixed_color(self, accumulator, calculator):
        result = calculator.color_nodes(accumulator, "#00FF00", ids=["c"])
        assert colors(result) == {"a": "#1f77b4", "b": "#1f77b4", "c": "#00ff00"}


class TestComposition:
    def test_idempotent(self, accumulator, calculator):
        once = calculator.color_nodes_by(accumulator, attribute="group")
        twice = calculator.color_nodes_by(once, attribute="group")
        assert dict(once.node_styles) == dict(twice.node_styles)

    def test_different_fields_commute(self, accumulator, calculator):
        size_first = calculator.color_nodes_by(
            calculator.size_nodes_by(accumulator), attribute="group")
        color_first = calculator.size_nodes_by(
            calculator.color_nodes_by(accumulator, attribute="group"))
        assert dict(size_first.node_styles) == dict(color_first.node_styles)

    def test_last_write_wins_on_same_field(self, accumulator, calculator):
        overwritten = calculator.size_nodes_by(
            calculator.size_nodes_by(accumulator, attribute="score"), metric="degree")
        direct = calculator.size_nodes_by(accumulator, metric="degree")
        assert sizes(overwritten) == sizes(direct)

    def test_chaining_with_pipe(self, accumulator, calculator):
        result = (accumulator
                  .pipe(calculator.size_nodes_by, size_range=(2, 10))
                  .pipe(calculator.color_nodes_by, attribute="group")
                  .pipe(calculator.label_nodes_by))
        assert result.node_style("b").size == 10.0
        assert result.node_style("b").color == "#377eb8"
        assert result.node_style("b").label == "b"
        assert accumulator.node_style("b").label is None


class TestLabels:
    def test_label_by_id(self, accumulator, calculator):
        result = calculator.label_nodes_by(accumulator)
        assert [result.node_style(n).label for n in "abc"] == ["a", "b", "c"]

    def test_label_template_and_missing(self, accumulator, calculator):
        result = calculator.label_nodes_by(accumulator, attribute="score", template="{value:.1f}")
        assert [result.node_style(n).label for n in "abc"] == ["1.0", "5.0", None]

    def test_clear_labels(self, accumulator, calculator):
        labelled = calculator.label_nodes_by(accumulator)
        assert calculator.clear_labels(labelled).node_style("a").label is None


class TestFilters:
    def test_filter_nodes_by_attribute(self, accumulator, calculator):
        result = calculator.filter_nodes(accumulator, {"group": "A"})
        assert [result.node_style(n).visible for n in "abc"] == [True, False, True]

    def test_filter_nodes_by_min_degree(self, accumulator, calculator):
        result = calculator.filter_nodes(accumulator, min_degree=2)
        assert [result.node_style(n).visible for n in "abc"] == [False, True, True]

    def test_filter_shows_previously_hidden(self, accumulator, calculator):
        hidden = calculator.filter_nodes(accumulator, {"group": "A"})
        shown = calculator.filter_nodes(hidden, {"group": ["A", "B"]})
        assert all(style.visible for style in shown.node_styles.values())

    def test_filter_edges(self, accumulator, calculator):
        result = calculator.filter_edges(accumulator, {"kind": "friend"})
        visible = {edge_id: style.visible for edge_id, style in result.edge_styles.items()}
        assert visible == {"a--b": True, "b--c": False, "c--b#1": True}


class TestEdges:
    def test_width_by_weight(self, accumulator, calculator):
        result = calculator.size_edges_by(accumulator, width_range=(1, 3))
        widths = {edge_id: style.width for edge_id, style in result.edge_styles.items()}
        assert widths == {"a--b": 1.0, "b--c": 3.0, "c--b#1": 2.0}

    def test_color_by_kind(self, accumulator, calculator):
        result = calculator.color_edges_by(accumulator, attribute="kind")
        edge_colors = {edge_id: style.color for edge_id, style in result.edge_styles.items()}
        assert edge_colors == {"a--b": "#377eb8", "b--c": "#e41a1c", "c--b#1": "#cccccc"}

    def test_edge_color_requires_a_source(self, accumulator, calculator):
        with pytest.raises(ConfigurationError):
            calculator.color_edges_by(accumulator)

    def test_fixed_edge_color(self, accumulator, calculator):
        result = calculator.color_edges(accumulator, "#000")
        assert {style.color for style in result.edge_styles.values()} == {"#000000"}


def test_set_interaction(accumulator, calculator):
    result = calculator.set_interaction(accumulator, highlight="none", zoom=False)
    assert result.interaction.to_dict() == {"highlight": "none", "zoom": False, "pan": True}
