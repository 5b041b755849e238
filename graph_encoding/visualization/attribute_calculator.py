"""Attribute Calculator for Graph Visualization

Encoding operations that turn node/edge attributes and metrics into
style fields. Every operation validates its input, builds a scale from the
values present at call time, writes one field through the accumulator and
returns the new accumulator.
"""

from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from graph_encoding.core.exceptions import ConfigurationError
from graph_encoding.core.logging_config import get_logger
from graph_encoding.core.standard_config import get_config_section
from .scale_mappers import (
    CategoricalColorScale,
    ColorRampScale,
    ColorSpec,
    FixedScale,
    LabelScale,
    LinearSizeScale,
    is_numeric_domain,
    present_values,
)
from .style_accumulator import StyleAccumulator
from .visualization_data_models import AttributeKind, Metric, NodeId, ValueSource, matches_filters

logger = get_logger(__name__)


class AttributeCalculator:
    """Calculate node and edge encodings for visualization"""

    def __init__(self, size_range: Optional[Sequence[float]] = None,
                 width_range: Optional[Sequence[float]] = None,
                 qualitative_palette: Optional[ColorSpec] = None,
                 sequential_palette: Optional[ColorSpec] = None,
                 neutral_color: Optional[str] = None):
        node = get_config_section("node")
        edge = get_config_section("edge")
        colors = get_config_section("colors")

        self.size_range = tuple(size_range or node.get("size_range", (5.0, 30.0)))
        self.width_range = tuple(width_range or edge.get("width_range", (0.5, 5.0)))
        self.qualitative_palette = qualitative_palette or colors.get("qualitative_palette", "Set1")
        self.sequential_palette = sequential_palette or colors.get("sequential_palette", "Viridis")
        self.neutral_color = neutral_color or colors.get("neutral", "#cccccc")

    # Node encodings

    def size_nodes_by(self, acc: StyleAccumulator, attribute: Optional[str] = None,
                      metric: Optional[Union[str, Metric]] = None,
                      values: Optional[Mapping[NodeId, Any]] = None,
                      size_range: Optional[Sequence[float]] = None, log: bool = False,
                      ids: Optional[Iterable[NodeId]] = None) -> StyleAccumulator:
        """Size nodes by an attribute, a built-in metric or supplied values.

        With no source given, nodes are sized by degree. Values interpolate
        from ``size_range[0]`` at the observed minimum to ``size_range[1]``
        at the observed maximum; nodes without a value get ``size_range[0]``.

        Raises:
            ConfigurationError: if no targeted node has the attribute, or the
                values are not numeric.
        """
        source, name = self._node_source(attribute, metric, values, default=Metric.DEGREE)
        targets = acc.target_node_ids(ids)
        if not targets:
            return acc
        found = self._require_present(acc.snapshot.node_values(source, targets), name, "node")

        size_range = tuple(size_range or self.size_range)
        scale = LinearSizeScale.from_values(found, size_range, log=log, field_name=name)
        logger.debug(f"Sizing {len(targets)} nodes by {name} over domain {scale.domain}")
        return (acc.set_node_size(targets, scale, source)
                .with_legend("node_size", {**scale.legend(), "source": name}))

    def size_nodes(self, acc: StyleAccumulator, size: float,
                   ids: Optional[Iterable[NodeId]] = None) -> StyleAccumulator:
        """Give the targeted nodes one fixed size"""
        acc = acc.set_node_size(ids, FixedScale(size))
        return acc.with_legend("node_size", None) if ids is None else acc

    def color_nodes_by(self, acc: StyleAccumulator, attribute: Optional[str] = None,
                       metric: Optional[Union[str, Metric]] = None,
                       values: Optional[Mapping[NodeId, Any]] = None,
                       kind: Optional[Union[str, AttributeKind]] = None,
                       palette: Optional[ColorSpec] = None,
                       ids: Optional[Iterable[NodeId]] = None) -> StyleAccumulator:
        """Color nodes by an attribute, a built-in metric or supplied values.

        All-numeric values are drawn on a continuous ramp, anything else gets
        one qualitative color per distinct value (assigned in sorted value
        order). ``kind`` forces either. Nodes without a value get the neutral
        color.
        """
        source, name = self._node_source(attribute, metric, values)
        targets = acc.target_node_ids(ids)
        if not targets:
            return acc
        found = self._require_present(acc.snapshot.node_values(source, targets), name, "node")

        scale = self._color_scale(found, kind, palette, name)
        return (acc.set_node_color(targets, scale, source)
                .with_legend("node_color", {**scale.legend(), "source": name}))

    def color_nodes(self, acc: StyleAccumulator, color: str,
                    ids: Optional[Iterable[NodeId]] = None) -> StyleAccumulator:
        """Paint the targeted nodes one fixed color"""
        acc = acc.set_node_color(ids, FixedScale(color))
        return acc.with_legend("node_color", None) if ids is None else acc

    def label_nodes_by(self, acc: StyleAccumulator, attribute: Optional[str] = None,
                       template: str = "{value}",
                       ids: Optional[Iterable[NodeId]] = None) -> StyleAccumulator:
        """Label nodes from an attribute, or from their ids when no attribute is given.

        Nodes without the attribute get no label.
        """
        targets = acc.target_node_ids(ids)
        if not targets:
            return acc
        if attribute is None:
            source: ValueSource = {node_id: node_id for node_id in targets}
        else:
            source = attribute
            self._require_present(acc.snapshot.node_values(source, targets), attribute, "node")
        return acc.set_node_label(targets, LabelScale(template), source)

    def clear_labels(self, acc: StyleAccumulator,
                     ids: Optional[Iterable[NodeId]] = None) -> StyleAccumulator:
        return acc.set_node_label(ids, FixedScale(None))

    def filter_nodes(self, acc: StyleAccumulator,
                     node_filters: Optional[Mapping[str, Any]] = None,
                     min_degree: Optional[int] = None) -> StyleAccumulator:
        """Hide nodes that fail the filters and show every other node.

        ``node_filters`` maps an attribute to an allowed value or list of
        values; nodes lacking the attribute pass. Nodes with fewer than
        ``min_degree`` incident edges are hidden.
        """
        snapshot = acc.snapshot
        degrees = snapshot.metric_values(Metric.DEGREE)
        hidden = []
        for node in snapshot.nodes:
            if min_degree is not None and degrees[node.id] < min_degree:
                hidden.append(node.id)
            elif not matches_filters(node.attributes, node_filters or {}):
                hidden.append(node.id)

        logger.debug(f"Filter hides {len(hidden)} of {len(snapshot.nodes)} nodes")
        hidden_set = set(hidden)
        shown = [node_id for node_id in snapshot.node_ids if node_id not in hidden_set]
        return acc.set_node_visibility(shown, True).set_node_visibility(hidden, False)

    # Edge encodings

    def size_edges_by(self, acc: StyleAccumulator, attribute: Optional[str] = "weight",
                      values: Optional[Mapping[str, Any]] = None,
                      width_range: Optional[Sequence[float]] = None, log: bool = False,
                      ids: Optional[Iterable[str]] = None) -> StyleAccumulator:
        """Set edge widths from an attribute (``weight`` by default) or supplied values"""
        source, name = self._edge_source(attribute, values)
        targets = acc.target_edge_ids(ids)
        if not targets:
            return acc
        found = self._require_present(acc.snapshot.edge_values(source, targets), name, "edge")

        width_range = tuple(width_range or self.width_range)
        scale = LinearSizeScale.from_values(found, width_range, log=log, field_name=name)
        return (acc.set_edge_size(targets, scale, source)
                .with_legend("edge_size", {**scale.legend(), "source": name}))

    def color_edges_by(self, acc: StyleAccumulator, attribute: Optional[str] = None,
                       values: Optional[Mapping[str, Any]] = None,
                       kind: Optional[Union[str, AttributeKind]] = None,
                       palette: Optional[ColorSpec] = None,
                       ids: Optional[Iterable[str]] = None) -> StyleAccumulator:
        """Color edges by an attribute or supplied values, like ``color_nodes_by``"""
        source, name = self._edge_source(attribute, values)
        targets = acc.target_edge_ids(ids)
        if not targets:
            return acc
        found = self._require_present(acc.snapshot.edge_values(source, targets), name, "edge")

        scale = self._color_scale(found, kind, palette, name)
        return (acc.set_edge_color(targets, scale, source)
                .with_legend("edge_color", {**scale.legend(), "source": name}))

    def color_edges(self, acc: StyleAccumulator, color: str,
                    ids: Optional[Iterable[str]] = None) -> StyleAccumulator:
        acc = acc.set_edge_color(ids, FixedScale(color))
        return acc.with_legend("edge_color", None) if ids is None else acc

    def filter_edges(self, acc: StyleAccumulator,
                     edge_filters: Optional[Mapping[str, Any]] = None) -> StyleAccumulator:
        """Hide edges that fail the attribute filters and show every other edge"""
        shown, hidden = [], []
        for edge in acc.snapshot.edges:
            (shown if matches_filters(edge.attributes, edge_filters or {}) else hidden).append(edge.id)
        logger.debug(f"Filter hides {len(hidden)} of {len(acc.snapshot.edges)} edges")
        return acc.set_edge_visibility(shown, True).set_edge_visibility(hidden, False)

    # Interaction

    def set_interaction(self, acc: StyleAccumulator, highlight: Optional[str] = None,
                        zoom: Optional[bool] = None, pan: Optional[bool] = None) -> StyleAccumulator:
        """Choose the neighbor highlight event (click, hover, none) and zoom/pan toggles"""
        return acc.set_interaction(highlight, zoom, pan)

    # Helpers

    def _node_source(self, attribute, metric, values,
                     default: Optional[Metric] = None) -> Tuple[ValueSource, str]:
        given = [s for s in (attribute, metric, values) if s is not None]
        if len(given) > 1:
            raise ConfigurationError(
                "source", "Pass only one of attribute, metric or values")
        if attribute is not None:
            return attribute, attribute
        if metric is not None:
            try:
                metric = Metric(metric)
            except ValueError:
                raise ConfigurationError(
                    str(metric), f"Unknown metric {metric!r}; expected one of "
                    f"{[m.value for m in Metric]}") from None
            return metric, metric.value
        if values is not None:
            return values, "values"
        if default is not None:
            return default, default.value
        raise ConfigurationError("source", "An attribute, metric or values mapping is required")

    def _edge_source(self, attribute, values) -> Tuple[ValueSource, str]:
        if values is not None:
            return values, "values"
        if attribute is None:
            raise ConfigurationError("source", "An attribute or values mapping is required")
        return attribute, attribute

    def _require_present(self, values: Mapping[Any, Any], name: str, element: str) -> list:
        found = present_values(values.values())
        if not found:
            raise ConfigurationError(name, f"Attribute '{name}' not found on any targeted {element}")
        missing = len(values) - len(found)
        if missing:
            logger.debug(f"{missing} {element}s lack '{name}' and will use the fallback")
        return found

    def _color_scale(self, found: list, kind, palette: Optional[ColorSpec], name: str):
        if kind is None:
            kind = AttributeKind.NUMERIC if is_numeric_domain(found) else AttributeKind.CATEGORICAL
        else:
            try:
                kind = AttributeKind(kind)
            except ValueError:
                raise ConfigurationError("kind", f"Unknown color kind {kind!r}") from None

        if kind == AttributeKind.NUMERIC:
            return ColorRampScale.from_values(
                found, palette or self.sequential_palette, self.neutral_color, field_name=name)
        return CategoricalColorScale.from_values(
            found, palette or self.qualitative_palette, self.neutral_color)

