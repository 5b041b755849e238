"""Style Accumulator for Graph Visualization

Holds the complete style state of every node and edge plus the global
interaction settings.

The accumulator is copy-on-write: every ``set_*`` call returns a new
accumulator and leaves the receiver untouched, so earlier references keep
their state. Each call replaces exactly one style field, which is why
operations on different fields commute while repeated operations on the
same field keep only the last result.
"""

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from graph_encoding.core.exceptions import ConfigurationError, GraphReferenceError
from graph_encoding.core.logging_config import get_logger
from graph_encoding.core.standard_config import get_config_section
from .scale_mappers import to_hex
from .visualization_data_models import (
    AttributeValue,
    EdgeStyle,
    GraphSnapshot,
    InteractionMode,
    InteractionSettings,
    Metric,
    NodeId,
    NodeStyle,
    ValueSource,
)

logger = get_logger(__name__)

Scale = Callable[[Optional[AttributeValue]], Any]
Source = Optional[ValueSource]


@dataclass(frozen=True)
class StyleDefaults:
    """Baseline style given to every element before any encoding runs"""
    node_size: float = 10.0
    node_color: str = "#1f77b4"
    edge_width: float = 1.0
    edge_color: str = "#888888"
    interaction: InteractionSettings = InteractionSettings()

    @classmethod
    def from_config(cls) -> "StyleDefaults":
        node = get_config_section("node")
        edge = get_config_section("edge")
        interaction = get_config_section("interaction")
        return cls(
            node_size=float(node.get("default_size", cls.node_size)),
            node_color=to_hex(node.get("default_color", cls.node_color)),
            edge_width=float(edge.get("default_width", cls.edge_width)),
            edge_color=to_hex(edge.get("default_color", cls.edge_color)),
            interaction=InteractionSettings(
                highlight=InteractionMode(interaction.get("highlight", "hover")),
                zoom=bool(interaction.get("zoom", True)),
                pan=bool(interaction.get("pan", True))
            )
        )


def _positive_size(value: Any, field_name: str) -> float:
    size = float(value)
    if not math.isfinite(size) or size <= 0:
        raise ConfigurationError(field_name, f"{field_name} must be a positive finite number, got {value!r}")
    return size


def _optional_label(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class StyleAccumulator:
    """Per-element style records for one graph snapshot"""
    snapshot: GraphSnapshot
    node_styles: Mapping[NodeId, NodeStyle]
    edge_styles: Mapping[str, EdgeStyle]
    interaction: InteractionSettings = InteractionSettings()
    legends: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("node_styles", "edge_styles", "legends"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    @classmethod
    def initial(cls, snapshot: GraphSnapshot,
                defaults: Optional[StyleDefaults] = None) -> "StyleAccumulator":
        """Baseline accumulator: uniform size and color, no labels, all visible"""
        defaults = defaults or StyleDefaults.from_config()
        node_style = NodeStyle(defaults.node_size, to_hex(defaults.node_color))
        edge_style = EdgeStyle(defaults.edge_width, to_hex(defaults.edge_color))
        return cls(
            snapshot=snapshot,
            node_styles={node_id: node_style for node_id in snapshot.node_ids},
            edge_styles={edge_id: edge_style for edge_id in snapshot.edge_ids},
            interaction=defaults.interaction
        )

    def node_style(self, node_id: NodeId) -> NodeStyle:
        try:
            return self.node_styles[node_id]
        except KeyError:
            raise GraphReferenceError(node_id) from None

    def edge_style(self, edge_id: str) -> EdgeStyle:
        try:
            return self.edge_styles[edge_id]
        except KeyError:
            raise GraphReferenceError(edge_id) from None

    def pipe(self, func: Callable[..., "StyleAccumulator"], *args, **kwargs) -> "StyleAccumulator":
        """Apply ``func(self, *args, **kwargs)`` so operations chain left to right"""
        return func(self, *args, **kwargs)

    # Target resolution

    def target_node_ids(self, ids: Optional[Iterable[NodeId]] = None) -> List[NodeId]:
        if ids is None:
            return list(self.snapshot.node_ids)
        targets = list(ids)
        for node_id in targets:
            if not self.snapshot.has_node(node_id):
                raise GraphReferenceError(node_id, f"Unknown node '{node_id}'")
        return targets

    def target_edge_ids(self, ids: Optional[Iterable[str]] = None) -> List[str]:
        if ids is None:
            return list(self.snapshot.edge_ids)
        targets = list(ids)
        for edge_id in targets:
            if not self.snapshot.has_edge(edge_id):
                raise GraphReferenceError(edge_id, f"Unknown edge '{edge_id}'")
        return targets

    # Field writers

    def _write_nodes(self, ids, scale: Scale, source: Source, field_name: str,
                     coerce: Callable[[Any], Any]) -> "StyleAccumulator":
        targets = self.target_node_ids(ids)
        if source is None:
            values = dict.fromkeys(targets)
        else:
            values = self.snapshot.node_values(source, targets)
        # Compute everything first so a failing value leaves no partial state
        updates = {node_id: coerce(scale(values[node_id])) for node_id in targets}

        styles = dict(self.node_styles)
        for node_id, value in updates.items():
            styles[node_id] = replace(styles[node_id], **{field_name: value})
        logger.debug(f"Set node {field_name} on {len(updates)} nodes from {_describe(source)}")
        return replace(self, node_styles=styles)

    def _write_edges(self, ids, scale: Scale, source: Source, field_name: str,
                     coerce: Callable[[Any], Any]) -> "StyleAccumulator":
        targets = self.target_edge_ids(ids)
        if source is None:
            values = dict.fromkeys(targets)
        else:
            values = self.snapshot.edge_values(source, targets)
        updates = {edge_id: coerce(scale(values[edge_id])) for edge_id in targets}

        styles = dict(self.edge_styles)
        for edge_id, value in updates.items():
            styles[edge_id] = replace(styles[edge_id], **{field_name: value})
        logger.debug(f"Set edge {field_name} on {len(updates)} edges from {_describe(source)}")
        return replace(self, edge_styles=styles)

    def set_node_size(self, ids: Optional[Iterable[NodeId]], scale: Scale,
                      source: Source = None) -> "StyleAccumulator":
        return self._write_nodes(ids, scale, source, "size", lambda v: _positive_size(v, "size"))

    def set_node_color(self, ids: Optional[Iterable[NodeId]], scale: Scale,
                       source: Source = None) -> "StyleAccumulator":
        return self._write_nodes(ids, scale, source, "color", to_hex)

    def set_node_label(self, ids: Optional[Iterable[NodeId]], scale: Scale,
                       source: Source = None) -> "StyleAccumulator":
        return self._write_nodes(ids, scale, source, "label", _optional_label)

    def set_node_visibility(self, ids: Optional[Iterable[NodeId]], visible: bool) -> "StyleAccumulator":
        return self._write_nodes(ids, lambda _: visible, None, "visible", bool)

    def set_edge_size(self, ids: Optional[Iterable[str]], scale: Scale,
                      source: Source = None) -> "StyleAccumulator":
        return self._write_edges(ids, scale, source, "width", lambda v: _positive_size(v, "width"))

    def set_edge_color(self, ids: Optional[Iterable[str]], scale: Scale,
                       source: Source = None) -> "StyleAccumulator":
        return self._write_edges(ids, scale, source, "color", to_hex)

    def set_edge_visibility(self, ids: Optional[Iterable[str]], visible: bool) -> "StyleAccumulator":
        return self._write_edges(ids, lambda _: visible, None, "visible", bool)

    def set_interaction(self, highlight: Optional[Union[str, InteractionMode]] = None,
                        zoom: Optional[bool] = None, pan: Optional[bool] = None) -> "StyleAccumulator":
        """Replace the interaction settings; arguments left as None keep their value"""
        changes: Dict[str, Any] = {}
        if highlight is not None:
            try:
                changes["highlight"] = InteractionMode(highlight)
            except ValueError:
                raise ConfigurationError(
                    "highlight", f"Unknown interaction mode {highlight!r}; "
                    f"expected one of {[m.value for m in InteractionMode]}") from None
        if zoom is not None:
            changes["zoom"] = bool(zoom)
        if pan is not None:
            changes["pan"] = bool(pan)
        return replace(self, interaction=replace(self.interaction, **changes))

    def with_legend(self, name: str, legend: Optional[Mapping[str, Any]]) -> "StyleAccumulator":
        """Record (or with None, drop) the legend describing one encoded field"""
        legends = dict(self.legends)
        if legend is None:
            legends.pop(name, None)
        else:
            legends[name] = MappingProxyType(dict(legend))
        return replace(self, legends=legends)


def _describe(source: Source) -> str:
    if source is None:
        return "fixed value"
    if isinstance(source, Metric):
        return f"metric '{source.value}'"
    if isinstance(source, Mapping):
        return "supplied values"
    return f"attribute '{source}'"
