"""Configuration Assembler for Graph Visualization

Merges the style accumulator, the snapshot identities and node positions
into the immutable configuration handed to renderers and exporters.
"""

import math
import time
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import numpy as np

from graph_encoding.core.exceptions import ConfigurationError, GraphReferenceError
from graph_encoding.core.logging_config import get_logger, log_operation_end, log_operation_start
from graph_encoding.core.standard_config import get_config_section
from .scale_mappers import to_hex
from .style_accumulator import StyleAccumulator
from .visualization_data_models import (
    CanvasSettings,
    EdgeRecord,
    GraphSnapshot,
    NodeId,
    NodeRecord,
    Position,
    RenderSettings,
    Viewport,
    VisualizationConfig,
)

logger = get_logger(__name__)

PLACEMENTS = ("circle", "none")

Layout = Callable[[GraphSnapshot], Mapping[NodeId, Sequence[float]]]


def circle_placement(node_ids: Sequence[NodeId]) -> Dict[NodeId, Position]:
    """Nodes evenly spaced on the unit circle in snapshot order; one node sits at the origin"""
    count = len(node_ids)
    if count == 1:
        return {node_ids[0]: (0.0, 0.0)}
    angles = 2 * np.pi * np.arange(count) / max(count, 1)
    return {node_id: (float(np.cos(angle)), float(np.sin(angle)))
            for node_id, angle in zip(node_ids, angles)}


class ConfigAssembler:
    """Assemble render-ready configurations from accumulated styles"""

    def __init__(self, default_placement: Optional[str] = None,
                 canvas: Optional[CanvasSettings] = None,
                 viewport_padding: Optional[float] = None):
        settings = get_config_section("assembler")
        placement = (default_placement or settings.get("default_placement", "circle")).lower()
        if placement not in PLACEMENTS:
            raise ConfigurationError(
                "default_placement", f"Unknown default placement '{placement}'; expected one of {PLACEMENTS}")
        self.default_placement = placement

        if canvas is None:
            canvas_config = get_config_section("canvas")
            canvas = CanvasSettings(
                width=int(canvas_config.get("width", 1200)),
                height=int(canvas_config.get("height", 800)),
                background=to_hex(canvas_config.get("background", "#ffffff"))
            )
        self.canvas = canvas
        self.viewport_padding = float(
            viewport_padding if viewport_padding is not None else settings.get("viewport_padding", 0.05))

    def assemble(self, acc: StyleAccumulator,
                 positions: Optional[Mapping[NodeId, Sequence[float]]] = None,
                 layout: Optional[Layout] = None) -> VisualizationConfig:
        """Build the configuration.

        Coordinates come from ``positions``, else from the snapshot, else from
        ``layout(snapshot)``, else from the default placement (only when no
        node is positioned at all).

        Raises:
            ConfigurationError: if a node has no coordinates or non-finite ones.
            GraphReferenceError: if ``positions`` names an unknown node.
        """
        snapshot = acc.snapshot
        start = time.perf_counter()
        log_operation_start(logger, "configuration assembly",
                            nodes=len(snapshot.nodes), edges=len(snapshot.edges))

        coordinates = self._resolve_positions(snapshot, positions, layout)

        node_records = []
        for node in snapshot.nodes:
            style = acc.node_style(node.id)
            x, y = self._coordinates(node.id, coordinates)
            node_records.append(NodeRecord(
                id=node.id, x=x, y=y, size=style.size, color=style.color,
                label=style.label, visible=style.visible))

        node_visible = {record.id: record.visible for record in node_records}
        edge_records = []
        for edge in snapshot.edges:
            style = acc.edge_style(edge.id)
            # An edge is drawn only when both endpoints are drawn
            visible = style.visible and node_visible[edge.source] and node_visible[edge.target]
            edge_records.append(EdgeRecord(
                id=edge.id, source=edge.source, target=edge.target, width=style.width,
                color=style.color, visible=visible))

        config = VisualizationConfig(
            nodes=tuple(node_records),
            edges=tuple(edge_records),
            settings=RenderSettings(
                interaction=acc.interaction,
                canvas=self.canvas,
                viewport=self._viewport(node_records)
            ),
            legends=acc.legends,
            statistics=self._statistics(snapshot, node_records, edge_records)
        )

        log_operation_end(logger, "configuration assembly", time.perf_counter() - start,
                          nodes=len(node_records), edges=len(edge_records))
        return config

    def _resolve_positions(self, snapshot: GraphSnapshot,
                           positions: Optional[Mapping[NodeId, Sequence[float]]],
                           layout: Optional[Layout]) -> Mapping[NodeId, Sequence[float]]:
        if positions is not None:
            source = "supplied positions"
        elif snapshot.positions:
            positions, source = snapshot.positions, "snapshot positions"
        elif layout is not None:
            positions, source = layout(snapshot), "layout"
        elif self.default_placement == "circle":
            positions, source = circle_placement(snapshot.node_ids), "default circle placement"
        else:
            positions, source = {}, "no positions"

        for node_id in positions:
            if not snapshot.has_node(node_id):
                raise GraphReferenceError(node_id, f"Position given for unknown node '{node_id}'")
        logger.debug(f"Using {source} for {len(positions)} of {len(snapshot.nodes)} nodes")
        return positions

    def _coordinates(self, node_id: NodeId,
                     positions: Mapping[NodeId, Sequence[float]]) -> Position:
        field_name = f"position[{node_id}]"
        if node_id not in positions:
            raise ConfigurationError(
                field_name, f"Node '{node_id}' has no coordinates; supply positions or a layout")
        try:
            x, y = float(positions[node_id][0]), float(positions[node_id][1])
        except (TypeError, ValueError, IndexError):
            raise ConfigurationError(
                field_name, f"Node '{node_id}' has malformed coordinates {positions[node_id]!r}") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ConfigurationError(field_name, f"Node '{node_id}' has non-finite coordinates ({x}, {y})")
        return (x, y)

    def _viewport(self, node_records: Sequence[NodeRecord]) -> Viewport:
        if not node_records:
            return Viewport(-1.0, 1.0, -1.0, 1.0)
        xs = [record.x for record in node_records]
        ys = [record.y for record in node_records]
        x_pad = self._padding(min(xs), max(xs))
        y_pad = self._padding(min(ys), max(ys))
        return Viewport(min(xs) - x_pad, max(xs) + x_pad, min(ys) - y_pad, max(ys) + y_pad)

    def _padding(self, low: float, high: float) -> float:
        span = high - low
        return span * self.viewport_padding if span > 0 else 1.0

    def _statistics(self, snapshot: GraphSnapshot, node_records: Sequence[NodeRecord],
                    edge_records: Sequence[EdgeRecord]) -> Dict[str, Any]:
        sizes = [record.size for record in node_records]
        widths = [record.width for record in edge_records]
        return {
            "node_count": len(node_records),
            "edge_count": len(edge_records),
            "visible_nodes": sum(1 for record in node_records if record.visible),
            "visible_edges": sum(1 for record in edge_records if record.visible),
            "labelled_nodes": sum(1 for record in node_records if record.label is not None),
            "size_range": [min(sizes), max(sizes)] if sizes else None,
            "width_range": [min(widths), max(widths)] if widths else None,
            "directed": snapshot.directed
        }
