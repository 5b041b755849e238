"""Plotly Renderer for Graph Visualization

Draws a ``VisualizationConfig`` as an interactive Plotly figure and exports
it. The renderer only reads the configuration; it never changes styles.
"""

import json
import os
from collections import defaultdict
from typing import Any, Dict, List, Tuple

import plotly.graph_objects as go

from graph_encoding.core.exceptions import ExportError
from graph_encoding.core.logging_config import get_logger
from .visualization_data_models import InteractionMode, VisualizationConfig

logger = get_logger(__name__)

IMAGE_FORMATS = ("png", "svg", "pdf")
OUTPUT_FORMATS = ("html", "json") + IMAGE_FORMATS


class PlotlyRenderer:
    """Render visualization configurations using Plotly

    The highlight mode only selects plotly's hover and click behaviour
    (``hover`` shows the closest node's tooltip, ``click`` enables point
    selection). Neighbours of the hovered or clicked node are not
    highlighted.
    """

    def create_figure(self, config: VisualizationConfig) -> go.Figure:
        """Create an interactive Plotly figure; hidden elements are skipped"""
        fig = go.Figure()

        # Edges first so they appear behind nodes
        self._add_edges_to_figure(fig, config)
        self._add_nodes_to_figure(fig, config)
        self._update_figure_layout(fig, config)
        return fig

    def save_visualization(self, config: VisualizationConfig, destination: str,
                           output_format: str = "html") -> str:
        """Write the visualization to ``destination`` and return the path.

        ``html`` is self-contained (plotly.js inlined), ``json`` is the
        configuration wire format, image formats need kaleido.

        Raises:
            ExportError: for unknown formats or when writing fails.
        """
        if output_format not in OUTPUT_FORMATS:
            raise ExportError(destination, f"Unsupported output format '{output_format}'; "
                                           f"expected one of {OUTPUT_FORMATS}")

        directory = os.path.dirname(destination)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            if output_format == "json":
                with open(destination, 'w', encoding="utf-8") as f:
                    json.dump(config.to_dict(), f, indent=2, default=str)
            elif output_format == "html":
                self.create_figure(config).write_html(destination, include_plotlyjs=True)
            else:
                canvas = config.settings.canvas
                self.create_figure(config).write_image(
                    destination, format=output_format, width=canvas.width, height=canvas.height)
        except (OSError, ValueError, ImportError) as e:
            raise ExportError(destination, f"Could not write {output_format} to {destination}: {e}") from e

        logger.info(f"Saved visualization to {destination}")
        return destination

    def _add_edges_to_figure(self, fig: go.Figure, config: VisualizationConfig):
        """One line trace per (width, color) group of visible edges"""
        positions = {node.id: (node.x, node.y) for node in config.nodes}
        groups: Dict[Tuple[float, str], Dict[str, List[Any]]] = defaultdict(lambda: {"x": [], "y": []})

        for edge in config.edges:
            if not edge.visible:
                continue
            x0, y0 = positions[edge.source]
            x1, y1 = positions[edge.target]
            group = groups[(edge.width, edge.color)]
            group["x"].extend([x0, x1, None])
            group["y"].extend([y0, y1, None])

        for (width, color), coords in groups.items():
            fig.add_trace(go.Scatter(
                x=coords["x"], y=coords["y"],
                line=dict(width=width, color=color),
                hoverinfo='none',
                mode='lines',
                name='Edges',
                showlegend=False
            ))

    def _add_nodes_to_figure(self, fig: go.Figure, config: VisualizationConfig):
        visible = [node for node in config.nodes if node.visible]
        if not visible:
            return

        has_labels = any(node.label is not None for node in visible)
        fig.add_trace(go.Scatter(
            x=[node.x for node in visible],
            y=[node.y for node in visible],
            mode='markers+text' if has_labels else 'markers',
            marker=dict(
                size=[node.size for node in visible],
                color=[node.color for node in visible],
                line=dict(width=1, color='white'),
                opacity=0.9
            ),
            text=[node.label or "" for node in visible],
            textposition="top center",
            customdata=[str(node.id) for node in visible],
            hovertext=[f"<b>{node.label or node.id}</b><br>ID: {node.id}<br>Size: {node.size:.1f}"
                       for node in visible],
            hoverinfo='text',
            name='Nodes',
            showlegend=False
        ))

    def _update_figure_layout(self, fig: go.Figure, config: VisualizationConfig):
        """Apply canvas, viewport and interaction settings"""
        settings = config.settings
        interaction = settings.interaction
        viewport = settings.viewport

        axis = dict(showgrid=False, zeroline=False, showticklabels=False,
                    fixedrange=not interaction.zoom)
        fig.update_layout(
            width=settings.canvas.width,
            height=settings.canvas.height,
            showlegend=False,
            margin=dict(b=20, l=5, r=5, t=20),
            xaxis=dict(axis, range=[viewport.x_min, viewport.x_max]),
            yaxis=dict(axis, range=[viewport.y_min, viewport.y_max]),
            plot_bgcolor=settings.canvas.background,
            paper_bgcolor=settings.canvas.background
        )

        if interaction.highlight == InteractionMode.HOVER:
            fig.update_layout(hovermode='closest', clickmode='none')
        elif interaction.highlight == InteractionMode.CLICK:
            fig.update_layout(hovermode=False, clickmode='event+select')
        else:
            fig.update_layout(hovermode=False, clickmode='none')

        if interaction.pan:
            fig.update_layout(dragmode='pan')
        elif interaction.zoom:
            fig.update_layout(dragmode='zoom')
        else:
            fig.update_layout(dragmode=False)
