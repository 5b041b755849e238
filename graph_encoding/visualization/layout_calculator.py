"""Layout Calculator for Graph Visualization

Computes node coordinates with networkx layout algorithms. A calculator is
a callable ``layout(snapshot) -> {node_id: (x, y)}`` that can be handed to
``ConfigAssembler.assemble``.
"""

from typing import Any, Dict, Optional, Union

import networkx as nx
import numpy as np

from graph_encoding.core.exceptions import ConfigurationError
from graph_encoding.core.logging_config import get_logger
from graph_encoding.core.standard_config import get_config_section
from .graph_data_loader import to_networkx
from .visualization_data_models import GraphSnapshot, LayoutType, Metric, NodeId, Position

logger = get_logger(__name__)


class LayoutCalculator:
    """Calculate graph layouts for visualization"""

    def __init__(self, layout_type: Union[str, LayoutType] = LayoutType.SPRING,
                 seed: Optional[int] = None, **options: Any):
        try:
            self.layout_type = LayoutType(layout_type)
        except ValueError:
            raise ConfigurationError(
                "layout_type", f"Unknown layout '{layout_type}'; expected one of "
                f"{[t.value for t in LayoutType]}") from None

        settings = get_config_section("layout")
        self.seed = seed if seed is not None else settings.get("seed", 42)
        self.options = {"iterations": settings.get("iterations", 50), **options}

    def __call__(self, snapshot: GraphSnapshot) -> Dict[NodeId, Position]:
        return self.calculate_layout(snapshot)

    def calculate_layout(self, snapshot: GraphSnapshot) -> Dict[NodeId, Position]:
        """Calculate node positions using the configured layout algorithm"""
        if not snapshot.nodes:
            return {}

        graph = to_networkx(snapshot)
        if self.layout_type == LayoutType.SPRING:
            pos = self._calculate_spring_layout(graph)
        elif self.layout_type == LayoutType.CIRCULAR:
            pos = nx.circular_layout(graph, scale=self.options.get("scale", 1.0))
        elif self.layout_type == LayoutType.KAMADA_KAWAI:
            pos = self._calculate_kamada_kawai_layout(graph)
        elif self.layout_type == LayoutType.SPECTRAL:
            pos = self._calculate_spectral_layout(graph)
        elif self.layout_type == LayoutType.SHELL:
            pos = self._calculate_shell_layout(graph, snapshot)
        elif self.layout_type == LayoutType.SPIRAL:
            pos = self._calculate_spiral_layout(graph)
        else:
            pos = nx.random_layout(graph, seed=self.seed)

        logger.debug(f"Calculated {self.layout_type.value} layout for {len(pos)} nodes")
        return {node: (float(coords[0]), float(coords[1])) for node, coords in pos.items()}

    def _calculate_spring_layout(self, graph: nx.Graph) -> Dict:
        """Calculate spring layout (Fruchterman-Reingold)"""
        return nx.spring_layout(graph,
                                iterations=self.options.get("iterations", 50),
                                k=self.options.get("k"),
                                seed=self.seed)

    def _calculate_kamada_kawai_layout(self, graph: nx.Graph) -> Dict:
        if len(graph) < 2:
            return nx.circular_layout(graph)
        return nx.kamada_kawai_layout(graph, scale=self.options.get("scale", 1.0))

    def _calculate_spectral_layout(self, graph: nx.Graph) -> Dict:
        if len(graph) < 3:
            logger.warning("Spectral layout needs at least 3 nodes, using circular layout")
            return nx.circular_layout(graph)
        return nx.spectral_layout(graph, weight=self.options.get("weight"))

    def _calculate_shell_layout(self, graph: nx.Graph, snapshot: GraphSnapshot) -> Dict:
        """Shell layout with shells made of degree quartiles unless ``nlist`` is given"""
        nlist = self.options.get("nlist")
        if nlist is None:
            degrees = snapshot.metric_values(Metric.DEGREE)
            nodes_by_degree = sorted(snapshot.node_ids, key=lambda n: degrees[n], reverse=True)

            n_nodes = len(nodes_by_degree)
            if n_nodes <= 4:
                nlist = [nodes_by_degree]
            else:
                shell_size = max(1, n_nodes // 4)
                nlist = [nodes_by_degree[i:i + shell_size] for i in range(0, n_nodes, shell_size)]

        return nx.shell_layout(graph, nlist=nlist)

    def _calculate_spiral_layout(self, graph: nx.Graph) -> Dict:
        """Spiral layout; equidistant spacing unless ``equidistant=False``"""
        nodes = list(graph.nodes())
        n_nodes = len(nodes)
        equidistant = self.options.get("equidistant", True)

        pos = {}
        for i, node in enumerate(nodes):
            if equidistant:
                angle = 2 * np.pi * i / n_nodes
                radius = 0.1 + (i / n_nodes) * 0.9
            else:
                # Logarithmic spiral
                angle = i * 0.5
                radius = 0.1 * np.exp(angle * 0.1)
            pos[node] = (radius * np.cos(angle), radius * np.sin(angle))
        return pos
