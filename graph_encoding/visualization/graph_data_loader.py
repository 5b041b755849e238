"""Graph Data Loader for Visualization

Builds immutable graph snapshots from networkx graphs, node-link dicts and
edge lists, and converts snapshots back to networkx for layout algorithms.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

import networkx as nx

from graph_encoding.core.exceptions import ConfigurationError
from graph_encoding.core.logging_config import get_logger
from .visualization_data_models import (
    AttributeKind,
    Edge,
    GraphSnapshot,
    Metric,
    Node,
    NodeId,
    Position,
    matches_filters,
    normalize_attribute,
)

logger = get_logger(__name__)

GRAPH_SOURCES = ("networkx", "node_link", "edge_list")


class VisualizationDataLoader:
    """Load graph data from various sources"""

    def load_graph_data(self, graph_source: str, graph_data: Any,
                        positions: Optional[Mapping[NodeId, Position]] = None) -> GraphSnapshot:
        """Load a snapshot from the specified source.

        Raises:
            ConfigurationError: for an unsupported source or malformed data.
            GraphReferenceError: when an edge names a node that does not exist.
        """
        if graph_source == "networkx":
            snapshot = self._load_from_networkx(graph_data, positions)
        elif graph_source == "node_link":
            snapshot = self._load_from_node_link(graph_data, positions)
        elif graph_source == "edge_list":
            snapshot = self._load_from_edge_list(graph_data, positions)
        else:
            raise ConfigurationError(
                "graph_source", f"Unsupported graph source '{graph_source}'; expected one of {GRAPH_SOURCES}")

        logger.info(f"Loaded graph from {graph_source}: {len(snapshot.nodes)} nodes, "
                    f"{len(snapshot.edges)} edges")
        return snapshot

    def _load_from_networkx(self, graph: nx.Graph,
                            positions: Optional[Mapping[NodeId, Position]]) -> GraphSnapshot:
        """Load a snapshot from any networkx graph class"""
        if not isinstance(graph, nx.Graph):
            raise ConfigurationError("graph_data", "networkx source requires a networkx graph")

        nodes = list(graph.nodes(data=True))
        if graph.is_multigraph():
            edges = [(u, v, data) for u, v, _, data in graph.edges(keys=True, data=True)]
        else:
            edges = list(graph.edges(data=True))
        return self._build(nodes, edges, graph.is_directed(), positions)

    def _load_from_node_link(self, graph_data: Mapping[str, Any],
                             positions: Optional[Mapping[NodeId, Position]]) -> GraphSnapshot:
        """Load from ``{"nodes": [{"id": ...}], "edges"|"links": [{"source", "target"}]}``"""
        if not isinstance(graph_data, Mapping) or "nodes" not in graph_data:
            raise ConfigurationError("nodes", "Node-link data must contain a 'nodes' list")

        nodes = []
        for node_data in graph_data["nodes"]:
            if "id" not in node_data:
                raise ConfigurationError("nodes", f"Node record without 'id': {node_data!r}")
            nodes.append((node_data["id"], {k: v for k, v in node_data.items() if k != "id"}))

        edges = []
        for edge_data in graph_data.get("edges", graph_data.get("links", [])):
            edges.append(self._edge_from_dict(edge_data))
        return self._build(nodes, edges, bool(graph_data.get("directed", False)), positions)

    def _load_from_edge_list(self, graph_data: Mapping[str, Any],
                             positions: Optional[Mapping[NodeId, Position]]) -> GraphSnapshot:
        """Load from ``{"edges": [(s, t[, weight]) | {...}], "nodes": [...]}``; endpoints imply nodes"""
        if not isinstance(graph_data, Mapping) or "edges" not in graph_data:
            raise ConfigurationError("edges", "Edge list data must contain 'edges' key")

        edges = []
        for edge in graph_data["edges"]:
            if isinstance(edge, Mapping):
                edges.append(self._edge_from_dict(edge))
            elif isinstance(edge, (list, tuple)) and len(edge) >= 2:
                attributes = {"weight": edge[2]} if len(edge) > 2 else {}
                edges.append((edge[0], edge[1], attributes))
            else:
                raise ConfigurationError("edges", f"Malformed edge {edge!r}")

        node_attributes: Dict[NodeId, Dict[str, Any]] = {}
        for node_data in graph_data.get("nodes", []):
            if "id" not in node_data:
                raise ConfigurationError("nodes", f"Node record without 'id': {node_data!r}")
            node_attributes[node_data["id"]] = {k: v for k, v in node_data.items() if k != "id"}
        for source, target, _ in edges:
            node_attributes.setdefault(source, {})
            node_attributes.setdefault(target, {})

        return self._build(list(node_attributes.items()), edges,
                           bool(graph_data.get("directed", False)), positions)

    def _edge_from_dict(self, edge_data: Mapping[str, Any]) -> Tuple[NodeId, NodeId, Dict[str, Any]]:
        if "source" not in edge_data or "target" not in edge_data:
            raise ConfigurationError("edges", f"Edge record needs 'source' and 'target': {edge_data!r}")
        attributes = {k: v for k, v in edge_data.items() if k not in ("source", "target")}
        return edge_data["source"], edge_data["target"], attributes

    def _build(self, nodes: List[Tuple[NodeId, Mapping[str, Any]]], edges, directed: bool,
               positions: Optional[Mapping[NodeId, Position]]) -> GraphSnapshot:
        merged = dict(_positions_from_attributes(nodes))
        merged.update(positions or {})
        return GraphSnapshot.from_records(nodes, edges, directed=directed, positions=merged)

    def apply_filters(self, snapshot: GraphSnapshot, filter_criteria: Mapping[str, Any]) -> GraphSnapshot:
        """Return a smaller snapshot focused on relevant data.

        Criteria are applied in order: ``node_filters``, ``edge_filters``,
        ``min_degree`` and ``max_nodes`` (highest-degree nodes kept). Edges
        losing an endpoint are dropped.
        """
        nodes = list(snapshot.nodes)
        edges = list(snapshot.edges)

        if "node_filters" in filter_criteria:
            nodes = [n for n in nodes if matches_filters(n.attributes, filter_criteria["node_filters"])]
            edges = _edges_between(nodes, edges)

        if "edge_filters" in filter_criteria:
            edges = [e for e in edges if matches_filters(e.attributes, filter_criteria["edge_filters"])]

        if "min_degree" in filter_criteria:
            degrees = GraphSnapshot(tuple(nodes), tuple(edges), snapshot.directed).metric_values(Metric.DEGREE)
            nodes = [n for n in nodes if degrees[n.id] >= filter_criteria["min_degree"]]
            edges = _edges_between(nodes, edges)

        max_nodes = filter_criteria.get("max_nodes")
        if max_nodes and len(nodes) > max_nodes:
            degrees = GraphSnapshot(tuple(nodes), tuple(edges), snapshot.directed).metric_values(Metric.DEGREE)
            keep = {n.id for n in sorted(nodes, key=lambda n: degrees[n.id], reverse=True)[:max_nodes]}
            nodes = [n for n in nodes if n.id in keep]
            edges = _edges_between(nodes, edges)

        filtered = GraphSnapshot(tuple(nodes), tuple(edges), snapshot.directed)
        logger.info(f"Filtered graph: {len(snapshot.nodes)} -> {len(filtered.nodes)} nodes, "
                    f"{len(snapshot.edges)} -> {len(filtered.edges)} edges")
        return filtered


def to_networkx(snapshot: GraphSnapshot) -> nx.Graph:
    """Rebuild a networkx graph (multi-graph when parallel edges exist) from a snapshot"""
    has_parallel = any(edge.key > 0 for edge in snapshot.edges)
    if snapshot.directed:
        graph = nx.MultiDiGraph() if has_parallel else nx.DiGraph()
    else:
        graph = nx.MultiGraph() if has_parallel else nx.Graph()

    for node in snapshot.nodes:
        graph.add_node(node.id, **node.attributes)
    for edge in snapshot.edges:
        graph.add_edge(edge.source, edge.target, **{**edge.attributes, "id": edge.id})
    return graph


def _positions_from_attributes(nodes: List[Tuple[NodeId, Mapping[str, Any]]]) -> Dict[NodeId, Position]:
    """Nodes carrying numeric ``x`` and ``y`` attributes are positioned by them"""
    positions = {}
    for node_id, data in nodes:
        x, y = normalize_attribute(data.get("x")), normalize_attribute(data.get("y"))
        if (x is not None and y is not None and AttributeKind.classify(x) == AttributeKind.NUMERIC
                and AttributeKind.classify(y) == AttributeKind.NUMERIC):
            positions[node_id] = (float(x), float(y))
    return positions


def _edges_between(nodes: List[Node], edges: List[Edge]) -> List[Edge]:
    kept = {n.id for n in nodes}
    return [e for e in edges if e.source in kept and e.target in kept]
