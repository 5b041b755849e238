"""Visualization Data Models

Data structures and enums shared by the encoding pipeline: the immutable
graph snapshot, per-element style records and the render-ready configuration.
"""

import json
import numbers
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Hashable, Iterable, Mapping, Optional, Tuple, Union

import numpy as np

from graph_encoding.core.exceptions import ConfigurationError, GraphReferenceError
from graph_encoding.core.logging_config import get_logger

logger = get_logger(__name__)

NodeId = Hashable
AttributeValue = Union[int, float, str, bool]
Position = Tuple[float, float]


class LayoutType(Enum):
    """Supported graph layout algorithms"""
    SPRING = "spring"
    CIRCULAR = "circular"
    KAMADA_KAWAI = "kamada_kawai"
    SPECTRAL = "spectral"
    SHELL = "shell"
    SPIRAL = "spiral"
    RANDOM = "random"


class InteractionMode(Enum):
    """Neighbor highlight event understood by the renderer"""
    CLICK = "click"
    HOVER = "hover"
    NONE = "none"


class Metric(Enum):
    """Built-in node metrics computed from the edge list"""
    DEGREE = "degree"
    IN_DEGREE = "in_degree"
    OUT_DEGREE = "out_degree"


class AttributeKind(Enum):
    """Tag of an attribute value"""
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    BOOLEAN = "boolean"

    @classmethod
    def classify(cls, value: AttributeValue) -> "AttributeKind":
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMERIC
        return cls.CATEGORICAL


def normalize_attribute(value: Any) -> Optional[AttributeValue]:
    """Coerce a raw adapter value into the attribute union; None means missing"""
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        return value
    logger.debug(f"Stringifying non-scalar attribute value of type {type(value).__name__}")
    return str(value)


def freeze_attributes(attributes: Optional[Mapping[str, Any]]) -> Mapping[str, AttributeValue]:
    frozen = {}
    for key, value in (attributes or {}).items():
        normalized = normalize_attribute(value)
        if normalized is not None:
            frozen[str(key)] = normalized
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class Node:
    """Graph node with read-only attributes and an optional 2D position"""
    id: NodeId
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    position: Optional[Position] = None

    def __post_init__(self):
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", freeze_attributes(self.attributes))
        if self.position is not None:
            x, y = self.position
            object.__setattr__(self, "position", (float(x), float(y)))


@dataclass(frozen=True)
class Edge:
    """Graph edge; ``key`` tells parallel edges between the same pair apart"""
    id: str
    source: NodeId
    target: NodeId
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    key: int = 0

    def __post_init__(self):
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", freeze_attributes(self.attributes))


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable nodes and edges with referential integrity checked up front.

    Raises:
        GraphReferenceError: on duplicate node or edge ids, or on an edge
            whose source or target is not a node of the snapshot.
    """
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...] = ()
    directed: bool = False
    _node_index: Dict[NodeId, Node] = field(init=False, repr=False, compare=False)
    _edge_index: Dict[str, Edge] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

        node_index: Dict[NodeId, Node] = {}
        for node in self.nodes:
            if node.id in node_index:
                raise GraphReferenceError(node.id, f"Duplicate node id '{node.id}'")
            node_index[node.id] = node

        edge_index: Dict[str, Edge] = {}
        for edge in self.edges:
            if edge.id in edge_index:
                raise GraphReferenceError(edge.id, f"Duplicate edge id '{edge.id}'")
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_index:
                    raise GraphReferenceError(
                        endpoint, f"Edge '{edge.id}' references unknown node '{endpoint}'")
            edge_index[edge.id] = edge

        object.__setattr__(self, "_node_index", node_index)
        object.__setattr__(self, "_edge_index", edge_index)

    @classmethod
    def from_records(cls, nodes: Iterable[Tuple[NodeId, Mapping[str, Any]]],
                     edges: Iterable[Tuple[NodeId, NodeId, Mapping[str, Any]]] = (),
                     directed: bool = False,
                     positions: Optional[Mapping[NodeId, Position]] = None) -> "GraphSnapshot":
        """Build a snapshot from ``(id, attrs)`` and ``(source, target, attrs)`` records.

        An ``id`` entry in an edge's attributes becomes its identity, otherwise
        one is generated from the endpoints (see ``edge_id``).
        """
        positions = dict(positions or {})
        node_list = []
        for node_id, attributes in nodes:
            node_list.append(Node(node_id, attributes, positions.pop(node_id, None)))
        if positions:
            unknown = next(iter(positions))
            raise GraphReferenceError(unknown, f"Position given for unknown node '{unknown}'")

        occurrences: Counter = Counter()
        records = []
        for source, target, attributes in edges:
            attributes = dict(attributes or {})
            explicit_id = attributes.pop("id", None)
            pair = (source, target) if directed else frozenset((source, target))
            key = occurrences[pair]
            occurrences[pair] += 1
            records.append((source, target, attributes, key, explicit_id))

        # Explicit ids are reserved up front; generated ids step around them
        taken = {str(record[4]) for record in records if record[4] is not None}
        edge_list = []
        for source, target, attributes, key, explicit_id in records:
            if explicit_id is None:
                identity = _unused_edge_id(source, target, key, directed, taken)
                taken.add(identity)
            else:
                identity = str(explicit_id)
            edge_list.append(Edge(identity, source, target, attributes, key))

        return cls(tuple(node_list), tuple(edge_list), directed)

    def node(self, node_id: NodeId) -> Node:
        try:
            return self._node_index[node_id]
        except KeyError:
            raise GraphReferenceError(node_id) from None

    def edge(self, edge_id: str) -> Edge:
        try:
            return self._edge_index[edge_id]
        except KeyError:
            raise GraphReferenceError(edge_id) from None

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._node_index

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edge_index

    @property
    def node_ids(self) -> Tuple[NodeId, ...]:
        return tuple(node.id for node in self.nodes)

    @property
    def edge_ids(self) -> Tuple[str, ...]:
        return tuple(edge.id for edge in self.edges)

    @property
    def positions(self) -> Dict[NodeId, Position]:
        return {node.id: node.position for node in self.nodes if node.position is not None}

    def metric_values(self, metric: Metric) -> Dict[NodeId, int]:
        """Count incident edges per node; a self-loop counts twice"""
        in_counts: Counter = Counter()
        out_counts: Counter = Counter()
        for edge in self.edges:
            out_counts[edge.source] += 1
            in_counts[edge.target] += 1

        values = {}
        for node in self.nodes:
            degree = in_counts[node.id] + out_counts[node.id]
            if metric == Metric.DEGREE or not self.directed:
                values[node.id] = degree
            elif metric == Metric.IN_DEGREE:
                values[node.id] = in_counts[node.id]
            else:
                values[node.id] = out_counts[node.id]
        return values

    def node_values(self, source: "ValueSource",
                    ids: Iterable[NodeId]) -> Dict[NodeId, Optional[AttributeValue]]:
        """Read values for the given nodes; None marks missing.

        ``source`` is an attribute name, a built-in ``Metric`` or a mapping of
        caller-supplied values (e.g. centrality or community ids computed
        elsewhere) keyed by node id.
        """
        if isinstance(source, Metric):
            metrics = self.metric_values(source)
            return {node_id: metrics[node_id] for node_id in ids}
        if isinstance(source, Mapping):
            return {node_id: normalize_attribute(source.get(node_id)) for node_id in ids}
        return {node_id: self._node_index[node_id].attributes.get(source) for node_id in ids}

    def edge_values(self, source: "ValueSource", ids: Iterable[str]) -> Dict[str, Optional[AttributeValue]]:
        """Read an attribute or caller-supplied mapping for the given edges"""
        if isinstance(source, Metric):
            raise ConfigurationError(source.value, f"Metric '{source.value}' is only defined for nodes")
        if isinstance(source, Mapping):
            return {edge_id: normalize_attribute(source.get(edge_id)) for edge_id in ids}
        return {edge_id: self._edge_index[edge_id].attributes.get(source) for edge_id in ids}


ValueSource = Union[str, Metric, Mapping[Any, Any]]


def edge_id(source: NodeId, target: NodeId, key: int = 0, directed: bool = False) -> str:
    """Generated edge identity: ``a->b`` or ``a--b``, with ``#n`` for the n-th parallel edge"""
    base = f"{source}->{target}" if directed else f"{source}--{target}"
    return base if key == 0 else f"{base}#{key}"


def _unused_edge_id(source: NodeId, target: NodeId, key: int, directed: bool, taken: set) -> str:
    """First generated id at or after ``key`` that is not taken.

    Needed when ids stringify alike (``1`` and ``"1"``), when a node id
    contains ``#`` or when an explicit id matches a generated one.
    """
    candidate = edge_id(source, target, key, directed)
    while candidate in taken:
        key += 1
        candidate = edge_id(source, target, key, directed)
    return candidate


@dataclass(frozen=True)
class NodeStyle:
    """Complete style record of one node"""
    size: float
    color: str
    label: Optional[str] = None
    visible: bool = True


@dataclass(frozen=True)
class EdgeStyle:
    """Complete style record of one edge"""
    width: float
    color: str
    visible: bool = True


@dataclass(frozen=True)
class InteractionSettings:
    """Global interaction behaviour of the rendered graph"""
    highlight: InteractionMode = InteractionMode.HOVER
    zoom: bool = True
    pan: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"highlight": self.highlight.value, "zoom": self.zoom, "pan": self.pan}


@dataclass(frozen=True)
class CanvasSettings:
    width: int = 1200
    height: int = 800
    background: str = "#ffffff"


@dataclass(frozen=True)
class Viewport:
    x_min: float
    x_max: float
    y_min: float
    y_max: float


@dataclass(frozen=True)
class NodeRecord:
    id: NodeId
    x: float
    y: float
    size: float
    color: str
    label: Optional[str]
    visible: bool


@dataclass(frozen=True)
class EdgeRecord:
    id: str
    source: NodeId
    target: NodeId
    width: float
    color: str
    visible: bool


@dataclass(frozen=True)
class RenderSettings:
    interaction: InteractionSettings
    canvas: CanvasSettings
    viewport: Viewport


@dataclass(frozen=True)
class VisualizationConfig:
    """Render-ready description of the whole visualization.

    ``to_dict`` is the wire contract handed to renderers and exporters;
    its field names and the interaction mode spellings are stable.
    """
    nodes: Tuple[NodeRecord, ...]
    edges: Tuple[EdgeRecord, ...]
    settings: RenderSettings
    legends: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    statistics: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "legends", MappingProxyType(dict(self.legends)))
        object.__setattr__(self, "statistics", MappingProxyType(dict(self.statistics)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [
                {"id": n.id, "x": n.x, "y": n.y, "size": n.size, "color": n.color,
                 "label": n.label, "visible": n.visible}
                for n in self.nodes
            ],
            "edges": [
                {"id": e.id, "source": e.source, "target": e.target, "width": e.width,
                 "color": e.color, "visible": e.visible}
                for e in self.edges
            ],
            "settings": {
                "interaction": self.settings.interaction.to_dict(),
                "canvas": {
                    "width": self.settings.canvas.width,
                    "height": self.settings.canvas.height,
                    "background": self.settings.canvas.background
                },
                "viewport": {
                    "x_min": self.settings.viewport.x_min,
                    "x_max": self.settings.viewport.x_max,
                    "y_min": self.settings.viewport.y_min,
                    "y_max": self.settings.viewport.y_max
                }
            },
            "legends": {name: dict(legend) for name, legend in self.legends.items()},
            "statistics": dict(self.statistics)
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)


def matches_filters(attributes: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    """True when every filtered attribute the element has is an allowed value.

    A filter value may be a single allowed value or a list of them; elements
    lacking the attribute pass.
    """
    for attr, allowed in filters.items():
        if attr not in attributes:
            continue
        if isinstance(allowed, (list, tuple, set, frozenset)):
            if attributes[attr] not in allowed:
                return False
        elif attributes[attr] != allowed:
            return False
    return True
