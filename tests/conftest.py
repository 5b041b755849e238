"""Shared test fixtures for graph_encoding tests."""
import pytest

from graph_encoding.core.standard_config import reload_config
from graph_encoding.visualization import (
    AttributeCalculator,
    ConfigAssembler,
    GraphSnapshot,
    StyleAccumulator,
    StyleDefaults,
)


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Every test starts from the packaged default configuration."""
    monkeypatch.delenv("GRAPH_ENCODING_CONFIG", raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def degree_snapshot():
    """a-b, b-c and a parallel c-b: degrees a=1, b=3, c=2."""
    return GraphSnapshot.from_records(
        nodes=[
            ("a", {"group": "A", "score": 1.0}),
            ("b", {"group": "B", "score": 5.0}),
            ("c", {"group": "A"}),
        ],
        edges=[
            ("a", "b", {"weight": 1.0, "kind": "friend"}),
            ("b", "c", {"weight": 3.0, "kind": "colleague"}),
            ("c", "b", {"weight": 2.0}),
        ],
    )


@pytest.fixture
def defaults():
    return StyleDefaults(node_size=10.0, node_color="#1f77b4", edge_width=1.0, edge_color="#888888")


@pytest.fixture
def accumulator(degree_snapshot, defaults):
    return StyleAccumulator.initial(degree_snapshot, defaults)


@pytest.fixture
def calculator():
    return AttributeCalculator()


@pytest.fixture
def assembler():
    return ConfigAssembler()
