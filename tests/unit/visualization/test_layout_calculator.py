"""Tests for LayoutCalculator."""
import networkx as nx
import pytest

from graph_encoding.core.exceptions import ConfigurationError
from graph_encoding.visualization import (
    GraphSnapshot,
    LayoutCalculator,
    LayoutType,
    VisualizationDataLoader,
)


@pytest.fixture
def karate():
    return VisualizationDataLoader().load_graph_data("networkx", nx.karate_club_graph())


@pytest.mark.parametrize("layout_type", list(LayoutType))
def test_every_layout_positions_every_node(karate, layout_type):
    positions = LayoutCalculator(layout_type)(karate)
    assert set(positions) == set(karate.node_ids)
    assert all(isinstance(x, float) and isinstance(y, float) for x, y in positions.values())


def test_seeded_layout_is_reproducible(karate):
    first = LayoutCalculator("spring", seed=7).calculate_layout(karate)
    second = LayoutCalculator("spring", seed=7).calculate_layout(karate)
    assert first == second


def test_multigraph_snapshot(degree_snapshot):
    positions = LayoutCalculator("kamada_kawai")(degree_snapshot)
    assert set(positions) == {"a", "b", "c"}


@pytest.mark.parametrize("layout_type", ["spectral", "kamada_kawai"])
def test_small_graphs_fall_back(layout_type):
    snapshot = GraphSnapshot.from_records([("a", {})])
    assert set(LayoutCalculator(layout_type)(snapshot)) == {"a"}


def test_empty_graph():
    assert LayoutCalculator()(GraphSnapshot(())) == {}


def test_unknown_layout():
    with pytest.raises(ConfigurationError) as exc_info:
        LayoutCalculator("force_atlas")
    assert exc_info.value.field == "layout_type"


def test_seed_from_config():
    assert LayoutCalculator().seed == 42
