"""Graph Visualization Module

Attribute-to-visual-encoding pipeline: snapshot, scales, style accumulator,
encoding operations and configuration assembly, plus the networkx layout
and Plotly renderer collaborators.
"""

from .visualization_data_models import (
    AttributeKind,
    CanvasSettings,
    Edge,
    EdgeRecord,
    EdgeStyle,
    GraphSnapshot,
    InteractionMode,
    InteractionSettings,
    LayoutType,
    Metric,
    Node,
    NodeRecord,
    NodeStyle,
    RenderSettings,
    Viewport,
    VisualizationConfig,
)
from .scale_mappers import (
    CategoricalColorScale,
    ColorRampScale,
    FixedScale,
    LabelScale,
    LinearSizeScale,
)
from .style_accumulator import StyleAccumulator, StyleDefaults
from .attribute_calculator import AttributeCalculator
from .config_assembler import ConfigAssembler, circle_placement
from .graph_data_loader import VisualizationDataLoader, to_networkx
from .layout_calculator import LayoutCalculator
from .plotly_renderer import PlotlyRenderer

__all__ = [
    'AttributeKind',
    'CanvasSettings',
    'Edge',
    'EdgeRecord',
    'EdgeStyle',
    'GraphSnapshot',
    'InteractionMode',
    'InteractionSettings',
    'LayoutType',
    'Metric',
    'Node',
    'NodeRecord',
    'NodeStyle',
    'RenderSettings',
    'Viewport',
    'VisualizationConfig',
    'CategoricalColorScale',
    'ColorRampScale',
    'FixedScale',
    'LabelScale',
    'LinearSizeScale',
    'StyleAccumulator',
    'StyleDefaults',
    'AttributeCalculator',
    'ConfigAssembler',
    'circle_placement',
    'VisualizationDataLoader',
    'to_networkx',
    'LayoutCalculator',
    'PlotlyRenderer'
]
