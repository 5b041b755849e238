"""Turn attributed graphs into declarative visual-encoding configurations."""

from graph_encoding.core.exceptions import (
    ConfigurationError,
    EncodingException,
    ExportError,
    GraphReferenceError,
)
from graph_encoding.visualization import (
    AttributeCalculator,
    ConfigAssembler,
    GraphSnapshot,
    InteractionMode,
    LayoutCalculator,
    Metric,
    PlotlyRenderer,
    StyleAccumulator,
    VisualizationConfig,
    VisualizationDataLoader,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeCalculator",
    "ConfigAssembler",
    "ConfigurationError",
    "EncodingException",
    "ExportError",
    "GraphReferenceError",
    "GraphSnapshot",
    "InteractionMode",
    "LayoutCalculator",
    "Metric",
    "PlotlyRenderer",
    "StyleAccumulator",
    "VisualizationConfig",
    "VisualizationDataLoader",
]
