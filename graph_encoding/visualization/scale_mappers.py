"""Scale Mappers for Graph Visualization

Pure mappings from a data domain onto a visual range. Every scale is a
frozen, callable value computed once from the values observed at call time;
``None`` input (missing attribute) always yields the scale's fallback.
"""

import colorsys
import math
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import plotly.colors as pc

from graph_encoding.core.exceptions import ConfigurationError
from .visualization_data_models import AttributeKind, AttributeValue

ColorSpec = Union[str, Sequence[str]]


def to_hex(color: str) -> str:
    """Normalize ``#rgb``, ``#rrggbb`` or ``rgb(r, g, b)`` to lowercase ``#rrggbb``"""
    if not isinstance(color, str):
        raise ConfigurationError("color", f"Color must be a string, got {color!r}")
    value = color.strip().lower()
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) == 6 and all(c in string.hexdigits for c in digits):
            return f"#{digits}"
    elif value.startswith("rgb"):
        try:
            return rgb_to_hex(pc.unlabel_rgb(value))
        except (ValueError, IndexError):
            pass
    raise ConfigurationError("color", f"Unsupported color value {color!r}")


def rgb_to_hex(rgb: Sequence[float]) -> str:
    r, g, b = (int(round(min(max(channel, 0.0), 255.0))) for channel in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def resolve_palette(palette: ColorSpec) -> List[str]:
    """Turn a plotly palette name or an explicit color list into hex colors"""
    if isinstance(palette, str):
        for module in (pc.qualitative, pc.sequential, pc.diverging, pc.cyclical):
            colors = getattr(module, palette, None)
            if isinstance(colors, list):
                return [to_hex(c) for c in colors]
        raise ConfigurationError("palette", f"Unknown plotly palette '{palette}'")
    colors = [to_hex(c) for c in palette]
    if not colors:
        raise ConfigurationError("palette", "Palette must contain at least one color")
    return colors


def generate_palette(count: int, base: Sequence[str]) -> List[str]:
    """Qualitative palette sized to ``count``.

    The base palette is used while it has enough colors; beyond that
    ``count`` evenly spaced hues are generated so no two categories share
    a color.
    """
    if count <= len(base):
        return list(base[:count])
    return [rgb_to_hex(tuple(255 * c for c in colorsys.hls_to_rgb(i / count, 0.5, 0.65)))
            for i in range(count)]


def interpolate_color(anchors: Sequence[str], t: float) -> str:
    """Color at ``t`` in [0, 1] along evenly spaced anchor colors"""
    if len(anchors) == 1:
        return anchors[0]
    rgb = np.array([pc.hex_to_rgb(a) for a in anchors], dtype=float)
    stops = np.linspace(0.0, 1.0, len(anchors))
    return rgb_to_hex([np.interp(t, stops, rgb[:, channel]) for channel in range(3)])


def category_sort_key(value: AttributeValue) -> Tuple[int, float, str]:
    """Numbers ascending first, then booleans, then everything else by string form"""
    kind = AttributeKind.classify(value)
    if kind == AttributeKind.NUMERIC:
        return (0, float(value), "")
    if kind == AttributeKind.BOOLEAN:
        return (1, float(value), "")
    return (2, 0.0, str(value))


def present_values(values: Iterable[Optional[AttributeValue]]) -> List[AttributeValue]:
    return [v for v in values if v is not None]


def is_numeric_domain(values: Iterable[AttributeValue]) -> bool:
    values = list(values)
    return bool(values) and all(AttributeKind.classify(v) == AttributeKind.NUMERIC for v in values)


def _numeric_domain(values: Sequence[AttributeValue], field_name: str) -> Tuple[float, float]:
    if not is_numeric_domain(values):
        raise ConfigurationError(field_name, f"Attribute '{field_name}' has non-numeric values")
    numbers = [float(v) for v in values]
    if not all(math.isfinite(v) for v in numbers):
        raise ConfigurationError(field_name, f"Attribute '{field_name}' has non-finite values")
    return (min(numbers), max(numbers))


def _validated_range(size_range: Sequence[float], field_name: str) -> Tuple[float, float]:
    if len(size_range) != 2:
        raise ConfigurationError(field_name, f"Range must be a (min, max) pair, got {list(size_range)}")
    low, high = (float(v) for v in size_range)
    if not (0 < low <= high) or not math.isfinite(high):
        raise ConfigurationError(field_name, f"Range must satisfy 0 < min <= max, got {list(size_range)}")
    return (low, high)


def _unit_position(value: float, domain: Tuple[float, float]) -> float:
    low, high = domain
    if high == low:
        return 1.0
    return min(max((value - low) / (high - low), 0.0), 1.0)


@dataclass(frozen=True)
class LinearSizeScale:
    """Numeric value to size, linear or logarithmic.

    A constant domain maps every value to the top of the range.
    """
    domain: Tuple[float, float]
    size_range: Tuple[float, float]
    log: bool = False
    fallback: Optional[float] = None

    @classmethod
    def from_values(cls, values: Iterable[Optional[AttributeValue]], size_range: Sequence[float],
                    log: bool = False, fallback: Optional[float] = None,
                    field_name: str = "value") -> "LinearSizeScale":
        present = present_values(values)
        domain = _numeric_domain(present, field_name)
        if log and domain[0] <= 0:
            raise ConfigurationError(
                field_name, f"Logarithmic scale needs positive values for '{field_name}'")
        return cls(domain, _validated_range(size_range, "size_range"), log, fallback)

    def __call__(self, value: Optional[AttributeValue]) -> float:
        low_size, high_size = self.size_range
        if value is None:
            return float(self.fallback if self.fallback is not None else low_size)
        domain = self.domain
        value = float(value)
        if self.log:
            value = math.log(value)
            domain = (math.log(domain[0]), math.log(domain[1]))
        return float(low_size + _unit_position(value, domain) * (high_size - low_size))

    def legend(self) -> Dict[str, Any]:
        return {
            "type": "size",
            "scale": "log" if self.log else "linear",
            "domain": list(self.domain),
            "range": list(self.size_range)
        }


@dataclass(frozen=True)
class ColorRampScale:
    """Numeric value to a color along a continuous ramp"""
    domain: Tuple[float, float]
    anchors: Tuple[str, ...]
    fallback: str

    @classmethod
    def from_values(cls, values: Iterable[Optional[AttributeValue]], anchors: ColorSpec,
                    fallback: str, field_name: str = "value") -> "ColorRampScale":
        domain = _numeric_domain(present_values(values), field_name)
        return cls(domain, tuple(resolve_palette(anchors)), to_hex(fallback))

    def __call__(self, value: Optional[AttributeValue]) -> str:
        if value is None:
            return self.fallback
        return interpolate_color(self.anchors, _unit_position(float(value), self.domain))

    def legend(self) -> Dict[str, Any]:
        return {
            "type": "continuous",
            "domain": list(self.domain),
            "colors": list(self.anchors)
        }


@dataclass(frozen=True)
class CategoricalColorScale:
    """Distinct value to a palette color, assigned in sorted value order"""
    mapping: Mapping[AttributeValue, str] = field(default_factory=dict)
    fallback: str = "#cccccc"

    def __post_init__(self):
        if not isinstance(self.mapping, MappingProxyType):
            object.__setattr__(self, "mapping", MappingProxyType(dict(self.mapping)))

    @classmethod
    def from_values(cls, values: Iterable[Optional[AttributeValue]], palette: ColorSpec,
                    fallback: str) -> "CategoricalColorScale":
        categories = sorted(set(present_values(values)), key=category_sort_key)
        colors = generate_palette(len(categories), resolve_palette(palette))
        return cls(dict(zip(categories, colors)), to_hex(fallback))

    def __call__(self, value: Optional[AttributeValue]) -> str:
        if value is None:
            return self.fallback
        return self.mapping.get(value, self.fallback)

    def legend(self) -> Dict[str, Any]:
        return {
            "type": "categorical",
            "entries": [{"value": value, "color": color} for value, color in self.mapping.items()]
        }


@dataclass(frozen=True)
class FixedScale:
    """Same value for every element"""
    value: Any

    def __call__(self, value: Optional[AttributeValue]) -> Any:
        return self.value


@dataclass(frozen=True)
class LabelScale:
    """Attribute value to label text; missing values leave no label"""
    template: str = "{value}"

    def __call__(self, value: Optional[AttributeValue]) -> Optional[str]:
        if value is None:
            return None
        return self.template.format(value=value)
