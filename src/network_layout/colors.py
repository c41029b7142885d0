"""
Color resolution for the styling pipeline.

Colors are configured as plain CSS color strings, as functions of the styled
entity, as references into a Theme, or as *inherited* colors: a color read
off the entity itself (usually its resolved fill) and passed through a chain
of modifiers such as ``darker`` or ``opacity``.

Supported inherited color specs:
    "#ff0000"                                   constant
    lambda node: ...                            function of the entity
    {"theme": "background"}                     theme lookup
    {"from": "color"}                           entity field
    {"from": "source.color",
     "modifiers": [["darker", 0.6], ["opacity", 0.5]]}
"""

from __future__ import annotations

import colorsys
import numbers
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from .accessors import get_path, parse_path
from .validation import ConfigurationError

# Per-step brightness factor for darker/brighter modifiers
BRIGHTNESS_STEP = 0.7

_NAMED_COLORS = {
    "aliceblue": 0xF0F8FF,
    "antiquewhite": 0xFAEBD7,
    "aqua": 0x00FFFF,
    "aquamarine": 0x7FFFD4,
    "azure": 0xF0FFFF,
    "beige": 0xF5F5DC,
    "bisque": 0xFFE4C4,
    "black": 0x000000,
    "blanchedalmond": 0xFFEBCD,
    "blue": 0x0000FF,
    "blueviolet": 0x8A2BE2,
    "brown": 0xA52A2A,
    "burlywood": 0xDEB887,
    "cadetblue": 0x5F9EA0,
    "chartreuse": 0x7FFF00,
    "chocolate": 0xD2691E,
    "coral": 0xFF7F50,
    "cornflowerblue": 0x6495ED,
    "cornsilk": 0xFFF8DC,
    "crimson": 0xDC143C,
    "cyan": 0x00FFFF,
    "darkblue": 0x00008B,
    "darkcyan": 0x008B8B,
    "darkgoldenrod": 0xB8860B,
    "darkgray": 0xA9A9A9,
    "darkgreen": 0x006400,
    "darkgrey": 0xA9A9A9,
    "darkkhaki": 0xBDB76B,
    "darkmagenta": 0x8B008B,
    "darkolivegreen": 0x556B2F,
    "darkorange": 0xFF8C00,
    "darkorchid": 0x9932CC,
    "darkred": 0x8B0000,
    "darksalmon": 0xE9967A,
    "darkseagreen": 0x8FBC8F,
    "darkslateblue": 0x483D8B,
    "darkslategray": 0x2F4F4F,
    "darkslategrey": 0x2F4F4F,
    "darkturquoise": 0x00CED1,
    "darkviolet": 0x9400D3,
    "deeppink": 0xFF1493,
    "deepskyblue": 0x00BFFF,
    "dimgray": 0x696969,
    "dimgrey": 0x696969,
    "dodgerblue": 0x1E90FF,
    "firebrick": 0xB22222,
    "floralwhite": 0xFFFAF0,
    "forestgreen": 0x228B22,
    "fuchsia": 0xFF00FF,
    "gainsboro": 0xDCDCDC,
    "ghostwhite": 0xF8F8FF,
    "gold": 0xFFD700,
    "goldenrod": 0xDAA520,
    "gray": 0x808080,
    "green": 0x008000,
    "greenyellow": 0xADFF2F,
    "grey": 0x808080,
    "honeydew": 0xF0FFF0,
    "hotpink": 0xFF69B4,
    "indianred": 0xCD5C5C,
    "indigo": 0x4B0082,
    "ivory": 0xFFFFF0,
    "khaki": 0xF0E68C,
    "lavender": 0xE6E6FA,
    "lavenderblush": 0xFFF0F5,
    "lawngreen": 0x7CFC00,
    "lemonchiffon": 0xFFFACD,
    "lightblue": 0xADD8E6,
    "lightcoral": 0xF08080,
    "lightcyan": 0xE0FFFF,
    "lightgoldenrodyellow": 0xFAFAD2,
    "lightgray": 0xD3D3D3,
    "lightgreen": 0x90EE90,
    "lightgrey": 0xD3D3D3,
    "lightpink": 0xFFB6C1,
    "lightsalmon": 0xFFA07A,
    "lightseagreen": 0x20B2AA,
    "lightskyblue": 0x87CEFA,
    "lightslategray": 0x778899,
    "lightslategrey": 0x778899,
    "lightsteelblue": 0xB0C4DE,
    "lightyellow": 0xFFFFE0,
    "lime": 0x00FF00,
    "limegreen": 0x32CD32,
    "linen": 0xFAF0E6,
    "magenta": 0xFF00FF,
    "maroon": 0x800000,
    "mediumaquamarine": 0x66CDAA,
    "mediumblue": 0x0000CD,
    "mediumorchid": 0xBA55D3,
    "mediumpurple": 0x9370DB,
    "mediumseagreen": 0x3CB371,
    "mediumslateblue": 0x7B68EE,
    "mediumspringgreen": 0x00FA9A,
    "mediumturquoise": 0x48D1CC,
    "mediumvioletred": 0xC71585,
    "midnightblue": 0x191970,
    "mintcream": 0xF5FFFA,
    "mistyrose": 0xFFE4E1,
    "moccasin": 0xFFE4B5,
    "navajowhite": 0xFFDEAD,
    "navy": 0x000080,
    "oldlace": 0xFDF5E6,
    "olive": 0x808000,
    "olivedrab": 0x6B8E23,
    "orange": 0xFFA500,
    "orangered": 0xFF4500,
    "orchid": 0xDA70D6,
    "palegoldenrod": 0xEEE8AA,
    "palegreen": 0x98FB98,
    "paleturquoise": 0xAFEEEE,
    "palevioletred": 0xDB7093,
    "papayawhip": 0xFFEFD5,
    "peachpuff": 0xFFDAB9,
    "peru": 0xCD853F,
    "pink": 0xFFC0CB,
    "plum": 0xDDA0DD,
    "powderblue": 0xB0E0E6,
    "purple": 0x800080,
    "rebeccapurple": 0x663399,
    "red": 0xFF0000,
    "rosybrown": 0xBC8F8F,
    "royalblue": 0x4169E1,
    "saddlebrown": 0x8B4513,
    "salmon": 0xFA8072,
    "sandybrown": 0xF4A460,
    "seagreen": 0x2E8B57,
    "seashell": 0xFFF5EE,
    "sienna": 0xA0522D,
    "silver": 0xC0C0C0,
    "skyblue": 0x87CEEB,
    "slateblue": 0x6A5ACD,
    "slategray": 0x708090,
    "slategrey": 0x708090,
    "snow": 0xFFFAFA,
    "springgreen": 0x00FF7F,
    "steelblue": 0x4682B4,
    "tan": 0xD2B48C,
    "teal": 0x008080,
    "thistle": 0xD8BFD8,
    "tomato": 0xFF6347,
    "turquoise": 0x40E0D0,
    "violet": 0xEE82EE,
    "wheat": 0xF5DEB3,
    "white": 0xFFFFFF,
    "whitesmoke": 0xF5F5F5,
    "yellow": 0xFFFF00,
    "yellowgreen": 0x9ACD32,
}

_FUNCTIONAL = re.compile(r"^(rgba?|hsla?)\(\s*([^)]*)\)$")
_SEPARATORS = re.compile(r"\s*,\s*|\s*/\s*|\s+")


def _component(text: str, percent_scale: float) -> float:
    """Parse a number or percentage; percentages are scaled to percent_scale."""
    if text.endswith("%"):
        return float(text[:-1]) / 100 * percent_scale
    return float(text)


def _from_hex(digits: str) -> tuple[float, float, float, float]:
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    if len(digits) not in (6, 8):
        raise ValueError(digits)
    r, g, b = int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
    a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return r, g, b, a


def _from_functional(kind: str, parts: list[str]) -> tuple[float, float, float, float]:
    if len(parts) not in (3, 4):
        raise ValueError(parts)
    a = _component(parts[3], 1.0) if len(parts) == 4 else 1.0
    if kind.startswith("rgb"):
        r, g, b = (_component(p, 255.0) for p in parts[:3])
        return r, g, b, a

    hue = parts[0][:-3] if parts[0].endswith("deg") else parts[0]
    if not (parts[1].endswith("%") and parts[2].endswith("%")):
        raise ValueError(parts)
    h = (float(hue) % 360) / 360
    s = _component(parts[1], 1.0)
    lightness = _component(parts[2], 1.0)
    r, g, b = colorsys.hls_to_rgb(h, lightness, s)
    return r * 255, g * 255, b * 255, a


@dataclass(frozen=True)
class Color:
    """An sRGB color with opacity. Channels are 0-255, opacity 0-1."""

    r: float
    g: float
    b: float
    opacity: float = 1.0

    @classmethod
    def parse(cls, value: str) -> Color:
        """
        Parse a CSS color string.

        Accepts ``#rgb``, ``#rgba``, ``#rrggbb``, ``#rrggbbaa``,
        ``rgb()``/``rgba()`` with numbers or percentages, ``hsl()``/``hsla()``,
        ``transparent`` and the CSS named colors.

        Raises:
            ConfigurationError: If the string is not a recognised color
        """
        text = value.strip().lower()
        if text == "transparent":
            return cls(0, 0, 0, 0.0)
        if text in _NAMED_COLORS:
            n = _NAMED_COLORS[text]
            return cls(n >> 16 & 0xFF, n >> 8 & 0xFF, n & 0xFF)
        try:
            if text.startswith("#"):
                return cls(*_from_hex(text[1:]))
            match = _FUNCTIONAL.match(text)
            if match:
                parts = _SEPARATORS.split(match.group(2).strip())
                return cls(*_from_functional(match.group(1), parts))
        except ValueError:
            pass
        raise ConfigurationError(f"Unrecognised color {value!r}")

    def darker(self, k: float = 1.0) -> Color:
        factor = BRIGHTNESS_STEP**k
        return Color(self.r * factor, self.g * factor, self.b * factor, self.opacity)

    def brighter(self, k: float = 1.0) -> Color:
        factor = (1 / BRIGHTNESS_STEP) ** k
        return Color(self.r * factor, self.g * factor, self.b * factor, self.opacity)

    def with_opacity(self, opacity: float) -> Color:
        return Color(self.r, self.g, self.b, opacity)

    def __str__(self) -> str:
        r, g, b = (_channel(c) for c in (self.r, self.g, self.b))
        a = max(0.0, min(1.0, self.opacity))
        if a >= 1:
            return f"rgb({r}, {g}, {b})"
        return f"rgba({r}, {g}, {b}, {a:g})"

    def hex(self) -> str:
        """Return ``#rrggbb`` (opacity is dropped)."""
        return "#{:02x}{:02x}{:02x}".format(*(_channel(c) for c in (self.r, self.g, self.b)))


def _channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


@dataclass(frozen=True)
class Theme:
    """
    Colors the styling pipeline can reference with ``{"theme": path}``.

    Attributes:
        background: Chart background color
        text_color: Default text color
        link_color: Default link color
        grid_color: Grid line color
        extra: Additional named colors, looked up by dotted path
    """

    background: str = "#ffffff"
    text_color: str = "#333333"
    link_color: str = "#999999"
    grid_color: str = "#dddddd"
    extra: dict[str, Any] = field(default_factory=dict)

    def lookup(self, path: str) -> Any:
        """Read a theme value by dotted path, falling back to ``extra``."""
        keys = parse_path(path)
        value = get_path(self, keys)
        if value is None:
            value = get_path(self.extra, keys)
        if value is None:
            raise ConfigurationError(f"Theme has no value at {path!r}")
        return value


DEFAULT_THEME = Theme()


def resolve_color(spec: Any, theme: Theme = DEFAULT_THEME) -> Any:
    """
    Resolve a non-inherited color spec to a concrete color.

    Args:
        spec: Color string, or ``{"theme": path}``
        theme: Theme used for theme references

    Raises:
        ConfigurationError: If spec is neither
    """
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict) and set(spec) == {"theme"}:
        return theme.lookup(spec["theme"])
    raise ConfigurationError(f"Cannot resolve color {spec!r}")


Modifier = Callable[[Color], Color]


def _build_modifiers(modifiers: Any) -> list[Modifier]:
    if not isinstance(modifiers, (list, tuple)):
        raise ConfigurationError(f"Color modifiers must be a list, got {modifiers!r}")

    built: list[Modifier] = []
    for modifier in modifiers:
        if not isinstance(modifier, Sequence) or isinstance(modifier, str) or len(modifier) != 2:
            raise ConfigurationError(f"Invalid color modifier {modifier!r}")
        name, amount = modifier
        if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
            raise ConfigurationError(f"Color modifier {name!r} needs a number, got {amount!r}")
        if name == "darker":
            built.append(lambda c, k=amount: c.darker(k))
        elif name == "brighter":
            built.append(lambda c, k=amount: c.brighter(k))
        elif name == "opacity":
            built.append(lambda c, a=amount: c.with_opacity(a))
        else:
            raise ConfigurationError(f"Unknown color modifier {name!r}")
    return built


def resolve_inherited_color(
    spec: Any, theme: Theme = DEFAULT_THEME
) -> Callable[[Any], Any]:
    """
    Resolve a color spec that may inherit from the entity being styled.

    Args:
        spec: Constant, function, theme reference, or ``{"from": path, "modifiers": [...]}``
        theme: Theme used for theme references

    Returns:
        A ``f(entity) -> color`` callable

    Raises:
        ConfigurationError: If spec is not a supported shape. Raised again
            at evaluation time if the inherited field is missing.
    """
    if callable(spec):
        return spec
    if isinstance(spec, str) or (isinstance(spec, dict) and "theme" in spec):
        color = resolve_color(spec, theme)
        return lambda _entity: color
    if not isinstance(spec, dict) or "from" not in spec:
        raise ConfigurationError(f"Unsupported inherited color {spec!r}")

    unknown = set(spec) - {"from", "modifiers"}
    if unknown:
        raise ConfigurationError(f"Unknown inherited color keys {sorted(unknown)}")

    keys = parse_path(spec["from"])
    modifiers = _build_modifiers(spec.get("modifiers", []))
    source = spec["from"]

    def inherit(entity: Any) -> Any:
        base = get_path(entity, keys)
        if base is None:
            raise ConfigurationError(f"Cannot inherit color from {source!r} on {entity!r}")
        if not modifiers:
            return base
        color = base if isinstance(base, Color) else Color.parse(str(base))
        for modify in modifiers:
            color = modify(color)
        return str(color)

    return inherit


__all__ = [
    "BRIGHTNESS_STEP",
    "Color",
    "Theme",
    "DEFAULT_THEME",
    "resolve_color",
    "resolve_inherited_color",
]
