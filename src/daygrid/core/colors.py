"""Event colour resolution.

Categories are free-text CSS colours typed by the user. They are parsed with a
static table of CSS named colours plus hex, rgb() and hsl() notations, so the
result does not depend on a browser.
"""

import colorsys
import re
from dataclasses import dataclass

DEFAULT_COLOR = "dodgerblue"
DEFAULT_OPACITY = 0.3
BLACK_OPACITY = 0.2

RGB = tuple[int, int, int]

NAMED_COLORS: dict[str, RGB] = {
    "aliceblue": (240, 248, 255),
    "antiquewhite": (250, 235, 215),
    "aqua": (0, 255, 255),
    "aquamarine": (127, 255, 212),
    "azure": (240, 255, 255),
    "beige": (245, 245, 220),
    "bisque": (255, 228, 196),
    "black": (0, 0, 0),
    "blanchedalmond": (255, 235, 205),
    "blue": (0, 0, 255),
    "blueviolet": (138, 43, 226),
    "brown": (165, 42, 42),
    "burlywood": (222, 184, 135),
    "cadetblue": (95, 158, 160),
    "chartreuse": (127, 255, 0),
    "chocolate": (210, 105, 30),
    "coral": (255, 127, 80),
    "cornflowerblue": (100, 149, 237),
    "cornsilk": (255, 248, 220),
    "crimson": (220, 20, 60),
    "cyan": (0, 255, 255),
    "darkblue": (0, 0, 139),
    "darkcyan": (0, 139, 139),
    "darkgoldenrod": (184, 134, 11),
    "darkgray": (169, 169, 169),
    "darkgreen": (0, 100, 0),
    "darkgrey": (169, 169, 169),
    "darkkhaki": (189, 183, 107),
    "darkmagenta": (139, 0, 139),
    "darkolivegreen": (85, 107, 47),
    "darkorange": (255, 140, 0),
    "darkorchid": (153, 50, 204),
    "darkred": (139, 0, 0),
    "darksalmon": (233, 150, 122),
    "darkseagreen": (143, 188, 143),
    "darkslateblue": (72, 61, 139),
    "darkslategray": (47, 79, 79),
    "darkslategrey": (47, 79, 79),
    "darkturquoise": (0, 206, 209),
    "darkviolet": (148, 0, 211),
    "deeppink": (255, 20, 147),
    "deepskyblue": (0, 191, 255),
    "dimgray": (105, 105, 105),
    "dimgrey": (105, 105, 105),
    "dodgerblue": (30, 144, 255),
    "firebrick": (178, 34, 34),
    "floralwhite": (255, 250, 240),
    "forestgreen": (34, 139, 34),
    "fuchsia": (255, 0, 255),
    "gainsboro": (220, 220, 220),
    "ghostwhite": (248, 248, 255),
    "gold": (255, 215, 0),
    "goldenrod": (218, 165, 32),
    "gray": (128, 128, 128),
    "green": (0, 128, 0),
    "greenyellow": (173, 255, 47),
    "grey": (128, 128, 128),
    "honeydew": (240, 255, 240),
    "hotpink": (255, 105, 180),
    "indianred": (205, 92, 92),
    "indigo": (75, 0, 130),
    "ivory": (255, 255, 240),
    "khaki": (240, 230, 140),
    "lavender": (230, 230, 250),
    "lavenderblush": (255, 240, 245),
    "lawngreen": (124, 252, 0),
    "lemonchiffon": (255, 250, 205),
    "lightblue": (173, 216, 230),
    "lightcoral": (240, 128, 128),
    "lightcyan": (224, 255, 255),
    "lightgoldenrodyellow": (250, 250, 210),
    "lightgray": (211, 211, 211),
    "lightgreen": (144, 238, 144),
    "lightgrey": (211, 211, 211),
    "lightpink": (255, 182, 193),
    "lightsalmon": (255, 160, 122),
    "lightseagreen": (32, 178, 170),
    "lightskyblue": (135, 206, 250),
    "lightslategray": (119, 136, 153),
    "lightslategrey": (119, 136, 153),
    "lightsteelblue": (176, 196, 222),
    "lightyellow": (255, 255, 224),
    "lime": (0, 255, 0),
    "limegreen": (50, 205, 50),
    "linen": (250, 240, 230),
    "magenta": (255, 0, 255),
    "maroon": (128, 0, 0),
    "mediumaquamarine": (102, 205, 170),
    "mediumblue": (0, 0, 205),
    "mediumorchid": (186, 85, 211),
    "mediumpurple": (147, 112, 219),
    "mediumseagreen": (60, 179, 113),
    "mediumslateblue": (123, 104, 238),
    "mediumspringgreen": (0, 250, 154),
    "mediumturquoise": (72, 209, 204),
    "mediumvioletred": (199, 21, 133),
    "midnightblue": (25, 25, 112),
    "mintcream": (245, 255, 250),
    "mistyrose": (255, 228, 225),
    "moccasin": (255, 228, 181),
    "navajowhite": (255, 222, 173),
    "navy": (0, 0, 128),
    "oldlace": (253, 245, 230),
    "olive": (128, 128, 0),
    "olivedrab": (107, 142, 35),
    "orange": (255, 165, 0),
    "orangered": (255, 69, 0),
    "orchid": (218, 112, 214),
    "palegoldenrod": (238, 232, 170),
    "palegreen": (152, 251, 152),
    "paleturquoise": (175, 238, 238),
    "palevioletred": (219, 112, 147),
    "papayawhip": (255, 239, 213),
    "peachpuff": (255, 218, 185),
    "peru": (205, 133, 63),
    "pink": (255, 192, 203),
    "plum": (221, 160, 221),
    "powderblue": (176, 224, 230),
    "purple": (128, 0, 128),
    "rebeccapurple": (102, 51, 153),
    "red": (255, 0, 0),
    "rosybrown": (188, 143, 143),
    "royalblue": (65, 105, 225),
    "saddlebrown": (139, 69, 19),
    "salmon": (250, 128, 114),
    "sandybrown": (244, 164, 96),
    "seagreen": (46, 139, 87),
    "seashell": (255, 245, 238),
    "sienna": (160, 82, 45),
    "silver": (192, 192, 192),
    "skyblue": (135, 206, 235),
    "slateblue": (106, 90, 205),
    "slategray": (112, 128, 144),
    "slategrey": (112, 128, 144),
    "snow": (255, 250, 250),
    "springgreen": (0, 255, 127),
    "steelblue": (70, 130, 180),
    "tan": (210, 180, 140),
    "teal": (0, 128, 128),
    "thistle": (216, 191, 216),
    "tomato": (255, 99, 71),
    "turquoise": (64, 224, 208),
    "violet": (238, 130, 238),
    "wheat": (245, 222, 179),
    "white": (255, 255, 255),
    "whitesmoke": (245, 245, 245),
    "yellow": (255, 255, 0),
    "yellowgreen": (154, 205, 50),
    # Computes to rgba(0, 0, 0, 0), so it renders like black.
    "transparent": (0, 0, 0),
}

_HEX_PATTERN = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_FUNC_PATTERN = re.compile(r"^(rgba?|hsla?)\((.*)\)$")
_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)"
_CHANNEL_PATTERN = re.compile(rf"^({_NUMBER})(%|deg)?$")


@dataclass(frozen=True)
class EventColor:
    """Resolved colours for one event category."""

    rgb: RGB
    border: str
    opacity: float

    @property
    def rgb_string(self) -> str:
        return ",".join(str(c) for c in self.rgb)

    @property
    def background(self) -> str:
        return f"rgba({self.rgb_string},{self.opacity})"


def _parse_hex(body: str) -> RGB:
    if len(body) in (3, 4):
        body = "".join(ch * 2 for ch in body)
    return (int(body[0:2], 16), int(body[2:4], 16), int(body[4:6], 16))


def _split_args(args: str) -> list[str] | None:
    """Split rgb()/hsl() arguments in comma or space syntax, alpha dropped."""
    args = args.strip()
    if "," in args:
        parts = [p.strip() for p in args.split(",")]
        if len(parts) not in (3, 4):
            return None
    else:
        color_part, _, alpha = args.partition("/")
        parts = color_part.split()
        if len(parts) != 3:
            return None
        if alpha.strip():
            parts.append(alpha.strip())
    if any(not _CHANNEL_PATTERN.match(p) for p in parts):
        return None
    return parts[:3]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _parse_rgb_args(parts: list[str]) -> RGB | None:
    channels = []
    for part in parts:
        match = _CHANNEL_PATTERN.match(part)
        number, unit = float(match.group(1)), match.group(2)
        if unit == "deg":
            return None
        if unit == "%":
            number = number * 255 / 100
        channels.append(int(round(_clamp(number, 0, 255))))
    return (channels[0], channels[1], channels[2])


def _parse_hsl_args(parts: list[str]) -> RGB | None:
    hue_match = _CHANNEL_PATTERN.match(parts[0])
    if hue_match.group(2) == "%":
        return None
    hue = float(hue_match.group(1)) % 360

    sat_match = _CHANNEL_PATTERN.match(parts[1])
    light_match = _CHANNEL_PATTERN.match(parts[2])
    if sat_match.group(2) != "%" or light_match.group(2) != "%":
        return None
    sat = _clamp(float(sat_match.group(1)), 0, 100) / 100
    light = _clamp(float(light_match.group(1)), 0, 100) / 100

    r, g, b = colorsys.hls_to_rgb(hue / 360, light, sat)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def parse_css_color(color: str | None) -> RGB | None:
    """
    Parse a CSS colour into an (r, g, b) triple.

    Returns None when the string is not a colour a browser would accept.
    """
    if not color:
        return None
    text = color.strip().lower()
    if not text:
        return None

    if text in NAMED_COLORS:
        return NAMED_COLORS[text]

    hex_match = _HEX_PATTERN.match(text)
    if hex_match:
        return _parse_hex(hex_match.group(1))

    func_match = _FUNC_PATTERN.match(text)
    if func_match:
        parts = _split_args(func_match.group(2))
        if parts is None:
            return None
        if func_match.group(1).startswith("rgb"):
            return _parse_rgb_args(parts)
        return _parse_hsl_args(parts)

    return None


def is_valid_css_color(color: str | None) -> bool:
    return parse_css_color(color) is not None


def border_color(category: str | None) -> str:
    """Colour used for an event's border; invalid categories use the default."""
    return category.strip() if is_valid_css_color(category) else DEFAULT_COLOR


def resolve_color(category: str | None, opacity: float = DEFAULT_OPACITY) -> EventColor:
    """
    Resolve a free-text category to border and translucent background colours.

    Pure black is always drawn at a fixed lower opacity.
    """
    rgb = parse_css_color(category)
    if rgb is None:
        rgb = NAMED_COLORS[DEFAULT_COLOR]
    if rgb == (0, 0, 0):
        opacity = BLACK_OPACITY
    return EventColor(rgb=rgb, border=border_color(category), opacity=opacity)


def event_background(category: str | None, opacity: float = DEFAULT_OPACITY) -> str:
    """CSS background for an event, e.g. ``rgba(255,0,0,0.3)``."""
    return resolve_color(category, opacity).background


class ColorResolver:
    """Resolves categories with a per-instance cache and a configurable default."""

    def __init__(self, default_color: str = DEFAULT_COLOR, opacity: float = DEFAULT_OPACITY):
        self.default_color = default_color if is_valid_css_color(default_color) else DEFAULT_COLOR
        self.opacity = opacity
        self._cache: dict[str, EventColor] = {}

    def resolve(self, category: str | None) -> EventColor:
        key = category or ""
        if key not in self._cache:
            self._cache[key] = resolve_color(
                key if is_valid_css_color(key) else self.default_color,
                self.opacity,
            )
        return self._cache[key]
