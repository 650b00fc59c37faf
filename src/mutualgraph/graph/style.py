"""
Node styling helpers.

Everything here is a pure function of its arguments: colors are derived
from a 32-bit FNV-1a hash of the identity (finished with a murmur3-style
mix), so a given identity always gets the same color, in every run.
"""

import math
import re
from html import escape
from urllib.parse import quote

from ..config import AVATAR_CDN, AVATAR_SIZE
from ..core.types import NodeColor

_MASK32 = 0xFFFFFFFF

_ZERO_DISCRIMINATOR = re.compile(r"(?:#0)+$", re.IGNORECASE)
_DISCRIMINATOR = re.compile(r"#(\d{1,4})$")
_LEADING_DIGITS = re.compile(r"^\d+")
_URL = re.compile(r"^https?://", re.IGNORECASE)

FALLBACK_COLOR = NodeColor(background="#4e79a7", border="#2e4a67")


def hash_string(value: str) -> int:
    """Non-negative 31-bit hash of ``value`` (UTF-16 code units, FNV-1a + mix)."""
    h = 0x811C9DC5
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * 0x01000193) & _MASK32

    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16

    signed = h - (1 << 32) if h & 0x80000000 else h
    return abs(signed)


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL (h in [0, 360), s and l in [0, 100]) to ``#rrggbb``."""
    s /= 100
    l /= 100
    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = l - c / 2

    if 0 <= h < 60:
        r, g, b = c, x, 0.0
    elif 60 <= h < 120:
        r, g, b = x, c, 0.0
    elif 120 <= h < 180:
        r, g, b = 0.0, c, x
    elif 180 <= h < 240:
        r, g, b = 0.0, x, c
    elif 240 <= h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    def to_hex(v: float) -> str:
        return f"{math.floor((v + m) * 255 + 0.5):02x}"

    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"


def color_from_id(node_id: str) -> NodeColor:
    """Deterministic base color for an identity."""
    hue = hash_string(node_id) % 360
    saturation = 65
    lightness = 50
    return NodeColor(
        background=hsl_to_hex(hue, saturation, lightness),
        border=hsl_to_hex(hue, saturation, max(0, lightness - 18)),
    )


def clean_username(name) -> str:
    """Strip legacy ``#0`` discriminator runs: ``alice#0#0`` -> ``alice``."""
    if not isinstance(name, str):
        return "" if name is None else str(name)
    return _ZERO_DISCRIMINATOR.sub("", name).strip()


def discriminator_from_name(name: str) -> int | None:
    """Discriminator of a ``name#1234`` style username, if any."""
    if not isinstance(name, str):
        return None
    match = _DISCRIMINATOR.search(name)
    return int(match.group(1)) if match else None


def explicit_avatar_url(node_id: str, avatar_ref: str) -> str:
    """
    Resolve an avatar reference given by an export.

    Full URLs pass through; anything else is treated as an avatar hash on the
    CDN. Returns an empty string when there is no reference.
    """
    if not avatar_ref:
        return ""
    if _URL.match(avatar_ref):
        return avatar_ref
    return f"{AVATAR_CDN}/avatars/{node_id}/{avatar_ref}.png?size={AVATAR_SIZE}"


def default_avatar_url(node_id: str, name: str = "") -> str:
    """Built-in avatar picked from the name's discriminator or the id's last digits."""
    disc = discriminator_from_name(name)
    if disc is None:
        digits = _LEADING_DIGITS.match(node_id[-2:])
        disc = int(digits.group(0)) if digits else 0
    return f"{AVATAR_CDN}/embed/avatars/{abs(disc) % 5}.png?size={AVATAR_SIZE}"


def resolve_avatar_url(node_id: str, name: str = "", avatar_ref: str = "") -> str:
    return explicit_avatar_url(node_id, avatar_ref) or default_avatar_url(node_id, name)


def initials_from_label(label: str) -> str:
    """Up to two uppercase initials taken from word or camelCase boundaries."""
    text = str(label or "").strip()
    if not text:
        return "?"
    spaced = re.sub(r"[_\-]+", " ", text)
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", spaced)
    parts = [p for p in spaced.split() if p]

    letters = ""
    for part in parts:
        if len(letters) >= 2:
            break
        letters += part[0]
    if not letters:
        letters = text[0]
    return letters[:2].upper()


def avatar_svg_data_url(label: str, color: NodeColor | None = None) -> str:
    """Circular initials avatar as an SVG data URL."""
    background = (color or FALLBACK_COLOR).background
    text = initials_from_label(label)
    size = AVATAR_SIZE
    svg = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}">\n'
        '  <defs><clipPath id="c"><circle cx="64" cy="64" r="64"/></clipPath></defs>\n'
        f'  <g clip-path="url(#c)"><rect width="{size}" height="{size}" fill="{background}"/></g>\n'
        '  <text x="50%" y="54%" text-anchor="middle" dominant-baseline="middle" '
        'font-family="Inter,Segoe UI,system-ui,Arial" font-weight="700" font-size="56" '
        f'fill="#ffffff">{escape(text)}</text>\n'
        "</svg>"
    )
    return "data:image/svg+xml;utf8," + quote(svg, safe="-_.!~*'()")
