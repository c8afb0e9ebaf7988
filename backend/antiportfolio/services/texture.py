"""
Procedural planet textures.

Renders a square PNG (as a data URL) from an appearance bundle and a palette:
radial albedo, one overlay routine per texture variant, then per-pixel grain.
Rendering is a pure function of its inputs, so results are cached by key and
never recomputed or evicted.
"""
import base64
import colorsys
import io
import logging
import math
import threading
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .appearance import TextureVariant
from .seeded_random import SeededRandom, hash_seed

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]
# (offset in [0, 1], rgb, alpha)
ColorStop = Tuple[float, RGB, float]

WHITE: RGB = (255.0, 255.0, 255.0)
BLACK: RGB = (0.0, 0.0, 0.0)

MAX_TEXTURE_SIZE = 2048
GRAIN_STRENGTH = 0.07


# ============================================================================
# Cache
# ============================================================================

def texture_cache_key(
    seed_key: str,
    size: int,
    base: str,
    accent: str,
    variant: TextureVariant,
    hue_shift_deg: float = 0,
) -> str:
    # 10 and 10.0 must address the same entry.
    return f"{seed_key}|{size}|{base}|{accent}|{TextureVariant(variant).value}|{float(hue_shift_deg)!r}"


class TextureCache:
    """Process-lifetime, content-addressed texture store. Never evicts."""

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def get_or_compute(self, key: str, compute: Callable[[], Optional[str]]) -> Optional[str]:
        cached = self._entries.get(key)
        if cached is not None:
            return cached
        value = compute()
        if value is None:
            return None
        with self._lock:
            # First writer wins so every caller shares one reference.
            return self._entries.setdefault(key, value)


# ============================================================================
# Color helpers
# ============================================================================

def hex_to_rgb(value: str) -> RGB:
    h = value.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    if len(h) != 6:
        raise ValueError(f"Unsupported color: {value!r}")
    n = int(h, 16)
    return (float((n >> 16) & 255), float((n >> 8) & 255), float(n & 255))


def shift_hue(value: str, hue_shift_deg: float, sat_boost: float = 0.06, light_boost: float = 0.02) -> RGB:
    r, g, b = hex_to_rgb(value)
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    h = (h + hue_shift_deg / 360.0 + 1.0) % 1.0
    s = min(1.0, max(0.0, s + sat_boost))
    l = min(1.0, max(0.0, l + light_boost))
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return (float(round(r * 255)), float(round(g * 255)), float(round(b * 255)))


# ============================================================================
# Surface primitives (premultiplied RGBA float arrays, source-over)
# ============================================================================

def allocate_surface(size: int) -> Optional[np.ndarray]:
    """Blank transparent surface, or None when one cannot be provided."""
    if size <= 0 or size > MAX_TEXTURE_SIZE:
        return None
    try:
        return np.zeros((size, size, 4), dtype=np.float64)
    except MemoryError:
        logger.warning("Could not allocate %sx%s texture surface", size, size)
        return None


def _composite(surface: np.ndarray, region: Tuple[slice, slice], rgb: np.ndarray, alpha: np.ndarray) -> None:
    """Source-over of straight-alpha rgb/alpha onto a premultiplied region."""
    a = alpha[..., None]
    src = np.concatenate([rgb * a, a * 255.0], axis=-1)
    dst = surface[region]
    surface[region] = src + dst * (1.0 - a)


def _interp_stops(t: np.ndarray, stops: Sequence[ColorStop]) -> Tuple[np.ndarray, np.ndarray]:
    offsets = [s[0] for s in stops]
    channels = [np.interp(t, offsets, [s[1][c] for s in stops]) for c in range(3)]
    alpha = np.interp(t, offsets, [s[2] for s in stops])
    return np.stack(channels, axis=-1), alpha


def _pixel_grid(y0: int, y1: int, x0: int, x1: int) -> Tuple[np.ndarray, np.ndarray]:
    yy, xx = np.mgrid[y0:y1, x0:x1].astype(np.float64)
    return yy + 0.5, xx + 0.5


def paint_radial(surface: np.ndarray, cx: float, cy: float, radius: float, stops: Sequence[ColorStop]) -> None:
    """Radial gradient clipped to its circle, like an arc() fill."""
    size = surface.shape[0]
    radius = max(radius, 0.5)
    x0, x1 = max(0, int(math.floor(cx - radius))), min(size, int(math.ceil(cx + radius)) + 1)
    y0, y1 = max(0, int(math.floor(cy - radius))), min(size, int(math.ceil(cy + radius)) + 1)
    if x0 >= x1 or y0 >= y1:
        return
    yy, xx = _pixel_grid(y0, y1, x0, x1)
    t = np.hypot(xx - cx, yy - cy) / radius
    rgb, alpha = _interp_stops(np.clip(t, 0.0, 1.0), stops)
    alpha = np.where(t <= 1.0, alpha, 0.0)
    _composite(surface, (slice(y0, y1), slice(x0, x1)), rgb, alpha)


def paint_disc(surface: np.ndarray, cx: float, cy: float, radius: float, rgb: RGB, alpha: float) -> None:
    paint_radial(surface, cx, cy, radius, [(0.0, rgb, alpha), (1.0, rgb, alpha)])


def paint_mask(surface: np.ndarray, mask: Image.Image, rgb: RGB, alpha: float) -> None:
    """Composite a solid color through an 8-bit coverage mask."""
    bbox = mask.getbbox()
    if bbox is None:
        return
    x0, y0, x1, y1 = bbox
    coverage = np.asarray(mask.crop(bbox), dtype=np.float64) / 255.0 * alpha
    color = np.broadcast_to(np.array(rgb, dtype=np.float64), coverage.shape + (3,))
    _composite(surface, (slice(y0, y1), slice(x0, x1)), color, coverage)


def to_straight_alpha(surface: np.ndarray) -> np.ndarray:
    alpha = surface[..., 3:4] / 255.0
    safe = np.where(alpha > 0, alpha, 1.0)
    rgb = np.where(alpha > 0, surface[..., :3] / safe, 0.0)
    return np.concatenate([rgb, surface[..., 3:4]], axis=-1)


# ============================================================================
# Overlay routines
# ============================================================================

def draw_albedo(surface: np.ndarray, base: RGB, accent: RGB) -> None:
    size = surface.shape[0]
    yy, xx = _pixel_grid(0, size, 0, size)
    t = np.hypot(xx - size * 0.28, yy - size * 0.26) / (size * 0.85)
    stops = [(0.0, base, 1.0), (0.55, accent, 1.0), (1.0, BLACK, 0.22)]
    rgb, alpha = _interp_stops(np.clip(t, 0.0, 1.0), stops)
    _composite(surface, (slice(None), slice(None)), rgb, alpha)


def draw_gas_bands(surface: np.ndarray, rng: SeededRandom, base: RGB, accent: RGB) -> None:
    size = surface.shape[0]
    angle = math.radians(-20 + rng() * 40)
    freq = rng.randint(6, 6)
    phase = rng() * math.pi * 2

    t = np.arange(size, dtype=np.float64) / size
    w = (np.sin(t * math.pi * 2 * freq + phase) * 0.45
         + np.sin(t * math.pi * 2 * (freq * 0.5) + phase * 0.7) * 0.18)
    # One jitter draw per row, top to bottom.
    jitter = (rng.take(size) - 0.5) * 0.08
    mix = np.clip(0.5 + w + jitter, 0.0, 1.0)[:, None]
    base_arr, accent_arr = np.array(base), np.array(accent)
    row_colors = np.round(base_arr + (accent_arr - base_arr) * mix)

    # Bands live in a frame rotated around the center.
    c = size / 2
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    yy, xx = _pixel_grid(0, size, 0, size)
    u = (xx - c) * cos_a + (yy - c) * sin_a + c
    v = -(xx - c) * sin_a + (yy - c) * cos_a + c
    covered = (u >= 0) & (u < size) & (v >= 0) & (v < size)
    idx = np.clip(np.floor(v).astype(int), 0, size - 1)
    _composite(surface, (slice(None), slice(None)), row_colors[idx], np.where(covered, 0.85, 0.0))

    storms = rng.randint(4, 4)
    for _ in range(storms):
        x = size * (0.15 + rng() * 0.7)
        y = size * (0.15 + rng() * 0.7)
        r = size * (0.06 + rng() * 0.14)
        px = c + (x - c) * cos_a - (y - c) * sin_a
        py = c + (x - c) * sin_a + (y - c) * cos_a
        paint_radial(surface, px, py, r, [(0.0, WHITE, 0.12), (0.35, WHITE, 0.06), (1.0, WHITE, 0.0)])


def draw_craters(surface: np.ndarray, rng: SeededRandom) -> None:
    size = surface.shape[0]
    for _ in range(rng.randint(6, 8)):
        x = size * (0.12 + rng() * 0.76)
        y = size * (0.12 + rng() * 0.76)
        r = size * (0.045 + rng() * 0.12)
        paint_radial(surface, x, y, r, [
            (0.0, BLACK, 0.22),
            (0.55, BLACK, 0.10),
            (0.72, WHITE, 0.08),
            (1.0, WHITE, 0.0),
        ])

    # Micro speckles
    for _ in range(rng.randint(220, 180)):
        x = rng() * size
        y = rng() * size
        r = 0.4 + rng() * 1.1
        if rng() > 0.5:
            paint_disc(surface, x, y, r, WHITE, 0.03)
        else:
            paint_disc(surface, x, y, r, BLACK, 0.04)


def draw_ice(surface: np.ndarray, rng: SeededRandom) -> None:
    size = surface.shape[0]
    for _ in range(rng.randint(14, 12)):
        x, y = rng() * size, rng() * size
        points = [(x, y)]
        for _ in range(rng.randint(6, 10)):
            x += (rng() - 0.5) * (size * 0.12)
            y += (rng() - 0.5) * (size * 0.12)
            points.append((x, y))
        mask = Image.new("L", (size, size), 0)
        ImageDraw.Draw(mask).line(points, fill=255, width=1)
        paint_mask(surface, mask, WHITE, 0.16 * 0.9)


def draw_nebula(surface: np.ndarray, rng: SeededRandom) -> None:
    size = surface.shape[0]
    for _ in range(rng.randint(4, 5)):
        x = size * (0.1 + rng() * 0.8)
        y = size * (0.1 + rng() * 0.8)
        r = size * (0.2 + rng() * 0.35)
        paint_radial(surface, x, y, r, [(0.0, WHITE, 0.10), (0.4, WHITE, 0.06), (1.0, WHITE, 0.0)])


def draw_tech_grid(surface: np.ndarray, rng: SeededRandom) -> None:
    size = surface.shape[0]
    step = rng.randint(8, 8)
    mask = Image.new("L", (size, size), 0)
    draw = ImageDraw.Draw(mask)
    for x in range(0, size + 1, step):
        draw.line([(x, 0), (x, size)], fill=255, width=1)
    for y in range(0, size + 1, step):
        draw.line([(0, y), (size, y)], fill=255, width=1)
    paint_mask(surface, mask, WHITE, 0.18 * 0.7)


def draw_lava(surface: np.ndarray, rng: SeededRandom) -> None:
    size = surface.shape[0]
    for _ in range(rng.randint(10, 10)):
        x = size * (0.1 + rng() * 0.8)
        y = size * (0.1 + rng() * 0.8)
        r = size * (0.06 + rng() * 0.22)
        paint_radial(surface, x, y, r, [
            (0.0, (255.0, 190.0, 70.0), 0.22),
            (0.35, (255.0, 120.0, 30.0), 0.16),
            (1.0, BLACK, 0.0),
        ])


def apply_grain(pixels: np.ndarray, rng: SeededRandom, strength: float = GRAIN_STRENGTH) -> np.ndarray:
    """Uniform luminance noise on straight-alpha pixels; alpha untouched."""
    noise = rng.take(pixels.shape[0] * pixels.shape[1])
    noise = ((noise - 0.5) * 255.0 * strength).reshape(pixels.shape[:2])[..., None]
    out = pixels.copy()
    out[..., :3] = np.clip(out[..., :3] + noise, 0.0, 255.0)
    return out


def encode_png_data_url(pixels: np.ndarray) -> str:
    image = Image.fromarray(np.round(pixels).astype(np.uint8))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


# ============================================================================
# Generator
# ============================================================================

class PlanetTextureGenerator:
    """
    Renders planet textures through an owned TextureCache.

    ``surface_factory`` returns None when no rendering surface is available;
    render() then returns None and callers fall back to the CSS gradient.
    """

    def __init__(
        self,
        cache: Optional[TextureCache] = None,
        surface_factory: Callable[[int], Optional[np.ndarray]] = allocate_surface,
    ):
        self.cache = cache if cache is not None else TextureCache()
        self._surface_factory = surface_factory

    def render(
        self,
        seed_key: str,
        size: int,
        base: str,
        accent: str,
        variant: TextureVariant,
        hue_shift_deg: float = 0,
    ) -> Optional[str]:
        variant = TextureVariant(variant)
        key = texture_cache_key(seed_key, size, base, accent, variant, hue_shift_deg)
        return self.cache.get_or_compute(
            key, lambda: self._render(seed_key, size, base, accent, variant, hue_shift_deg)
        )

    def _render(
        self,
        seed_key: str,
        size: int,
        base: str,
        accent: str,
        variant: TextureVariant,
        hue_shift_deg: float,
    ) -> Optional[str]:
        surface = self._surface_factory(size)
        if surface is None:
            return None

        rng = SeededRandom(hash_seed(f"{seed_key}|tex|{variant.value}|{size}"))

        base_shifted = shift_hue(base, hue_shift_deg, 0.08, 0.01)
        accent_shifted = shift_hue(accent, hue_shift_deg * 0.85, 0.10, 0.0)
        draw_albedo(surface, base_shifted, accent_shifted)

        if variant is TextureVariant.BANDS:
            draw_gas_bands(surface, rng, hex_to_rgb(base), hex_to_rgb(accent))
        elif variant is TextureVariant.CRATERS:
            draw_craters(surface, rng)
        elif variant is TextureVariant.ICE:
            draw_ice(surface, rng)
        elif variant is TextureVariant.NEBULA:
            draw_nebula(surface, rng)
        elif variant is TextureVariant.TECH_GRID:
            draw_tech_grid(surface, rng)
        else:
            draw_lava(surface, rng)

        # Grain helps a lot at small sizes.
        pixels = apply_grain(to_straight_alpha(surface), rng)
        logger.debug("Rendered %s texture %spx for %s", variant.value, size, seed_key)
        return encode_png_data_url(pixels)


texture_generator = PlanetTextureGenerator()
