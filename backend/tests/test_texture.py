import base64
import io

import numpy as np
import pytest
from PIL import Image

from antiportfolio.services.appearance import TextureVariant
from antiportfolio.services.seeded_random import SeededRandom
from antiportfolio.services.texture import (
    PlanetTextureGenerator,
    TextureCache,
    allocate_surface,
    apply_grain,
    hex_to_rgb,
    shift_hue,
    texture_cache_key,
)

SIZE = 24


def _decode(data_url):
    assert data_url.startswith("data:image/png;base64,")
    return Image.open(io.BytesIO(base64.b64decode(data_url.split(",", 1)[1])))


@pytest.mark.parametrize("variant", list(TextureVariant))
def test_every_variant_renders_a_png(variant):
    generator = PlanetTextureGenerator(cache=TextureCache())
    data_url = generator.render("skill:1:Chiarezza", SIZE, "#22d3ee", "#0891b2", variant, 12)
    image = _decode(data_url)
    assert image.size == (SIZE, SIZE)
    assert image.mode == "RGBA"


def test_same_inputs_share_one_cached_reference():
    cache = TextureCache()
    generator = PlanetTextureGenerator(cache=cache)
    first = generator.render("lesson:1", SIZE, "#ef4444", "#dc2626", TextureVariant.LAVA)
    second = generator.render("lesson:1", SIZE, "#ef4444", "#dc2626", TextureVariant.LAVA)
    assert first is second
    assert len(cache) == 1
    assert texture_cache_key("lesson:1", SIZE, "#ef4444", "#dc2626", TextureVariant.LAVA) in cache


def test_rendering_is_deterministic_across_caches():
    a = PlanetTextureGenerator(cache=TextureCache()).render("social:github", SIZE, "#6e5494", "#4c3a6b", "craters")
    b = PlanetTextureGenerator(cache=TextureCache()).render("social:github", SIZE, "#6e5494", "#4c3a6b", "craters")
    assert a == b


def test_different_seeds_render_differently():
    generator = PlanetTextureGenerator(cache=TextureCache())
    a = generator.render("skill:1", SIZE, "#22d3ee", "#0891b2", TextureVariant.BANDS)
    b = generator.render("skill:2", SIZE, "#22d3ee", "#0891b2", TextureVariant.BANDS)
    assert a != b


def test_missing_surface_yields_none_and_is_not_cached():
    cache = TextureCache()
    generator = PlanetTextureGenerator(cache=cache, surface_factory=lambda size: None)
    assert generator.render("skill:1", SIZE, "#22d3ee", "#0891b2", TextureVariant.ICE) is None
    assert len(cache) == 0


@pytest.mark.parametrize("size", [0, -5, 4096])
def test_unsupported_sizes_have_no_surface(size):
    assert allocate_surface(size) is None


def test_allocate_surface_is_transparent():
    surface = allocate_surface(8)
    assert surface.shape == (8, 8, 4)
    assert not np.any(surface)


def test_cache_first_writer_wins():
    cache = TextureCache()
    assert cache.get_or_compute("k", lambda: "first") == "first"
    assert cache.get_or_compute("k", lambda: "second") == "first"
    assert cache.get("missing") is None


def test_color_helpers():
    assert hex_to_rgb("#0f0") == (0.0, 255.0, 0.0)
    assert hex_to_rgb("22d3ee") == (34.0, 211.0, 238.0)
    with pytest.raises(ValueError):
        hex_to_rgb("#12345")
    # A zero shift with no boosts keeps the color.
    assert shift_hue("#22d3ee", 0, 0.0, 0.0) == (34.0, 211.0, 238.0)


def test_integral_and_float_hue_shifts_share_a_cache_entry():
    assert texture_cache_key("skill:1", SIZE, "#22d3ee", "#0891b2", "bands", 10) == texture_cache_key(
        "skill:1", SIZE, "#22d3ee", "#0891b2", TextureVariant.BANDS, 10.0
    )
    cache = TextureCache()
    generator = PlanetTextureGenerator(cache=cache)
    first = generator.render("skill:1", SIZE, "#22d3ee", "#0891b2", TextureVariant.BANDS, 10)
    second = generator.render("skill:1", SIZE, "#22d3ee", "#0891b2", TextureVariant.BANDS, 10.0)
    assert first is second
    assert len(cache) == 1


def test_grain_uses_the_seeded_stream_in_pixel_order():
    pixels = np.full((3, 4, 4), 128.0)
    grained = apply_grain(pixels, SeededRandom(99), strength=0.1)
    reference = SeededRandom(99)
    expected = [128.0 + (reference() - 0.5) * 255.0 * 0.1 for _ in range(12)]
    np.testing.assert_allclose(grained[..., 0].ravel(), expected)
    np.testing.assert_array_equal(grained[..., 3], pixels[..., 3])
