import pytest

from antiportfolio.services.appearance import (
    LESSON_COLORS,
    PALETTES,
    SKILL_COLORS,
    SOCIAL_COLORS,
    TextureVariant,
    accent_for_failure,
    build_planet_background,
    build_seed_key,
    default_colors,
    resolve_appearance,
    resolve_palette,
)
from antiportfolio.services.seeded_random import hash_seed

SEED_KEYS = [build_seed_key("skill", i, f"Capacità {i}", "tech") for i in range(60)]


def test_build_seed_key():
    assert build_seed_key("project", 2, "Onboarding", "skill:1") == "project:2:Onboarding:skill:1"


def test_appearance_is_deterministic():
    for key in SEED_KEYS:
        assert resolve_appearance("skill", key) == resolve_appearance("skill", key)


@pytest.mark.parametrize("kind, spread", [("skill", 120), ("lesson", 15), ("project", 15), ("social", 15)])
def test_appearance_ranges(kind, spread):
    for key in SEED_KEYS:
        appearance = resolve_appearance(kind, key)
        h = hash_seed(key)
        assert -spread <= appearance.hue_shift_deg < spread
        assert -20 <= appearance.ring_tilt_deg < 20
        assert appearance.has_ring == (h % 7 == 0 or h % 11 == 0)
        assert isinstance(appearance.variant, TextureVariant)


def test_skills_lean_towards_bands():
    variants = [resolve_appearance("skill", f"skill:{i}") for i in range(900)]
    bands = sum(1 for a in variants if a.variant is TextureVariant.BANDS)
    craters = sum(1 for a in variants if a.variant is TextureVariant.CRATERS)
    assert bands > craters


def test_appearance_to_dict_is_camel_case():
    data = resolve_appearance("lesson", "lesson:lesson-1:Lancio").to_dict()
    assert set(data) == {"variant", "hasRing", "ringTiltDeg", "hueShiftDeg"}
    assert data["variant"] in {v.value for v in TextureVariant}


def test_palette_comes_from_table_possibly_swapped():
    for key in SEED_KEYS:
        palette = resolve_palette(key)
        h = hash_seed(key)
        chosen = PALETTES[h % len(PALETTES)]
        if h % 9 == 0:
            assert (palette.base, palette.accent) == (chosen.accent, chosen.base)
        else:
            assert palette == chosen


def test_default_colors_per_kind():
    assert default_colors("lesson") == LESSON_COLORS
    assert default_colors("skill", "marketing") == SKILL_COLORS["marketing"]
    assert default_colors("social", "tech", "github") == SOCIAL_COLORS["github"]
    assert default_colors("skill", "unknown") == SKILL_COLORS["tech"]


def test_accent_for_failure_depends_on_theme():
    assert accent_for_failure("tech") != accent_for_failure("design")
    assert accent_for_failure("marketing").accent == "#a855f7"


@pytest.mark.parametrize("variant", list(TextureVariant))
def test_css_background_for_every_variant(variant):
    css = build_planet_background("#22d3ee", "#0891b2", variant, 30)
    assert set(css) == {"backgroundImage", "filter", "backgroundSize", "backgroundBlendMode"}
    assert "radial-gradient" in css["backgroundImage"]
    assert "hue-rotate(30deg)" in css["filter"]
