"""
Planet appearance resolver.

Maps a seed key (entity kind + id + name) to a stable visual personality:
texture variant, ring, ring tilt, hue shift and a curated palette. Nothing is
stored; the same key always resolves to the same bundle.
"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Literal, Optional, Tuple

from .seeded_random import hash_seed


class TextureVariant(str, Enum):
    CRATERS = "craters"
    BANDS = "bands"
    ICE = "ice"
    NEBULA = "nebula"
    TECH_GRID = "tech-grid"
    LAVA = "lava"


EntityKind = Literal["skill", "project", "lesson", "social"]

# Weighted variant tables. Skills lean towards gas bands.
_SKILL_VARIANTS: Tuple[Tuple[TextureVariant, int], ...] = (
    (TextureVariant.BANDS, 4),
    (TextureVariant.NEBULA, 2),
    (TextureVariant.CRATERS, 1),
    (TextureVariant.ICE, 1),
    (TextureVariant.TECH_GRID, 1),
    (TextureVariant.LAVA, 1),
)
_DEFAULT_VARIANTS: Tuple[Tuple[TextureVariant, int], ...] = tuple((v, 1) for v in TextureVariant)

SKILL_HUE_SPREAD = 120
DEFAULT_HUE_SPREAD = 15


@dataclass(frozen=True)
class PlanetAppearance:
    variant: TextureVariant
    has_ring: bool
    ring_tilt_deg: int
    hue_shift_deg: int

    def to_dict(self) -> dict:
        return {
            "variant": self.variant.value,
            "hasRing": self.has_ring,
            "ringTiltDeg": self.ring_tilt_deg,
            "hueShiftDeg": self.hue_shift_deg,
        }


@dataclass(frozen=True)
class Palette:
    base: str
    accent: str
    glow: str

    def to_dict(self) -> dict:
        return asdict(self)


# Curated palette table. Selection and base/accent order come from the hash.
PALETTES: Tuple[Palette, ...] = (
    Palette("#22d3ee", "#0891b2", "rgba(34, 211, 238, 0.4)"),
    Palette("#d946ef", "#a21caf", "rgba(217, 70, 239, 0.4)"),
    Palette("#facc15", "#ca8a04", "rgba(250, 204, 21, 0.4)"),
    Palette("#8b5cf6", "#6d28d9", "rgba(139, 92, 246, 0.4)"),
    Palette("#34d399", "#059669", "rgba(52, 211, 153, 0.4)"),
    Palette("#fb7185", "#be123c", "rgba(251, 113, 133, 0.4)"),
    Palette("#60a5fa", "#1d4ed8", "rgba(96, 165, 250, 0.4)"),
    Palette("#f97316", "#c2410c", "rgba(249, 115, 22, 0.4)"),
    Palette("#2dd4bf", "#7c3aed", "rgba(45, 212, 191, 0.4)"),
    Palette("#f472b6", "#0ea5e9", "rgba(244, 114, 182, 0.4)"),
    Palette("#a3e635", "#4d7c0f", "rgba(163, 230, 53, 0.4)"),
    Palette("#e2e8f0", "#64748b", "rgba(226, 232, 240, 0.35)"),
)

SKILL_COLORS: Dict[str, Palette] = {
    "tech": Palette("#22d3ee", "#0891b2", "rgba(34, 211, 238, 0.4)"),
    "design": Palette("#d946ef", "#a21caf", "rgba(217, 70, 239, 0.4)"),
    "marketing": Palette("#facc15", "#ca8a04", "rgba(250, 204, 21, 0.4)"),
}

SOCIAL_COLORS: Dict[str, Palette] = {
    "linkedin": Palette("#0077b5", "#005885", "rgba(0, 119, 181, 0.4)"),
    "github": Palette("#6e5494", "#4c3a6b", "rgba(110, 84, 148, 0.4)"),
    "portfolio": Palette("#10b981", "#059669", "rgba(16, 185, 129, 0.4)"),
}

LESSON_COLORS = Palette("#ef4444", "#dc2626", "rgba(239, 68, 68, 0.4)")

THEME_COLORS: Dict[str, Dict[str, str]] = {
    "tech": {"primary": "#22d3ee", "secondary": "#8b5cf6"},
    "marketing": {"primary": "#facc15", "secondary": "#d946ef"},
    "design": {"primary": "#d946ef", "secondary": "#22d3ee"},
}


def build_seed_key(kind: EntityKind, *parts) -> str:
    """Content-addressed key, e.g. ``skill:3:Ascolto attivo``."""
    return ":".join([kind, *(str(part) for part in parts)])


def _pick_weighted(h: int, table: Tuple[Tuple[TextureVariant, int], ...]) -> TextureVariant:
    total = sum(weight for _, weight in table)
    slot = h % total
    for variant, weight in table:
        if slot < weight:
            return variant
        slot -= weight
    return table[-1][0]


def resolve_appearance(kind: EntityKind, seed_key: str) -> PlanetAppearance:
    h = hash_seed(seed_key)
    if kind == "skill":
        variant = _pick_weighted(h, _SKILL_VARIANTS)
        # Separate hash so the wide hue spread does not track the variant.
        hue_hash = hash_seed(f"{seed_key}|hue")
        hue_shift = (hue_hash % (2 * SKILL_HUE_SPREAD)) - SKILL_HUE_SPREAD
    else:
        variant = _pick_weighted(h, _DEFAULT_VARIANTS)
        hue_shift = (h % (2 * DEFAULT_HUE_SPREAD)) - DEFAULT_HUE_SPREAD
    return PlanetAppearance(
        variant=variant,
        has_ring=(h % 7) == 0 or (h % 11) == 0,
        ring_tilt_deg=(h % 40) - 20,
        hue_shift_deg=hue_shift,
    )


def resolve_palette(seed_key: str) -> Palette:
    h = hash_seed(seed_key)
    chosen = PALETTES[h % len(PALETTES)]
    if h % 9 == 0:
        return Palette(base=chosen.accent, accent=chosen.base, glow=chosen.glow)
    return chosen


def default_colors(kind: EntityKind, theme: str = "tech", icon: Optional[str] = None) -> Palette:
    """Fixed per-kind colors used when no palette is requested."""
    if kind == "lesson":
        return LESSON_COLORS
    if kind == "social":
        if icon in SOCIAL_COLORS:
            return SOCIAL_COLORS[icon]
        colors = THEME_COLORS.get(theme, THEME_COLORS["tech"])
        return Palette(colors["primary"], colors["secondary"], f"{colors['primary']}66")
    return SKILL_COLORS.get(theme, SKILL_COLORS["tech"])


def accent_for_failure(theme: str) -> Palette:
    # Anomaly stays purple-ish, tinted by theme.
    if theme == "tech":
        return Palette("#a855f7", "#7c3aed", "rgba(168, 85, 247, 0.4)")
    if theme == "design":
        return Palette("#ec4899", "#a855f7", "rgba(236, 72, 153, 0.4)")
    return Palette("#f97316", "#a855f7", "rgba(249, 115, 22, 0.4)")


# ============================================================================
# CSS gradient fallback (used when no raster texture can be rendered)
# ============================================================================

def build_planet_background(
    base: str,
    accent: str,
    variant: TextureVariant,
    hue_shift_deg: int = 0,
) -> Dict[str, str]:
    albedo = f"radial-gradient(circle at 30% 30%, {base}ff 0%, {accent}ff 55%, {base}aa 100%)"
    variant = TextureVariant(variant)

    if variant is TextureVariant.CRATERS:
        layers = [
            albedo,
            "radial-gradient(circle at 70% 35%, rgba(255,255,255,0.12) 0%, rgba(255,255,255,0.00) 38%)",
            "radial-gradient(circle at 40% 75%, rgba(0,0,0,0.35) 0%, rgba(0,0,0,0.00) 45%)",
            "radial-gradient(circle at 75% 75%, rgba(255,255,255,0.10) 0%, rgba(255,255,255,0.00) 40%)",
        ]
    elif variant is TextureVariant.BANDS:
        layers = [
            albedo,
            "repeating-linear-gradient(12deg, rgba(255,255,255,0.12) 0px, rgba(255,255,255,0.12) 6px, "
            "rgba(0,0,0,0.0) 6px, rgba(0,0,0,0.0) 14px)",
        ]
    elif variant is TextureVariant.ICE:
        layers = [
            albedo.replace("30% 30%", "35% 30%"),
            "repeating-radial-gradient(circle at 60% 40%, rgba(255,255,255,0.18) 0px, "
            "rgba(255,255,255,0.18) 2px, rgba(255,255,255,0.0) 2px, rgba(255,255,255,0.0) 7px)",
        ]
    elif variant is TextureVariant.TECH_GRID:
        layers = [
            albedo,
            "linear-gradient(to right, rgba(255,255,255,0.12) 1px, transparent 1px)",
            "linear-gradient(to bottom, rgba(255,255,255,0.10) 1px, transparent 1px)",
        ]
    elif variant is TextureVariant.LAVA:
        layers = [
            albedo,
            "conic-gradient(from 120deg, rgba(255,255,255,0.00), rgba(255,180,0,0.18), "
            "rgba(255,255,255,0.00), rgba(255,80,0,0.18), rgba(255,255,255,0.00))",
        ]
    else:
        layers = [
            albedo,
            "radial-gradient(circle at 60% 50%, rgba(255,255,255,0.12) 0%, rgba(255,255,255,0.00) 55%)",
            "conic-gradient(from 240deg, rgba(255,255,255,0.00), rgba(255,255,255,0.12), rgba(255,255,255,0.00))",
        ]

    is_grid = variant is TextureVariant.TECH_GRID
    return {
        "backgroundImage": ", ".join(layers),
        "filter": f"hue-rotate({hue_shift_deg}deg)" if hue_shift_deg else "none",
        "backgroundSize": "auto, 10px 10px, 10px 10px" if is_grid else "auto",
        "backgroundBlendMode": "normal, overlay, overlay" if is_grid else "normal",
    }
