"""
Appearance Router - deterministic planet look for a seed key
"""
from typing import Literal, Optional

from fastapi import APIRouter, Query

from ..services.appearance import (
    EntityKind,
    build_planet_background,
    default_colors,
    resolve_appearance,
    resolve_palette,
)
from ..services.texture import MAX_TEXTURE_SIZE, texture_generator

router = APIRouter(prefix="/api", tags=["Appearance"])


@router.get("/appearance")
def get_appearance(
    kind: EntityKind,
    seed_key: str = Query(..., min_length=1),
    theme: Literal["tech", "marketing", "design"] = "tech",
    icon: Optional[Literal["linkedin", "github", "portfolio"]] = None,
    size: int = Query(default=256, ge=1, le=MAX_TEXTURE_SIZE),
):
    """
    Resolve appearance, palette, CSS fallback and raster texture.

    Skills get a per-seed palette; other kinds use their fixed colors.
    ``texture`` is null when no raster could be rendered. Declared sync so the
    render runs in the threadpool, not on the event loop.
    """
    appearance = resolve_appearance(kind, seed_key)
    palette = resolve_palette(seed_key) if kind == "skill" else default_colors(kind, theme, icon)
    texture = texture_generator.render(
        seed_key,
        size,
        palette.base,
        palette.accent,
        appearance.variant,
        appearance.hue_shift_deg,
    )
    return {
        "seedKey": seed_key,
        "appearance": appearance.to_dict(),
        "palette": palette.to_dict(),
        "background": build_planet_background(
            palette.base, palette.accent, appearance.variant, appearance.hue_shift_deg
        ),
        "texture": texture,
    }
