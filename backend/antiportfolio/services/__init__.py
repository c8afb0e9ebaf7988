from .seeded_random import (
    hash_seed,
    seeded_random,
    SeededRandom
)
from .appearance import (
    TextureVariant,
    PlanetAppearance,
    Palette,
    build_seed_key,
    resolve_appearance,
    resolve_palette,
    default_colors,
    accent_for_failure,
    build_planet_background
)
from .texture import (
    TextureCache,
    PlanetTextureGenerator,
    texture_cache_key,
    texture_generator
)
from .json_repair import (
    parse_model_json,
    parse_model_json_with_stage,
    extract_balanced_object,
    repair_text
)
from .sanitizer import (
    sanitize_anti_portfolio,
    sanitize_profile_analysis
)
from .names import (
    guess_name_hint,
    resolve_real_name
)
from .retry import with_retry
from .orchestrator import (
    AntiPortfolioBuilder,
    SourceFile,
    build_anti_portfolio,
    parse_links
)
from .flight_log import (
    FLIGHT_LOG_KEY,
    dump_flight_log,
    load_flight_log
)

__all__ = [
    # Seeded random
    "hash_seed",
    "seeded_random",
    "SeededRandom",
    # Appearance
    "TextureVariant",
    "PlanetAppearance",
    "Palette",
    "build_seed_key",
    "resolve_appearance",
    "resolve_palette",
    "default_colors",
    "accent_for_failure",
    "build_planet_background",
    # Texture
    "TextureCache",
    "PlanetTextureGenerator",
    "texture_cache_key",
    "texture_generator",
    # AI output ingestion
    "parse_model_json",
    "parse_model_json_with_stage",
    "extract_balanced_object",
    "repair_text",
    "sanitize_anti_portfolio",
    "sanitize_profile_analysis",
    "guess_name_hint",
    "resolve_real_name",
    # Pipeline
    "with_retry",
    "AntiPortfolioBuilder",
    "SourceFile",
    "build_anti_portfolio",
    "parse_links",
    # Flight log
    "FLIGHT_LOG_KEY",
    "dump_flight_log",
    "load_flight_log",
]
