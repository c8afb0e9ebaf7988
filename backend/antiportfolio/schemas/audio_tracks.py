"""
Background audio catalogue. The model may only pick one of these track ids.
"""
from typing import Optional

BACKGROUND_AUDIO_TRACKS = [
    {
        "id": "orbital_drift_ambient",
        "file": "/audio/orbital_drift_ambient.mp3",
        "title": "Orbital Drift (Ambient)",
        "description": "Ambient spaziale, pad morbidi e texture \"cosmic dust\". Mood contemplativo e umano.",
    },
    {
        "id": "signal_glass_glitch",
        "file": "/audio/signal_glass_glitch.mp3",
        "title": "Signal Glass (Glitch Minimal)",
        "description": "Elettronica minimale con micro-glitch e suoni da telemetria. Adatta a profili engineering/data.",
    },
    {
        "id": "neon_orbit_synthwave",
        "file": "/audio/neon_orbit_synthwave.mp3",
        "title": "Neon Orbit (Modern Synthwave)",
        "description": "Synthwave leggero, arpeggi e atmosfera notturna. Adatta a design/creative tech.",
    },
    {
        "id": "golden_launch_chillhop",
        "file": "/audio/golden_launch_chillhop.mp3",
        "title": "Golden Launch (Chillhop)",
        "description": "Chillhop caldo, Rhodes/piano, vibe positiva. Ottima per marketing/growth/brand.",
    },
    {
        "id": "quiet_gravity_piano",
        "file": "/audio/quiet_gravity_piano.mp3",
        "title": "Quiet Gravity (Cinematic Piano)",
        "description": "Piano cinematico e pad, ritmo lento. Adatto a leadership/strategy/people.",
    },
    {
        "id": "gravity_waves_downtempo",
        "file": "/audio/gravity_waves_downtempo.mp3",
        "title": "Gravity Waves (Downtempo)",
        "description": "Downtempo moderno con soundscape spaziale neutro. Fallback universale.",
    },
]

BACKGROUND_AUDIO_TRACK_IDS = tuple(track["id"] for track in BACKGROUND_AUDIO_TRACKS)

DEFAULT_TRACK_ID = "gravity_waves_downtempo"
DEFAULT_VOLUME = 0.3


def get_background_audio_track_file(track_id: Optional[str]) -> Optional[str]:
    """Return the public file path for a track id, or None if unknown."""
    for track in BACKGROUND_AUDIO_TRACKS:
        if track["id"] == track_id:
            return track["file"]
    return None
