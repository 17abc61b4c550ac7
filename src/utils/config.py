"""
src/utils/config.py
Load env vars, the draw schedule and the analysis tunables JSON.
"""
import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = ROOT / "config"

# ── Supabase ──────────────────────────────────────────────────────
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

ANALYSIS_CONFIG_FILE: str = os.getenv("ANALYSIS_CONFIG_FILE", "analysis_params.json")

# ── Game rules ────────────────────────────────────────────────────
NUMBER_RANGE: tuple[int, int] = (1, 90)
PICK_COUNT: int = 5

HISTORY_LIMIT_MIN = 10
HISTORY_LIMIT_MAX = 1000

# Four named draws per day, 10:00 / 13:00 / 16:00 / 18:15
DRAW_SCHEDULE: dict[str, list[str]] = {
    "Lundi":    ["Reveil", "Etoile", "Akwaba", "Monday Special"],
    "Mardi":    ["La Matinale", "Emergence", "Sika", "Lucky Tuesday"],
    "Mercredi": ["Premiere Heure", "Fortune", "Baraka", "Midweek"],
    "Jeudi":    ["Kado", "Privilege", "Monni", "Fortune Thursday"],
    "Vendredi": ["Cash", "Solution", "Wari", "Friday Bonanza"],
    "Samedi":   ["Soutra", "Diamant", "Moaye", "National"],
    "Dimanche": ["Benediction", "Prestige", "Awale", "Espoir"],
}

DRAW_TIMES: list[str] = ["10:00", "13:00", "16:00", "18:15"]

DRAW_NAMES: list[str] = [name for names in DRAW_SCHEDULE.values() for name in names]

_analysis_config_cache: dict[str, Any] = {}


def get_analysis_config(filename: str | None = None) -> dict[str, Any]:
    """Load and cache the analysis tunables JSON."""
    filename = filename or ANALYSIS_CONFIG_FILE
    if filename in _analysis_config_cache:
        return _analysis_config_cache[filename]
    path = CONFIG_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    if tuple(config.get("number_range", NUMBER_RANGE)) != NUMBER_RANGE:
        raise ValueError(f"Unsupported number_range in {path}: {config['number_range']}")
    _analysis_config_cache[filename] = config
    return config


def get_section(name: str) -> dict[str, Any]:
    """Return one tunables section ("anomaly", "heat", ...) or {} if absent."""
    return dict(get_analysis_config().get(name, {}))


def get_draw_day(draw_name: str) -> str | None:
    """Return the weekday a named draw runs on, or None for unknown names."""
    for day, names in DRAW_SCHEDULE.items():
        if draw_name in names:
            return day
    return None
