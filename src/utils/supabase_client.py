"""
src/utils/supabase_client.py
Typed Supabase client wrapper for the draw, prediction and algorithm tables.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from supabase import Client, create_client

from src.utils.config import SUPABASE_KEY, SUPABASE_URL
from src.utils.logger import get_logger

log = get_logger("supabase")

_client: Client | None = None


def get_client() -> Client:
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set (see .env).")
        _client = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _client


# ── draw_results ──────────────────────────────────────────────────

def get_recent_draws(draw_name: str, limit: int = 100) -> list[dict]:
    """Most-recent-first draw rows for one named draw."""
    db = get_client()
    resp = (
        db.table("draw_results")
        .select("draw_name, draw_date, draw_day, winning_numbers, machine_numbers")
        .eq("draw_name", draw_name)
        .order("draw_date", desc=True)
        .limit(limit)
        .execute()
    )
    return resp.data or []


def get_draws(draw_name: str | None = None) -> list[dict]:
    """All draw rows (optionally for one draw name), most recent first."""
    db = get_client()
    q = (
        db.table("draw_results")
        .select("id, draw_name, draw_date, winning_numbers")
        .order("draw_date", desc=True)
    )
    if draw_name:
        q = q.eq("draw_name", draw_name)
    resp = q.execute()
    return resp.data or []


# ── predictions ───────────────────────────────────────────────────

def get_predictions_before(draw_name: str, draw_date: str) -> list[dict]:
    """Predictions for a draw name made on or before the draw date."""
    db = get_client()
    resp = (
        db.table("predictions")
        .select("id, draw_name, prediction_date, predicted_numbers, model_used, confidence_score")
        .eq("draw_name", draw_name)
        .lte("prediction_date", draw_date)
        .order("prediction_date", desc=True)
        .execute()
    )
    return resp.data or []


def get_recent_predictions(draw_name: str, limit: int = 10) -> list[dict]:
    db = get_client()
    resp = (
        db.table("predictions")
        .select("*")
        .eq("draw_name", draw_name)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return resp.data or []


# ── algorithm_config ──────────────────────────────────────────────

def get_algorithm_configs(enabled_only: bool = False) -> list[dict]:
    db = get_client()
    q = db.table("algorithm_config").select("*").order("weight", desc=True)
    if enabled_only:
        q = q.eq("is_enabled", True)
    resp = q.execute()
    return resp.data or []


def upsert_algorithm_config(record: dict[str, Any]) -> dict:
    db = get_client()
    resp = (
        db.table("algorithm_config")
        .upsert(record, on_conflict="algorithm_name")
        .execute()
    )
    return resp.data[0] if resp.data else {}


def insert_training_history(record: dict[str, Any]) -> dict:
    db = get_client()
    resp = db.table("algorithm_training_history").insert(record).execute()
    return resp.data[0] if resp.data else {}


# ── algorithm_performance ─────────────────────────────────────────

def get_performance_history(
    algorithm: str | None = None,
    draw_name: str | None = None,
    limit: int = 50,
    order_by: str = "draw_date",
) -> list[dict]:
    """Newest first by `order_by` ("draw_date", or "created_at" for evaluation order)."""
    db = get_client()
    q = (
        db.table("algorithm_performance")
        .select("*")
        .order(order_by, desc=True)
        .limit(limit)
    )
    if algorithm:
        q = q.eq("model_used", algorithm)
    if draw_name:
        q = q.eq("draw_name", draw_name)
    resp = q.execute()
    return resp.data or []


def performance_exists(draw_name: str, model_used: str, prediction_date: str, draw_date: str) -> bool:
    db = get_client()
    resp = (
        db.table("algorithm_performance")
        .select("id")
        .eq("draw_name", draw_name)
        .eq("model_used", model_used)
        .eq("prediction_date", prediction_date)
        .eq("draw_date", draw_date)
        .limit(1)
        .execute()
    )
    return bool(resp.data)


def upsert_performance_record(record: dict[str, Any]) -> dict:
    """Idempotent on (draw_name, model_used, prediction_date, draw_date)."""
    db = get_client()
    resp = (
        db.table("algorithm_performance")
        .upsert(record, on_conflict="draw_name,model_used,prediction_date,draw_date")
        .execute()
    )
    return resp.data[0] if resp.data else {}


# ── algorithm_rankings (materialized view) ────────────────────────

def get_algorithm_rankings(draw_name: str | None = None, global_only: bool = False) -> list[dict]:
    db = get_client()
    q = db.table("algorithm_rankings").select("*").order("avg_accuracy", desc=True)
    if draw_name:
        q = q.eq("draw_name", draw_name)
    elif global_only:
        q = q.is_("draw_name", "null")
    resp = q.execute()
    return resp.data or []


def refresh_algorithm_rankings() -> bool:
    db = get_client()
    try:
        db.rpc("refresh_algorithm_rankings").execute()
        return True
    except Exception as exc:
        log.warning(f"Could not refresh rankings: {exc}")
        return False


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
