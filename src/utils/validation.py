"""
src/utils/validation.py
Boundary checks for draw records, number sets and draw names.
The analyzers assume validated input; these run where rows enter the service.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any

from src.utils.config import NUMBER_RANGE, PICK_COUNT
from src.utils.logger import get_logger

log = get_logger("validation")

_DRAW_NAME_RE = re.compile(r"^[A-Za-z0-9\s-]+$")
# plain dates, or timestamps as PostgREST returns them for timestamptz columns
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\S+)?$")
DRAW_NAME_MAX_LEN = 50


def validate_numbers(nums: Any, pick_count: int = PICK_COUNT) -> bool:
    """Exactly `pick_count` distinct integers inside NUMBER_RANGE."""
    lo, hi = NUMBER_RANGE
    if not isinstance(nums, (list, tuple)):
        log.error(f"Numbers must be a list, got {type(nums).__name__}")
        return False
    if len(nums) != pick_count:
        log.error(f"Expected {pick_count} numbers, got {len(nums)}: {nums}")
        return False
    if not all(isinstance(n, int) and not isinstance(n, bool) for n in nums):
        log.error(f"Non-integer numbers: {nums}")
        return False
    if len(set(nums)) != pick_count:
        log.error(f"Duplicate numbers: {nums}")
        return False
    if not all(lo <= n <= hi for n in nums):
        log.error(f"Numbers out of range [{lo},{hi}]: {nums}")
        return False
    return True


def validate_draw_name(draw_name: Any) -> bool:
    if not isinstance(draw_name, str) or not draw_name.strip():
        log.error("Draw name is required")
        return False
    name = draw_name.strip()
    if len(name) > DRAW_NAME_MAX_LEN:
        log.error(f"Draw name too long ({len(name)} > {DRAW_NAME_MAX_LEN})")
        return False
    if not _DRAW_NAME_RE.match(name):
        log.error(f"Draw name has invalid characters: {name!r}")
        return False
    return True


def validate_date(value: Any) -> bool:
    if isinstance(value, date):
        return True
    if not isinstance(value, str) or not _DATE_RE.match(value):
        log.error(f"Invalid date format (YYYY-MM-DD): {value!r}")
        return False
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        log.error(f"Invalid calendar date: {value!r}")
        return False
    return True


def validate_draw(record: dict[str, Any]) -> bool:
    """Validate a draw_results row before it reaches the analyzers."""
    required = {"draw_name", "draw_date", "winning_numbers"}
    if not required.issubset(record.keys()):
        log.error(f"Missing fields: {required - record.keys()}")
        return False
    if not validate_draw_name(record["draw_name"]):
        return False
    if not validate_date(record["draw_date"]):
        return False
    if not validate_numbers(record["winning_numbers"]):
        return False
    machine = record.get("machine_numbers")
    if machine is not None and not validate_numbers(machine):
        return False
    return True
