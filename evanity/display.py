"""Human-readable formatting for difficulties, rates and durations."""

import math
from typing import Optional

DIFFICULTY_UNITS = ["", "kH", "MH", "GH", "TH", "PH", "EH", "ZH", "YH"]


def display_difficulty(difficulty: Optional[float]) -> str:
    """Format a work-unit count with metric suffixes, e.g. "268.4 MH"."""
    if difficulty is None:
        return "N/A"
    difficulty = float(difficulty)
    if math.isnan(difficulty):
        return "NaN"

    unit_index = 0
    while difficulty >= 1000 and unit_index < len(DIFFICULTY_UNITS) - 1:
        difficulty /= 1000
        unit_index += 1

    if difficulty < 10:
        precision = 3
    elif difficulty < 100:
        precision = 2
    else:
        precision = 1
    return f"{difficulty:.{precision}f} {DIFFICULTY_UNITS[unit_index]}"


def display_hours(total_hours: float) -> str:
    if total_hours < 1:
        return f"{round(total_hours * 60)} m"
    elif total_hours < 24:
        return f"{total_hours:.1f} h"
    days = int(total_hours // 24)
    hours = round(total_hours % 24)
    return f"{days} d {hours} h"


def ms_to_short(ms: float) -> str:
    if ms <= 0:
        return "expired"
    s = int(ms // 1000)
    d, rem = divmod(s, 86400)
    h, rem = divmod(rem, 3600)
    m = rem // 60
    if d > 0:
        return f"{d}d {h}h"
    if h > 0:
        return f"{h}h {m}m"
    return f"{m}m"


def truncate_middle(text: str, start: int = 6, end: int = 4) -> str:
    if not text:
        return ""
    if len(text) > start + end:
        return f"{text[:start]}…{text[-end:]}"
    return text


def format_time(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{seconds / 60:.1f}m"
    elif seconds < 86400:
        return f"{seconds / 3600:.1f}h"
    else:
        return f"{seconds / 86400:.1f}d"


def format_rate(rate: float) -> str:
    if rate < 1000:
        return f"{rate:.0f}"
    elif rate < 1_000_000:
        return f"{rate / 1000:.1f}K"
    else:
        return f"{rate / 1_000_000:.2f}M"
