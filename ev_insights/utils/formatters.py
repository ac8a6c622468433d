# ========================
# ev_insights/utils/formatters.py
# ========================

"""
Display Formatters

Human-readable rendering of counts, percentages and ranges for console output.
"""

from typing import Dict, Union

Number = Union[int, float]


def format_number(num: Number) -> str:
    """Compact count: 1234 -> '1.2K', 2500000 -> '2.5M'."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return f"{num:,}"


def format_percentage(num: Number, decimals: int = 1) -> str:
    return f"{num:.{decimals}f}%"


def format_range(miles: Number) -> str:
    return f"{miles} mi"


def get_change_indicator(change: Number) -> Dict[str, str]:
    """Direction label and arrow for a year-over-year change."""
    if change > 0:
        return {'direction': 'up', 'icon': '↑'}
    if change < 0:
        return {'direction': 'down', 'icon': '↓'}
    return {'direction': 'flat', 'icon': '→'}

