# ========================
# ev_insights/pipeline/options.py
# ========================

"""
Filter Option Extraction

Derives the selectable filter values from the full record collection.
"""

import logging
from typing import Dict, Any, Sequence

from .records import VehicleRecord

logger = logging.getLogger(__name__)


def get_filter_options(records: Sequence[VehicleRecord]) -> Dict[str, Any]:
    """
    Compute the filter domain of a dataset.

    Args:
        records: The complete, unfiltered collection

    Returns:
        dict: 'year_range' as an inclusive (min, max) tuple, (0, 0) when
        there are no records; 'manufacturers' and 'states' as sorted lists of
        distinct values, blank states left out.
    """
    years = {record.model_year for record in records}
    manufacturers = sorted({record.make for record in records})
    states = sorted({record.state for record in records if record.state})

    year_range = (min(years), max(years)) if years else (0, 0)

    logger.debug(
        f"Filter options: years {year_range}, {len(manufacturers)} makes, {len(states)} states"
    )
    return {
        'year_range': year_range,
        'manufacturers': manufacturers,
        'states': states,
    }
