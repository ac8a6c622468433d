# ========================
# ev_insights/pipeline/transformation.py
# ========================

"""
Data Transformation Module

Pure aggregation functions that reduce a vehicle collection to the derived
views shown on the dashboard. Each function is stateless, leaves its input
untouched and returns defaults (zeros, empty lists, None) for empty input.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List, Any, Optional, Sequence, Tuple

from .constants import (
    RANGE_BUCKETS,
    MIN_CORRELATION_GROUP_SIZE,
    DEFAULT_TOP_MANUFACTURERS,
    DEFAULT_TOP_STATES,
    DEFAULT_TOP_CITIES,
    DEFAULT_TOP_MODELS,
    VEHICLE_TYPE_LABELS,
    VEHICLE_TYPE_COLORS,
    get_chart_color,
)
from .records import VehicleRecord, VehicleType

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _percentage(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0


def _count_by(records: Iterable[VehicleRecord], attribute: str,
              skip_empty: bool = False) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for record in records:
        key = getattr(record, attribute)
        if skip_empty and not key:
            continue
        counts[key] += 1
    return counts


def _rank(counts: Dict[str, int], limit: Optional[int]) -> List[Tuple[str, int]]:
    """Sort by count descending, ties by name ascending, then truncate."""
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if limit is not None:
        ranked = ranked[:max(limit, 0)]
    return ranked


def _ranked_view(counts: Dict[str, int], limit: Optional[int]) -> List[Dict[str, Any]]:
    return [
        {'name': name, 'value': value, 'fill': get_chart_color(index)}
        for index, (name, value) in enumerate(_rank(counts, limit))
    ]


def get_adoption_trend(records: Sequence[VehicleRecord]) -> List[Dict[str, int]]:
    """
    Registrations per model year, split by powertrain.

    Returns:
        list[dict]: {'year', 'count', 'bev', 'phev'} ascending by year. Years
        without vehicles are not filled in.
    """
    years = defaultdict(lambda: {'count': 0, 'bev': 0, 'phev': 0})

    for record in records:
        bucket = years[record.model_year]
        bucket['count'] += 1
        if record.is_bev:
            bucket['bev'] += 1
        else:
            bucket['phev'] += 1

    return [{'year': year, **years[year]} for year in sorted(years)]


def get_top_manufacturers(records: Sequence[VehicleRecord],
                          limit: int = DEFAULT_TOP_MANUFACTURERS) -> List[Dict[str, Any]]:
    """Most registered makes: [{'name', 'value', 'fill'}]."""
    return _ranked_view(_count_by(records, 'make'), limit)


def get_vehicle_type_distribution(records: Sequence[VehicleRecord]) -> List[Dict[str, Any]]:
    """
    BEV versus PHEV counts. Both buckets are always present.
    """
    counts = {VehicleType.BEV: 0, VehicleType.PHEV: 0}
    for record in records:
        counts[record.vehicle_type] += 1

    return [
        {
            'type': vehicle_type.value,
            'name': VEHICLE_TYPE_LABELS[vehicle_type.value],
            'value': counts[vehicle_type],
            'fill': VEHICLE_TYPE_COLORS[vehicle_type.value],
        }
        for vehicle_type in (VehicleType.BEV, VehicleType.PHEV)
    ]


def get_range_distribution(records: Sequence[VehicleRecord]) -> List[Dict[str, Any]]:
    """
    Electric range histogram over RANGE_BUCKETS.

    Vehicles with an unreported range (0) are counted in the first bucket,
    but percentages are taken over vehicles with a reported range only, so
    the bucket counts always add up to len(records) while the percentages
    can add up to more than 100.
    """
    counts = [0] * len(RANGE_BUCKETS)
    ranged_total = 0

    for record in records:
        electric_range = record.electric_range
        if electric_range > 0:
            ranged_total += 1
        for index, (_, low, high) in enumerate(RANGE_BUCKETS):
            if electric_range >= low and (high is None or electric_range <= high):
                counts[index] += 1
                break

    return [
        {
            'range': label,
            'min': low,
            'max': high,
            'count': counts[index],
            'percentage': _percentage(counts[index], ranged_total),
        }
        for index, (label, low, high) in enumerate(RANGE_BUCKETS)
    ]


def get_geographic_distribution(records: Sequence[VehicleRecord],
                                limit: int = DEFAULT_TOP_STATES) -> List[Dict[str, Any]]:
    """Vehicles per state, blank states ignored: [{'name', 'value', 'fill'}]."""
    return _ranked_view(_count_by(records, 'state', skip_empty=True), limit)


def get_top_cities(records: Sequence[VehicleRecord],
                   limit: int = DEFAULT_TOP_CITIES) -> List[Dict[str, Any]]:
    """Vehicles per city, blank cities ignored: [{'name', 'value', 'fill'}]."""
    return _ranked_view(_count_by(records, 'city', skip_empty=True), limit)


def get_year_range_correlation(records: Sequence[VehicleRecord],
                               min_group_size: int = MIN_CORRELATION_GROUP_SIZE) -> List[Dict[str, Any]]:
    """
    Mean electric range per (model year, make).

    Only vehicles with a reported range contribute, and groups smaller than
    min_group_size are left out.

    Returns:
        list[dict]: {'model_year', 'electric_range', 'make', 'count'} sorted
        by model year, then make.
    """
    groups = defaultdict(lambda: {'total_range': 0, 'count': 0})

    for record in records:
        if record.electric_range <= 0:
            continue
        group = groups[(record.model_year, record.make)]
        group['total_range'] += record.electric_range
        group['count'] += 1

    return [
        {
            'model_year': model_year,
            'electric_range': round_half_up(group['total_range'] / group['count']),
            'make': make,
            'count': group['count'],
        }
        for (model_year, make), group in sorted(groups.items())
        if group['count'] >= min_group_size
    ]


def get_top_models(records: Sequence[VehicleRecord],
                   limit: int = DEFAULT_TOP_MODELS) -> List[Dict[str, Any]]:
    """
    Most registered (make, model) pairs.

    avg_range includes vehicles with an unreported range. vehicle_type is the
    majority powertrain of the group; an even split reports BEV.
    """
    models = defaultdict(lambda: {'count': 0, 'total_range': 0, 'bev': 0})

    for record in records:
        model = models[(record.make, record.model)]
        model['count'] += 1
        model['total_range'] += record.electric_range
        if record.is_bev:
            model['bev'] += 1

    ranked = sorted(models.items(), key=lambda item: (-item[1]['count'], item[0]))
    if limit is not None:
        ranked = ranked[:max(limit, 0)]

    return [
        {
            'make': make,
            'model': model_name,
            'count': data['count'],
            'avg_range': round_half_up(data['total_range'] / data['count']),
            'vehicle_type': (
                VehicleType.BEV if data['bev'] * 2 >= data['count'] else VehicleType.PHEV
            ).value,
        }
        for (make, model_name), data in ranked
    ]


def calculate_kpis(records: Sequence[VehicleRecord],
                   all_records: Sequence[VehicleRecord]) -> Dict[str, Any]:
    """
    Headline metrics for the filtered set.

    Args:
        records: Filtered vehicles
        all_records: The complete, unfiltered collection

    Returns:
        dict: total_vehicles, bev_percentage, avg_range, top_manufacturer
        ({'name', 'count', 'share'} or None), yoy_change, unique_makes,
        unique_models and dataset_share.
    """
    total = len(records)
    bev_count = 0
    ranged_total = 0
    ranged_count = 0
    year_counts: Dict[int, int] = defaultdict(int)
    make_counts: Dict[str, int] = defaultdict(int)
    models = set()

    for record in records:
        if record.is_bev:
            bev_count += 1
        if record.electric_range > 0:
            ranged_total += record.electric_range
            ranged_count += 1
        year_counts[record.model_year] += 1
        make_counts[record.make] += 1
        models.add((record.make, record.model))

    top_manufacturer = None
    ranked_makes = _rank(make_counts, 1)
    if ranked_makes:
        name, count = ranked_makes[0]
        top_manufacturer = {'name': name, 'count': count, 'share': _percentage(count, total)}

    # Compare the two most recent model years present
    yoy_change = 0
    years = sorted(year_counts)
    if len(years) >= 2:
        current_count = year_counts[years[-1]]
        previous_count = year_counts[years[-2]]
        yoy_change = _percentage(current_count - previous_count, previous_count)

    return {
        'total_vehicles': total,
        'bev_percentage': _percentage(bev_count, total),
        'avg_range': round_half_up(ranged_total / ranged_count) if ranged_count else 0,
        'top_manufacturer': top_manufacturer,
        'yoy_change': yoy_change,
        'unique_makes': len(make_counts),
        'unique_models': len(models),
        'dataset_share': _percentage(total, len(all_records)),
    }
