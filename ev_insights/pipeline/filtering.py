# ========================
# ev_insights/pipeline/filtering.py
# ========================

"""
Filter Engine

Declarative filter criteria and the stable, linear-time filter applied
before every aggregation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .records import VehicleRecord, VehicleType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSpec:
    """
    Four independent inclusion predicates, combined with AND.

    An empty set means "allow every value", not "allow none". A year_range of
    None leaves model years unbounded. The spec is hashable so it can key a
    cache together with a dataset version.
    """

    year_range: Optional[Tuple[int, int]] = None
    manufacturers: FrozenSet[str] = field(default_factory=frozenset)
    vehicle_types: FrozenSet[VehicleType] = field(default_factory=frozenset)
    states: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.year_range is not None:
            low, high = self.year_range
            object.__setattr__(self, 'year_range', (int(low), int(high)))
        object.__setattr__(self, 'manufacturers', frozenset(self.manufacturers or ()))
        object.__setattr__(
            self, 'vehicle_types',
            frozenset(VehicleType.coerce(t) for t in (self.vehicle_types or ()))
        )
        object.__setattr__(self, 'states', frozenset(self.states or ()))

    @classmethod
    def from_options(cls, options: Dict[str, Any]) -> 'FilterSpec':
        """Default spec for a dataset: its full year range, nothing excluded."""
        return cls(year_range=tuple(options['year_range']))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year_range': list(self.year_range) if self.year_range else None,
            'manufacturers': sorted(self.manufacturers),
            'vehicle_types': sorted(t.value for t in self.vehicle_types),
            'states': sorted(self.states),
        }


def passes_filters(record: VehicleRecord, spec: FilterSpec) -> bool:
    """Check a single record against every predicate of the spec."""
    if spec.year_range is not None:
        low, high = spec.year_range
        if record.model_year < low or record.model_year > high:
            return False

    if spec.manufacturers and record.make not in spec.manufacturers:
        return False

    if spec.vehicle_types and record.vehicle_type not in spec.vehicle_types:
        return False

    if spec.states and record.state not in spec.states:
        return False

    return True


def filter_vehicles(records: Iterable[VehicleRecord], spec: FilterSpec) -> List[VehicleRecord]:
    """
    Return the records that satisfy the spec, in their original order.

    Args:
        records: Full or partially filtered record collection (not modified)
        spec (FilterSpec): Predicates to apply

    Returns:
        list[VehicleRecord]: New list holding the matching records
    """
    result = [record for record in records if passes_filters(record, spec)]
    logger.debug(f"Filter {spec.to_dict()} kept {len(result):,} vehicles")
    return result
