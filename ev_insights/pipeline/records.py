# ========================
# ev_insights/pipeline/records.py
# ========================

"""
Record Models

Typed representation of a single EV registration row.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any


class VehicleType(str, Enum):
    """The two powertrain variants a registration can carry."""

    BEV = 'BEV'
    PHEV = 'PHEV'

    @property
    def description(self) -> str:
        return 'BatteryElectric' if self is VehicleType.BEV else 'PlugInHybrid'

    @classmethod
    def coerce(cls, value: Any) -> 'VehicleType':
        """
        Resolve a member from a member, its value or a descriptive name.

        Args:
            value: VehicleType, 'BEV'/'PHEV' (any case) or
                'BatteryElectric'/'PlugInHybrid'

        Returns:
            VehicleType: The matching member

        Raises:
            ValueError: If the value names neither variant
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.upper() == member.value or text.lower() == member.description.lower():
                return member
        raise ValueError(f"Unknown vehicle type: {value!r}")


@dataclass(frozen=True)
class VehicleRecord:
    """One parsed vehicle registration. Never mutated after parsing."""

    vin: str
    county: str
    city: str
    state: str
    postal_code: str
    model_year: int
    make: str
    model: str
    vehicle_type: VehicleType
    cafv_eligibility: str = ''
    electric_range: int = 0
    base_msrp: int = 0
    legislative_district: int = 0
    electric_utility: str = ''

    @property
    def is_bev(self) -> bool:
        return self.vehicle_type is VehicleType.BEV

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a JSON-ready dictionary."""
        data = asdict(self)
        data['vehicle_type'] = self.vehicle_type.value
        return data
