# ========================
# ev_insights/pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Coerces tokenised CSV rows into typed vehicle records and applies the
minimal validity rule (positive model year, non-empty make).
"""

import re
import logging
from typing import Dict, List, Optional, Any

from .constants import COLUMN_ORDER, INTEGER_COLUMNS, NON_NEGATIVE_COLUMNS, BEV_MARKER
from .records import VehicleRecord, VehicleType

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def classify_vehicle_type(value: Optional[str]) -> VehicleType:
    """
    Map the free-text EV type column onto a VehicleType.

    Anything mentioning "Battery" is a battery electric vehicle; everything
    else, including an empty or missing value, is a plug-in hybrid.
    """
    if value and BEV_MARKER in value:
        return VehicleType.BEV
    return VehicleType.PHEV


class RecordCleaner:
    """
    Turns a list of raw field strings into a VehicleRecord.
    Rows that fail validation are dropped and counted, never raised.
    """

    DROP_INVALID_YEAR = 'invalid_model_year'
    DROP_MISSING_MAKE = 'missing_make'

    def __init__(self):
        """Initialize the record cleaner."""
        self.records_processed = 0
        self.records_dropped = 0
        self.drop_reasons: Dict[str, int] = {}
        logger.debug("RecordCleaner initialized")

    def clean_row(self, values: List[str]) -> Optional[VehicleRecord]:
        """
        Build a record from positional field values.

        Args:
            values (list[str]): Field values in COLUMN_ORDER; missing trailing
                columns are allowed.

        Returns:
            VehicleRecord or None: The record, or None if the row is invalid.
        """
        self.records_processed += 1

        fields: Dict[str, Any] = {}
        for index, column in enumerate(COLUMN_ORDER):
            raw = values[index] if index < len(values) else None
            if column in INTEGER_COLUMNS:
                fields[column] = self._clean_int(raw)
                if column in NON_NEGATIVE_COLUMNS:
                    fields[column] = max(fields[column], 0)
            else:
                fields[column] = self._clean_string(raw)

        if fields['model_year'] <= 0:
            return self._drop(self.DROP_INVALID_YEAR, values)
        if not fields['make']:
            return self._drop(self.DROP_MISSING_MAKE, values)

        vehicle_type = classify_vehicle_type(fields.pop('electric_vehicle_type'))
        return VehicleRecord(vehicle_type=vehicle_type, **fields)

    def _drop(self, reason: str, values: List[str]) -> None:
        self.records_dropped += 1
        self.drop_reasons[reason] = self.drop_reasons.get(reason, 0) + 1
        logger.debug(f"Row dropped ({reason}): {values}")
        return None

    def _clean_string(self, value: Any) -> str:
        """Strip whitespace; missing values become an empty string."""
        if not isinstance(value, str):
            return ''
        return value.strip()

    def _clean_int(self, value: Any) -> int:
        """
        Parse the leading integer of a value ("2022", "250 mi", "31.0").
        Non-numeric or missing content coerces to 0.
        """
        if isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return value
        if not isinstance(value, str):
            return 0

        match = _LEADING_INT.match(value)
        if not match:
            return 0
        return int(match.group(1))

    def get_statistics(self) -> Dict[str, Any]:
        """Get cleaning statistics."""
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'records_cleaned': self.records_processed - self.records_dropped,
            'drop_reasons': dict(self.drop_reasons),
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }
