# ========================
# ev_insights/pipeline/__init__.py
# ========================

"""
Data Pipeline Package

Core components of the EV insights pipeline:
- records: Typed vehicle record and powertrain enum
- ingestion: Line-by-line CSV parsing
- cleaning: Field coercion and row validation
- filtering: Declarative filter criteria
- transformation: Pure aggregation functions for each dashboard view
- options: Filter domain extraction
- orchestrator: Pipeline coordination and view memoisation
"""

from .records import VehicleRecord, VehicleType
from .ingestion import CSVReader, VehicleCSVParser, parse_csv_data
from .cleaning import RecordCleaner, classify_vehicle_type
from .filtering import FilterSpec, filter_vehicles, passes_filters
from .options import get_filter_options
from .transformation import (
    calculate_kpis,
    get_adoption_trend,
    get_geographic_distribution,
    get_range_distribution,
    get_top_cities,
    get_top_manufacturers,
    get_top_models,
    get_vehicle_type_distribution,
    get_year_range_correlation,
)
from .orchestrator import DataPipeline, VIEW_NAMES

__all__ = [
    'VehicleRecord',
    'VehicleType',
    'CSVReader',
    'VehicleCSVParser',
    'parse_csv_data',
    'RecordCleaner',
    'classify_vehicle_type',
    'FilterSpec',
    'filter_vehicles',
    'passes_filters',
    'get_filter_options',
    'calculate_kpis',
    'get_adoption_trend',
    'get_geographic_distribution',
    'get_range_distribution',
    'get_top_cities',
    'get_top_manufacturers',
    'get_top_models',
    'get_vehicle_type_distribution',
    'get_year_range_correlation',
    'DataPipeline',
    'VIEW_NAMES',
]
