# ========================
# ev_insights/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Coordinates loading, option extraction, filtering and the dashboard views.
"""

import logging
from collections import OrderedDict
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .filtering import FilterSpec, filter_vehicles
from .ingestion import CSVReader, VehicleCSVParser
from .options import get_filter_options
from .records import VehicleRecord
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
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)

# Names of the views build_dashboard() returns, in display order
VIEW_NAMES = [
    'kpis',
    'adoption_trend',
    'top_manufacturers',
    'vehicle_types',
    'range_distribution',
    'geographic_distribution',
    'top_cities',
    'range_correlation',
    'top_models',
]


class DataPipeline:
    """
    Holds the parsed dataset and derives dashboard views from it.

    The record collection is replaced as a whole by load()/load_text(); each
    replacement bumps dataset_version so memoised views are never reused
    across datasets.
    """

    def __init__(self, input_file: Optional[str] = None, config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            input_file (str): Path to the EV population CSV; defaults to the
                configured input file
            config (Config): Configuration object
        """
        self.config = config or Config()
        self.input_file = input_file or self.config.DEFAULT_INPUT_FILE

        self.vehicles: List[VehicleRecord] = []
        self.filter_options: Dict[str, Any] = get_filter_options([])
        self.parse_stats: Dict[str, Any] = {}
        self.dataset_version = 0
        self._view_cache: 'OrderedDict[Tuple[FilterSpec, int], Dict[str, Any]]' = OrderedDict()

        logger.info(f"DataPipeline initialized with input: {self.input_file}")

    def validate_input(self) -> bool:
        """
        Validate input file exists and is readable.

        Returns:
            bool: True if input is valid
        """
        input_path = Path(self.input_file)
        if not input_path.exists():
            logger.error(f"Input file does not exist: {self.input_file}")
            return False

        if not input_path.is_file():
            logger.error(f"Input path is not a file: {self.input_file}")
            return False

        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                f.readline()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read input file: {e}")
            return False

        logger.info(f"Input validation passed: {self.input_file}")
        return True

    def load(self) -> List[VehicleRecord]:
        """Read and parse the input file, replacing the current dataset."""
        text = CSVReader(self.input_file).read_text()
        return self.load_text(text)

    def load_text(self, text: Optional[str]) -> List[VehicleRecord]:
        """
        Parse raw CSV text and make it the current dataset.

        Args:
            text (str): Raw CSV text, header row included

        Returns:
            list[VehicleRecord]: The parsed records
        """
        parser = VehicleCSVParser()
        self.vehicles = parser.parse(text)
        self.parse_stats = parser.get_statistics()
        self.filter_options = get_filter_options(self.vehicles)
        self.dataset_version += 1
        self._view_cache.clear()

        logger.info(
            f"Dataset v{self.dataset_version}: {len(self.vehicles):,} vehicles, "
            f"years {self.filter_options['year_range']}, "
            f"{len(self.filter_options['manufacturers'])} makes"
        )
        return self.vehicles

    def default_filters(self) -> FilterSpec:
        """Spec covering the whole dataset (the "reset filters" state)."""
        return FilterSpec.from_options(self.filter_options)

    def filter(self, spec: Optional[FilterSpec] = None) -> List[VehicleRecord]:
        return filter_vehicles(self.vehicles, spec or self.default_filters())

    def build_dashboard(self, spec: Optional[FilterSpec] = None) -> Dict[str, Any]:
        """
        Compute every dashboard view for a filter spec.

        Results are memoised per (spec, dataset_version) in a bounded LRU. Callers
        get their own copy, so mutating a result never changes the cache.

        Args:
            spec (FilterSpec): Filters to apply; defaults to default_filters()

        Returns:
            dict: One entry per name in VIEW_NAMES plus 'filters' and
            'vehicle_count'.
        """
        spec = spec or self.default_filters()
        key = (spec, self.dataset_version)

        cached = self._view_cache.get(key)
        if cached is not None:
            self._view_cache.move_to_end(key)
            logger.debug(f"Dashboard cache hit for {spec.to_dict()}")
            return deepcopy(cached)

        filtered = filter_vehicles(self.vehicles, spec)
        dashboard = {
            'filters': spec.to_dict(),
            'vehicle_count': len(filtered),
            'kpis': calculate_kpis(filtered, self.vehicles),
            'adoption_trend': get_adoption_trend(filtered),
            'top_manufacturers': get_top_manufacturers(filtered, self.config.TOP_MANUFACTURERS_LIMIT),
            'vehicle_types': get_vehicle_type_distribution(filtered),
            'range_distribution': get_range_distribution(filtered),
            'geographic_distribution': get_geographic_distribution(filtered, self.config.TOP_STATES_LIMIT),
            'top_cities': get_top_cities(filtered, self.config.TOP_CITIES_LIMIT),
            'range_correlation': get_year_range_correlation(filtered),
            'top_models': get_top_models(filtered, self.config.TOP_MODELS_LIMIT),
        }

        if self.config.VIEW_CACHE_SIZE > 0:
            self._view_cache[key] = dashboard
            while len(self._view_cache) > self.config.VIEW_CACHE_SIZE:
                self._view_cache.popitem(last=False)

        return deepcopy(dashboard) if key in self._view_cache else dashboard

    def run(self) -> Dict[str, Any]:
        """
        Load the input file and compute the unfiltered dashboard.

        Returns:
            dict: Summary of parsing, filter options, the default dashboard
            and performance statistics
        """
        logger.info(f"Starting EV insights pipeline for '{self.input_file}'...")

        with monitor_performance("EV Insights Pipeline") as monitor:
            self.load()
            monitor.update_progress(self.parse_stats.get('lines_read', 0))
            monitor.add_checkpoint('parse', {'vehicles': len(self.vehicles)})

            dashboard = self.build_dashboard()
            monitor.add_checkpoint('aggregate', {'views': len(VIEW_NAMES)})

        results = {
            'pipeline_status': 'completed',
            'input_file': self.input_file,
            'dataset_version': self.dataset_version,
            'parse_stats': self.parse_stats,
            'filter_options': self.filter_options,
            'dashboard': dashboard,
            'performance': monitor.summary,
        }

        logger.info("Pipeline finished successfully.")
        self._log_final_summary(results)
        return results

    def _log_final_summary(self, results: Dict[str, Any]) -> None:
        """Log final pipeline summary."""
        parse_stats = results['parse_stats']
        kpis = results['dashboard']['kpis']

        logger.info("=" * 60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Input file: {results['input_file']}")
        logger.info(f"Data lines read: {parse_stats['lines_read']:,}")
        logger.info(f"Vehicles kept: {parse_stats['records_cleaned']:,}")
        logger.info(f"Rows dropped: {parse_stats['records_dropped']:,} {parse_stats['drop_reasons']}")
        logger.info(f"Unique makes: {kpis['unique_makes']}, unique models: {kpis['unique_models']}")
        logger.info("=" * 60)
