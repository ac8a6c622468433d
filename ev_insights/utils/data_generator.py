# ========================
# ev_insights/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Synthetic EV population datasets with realistic distributions and
controlled error injection.
"""

import csv
import random
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

HEADER = [
    'VIN (1-10)', 'County', 'City', 'State', 'Postal Code', 'Model Year', 'Make',
    'Model', 'Electric Vehicle Type', 'Clean Alternative Fuel Vehicle (CAFV) Eligibility',
    'Electric Range', 'Base MSRP', 'Legislative District', 'Electric Utility'
]

BEV_LABEL = 'Battery Electric Vehicle (BEV)'
PHEV_LABEL = 'Plug-in Hybrid Electric Vehicle (PHEV)'

CAFV_LABELS = [
    'Clean Alternative Fuel Vehicle Eligible',
    'Not eligible due to low battery range',
    'Eligibility unknown as battery range has not been researched',
]


class DataGenerator:
    """
    Generates EV registration CSVs shaped like the public EV population data.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize catalog and geography patterns."""
        # (make, model, powertrain, typical range, base MSRP, weight)
        self.models = [
            ('TESLA', 'MODEL Y', BEV_LABEL, 291, 0, 0.22),
            ('TESLA', 'MODEL 3', BEV_LABEL, 266, 0, 0.18),
            ('NISSAN', 'LEAF', BEV_LABEL, 150, 0, 0.08),
            ('CHEVROLET', 'BOLT EV', BEV_LABEL, 259, 0, 0.06),
            ('CHEVROLET', 'VOLT', PHEV_LABEL, 53, 0, 0.04),
            ('FORD', 'MUSTANG MACH-E', BEV_LABEL, 0, 0, 0.05),
            ('KIA', 'NIRO', PHEV_LABEL, 26, 0, 0.05),
            ('TOYOTA', 'RAV4 PRIME', PHEV_LABEL, 42, 0, 0.05),
            ('BMW', 'X5', PHEV_LABEL, 30, 0, 0.04),
            ('JEEP', 'WRANGLER', PHEV_LABEL, 21, 0, 0.04),
            ('VOLKSWAGEN', 'ID.4', BEV_LABEL, 0, 0, 0.05),
            ('RIVIAN', 'R1T', BEV_LABEL, 314, 0, 0.03),
            ('PORSCHE', 'TAYCAN', BEV_LABEL, 0, 110000, 0.02),
            ('TESLA', 'MODEL S', BEV_LABEL, 405, 69900, 0.04),
            ('AUDI', 'E-TRON', BEV_LABEL, 204, 0, 0.05),
        ]

        # (state, weight, [(county, city, postal code)])
        self.locations = [
            ('WA', 0.9, [
                ('King', 'Seattle', '98101'),
                ('King', 'Bellevue', '98004'),
                ('King', 'Redmond', '98052'),
                ('Snohomish', 'Bothell', '98012'),
                ('Pierce', 'Tacoma', '98402'),
                ('Thurston', 'Olympia', '98501'),
                ('Clark', 'Vancouver', '98661'),
            ]),
            ('CA', 0.04, [('San Diego', 'San Diego', '92101')]),
            ('OR', 0.03, [('Multnomah', 'Portland', '97201')]),
            ('TX', 0.02, [('Travis', 'Austin', '78701')]),
            ('VA', 0.01, [('Fairfax', 'Fairfax, City of', '22030')]),
        ]

        self.utilities = [
            'CITY OF SEATTLE - (WA)|CITY OF TACOMA - (WA)',
            'PUGET SOUND ENERGY INC',
            'BONNEVILLE POWER ADMINISTRATION||PUGET SOUND ENERGY INC',
        ]

        # Adoption grows steeply with model year
        self.years = list(range(2011, 2025))
        self.year_weights = [1.25 ** (year - 2011) for year in self.years]

    def generate_dataset(self,
                         file_path: str,
                         num_rows: int,
                         error_rate: float = 0.05) -> Dict[str, Any]:
        """
        Generate a dataset with controlled error injection.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of data lines to generate
            error_rate (float): Fraction of lines with an intentional defect

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'invalid_rows': 0,
            'blank_lines': 0,
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f, lineterminator='\n')
            writer.writerow(HEADER)

            for i in range(num_rows):
                row = self._generate_single_record(error_rate, stats)
                if row is None:
                    f.write('\n')
                else:
                    writer.writerow(row)

                if (i + 1) % 100000 == 0:
                    logger.debug(f"Generated {i + 1:,} records")

        stats['valid_rows'] = num_rows - stats['invalid_rows'] - stats['blank_lines']
        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Error breakdown: {stats['error_types']}")
        return stats

    def generate_rows(self, num_rows: int) -> List[List[Any]]:
        """Generate clean rows in memory, without the header."""
        stats = {'records_with_errors': 0, 'invalid_rows': 0, 'blank_lines': 0, 'error_types': {}}
        return [self._generate_single_record(0.0, stats) for _ in range(num_rows)]

    def _generate_single_record(self,
                                error_rate: float,
                                stats: Dict[str, Any]) -> Optional[List[Any]]:
        """Generate one row; None stands for a blank line."""
        rnd = self.random
        make, model, ev_type, typical_range, msrp, _ = rnd.choices(
            self.models, weights=[m[5] for m in self.models]
        )[0]
        state, _, places = rnd.choices(self.locations, weights=[loc[1] for loc in self.locations])[0]
        county, city, postal_code = rnd.choice(places)
        model_year = rnd.choices(self.years, weights=self.year_weights)[0]

        # Newer long-range BEVs are often reported without a range
        if typical_range and model_year >= 2021 and ev_type == BEV_LABEL and rnd.random() < 0.5:
            electric_range = 0
        elif typical_range:
            electric_range = max(1, typical_range + rnd.randint(-15, 15))
        else:
            electric_range = 0

        row = [
            self._generate_vin(rnd), county, city, state, postal_code, model_year, make,
            model, ev_type, rnd.choice(CAFV_LABELS), electric_range, msrp,
            rnd.randint(1, 49), rnd.choice(self.utilities)
        ]

        if rnd.random() < error_rate:
            stats['records_with_errors'] += 1
            return self._inject_error(row, stats)
        return row

    def _generate_vin(self, rnd: random.Random) -> str:
        alphabet = 'ABCDEFGHJKLMNPRSTUVWXYZ0123456789'
        return ''.join(rnd.choice(alphabet) for _ in range(10))

    def _inject_error(self, row: List[Any], stats: Dict[str, Any]) -> Optional[List[Any]]:
        """Inject one defect into the row."""
        error_type = self.random.choice([
            'zero_model_year', 'missing_make', 'non_numeric_range', 'blank_line', 'truncated_row'
        ])
        self._track_error_type(stats, error_type)

        if error_type == 'zero_model_year':
            row[5] = 0
            stats['invalid_rows'] += 1
        elif error_type == 'missing_make':
            row[6] = ''
            stats['invalid_rows'] += 1
        elif error_type == 'non_numeric_range':
            row[10] = 'unknown'
        elif error_type == 'blank_line':
            stats['blank_lines'] += 1
            return None
        elif error_type == 'truncated_row':
            # Trailing columns missing; still a valid vehicle
            row = row[:9]
        return row

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        stats['error_types'][error_type] = stats['error_types'].get(error_type, 0) + 1
