# ========================
# ev_insights/pipeline/constants.py
# ========================

"""
Pipeline Constants

Fixed column layout, bucket bounds, thresholds and chart palette shared by
the parser and the aggregation functions.
"""

# -----------------------------------------------------------------------------
# Input layout
# -----------------------------------------------------------------------------
CSV_DELIMITER = ','
CSV_QUOTECHAR = '"'

# Positional column order of the EV population dataset
COLUMN_ORDER = [
    'vin',
    'county',
    'city',
    'state',
    'postal_code',
    'model_year',
    'make',
    'model',
    'electric_vehicle_type',
    'cafv_eligibility',
    'electric_range',
    'base_msrp',
    'legislative_district',
    'electric_utility',
]

INTEGER_COLUMNS = {'model_year', 'electric_range', 'base_msrp', 'legislative_district'}

# Negative values in these columns are treated as unreported (0)
NON_NEGATIVE_COLUMNS = {'electric_range', 'base_msrp'}

# Substring that marks a battery electric vehicle in the free-text type column
BEV_MARKER = 'Battery'


# -----------------------------------------------------------------------------
# Aggregation thresholds
# -----------------------------------------------------------------------------
# (label, min, max) inclusive bounds; None means unbounded
RANGE_BUCKETS = [
    ('0-50 mi', 0, 50),
    ('51-100 mi', 51, 100),
    ('101-150 mi', 101, 150),
    ('151-200 mi', 151, 200),
    ('201-250 mi', 201, 250),
    ('251-300 mi', 251, 300),
    ('301-350 mi', 301, 350),
    ('351+ mi', 351, None),
]

# A (model year, make) group needs this many ranged vehicles to be plotted
MIN_CORRELATION_GROUP_SIZE = 5

DEFAULT_TOP_MANUFACTURERS = 10
DEFAULT_TOP_STATES = 10
DEFAULT_TOP_CITIES = 10
DEFAULT_TOP_MODELS = 15


# -----------------------------------------------------------------------------
# Chart palette
# -----------------------------------------------------------------------------
CHART_COLOR_ARRAY = [
    '#3b82f6',  # blue
    '#10b981',  # emerald
    '#8b5cf6',  # purple
    '#f59e0b',  # amber
    '#06b6d4',  # cyan
    '#f43f5e',  # rose
    '#ec4899',  # pink
    '#84cc16',  # lime
    '#14b8a6',  # teal
    '#a855f7',  # violet
]

VEHICLE_TYPE_LABELS = {
    'BEV': 'Battery Electric (BEV)',
    'PHEV': 'Plug-in Hybrid (PHEV)',
}

VEHICLE_TYPE_COLORS = {
    'BEV': '#3b82f6',
    'PHEV': '#8b5cf6',
}


def get_chart_color(index: int) -> str:
    """Palette color for a ranked position, wrapping around the palette."""
    return CHART_COLOR_ARRAY[index % len(CHART_COLOR_ARRAY)]
