# ========================
# ev_insights/__init__.py
# ========================

"""
EV Insights

Parses electric vehicle registration data and derives the aggregate views
(trends, rankings, distributions, correlations, KPIs) behind the EV
population dashboard.
"""

__version__ = "1.0.0"
