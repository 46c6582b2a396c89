"""
PG reporting engine.

Period-based occupancy, revenue and collection reporting for paying-guest
housing, with a persistent cache for completed weeks and months.
"""

__version__ = "1.0.0"
