"""
KATOTTG Geo - compaction and query tools for the Ukrainian administrative
division codifier (KATOTTG).

This package converts the published flat dataset into a compact index-based
snapshot and serves read-only lookups over the rebuilt hierarchy of regions,
districts, communities and settlements.
"""

__version__ = "1.0.0"
__author__ = "Data Analytics Team"
