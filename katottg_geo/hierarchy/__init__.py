"""
Hierarchy module for the KATOTTG geo application.

This module provides the compaction stage table, the Compactor that turns raw
records into an index-addressed snapshot, and the HierarchyBuilder that
rebuilds typed entities from that snapshot.
"""

from katottg_geo.hierarchy.hierarchy_config import (
    CompactionStage,
    COMPACTION_STAGES,
    SPECIAL_CITY_REGIONS
)
from katottg_geo.hierarchy.snapshot_validator import SnapshotValidator
from katottg_geo.hierarchy.compactor import Compactor
from katottg_geo.hierarchy.hierarchy_builder import HierarchyBuilder, HierarchyMaps

__all__ = [
    'CompactionStage',
    'COMPACTION_STAGES',
    'SPECIAL_CITY_REGIONS',
    'SnapshotValidator',
    'Compactor',
    'HierarchyBuilder',
    'HierarchyMaps'
]
