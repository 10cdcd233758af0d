"""
Read-only query layer over the KATOTTG hierarchy.

This module provides the GeoAPI class, which is built once from a compacted
snapshot and then answers lookups by code, filtered listings and name
searches over regions, districts, communities and settlements.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
from rapidfuzz import fuzz, process

from .categories import CategoryBase, StructureType
from .data_loader import DataLoader
from .hierarchy.hierarchy_builder import HierarchyBuilder, HierarchyMaps
from .models import Snapshot, Region, District, Community, Settlement
from .utils.data_utils import is_null_or_empty

CHILD_LIST_FIELDS = ('districts', 'communities', 'settlements')


class GeoAPI:
    """
    Query interface for the administrative hierarchy.

    All maps are built in the constructor and never modified afterwards.
    Lookups return None when a code is unknown and filters return an empty
    list when nothing matches; no query raises.
    """

    def __init__(self, maps: HierarchyMaps, order_date: Optional[str] = None,
                 categories: Optional[Dict[str, str]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the GeoAPI over already built maps.

        Args:
            maps: Entity maps produced by HierarchyBuilder
            order_date: Order/version date of the source snapshot
            categories: Category letter to label mapping of the snapshot
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._regions = dict(maps.regions)
        self._districts = dict(maps.districts)
        self._communities = dict(maps.communities)
        self._settlements = dict(maps.settlements)
        self.order_date = order_date
        self.categories = dict(categories or {})

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot,
                      logger: Optional[logging.Logger] = None) -> 'GeoAPI':
        """
        Build the hierarchy from a snapshot and wrap it.

        Raises:
            SnapshotError: If the snapshot is structurally malformed
        """
        maps = HierarchyBuilder(snapshot, logger=logger).build()
        return cls(maps, order_date=snapshot.order_date,
                   categories=snapshot.categories, logger=logger)

    @classmethod
    def from_file(cls, file_path: Union[str, Path],
                  logger: Optional[logging.Logger] = None) -> 'GeoAPI':
        """Load a snapshot file and build the hierarchy from it."""
        snapshot = DataLoader(logger).load_snapshot(file_path)
        return cls.from_snapshot(snapshot, logger=logger)

    # Regions

    def get_all_regions(self) -> List[Region]:
        """Get all regions, including the independent special-status cities."""
        return list(self._regions.values())

    def get_region(self, region_id: str) -> Optional[Region]:
        return self._regions.get(region_id)

    # Districts

    def get_region_districts(self, region_id: Optional[str] = None) -> List[District]:
        """
        Get districts of regions.

        Args:
            region_id: Optional region code to narrow the result to

        Returns:
            Region districts (category District), all or those of one region
        """
        districts = [d for d in self._districts.values() if d.category == CategoryBase.DISTRICT]
        if not region_id:
            return districts
        return [d for d in districts if d.region_id == region_id]

    def get_district(self, district_id: str) -> Optional[District]:
        """Get a region district or a city district by code."""
        return self._districts.get(district_id)

    def get_city_districts(self, city_id: Optional[str] = None) -> List[District]:
        """
        Get districts of cities.

        Args:
            city_id: Optional city code to narrow the result to

        Returns:
            City districts (category DistrictCity), all or those of one city
        """
        districts = [d for d in self._districts.values()
                     if d.category == CategoryBase.DISTRICT_CITY]
        if not city_id:
            return districts
        return [d for d in districts if d.region_id == city_id]

    # Communities

    def get_communities(self, district_id: Optional[str] = None) -> List[Community]:
        if not district_id:
            return list(self._communities.values())
        return [c for c in self._communities.values() if c.district_id == district_id]

    def get_community(self, community_id: str) -> Optional[Community]:
        return self._communities.get(community_id)

    def search_communities(self, substring: str) -> List[Community]:
        """Find communities whose name contains a substring, ignoring case."""
        needle = (substring or "").lower()
        return [c for c in self._communities.values() if needle in c.name.lower()]

    # Settlements

    def get_settlements(self, region_id: Optional[str] = None,
                        district_id: Optional[str] = None,
                        community_id: Optional[str] = None) -> List[Settlement]:
        """
        Get settlements, optionally filtered by owner.

        Filters combine: a settlement must satisfy every filter given. The
        district and community filters match direct children only.

        Args:
            region_id: Region (or special-status city) the settlement belongs to
            district_id: District that is the direct parent
            community_id: Community that is the direct parent

        Returns:
            List of matching settlements
        """
        result = list(self._settlements.values())

        if region_id:
            result = [s for s in result if s.region_id == region_id]
        if district_id:
            result = [s for s in result
                      if s.parent_id == district_id and s.parent_type == StructureType.DISTRICT]
        if community_id:
            result = [s for s in result
                      if s.parent_id == community_id and s.parent_type == StructureType.COMMUNITY]

        return result

    def get_settlement(self, settlement_id: str) -> Optional[Settlement]:
        return self._settlements.get(settlement_id)

    def search_settlements(self, substring: str) -> List[Settlement]:
        """Find settlements whose name contains a substring, ignoring case."""
        needle = (substring or "").lower()
        return [s for s in self._settlements.values() if needle in s.name.lower()]

    # Fuzzy search

    def fuzzy_search_settlements(self, name: str, threshold: int = 85,
                                 limit: int = 10) -> List[Tuple[Settlement, float]]:
        """
        Find settlements with names similar to the given one.

        Args:
            name: Name to look for, typos allowed
            threshold: Minimum similarity score (0-100)
            limit: Maximum number of results

        Returns:
            List of (settlement, score) pairs, best match first
        """
        return self._fuzzy_search(self._settlements, name, threshold, limit)

    def fuzzy_search_communities(self, name: str, threshold: int = 85,
                                 limit: int = 10) -> List[Tuple[Community, float]]:
        """Find communities with names similar to the given one."""
        return self._fuzzy_search(self._communities, name, threshold, limit)

    def _fuzzy_search(self, entities: Dict, name: str, threshold: int, limit: int) -> List[Tuple]:
        if is_null_or_empty(name) or not entities:
            return []

        if not 0 <= threshold <= 100:
            raise ValueError("Threshold must be between 0 and 100")

        choices = {code: entity.name for code, entity in entities.items()}
        matches = process.extract(
            name,
            choices,
            scorer=fuzz.WRatio,
            processor=str.lower,
            limit=limit,
            score_cutoff=threshold
        )

        self.logger.debug(f"Fuzzy search for '{name}' found {len(matches)} match(es)")

        # rapidfuzz returns (choice, score, key) for mapping choices
        return [(entities[code], score) for _, score, code in matches]

    # Reporting

    def get_summary(self) -> Dict[str, object]:
        """Get entity counts and the snapshot order date."""
        return {
            'order_date': self.order_date,
            'regions': len(self._regions),
            'region_districts': len(self.get_region_districts()),
            'city_districts': len(self.get_city_districts()),
            'communities': len(self._communities),
            'settlements': len(self._settlements)
        }

    def to_dataframe(self, kind: Union[StructureType, str]) -> pd.DataFrame:
        """
        Export one entity kind as a DataFrame.

        Child reference lists are replaced by their sizes in '<field>_count'
        columns.

        Args:
            kind: Entity kind (region, district, community, settlement)

        Returns:
            DataFrame with one row per entity
        """
        kind = StructureType(kind)
        entities = {
            StructureType.REGION: self._regions,
            StructureType.DISTRICT: self._districts,
            StructureType.COMMUNITY: self._communities,
            StructureType.SETTLEMENT: self._settlements
        }[kind]

        rows = []
        for entity in entities.values():
            row = entity.to_dict()
            for list_field in CHILD_LIST_FIELDS:
                if list_field in row:
                    row[f"{list_field}_count"] = len(row.pop(list_field))
            rows.append(row)

        return pd.DataFrame(rows)
