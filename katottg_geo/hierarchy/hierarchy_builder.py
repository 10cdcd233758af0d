"""
Hierarchy building for compacted KATOTTG snapshots.

This module provides the HierarchyBuilder class that turns a compacted
snapshot back into typed regions, districts, communities and settlements
keyed by their original KATOTTG codes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from ..categories import (
    CATEGORY_TABLE,
    CategoryCode,
    CategoryData,
    StructureType,
    build_name_full,
    classify
)
from ..models import (
    Snapshot,
    CompactNode,
    ChildRef,
    Region,
    District,
    Community,
    Settlement
)
from .snapshot_validator import SnapshotValidator

DISTRICT_CATEGORIES = (CategoryCode.P.value, CategoryCode.B.value)
SETTLEMENT_CATEGORIES = (
    CategoryCode.C.value,
    CategoryCode.X.value,
    CategoryCode.M.value,
    CategoryCode.K.value
)


@dataclass
class HierarchyMaps:
    """The four entity maps, keyed by KATOTTG code in snapshot order."""

    regions: Dict[str, Region] = field(default_factory=dict)
    districts: Dict[str, District] = field(default_factory=dict)
    communities: Dict[str, Community] = field(default_factory=dict)
    settlements: Dict[str, Settlement] = field(default_factory=dict)

    def get_counts(self) -> Dict[str, int]:
        return {
            StructureType.REGION.value: len(self.regions),
            StructureType.DISTRICT.value: len(self.districts),
            StructureType.COMMUNITY.value: len(self.communities),
            StructureType.SETTLEMENT.value: len(self.settlements)
        }


class HierarchyBuilder:
    """
    Rebuilds the administrative hierarchy from a compacted snapshot.

    Maps are built in dependency order (regions, districts, communities,
    settlements) so that each entity can read its region from an already
    built ancestor. A parent missing from the map it is looked up in leaves
    the derived field as None instead of failing.
    """

    def __init__(self, snapshot: Snapshot,
                 category_table: Optional[Dict[CategoryCode, CategoryData]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the HierarchyBuilder.

        Args:
            snapshot: Compacted snapshot to rebuild
            category_table: Category metadata used for full names and roles
            logger: Optional logger instance for logging operations
        """
        self.snapshot = snapshot
        self.category_table = category_table if category_table is not None else CATEGORY_TABLE
        self.logger = logger or logging.getLogger(__name__)
        self.validator = SnapshotValidator(self.logger)

    def build(self) -> HierarchyMaps:
        """
        Build the four entity maps.

        Returns:
            HierarchyMaps with regions, districts, communities and settlements

        Raises:
            SnapshotError: If the snapshot is structurally malformed
        """
        start_time = time.time()
        self.validator.validate_structure(self.snapshot)

        names_by_code = {
            code: item.name
            for code, item in zip(self.snapshot.index_to_code, self.snapshot.items)
        }

        maps = HierarchyMaps()
        maps.regions = self._build_regions(names_by_code)
        maps.districts = self._build_districts(names_by_code)
        maps.communities = self._build_communities(names_by_code, maps.districts)
        maps.settlements = self._build_settlements(maps.districts, maps.communities)

        duration = time.time() - start_time
        counts = ", ".join(f"{kind}s: {count:,}" for kind, count in maps.get_counts().items())
        self.logger.info(f"Hierarchy built in {duration:.2f}s ({counts})")

        return maps

    def _iter_nodes(self, *categories: str) -> Iterator[Tuple[str, CompactNode]]:
        """Yield (code, node) pairs of the given categories in snapshot order."""
        for code, item in zip(self.snapshot.index_to_code, self.snapshot.items):
            if item.category in categories:
                yield code, item

    def _code_at(self, index: Optional[int]) -> Optional[str]:
        if index is None:
            return None
        return self.snapshot.index_to_code[index]

    def _child_refs(self, item: CompactNode, names_by_code: Dict[str, str]) -> Tuple[ChildRef, ...]:
        """Resolve child indices to (id, name) references, keeping their order."""
        refs = []
        for child_index in item.children or []:
            child_code = self.snapshot.index_to_code[child_index]
            refs.append(ChildRef(id=child_code, name=names_by_code.get(child_code, "")))
        return tuple(refs)

    def _build_regions(self, names_by_code: Dict[str, str]) -> Dict[str, Region]:
        """
        Build oblasts followed by the independent special-status cities.
        """
        regions: Dict[str, Region] = {}

        candidates = list(self._iter_nodes(CategoryCode.O.value))
        candidates += [
            (code, item) for code, item in self._iter_nodes(CategoryCode.K.value)
            if item.independent
        ]

        for code, item in candidates:
            category_data = classify(item.category, self.category_table)
            regions[code] = Region(
                id=code,
                name=item.name,
                name_full=build_name_full(item.name, category_data),
                category=category_data.category,
                districts=self._child_refs(item, names_by_code)
            )

        return regions

    def _build_districts(self, names_by_code: Dict[str, str]) -> Dict[str, District]:
        """
        Build region districts (P) and city districts (B).

        The region of a city district is the city that owns it.
        """
        districts: Dict[str, District] = {}

        for code, item in self._iter_nodes(*DISTRICT_CATEGORIES):
            category_data = classify(item.category, self.category_table)
            districts[code] = District(
                id=code,
                name=item.name,
                name_full=build_name_full(item.name, category_data),
                category=category_data.category,
                region_id=self._code_at(item.parent),
                communities=self._child_refs(item, names_by_code)
            )

        return districts

    def _build_communities(self, names_by_code: Dict[str, str],
                           districts: Dict[str, District]) -> Dict[str, Community]:
        communities: Dict[str, Community] = {}

        for code, item in self._iter_nodes(CategoryCode.H.value):
            category_data = classify(item.category, self.category_table)
            district_code = self._code_at(item.parent)
            district = districts.get(district_code) if district_code else None

            if district is None:
                self.logger.debug(f"Community {code}: district {district_code} not built, "
                                  f"region left unresolved")

            communities[code] = Community(
                id=code,
                name=item.name,
                name_full=build_name_full(item.name, category_data),
                category=category_data.category,
                district_id=district_code,
                region_id=district.region_id if district else None,
                settlements=self._child_refs(item, names_by_code)
            )

        return communities

    def _build_settlements(self, districts: Dict[str, District],
                           communities: Dict[str, Community]) -> Dict[str, Settlement]:
        """
        Build villages, urban settlements, cities and special-status cities.

        The parent of a settlement may be a community, a district, a region
        or an independent special-status city. Only the first two are
        reported as parent_type; for the others the parent itself is the
        region.
        """
        settlements: Dict[str, Settlement] = {}
        items = self.snapshot.items

        for code, item in self._iter_nodes(*SETTLEMENT_CATEGORIES):
            category_data = classify(item.category, self.category_table)
            parent_code = self._code_at(item.parent)
            parent_category = items[item.parent].category if item.parent is not None else None

            parent_type = None
            if parent_category == CategoryCode.H.value:
                parent_type = StructureType.COMMUNITY
                community = communities.get(parent_code)
                region_id = community.region_id if community else None
            elif parent_category in DISTRICT_CATEGORIES:
                parent_type = StructureType.DISTRICT
                district = districts.get(parent_code)
                region_id = district.region_id if district else None
            else:
                region_id = parent_code

            settlements[code] = Settlement(
                id=code,
                name=item.name,
                name_full=build_name_full(item.name, category_data),
                category=category_data.category,
                parent_id=parent_code,
                parent_type=parent_type,
                region_id=region_id
            )

        return settlements
