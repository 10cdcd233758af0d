"""
Compaction stage configuration for the KATOTTG hierarchy.

KATOTTG records store their own code and their parent's code in different
level fields depending on the category letter. This module declares that
layout as an ordered table of compaction stages, together with the two
special-status cities that have no ordinary regional parent.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..categories import CategoryCode

# Special-status cities and the regions their nodes are attached to
KYIV_CODE = "UA80000000000093317"
SEVASTOPOL_CODE = "UA85000000000065278"

KYIV_REGION_CODE = "UA32000000000030281"
SEVASTOPOL_REGION_CODE = "UA01000000000013043"

SPECIAL_CITY_REGIONS: Dict[str, str] = {
    KYIV_CODE: KYIV_REGION_CODE,
    SEVASTOPOL_CODE: SEVASTOPOL_REGION_CODE,
}

SPECIAL_CITY_CODES: Tuple[str, ...] = tuple(SPECIAL_CITY_REGIONS)


@dataclass(frozen=True)
class CompactionStage:
    """
    One step of the compaction pipeline.

    Attributes:
        name: Stage identifier used in logs and statistics
        categories: Category letters accepted by the stage
        code_fields: Level fields holding the record's own code, first non-empty wins
        parent_fields: Level fields holding the parent's code, first non-empty wins;
            empty for root stages
        special_cities: None to accept any record, True to accept only the
            special-status cities, False to exclude them
    """
    name: str
    categories: Tuple[CategoryCode, ...]
    code_fields: Tuple[str, ...]
    parent_fields: Tuple[str, ...] = ()
    special_cities: Optional[bool] = None

    @property
    def is_root(self) -> bool:
        """Root stages add nodes without a parent."""
        return not self.parent_fields and not self.special_cities

    @property
    def category_values(self) -> List[str]:
        return [category.value for category in self.categories]


# Stage order is a topological order: every stage only references nodes
# indexed by itself or by an earlier stage.
COMPACTION_STAGES: Tuple[CompactionStage, ...] = (
    CompactionStage(
        name="regions",
        categories=(CategoryCode.O, CategoryCode.K),
        code_fields=("level1",),
        special_cities=False,
    ),
    CompactionStage(
        name="area_districts",
        categories=(CategoryCode.P,),
        code_fields=("level2",),
        parent_fields=("level1",),
    ),
    CompactionStage(
        name="city_settlements",
        categories=(CategoryCode.M,),
        code_fields=("level4",),
        parent_fields=("level2",),
    ),
    CompactionStage(
        name="special_cities",
        categories=(CategoryCode.K,),
        code_fields=("level1",),
        special_cities=True,
    ),
    CompactionStage(
        name="city_districts",
        categories=(CategoryCode.B,),
        code_fields=("level5",),
        parent_fields=("level4",),
    ),
    CompactionStage(
        name="communities",
        categories=(CategoryCode.H,),
        code_fields=("level3",),
        parent_fields=("level2",),
    ),
    CompactionStage(
        name="other_settlements",
        categories=(CategoryCode.C, CategoryCode.X),
        code_fields=("level4", "level5"),
        parent_fields=("level3", "level2"),
    ),
)


def get_stage(name: str) -> Optional[CompactionStage]:
    """
    Get a compaction stage by name.

    Args:
        name: Name of the stage to retrieve

    Returns:
        CompactionStage if found, None otherwise
    """
    for stage in COMPACTION_STAGES:
        if stage.name == name:
            return stage
    return None


def get_stage_rank(category: str, independent: bool = False) -> Optional[int]:
    """
    Get the position of the stage that emits nodes of a category.

    Used to check that a parent node was emitted by an earlier (or the same)
    stage than its child.

    Args:
        category: Category letter of a compacted node
        independent: Whether the node is flagged as a special-status city

    Returns:
        Zero-based stage position, or None for an unknown letter
    """
    for rank, stage in enumerate(COMPACTION_STAGES):
        if category not in stage.category_values:
            continue
        if stage.special_cities is None or stage.special_cities == independent:
            return rank
    return None
