"""
KATOTTG dataset compaction.

This module provides the Compactor class that rewrites the flat KATOTTG
dataset into an index-addressed snapshot: every accepted record becomes a
node with an integer parent index and an ordered list of child indices.
"""

import logging
import time
from typing import Dict, List, Optional

import pandas as pd
from tqdm import tqdm

from ..categories import filter_known_categories
from ..config import CompactionStats
from ..models import RawDataset, CompactNode, Snapshot
from ..utils.data_utils import first_present, safe_string_conversion
from .hierarchy_config import (
    COMPACTION_STAGES,
    CompactionStage,
    SPECIAL_CITY_CODES,
    SPECIAL_CITY_REGIONS
)


class Compactor:
    """
    Converts raw KATOTTG records into a compacted snapshot.

    Records are processed stage by stage in the order of COMPACTION_STAGES,
    so a parent is always indexed before any of its children. Records whose
    parent cannot be resolved are skipped, and a code that is already indexed
    is never added twice. Compaction never fails on data irregularities.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, show_progress: bool = False):
        """
        Initialize the Compactor.

        Args:
            logger: Optional logger instance for logging operations
            show_progress: Display a progress bar for each stage
        """
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress
        self.stats = CompactionStats()

        self._items: List[CompactNode] = []
        self._index_to_code: List[str] = []
        self._code_to_index: Dict[str, int] = {}

    def compact(self, dataset: RawDataset) -> Snapshot:
        """
        Compact a raw dataset.

        Args:
            dataset: Raw KATOTTG dataset

        Returns:
            Snapshot with nodes and the parallel index-to-code list
        """
        start_time = time.time()
        self._reset()
        self.stats = CompactionStats(total_records=len(dataset))

        self.logger.info(f"Starting compaction of {len(dataset):,} raw records")

        records = filter_known_categories(dataset.records, self.logger)
        self.stats.unknown_category = len(dataset.records) - len(records)

        for stage in COMPACTION_STAGES:
            stage_records = self._select_stage_records(records, stage)
            self._process_stage(stage, stage_records)

        # Child lists are created on first append, this only guards the invariant
        for item in self._items:
            if item.children is not None and not item.children:
                item.children = None

        snapshot = Snapshot(
            order_date=dataset.order_date,
            categories=dataset.categories,
            items=self._items,
            index_to_code=self._index_to_code
        )

        self.stats.processing_time = time.time() - start_time
        self.logger.info(
            f"Compaction produced {len(snapshot):,} nodes from {len(dataset):,} records "
            f"in {self.stats.processing_time:.2f}s"
        )

        self._reset()
        return snapshot

    def _reset(self):
        self._items = []
        self._index_to_code = []
        self._code_to_index = {}

    def _select_stage_records(self, records: pd.DataFrame, stage: CompactionStage) -> pd.DataFrame:
        """Select the raw records handled by a stage, preserving input order."""
        if records.empty:
            return records

        mask = records['category'].isin(stage.category_values)
        if stage.special_cities is not None:
            special_mask = records['level1'].isin(SPECIAL_CITY_CODES)
            mask &= special_mask if stage.special_cities else ~special_mask

        return records[mask]

    def _process_stage(self, stage: CompactionStage, records: pd.DataFrame):
        """
        Add the records of one stage to the node list.

        Args:
            stage: Stage being processed
            records: Raw records selected for the stage
        """
        stage_stats = self.stats.stage(stage.name)

        with tqdm(total=len(records), desc=f"Compacting {stage.name}",
                  unit="records", leave=False, disable=not self.show_progress) as pbar:
            for record in records.itertuples(index=False):
                pbar.update(1)

                code = first_present(record, stage.code_fields)
                if code is None:
                    stage_stats.unresolved += 1
                    self.logger.debug(f"{stage.name}: record '{record.name}' has no code, skipped")
                    continue

                parent_index = None
                if stage.special_cities:
                    # Attached to the substitute region when it is present,
                    # otherwise added as a parentless node
                    parent_index = self._code_to_index.get(SPECIAL_CITY_REGIONS.get(code))
                elif not stage.is_root:
                    parent_code = first_present(record, stage.parent_fields)
                    parent_index = self._code_to_index.get(parent_code) if parent_code else None
                    if parent_index is None:
                        stage_stats.unresolved += 1
                        self.logger.debug(
                            f"{stage.name}: parent '{parent_code}' of {code} is not indexed, skipped"
                        )
                        continue

                if code in self._code_to_index:
                    stage_stats.duplicates += 1
                    self.logger.debug(f"{stage.name}: duplicate code {code}, skipped")
                    continue

                node = CompactNode(
                    name=safe_string_conversion(record.name),
                    category=record.category,
                    parent=parent_index,
                    independent=True if stage.special_cities else None
                )
                self._add_node(node, code)
                stage_stats.accepted += 1

        self.logger.debug(
            f"Stage {stage.name}: accepted {stage_stats.accepted:,}, "
            f"duplicates {stage_stats.duplicates:,}, unresolved {stage_stats.unresolved:,}"
        )

    def _add_node(self, node: CompactNode, code: str) -> int:
        """
        Append a node, register its code and link it to its parent.

        Returns:
            Index of the new node
        """
        index = len(self._items)
        self._items.append(node)
        self._index_to_code.append(code)
        self._code_to_index[code] = index

        if node.parent is not None:
            self._items[node.parent].add_child(index)

        return index
