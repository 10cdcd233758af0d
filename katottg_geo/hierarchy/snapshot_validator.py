"""
Snapshot validation utilities.

This module provides the SnapshotValidator class with two levels of checks:
structural validation, which rejects snapshots the hierarchy builder cannot
safely index, and consistency checks, which report violations of the
compacted hierarchy invariants without raising.
"""

import logging
from collections import Counter
from typing import List, Optional, Tuple

from ..categories import is_known_category
from ..exceptions import create_snapshot_error
from .hierarchy_config import get_stage_rank
from ..models import Snapshot


class SnapshotValidator:
    """Validates compacted snapshots before and after hierarchy building."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the validator.

        Args:
            logger: Optional logger instance for reporting issues
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_structure(self, snapshot: Snapshot):
        """
        Check that every index in the snapshot can be resolved.

        Args:
            snapshot: Snapshot to validate

        Raises:
            SnapshotError: If the snapshot is malformed
        """
        issues = []
        first_bad_index = None
        size = len(snapshot.items)

        if len(snapshot.index_to_code) != size:
            issues.append(
                f"items ({size}) and indexToCode ({len(snapshot.index_to_code)}) "
                f"have different lengths"
            )

        for idx, code in enumerate(snapshot.index_to_code):
            if not isinstance(code, str) or not code:
                issues.append(f"indexToCode[{idx}] is not a non-empty string")
                first_bad_index = idx if first_bad_index is None else first_bad_index

        for idx, item in enumerate(snapshot.items):
            item_issues = []
            if not is_known_category(item.category):
                item_issues.append(f"item {idx}: unknown category {item.category!r}")
            if item.parent is not None and not 0 <= item.parent < size:
                item_issues.append(f"item {idx}: parent index {item.parent} out of bounds")
            for child in item.children or []:
                if not 0 <= child < size:
                    item_issues.append(f"item {idx}: child index {child} out of bounds")

            if item_issues:
                issues.extend(item_issues)
                first_bad_index = idx if first_bad_index is None else first_bad_index

        if issues:
            self.logger.error(f"Snapshot failed structural validation with {len(issues)} issue(s)")
            raise create_snapshot_error(issues, item_index=first_bad_index)

        self.logger.debug(f"Snapshot structure valid: {size:,} nodes")

    def check_consistency(self, snapshot: Snapshot) -> Tuple[bool, List[str]]:
        """
        Check the compacted hierarchy invariants.

        Checks that codes are unique, child lists are non-empty, every
        parent lists its children and every child points back to its
        parent, and that parents come from an earlier or the same stage.
        Assumes the snapshot passed validate_structure().

        Args:
            snapshot: Snapshot to check

        Returns:
            Tuple of (is_consistent, list_of_issues)
        """
        issues = []
        items = snapshot.items

        duplicates = [code for code, count in Counter(snapshot.index_to_code).items() if count > 1]
        for code in duplicates:
            issues.append(f"code {code} is indexed more than once")

        seen_children = set()
        for idx, item in enumerate(items):
            if item.children is not None and not item.children:
                issues.append(f"item {idx}: empty child list")

            for child in item.children or []:
                if child in seen_children:
                    issues.append(f"item {child}: listed as a child more than once")
                seen_children.add(child)
                if items[child].parent != idx:
                    issues.append(f"item {child}: listed as child of {idx} but parent is "
                                  f"{items[child].parent}")

            if item.parent is not None:
                parent = items[item.parent]
                if idx not in (parent.children or []):
                    issues.append(f"item {idx}: missing from child list of parent {item.parent}")

                parent_rank = get_stage_rank(parent.category, bool(parent.independent))
                child_rank = get_stage_rank(item.category, bool(item.independent))
                if parent_rank is not None and child_rank is not None and parent_rank > child_rank:
                    issues.append(f"item {idx}: parent {item.parent} belongs to a later stage")

        if issues:
            self.logger.warning(f"Snapshot consistency check found {len(issues)} issue(s)")

        return len(issues) == 0, issues
