"""
Data models for the KATOTTG geo application.

This module defines the raw dataset, the compacted snapshot and the typed
entities (regions, districts, communities, settlements) rebuilt from it.
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Tuple, Dict, Any

import pandas as pd

from .categories import CategoryBase, StructureType
from .exceptions import SnapshotError, DataLoadError

LEVEL_COLUMNS = ['level1', 'level2', 'level3', 'level4', 'level5']
RAW_COLUMNS = LEVEL_COLUMNS + ['category', 'name']


@dataclass
class RawRecord:
    """
    One row of the published KATOTTG dataset.

    Which level field holds the record's own code and which holds its
    parent's code depends on the category letter.
    """

    category: str
    name: str
    level1: Optional[str] = None
    level2: Optional[str] = None
    level3: Optional[str] = None
    level4: Optional[str] = None
    level5: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def records_to_dataframe(items: List[Any]) -> pd.DataFrame:
    """
    Build a raw records DataFrame with the canonical column set.

    Args:
        items: List of dictionaries or RawRecord objects

    Returns:
        DataFrame with columns level1..level5, category, name; nulls are None,
        codes and category letters are stripped and blank codes become None
    """
    rows = [item.to_dict() if isinstance(item, RawRecord) else item for item in items]
    df = pd.DataFrame(rows)

    for col in RAW_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df = df[RAW_COLUMNS].astype(object)
    df = df.where(pd.notna(df), None)

    # Stage selection matches codes verbatim
    for col in LEVEL_COLUMNS + ['category']:
        df[col] = df[col].map(_clean_code).astype(object)

    return df


def _clean_code(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip() or None
    return value


@dataclass
class RawDataset:
    """Raw KATOTTG document: order date, category labels and records."""

    order_date: str
    categories: Dict[str, str]
    records: pd.DataFrame

    @classmethod
    def from_dict(cls, data: Dict[str, Any], file_path: Optional[str] = None) -> 'RawDataset':
        """
        Create a dataset from a parsed raw JSON document.

        Raises:
            DataLoadError: If required top-level fields are missing
        """
        if not isinstance(data, dict):
            raise DataLoadError("Raw dataset must be a JSON object", file_path=file_path)

        missing = [key for key in ('orderDate', 'categories', 'items') if key not in data]
        if missing:
            raise DataLoadError(
                f"Raw dataset is missing required fields: {', '.join(missing)}",
                file_path=file_path,
                missing_fields=missing
            )

        if not isinstance(data['items'], list):
            raise DataLoadError("Raw dataset 'items' must be a list", file_path=file_path)

        return cls(
            order_date=data['orderDate'],
            categories=dict(data['categories'] or {}),
            records=records_to_dataframe(data['items'])
        )

    @classmethod
    def from_records(cls, records: List[RawRecord], order_date: str = "",
                     categories: Optional[Dict[str, str]] = None) -> 'RawDataset':
        """Create a dataset from in-memory RawRecord objects."""
        return cls(
            order_date=order_date,
            categories=dict(categories or {}),
            records=records_to_dataframe(records)
        )

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class CompactNode:
    """
    Index-addressed node of the compacted snapshot.

    Serialized with short keys: n (name), k (category letter), p (parent
    index), c (child indices) and i (independent flag).
    """

    name: str
    category: str
    parent: Optional[int] = None
    children: Optional[List[int]] = None
    independent: Optional[bool] = None

    def add_child(self, index: int):
        """Append a child index, creating the list on first use."""
        if self.children:
            self.children.append(index)
        else:
            self.children = [index]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'n': self.name, 'k': self.category}
        if self.parent is not None:
            data['p'] = self.parent
        if self.children:
            data['c'] = list(self.children)
        if self.independent:
            data['i'] = True
        return data

    @classmethod
    def from_dict(cls, data: Any, index: int) -> 'CompactNode':
        """
        Create a node from its serialized form.

        Raises:
            SnapshotError: If the node is not a well-formed object
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"Item {index} is not an object", item_index=index)

        name = data.get('n')
        category = data.get('k')
        parent = data.get('p')
        children = data.get('c')
        independent = data.get('i')

        issues = []
        if not isinstance(name, str):
            issues.append(f"item {index}: name 'n' must be a string")
        if not isinstance(category, str):
            issues.append(f"item {index}: category 'k' must be a string")
        if parent is not None and (isinstance(parent, bool) or not isinstance(parent, int)):
            issues.append(f"item {index}: parent 'p' must be an integer")
        if children is not None:
            if not isinstance(children, list) or any(
                    isinstance(c, bool) or not isinstance(c, int) for c in children):
                issues.append(f"item {index}: children 'c' must be a list of integers")
        if independent is not None and not isinstance(independent, bool):
            issues.append(f"item {index}: independent flag 'i' must be a boolean")

        if issues:
            raise SnapshotError(f"Malformed item {index}: {'; '.join(issues)}",
                                issues=issues, item_index=index)

        return cls(
            name=name,
            category=category,
            parent=parent,
            children=list(children) if children else None,
            independent=True if independent else None
        )


@dataclass
class Snapshot:
    """Compacted KATOTTG document consumed by the hierarchy builder."""

    order_date: str
    categories: Dict[str, str]
    items: List[CompactNode] = field(default_factory=list)
    index_to_code: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'orderDate': self.order_date,
            'categories': self.categories,
            'items': [item.to_dict() for item in self.items],
            'indexToCode': list(self.index_to_code)
        }

    def to_json(self) -> str:
        """Serialize to compact UTF-8 JSON; identical snapshots give identical text."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Any) -> 'Snapshot':
        """
        Create a snapshot from a parsed JSON document.

        Only the shape of the document is checked here; index bounds are
        checked by SnapshotValidator.validate_structure().

        Raises:
            SnapshotError: If the document shape is invalid
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot must be a JSON object")

        missing = [key for key in ('orderDate', 'categories', 'items', 'indexToCode')
                   if key not in data]
        if missing:
            raise SnapshotError(
                f"Snapshot is missing required fields: {', '.join(missing)}",
                issues=[f"missing field '{key}'" for key in missing]
            )

        items = data['items']
        index_to_code = data['indexToCode']
        if not isinstance(items, list) or not isinstance(index_to_code, list):
            raise SnapshotError("Snapshot 'items' and 'indexToCode' must be lists")
        if not isinstance(data['categories'], dict):
            raise SnapshotError("Snapshot 'categories' must be an object")

        return cls(
            order_date=data['orderDate'],
            categories=dict(data['categories']),
            items=[CompactNode.from_dict(item, idx) for idx, item in enumerate(items)],
            index_to_code=list(index_to_code)
        )


@dataclass(frozen=True)
class ChildRef:
    """Reference from a parent entity to one of its children."""

    id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {'id': self.id, 'name': self.name}


@dataclass(frozen=True)
class Region:
    """Oblast, or a special-status city acting as a region peer."""

    id: str
    name: str
    name_full: str
    category: CategoryBase
    districts: Tuple[ChildRef, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'nameFull': self.name_full,
            'districts': [child.to_dict() for child in self.districts]
        }


@dataclass(frozen=True)
class District:
    """District of a region, or a district of a city."""

    id: str
    name: str
    name_full: str
    category: CategoryBase
    region_id: Optional[str]
    communities: Tuple[ChildRef, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'nameFull': self.name_full,
            'regionId': self.region_id,
            'communities': [child.to_dict() for child in self.communities]
        }


@dataclass(frozen=True)
class Community:
    """Territorial community owned by a district."""

    id: str
    name: str
    name_full: str
    category: CategoryBase
    district_id: Optional[str]
    region_id: Optional[str]
    settlements: Tuple[ChildRef, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'nameFull': self.name_full,
            'districtId': self.district_id,
            'regionId': self.region_id,
            'settlements': [child.to_dict() for child in self.settlements]
        }


@dataclass(frozen=True)
class Settlement:
    """Village, urban-type settlement, city or special-status city."""

    id: str
    name: str
    name_full: str
    category: CategoryBase
    parent_id: Optional[str]
    parent_type: Optional[StructureType]
    region_id: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'nameFull': self.name_full,
            'parentId': self.parent_id,
            'parentType': self.parent_type.value if self.parent_type else None,
            'regionId': self.region_id
        }
