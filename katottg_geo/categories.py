"""
KATOTTG category classification.

This module maps the single-letter KATOTTG category codes to their semantic
role in the administrative hierarchy and to the display metadata used when
building full names (prefix/postfix affixes, display names, short labels).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import pandas as pd

from .exceptions import UnknownCategoryError


class CategoryCode(str, Enum):
    """Category letters defined by the KATOTTG standard."""
    O = "O"
    P = "P"
    H = "H"
    C = "C"
    X = "X"
    M = "M"
    B = "B"
    K = "K"


class CategoryBase(str, Enum):
    """Semantic role of a category in the hierarchy."""
    REGION = "Region"
    DISTRICT = "District"
    COMMUNITY = "Community"
    VILLAGE = "Village"
    URBAN = "Urban"
    CITY = "City"
    DISTRICT_CITY = "DistrictCity"
    CITY_SPECIAL = "CitySpecial"


class StructureType(str, Enum):
    """Entity kinds exposed by the query layer."""
    REGION = "region"
    DISTRICT = "district"
    COMMUNITY = "community"
    SETTLEMENT = "settlement"


@dataclass(frozen=True)
class CategoryData:
    """
    Display and role metadata for one category letter.

    Attributes:
        code: Category letter
        category: Semantic role of the category
        alias: Entity kind the category belongs to
        specific_alias: Narrower kind (village, city, ...)
        category_name: Human-readable category name
        short: Abbreviated label
        prefix: Affix placed before the name, e.g. "село"
        postfix: Affix placed after the name, e.g. "область"
    """
    code: CategoryCode
    category: CategoryBase
    alias: str
    specific_alias: str
    category_name: str
    short: str
    prefix: Optional[str] = None
    postfix: Optional[str] = None


CATEGORY_TABLE: Dict[CategoryCode, CategoryData] = {
    CategoryCode.O: CategoryData(
        code=CategoryCode.O,
        category=CategoryBase.REGION,
        alias="region",
        specific_alias="region",
        category_name="Область",
        short="обл.",
        postfix="область",
    ),
    CategoryCode.P: CategoryData(
        code=CategoryCode.P,
        category=CategoryBase.DISTRICT,
        alias="district",
        specific_alias="district",
        category_name="Район",
        short="р-н",
        postfix="район",
    ),
    CategoryCode.H: CategoryData(
        code=CategoryCode.H,
        category=CategoryBase.COMMUNITY,
        alias="community",
        specific_alias="community",
        category_name="Територіальна громада",
        short="ОТГ",
        postfix="територіальна громада",
    ),
    CategoryCode.C: CategoryData(
        code=CategoryCode.C,
        category=CategoryBase.VILLAGE,
        alias="settlement",
        specific_alias="village",
        category_name="Село",
        short="с.",
        prefix="село",
    ),
    CategoryCode.X: CategoryData(
        code=CategoryCode.X,
        category=CategoryBase.URBAN,
        alias="settlement",
        specific_alias="urban",
        category_name="Селище",
        short="с-ще",
        prefix="селище",
    ),
    CategoryCode.M: CategoryData(
        code=CategoryCode.M,
        category=CategoryBase.CITY,
        alias="settlement",
        specific_alias="city",
        category_name="Місто",
        short="м.",
        prefix="місто",
    ),
    CategoryCode.B: CategoryData(
        code=CategoryCode.B,
        category=CategoryBase.DISTRICT_CITY,
        alias="districtCity",
        specific_alias="district",
        category_name="Район міста",
        short="р-н",
        postfix="район міста",
    ),
    CategoryCode.K: CategoryData(
        code=CategoryCode.K,
        category=CategoryBase.CITY_SPECIAL,
        alias="settlement",
        specific_alias="citySpecial",
        category_name="Місто зі спецстатусом",
        short="м.",
        postfix="місто зі спецстатусом",
    ),
}

VALID_CATEGORY_LETTERS = frozenset(code.value for code in CategoryCode)


def is_known_category(letter) -> bool:
    """Check whether a value is one of the eight KATOTTG category letters."""
    return isinstance(letter, str) and letter in VALID_CATEGORY_LETTERS


def classify(letter, table: Optional[Dict[CategoryCode, CategoryData]] = None) -> CategoryData:
    """
    Classify a category letter.

    Args:
        letter: Category letter from a raw record or a compacted node
        table: Optional category table, defaults to CATEGORY_TABLE

    Returns:
        CategoryData describing the letter

    Raises:
        UnknownCategoryError: If the letter is not a KATOTTG category
    """
    if not is_known_category(letter):
        raise UnknownCategoryError(letter, valid_categories=sorted(VALID_CATEGORY_LETTERS))

    table = table if table is not None else CATEGORY_TABLE
    return table[CategoryCode(letter)]


def build_name_full(name: str, category_data: CategoryData) -> str:
    """
    Build a full display name in the form "<prefix> <name> <postfix>".

    Example:
        build_name_full("Полтавська", CATEGORY_TABLE[CategoryCode.O])
        -> "Полтавська область"
    """
    prefix = category_data.prefix or ""
    postfix = category_data.postfix or ""
    return f"{prefix} {name} {postfix}".strip()


def filter_known_categories(records: pd.DataFrame,
                            logger: Optional[logging.Logger] = None) -> pd.DataFrame:
    """
    Drop raw records whose category letter is not a KATOTTG category.

    Unknown letters are a data quality concern, not a processing failure, so
    the offending rows are logged and excluded.

    Args:
        records: DataFrame of raw records with a 'category' column
        logger: Optional logger for data quality warnings

    Returns:
        DataFrame containing only rows with a known category
    """
    logger = logger or logging.getLogger(__name__)

    if records.empty:
        return records

    known_mask = records['category'].apply(is_known_category)
    unknown_count = int((~known_mask).sum())

    if unknown_count:
        unknown_letters = sorted({str(v) for v in records.loc[~known_mask, 'category']})
        logger.warning(
            f"DATA QUALITY: skipping {unknown_count:,} record(s) with unknown "
            f"category letters: {', '.join(unknown_letters)}"
        )

    return records[known_mask]
