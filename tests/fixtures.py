"""
Shared test data: a small raw KATOTTG document.

Records are listed out of hierarchy order on purpose so that the staged
compaction has to resolve parents regardless of input order.
"""

import copy

POLTAVA_REGION = "UA53000000000028050"
POLTAVA_DISTRICT = "UA53080000000088231"
POLTAVA_COMMUNITY = "UA53080370000043878"
POLTAVA_CITY = "UA53080370010016581"
POLTAVA_CITY_DISTRICTS = (
    "UA53080370010100001",
    "UA53080370010100002",
    "UA53080370010100003",
)
SHCHERBANI = "UA53080370120081264"

KYIV_REGION = "UA32000000000030281"
CRIMEA_REGION = "UA01000000000013043"
KYIV = "UA80000000000093317"
SEVASTOPOL = "UA85000000000065278"
KYIV_CITY_DISTRICTS = (
    "UA80000000000126643",
    "UA80000000000719633",
)

DNIPRO_REGION = "UA12000000000090473"
NIKOPOL_DISTRICT = "UA12080000000023578"
NIKOPOL_COMMUNITY = "UA12080070000094389"
CHERVONOHRYHORIVKA = "UA12080070020011111"

ORPHAN_PARENT = "UA99999999999999999"

ORDER_DATE = "2023-11-08"
CATEGORIES = {
    "O": "Автономна Республіка Крим, області",
    "K": "Міста, що мають спеціальний статус",
    "P": "Райони в областях та Автономній Республіці Крим",
    "H": "Території територіальних громад",
    "M": "Міста",
    "X": "Селища",
    "C": "Села",
    "B": "Райони в містах",
}

RAW_ITEMS = [
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": SHCHERBANI, "level5": None, "category": "C", "name": "Щербані"},
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": POLTAVA_CITY, "level5": POLTAVA_CITY_DISTRICTS[0], "category": "B",
     "name": "Київський"},
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": POLTAVA_CITY, "level5": POLTAVA_CITY_DISTRICTS[1], "category": "B",
     "name": "Подільський"},
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": POLTAVA_CITY, "level5": POLTAVA_CITY_DISTRICTS[2], "category": "B",
     "name": "Шевченківський"},
    {"level1": KYIV, "level2": None, "level3": None, "level4": KYIV,
     "level5": KYIV_CITY_DISTRICTS[0], "category": "B", "name": "Печерський"},
    {"level1": KYIV, "level2": None, "level3": None, "level4": KYIV,
     "level5": KYIV_CITY_DISTRICTS[1], "category": "B", "name": "Оболонський"},
    {"level1": KYIV, "level2": None, "level3": None, "level4": None, "level5": None,
     "category": "K", "name": "Київ"},
    {"level1": POLTAVA_REGION, "level2": None, "level3": None, "level4": None, "level5": None,
     "category": "O", "name": "Полтавська"},
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": None, "level4": None,
     "level5": None, "category": "P", "name": "Полтавський"},
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": POLTAVA_CITY, "level5": None, "category": "M", "name": "Полтава"},
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": None, "level5": None, "category": "H", "name": "Полтавська"},
    {"level1": KYIV_REGION, "level2": None, "level3": None, "level4": None, "level5": None,
     "category": "O", "name": "Київська"},
    {"level1": CRIMEA_REGION, "level2": None, "level3": None, "level4": None, "level5": None,
     "category": "O", "name": "Автономна Республіка Крим"},
    {"level1": SEVASTOPOL, "level2": None, "level3": None, "level4": None, "level5": None,
     "category": "K", "name": "Севастополь"},
    {"level1": DNIPRO_REGION, "level2": None, "level3": None, "level4": None, "level5": None,
     "category": "O", "name": "Дніпропетровська"},
    {"level1": DNIPRO_REGION, "level2": NIKOPOL_DISTRICT, "level3": None, "level4": None,
     "level5": None, "category": "P", "name": "Нікопольський"},
    {"level1": DNIPRO_REGION, "level2": NIKOPOL_DISTRICT, "level3": NIKOPOL_COMMUNITY,
     "level4": None, "level5": None, "category": "H", "name": "Нікопольська"},
    {"level1": DNIPRO_REGION, "level2": NIKOPOL_DISTRICT, "level3": NIKOPOL_COMMUNITY,
     "level4": CHERVONOHRYHORIVKA, "level5": None, "category": "X",
     "name": "Червоногригорівка"},
    # Same code as an earlier village, must not replace it
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": POLTAVA_COMMUNITY,
     "level4": SHCHERBANI, "level5": None, "category": "C", "name": "Щербані (дубль)"},
    # Parent community is absent from the dataset
    {"level1": POLTAVA_REGION, "level2": POLTAVA_DISTRICT, "level3": ORPHAN_PARENT,
     "level4": "UA53080990010011111", "level5": None, "category": "C", "name": "Загублене"},
    {"level1": "UA00000000000000000", "level2": None, "level3": None, "level4": None,
     "level5": None, "category": "Z", "name": "Невідоме"},
]

RAW_RECORD_COUNT = len(RAW_ITEMS)
EXPECTED_NODE_COUNT = 18


def build_raw_document():
    """Return a fresh copy of the raw JSON document."""
    return {
        "orderDate": ORDER_DATE,
        "categories": dict(CATEGORIES),
        "items": copy.deepcopy(RAW_ITEMS),
    }
