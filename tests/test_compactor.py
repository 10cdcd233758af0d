"""
Unit tests for the Compactor class.
"""

import json
import unittest

from katottg_geo.hierarchy.compactor import Compactor
from katottg_geo.hierarchy.snapshot_validator import SnapshotValidator
from katottg_geo.models import RawDataset, RawRecord
from tests.fixtures import (
    CHERVONOHRYHORIVKA,
    CRIMEA_REGION,
    EXPECTED_NODE_COUNT,
    KYIV,
    KYIV_CITY_DISTRICTS,
    KYIV_REGION,
    NIKOPOL_COMMUNITY,
    ORDER_DATE,
    POLTAVA_CITY,
    POLTAVA_CITY_DISTRICTS,
    POLTAVA_COMMUNITY,
    POLTAVA_DISTRICT,
    POLTAVA_REGION,
    RAW_RECORD_COUNT,
    SEVASTOPOL,
    SHCHERBANI,
    build_raw_document
)


class TestCompactor(unittest.TestCase):
    """Test cases for compaction of the fixture dataset."""

    def setUp(self):
        self.dataset = RawDataset.from_dict(build_raw_document())
        self.compactor = Compactor()
        self.snapshot = self.compactor.compact(self.dataset)
        self.index = {code: idx for idx, code in enumerate(self.snapshot.index_to_code)}

    def node(self, code):
        return self.snapshot.items[self.index[code]]

    def test_node_count(self):
        self.assertEqual(len(self.snapshot), EXPECTED_NODE_COUNT)
        self.assertEqual(len(self.snapshot.index_to_code), EXPECTED_NODE_COUNT)

    def test_passthrough_fields(self):
        self.assertEqual(self.snapshot.order_date, ORDER_DATE)
        self.assertEqual(self.snapshot.categories, self.dataset.categories)

    def test_stage_order(self):
        """Nodes are emitted stage by stage regardless of input order."""
        self.assertEqual(self.snapshot.index_to_code[0], POLTAVA_REGION)
        self.assertEqual(self.index[POLTAVA_DISTRICT], 4)
        self.assertEqual(self.index[POLTAVA_CITY], 6)
        self.assertEqual(self.index[KYIV], 7)
        self.assertEqual(self.index[SEVASTOPOL], 8)
        self.assertEqual([self.index[c] for c in POLTAVA_CITY_DISTRICTS], [9, 10, 11])
        self.assertEqual([self.index[c] for c in KYIV_CITY_DISTRICTS], [12, 13])
        self.assertEqual(self.index[POLTAVA_COMMUNITY], 14)
        self.assertEqual(self.index[SHCHERBANI], 16)

    def test_parents_precede_children(self):
        for idx, item in enumerate(self.snapshot.items):
            if item.parent is not None:
                self.assertLess(item.parent, idx)

    def test_parent_links(self):
        self.assertIsNone(self.node(POLTAVA_REGION).parent)
        self.assertEqual(self.node(POLTAVA_DISTRICT).parent, self.index[POLTAVA_REGION])
        self.assertEqual(self.node(POLTAVA_CITY).parent, self.index[POLTAVA_DISTRICT])
        self.assertEqual(self.node(POLTAVA_CITY_DISTRICTS[0]).parent, self.index[POLTAVA_CITY])
        self.assertEqual(self.node(SHCHERBANI).parent, self.index[POLTAVA_COMMUNITY])
        self.assertEqual(self.node(CHERVONOHRYHORIVKA).parent, self.index[NIKOPOL_COMMUNITY])

    def test_children_in_insertion_order(self):
        self.assertEqual(
            self.node(POLTAVA_CITY).children,
            [self.index[c] for c in POLTAVA_CITY_DISTRICTS]
        )
        self.assertEqual(
            self.node(POLTAVA_DISTRICT).children,
            [self.index[POLTAVA_CITY], self.index[POLTAVA_COMMUNITY]]
        )

    def test_leaves_have_no_child_list(self):
        self.assertIsNone(self.node(SHCHERBANI).children)
        self.assertNotIn('c', self.node(SHCHERBANI).to_dict())

    def test_special_cities_attached_to_substitute_regions(self):
        kyiv = self.node(KYIV)
        sevastopol = self.node(SEVASTOPOL)

        self.assertTrue(kyiv.independent)
        self.assertTrue(sevastopol.independent)
        self.assertEqual(kyiv.parent, self.index[KYIV_REGION])
        self.assertEqual(sevastopol.parent, self.index[CRIMEA_REGION])
        self.assertIn(self.index[KYIV], self.node(KYIV_REGION).children)

    def test_duplicate_keeps_first_record(self):
        self.assertEqual(self.snapshot.index_to_code.count(SHCHERBANI), 1)
        self.assertEqual(self.node(SHCHERBANI).name, 'Щербані')

    def test_orphan_and_unknown_skipped(self):
        names = [item.name for item in self.snapshot.items]
        self.assertNotIn('Загублене', names)
        self.assertNotIn('Невідоме', names)

    def test_statistics(self):
        stats = self.compactor.stats
        self.assertEqual(stats.total_records, RAW_RECORD_COUNT)
        self.assertEqual(stats.unknown_category, 1)
        self.assertEqual(stats.stage('other_settlements').accepted, 2)
        self.assertEqual(stats.stage('other_settlements').duplicates, 1)
        self.assertEqual(stats.stage('other_settlements').unresolved, 1)
        self.assertEqual(stats.stage('city_districts').accepted, 5)
        self.assertEqual(stats.total_accepted(), EXPECTED_NODE_COUNT)
        self.assertEqual(stats.total_skipped(), 3)

    def test_result_is_consistent(self):
        is_consistent, issues = SnapshotValidator().check_consistency(self.snapshot)
        self.assertTrue(is_consistent, issues)

    def test_output_is_deterministic(self):
        again = Compactor().compact(RawDataset.from_dict(build_raw_document()))
        self.assertEqual(again.to_json(), self.snapshot.to_json())

    def test_json_uses_short_keys(self):
        data = json.loads(self.snapshot.to_json())

        self.assertEqual(set(data), {'orderDate', 'categories', 'items', 'indexToCode'})
        self.assertEqual(data['items'][self.index[SHCHERBANI]],
                         {'n': 'Щербані', 'k': 'C', 'p': self.index[POLTAVA_COMMUNITY]})
        self.assertEqual(data['items'][self.index[KYIV]],
                         {'n': 'Київ', 'k': 'K', 'p': self.index[KYIV_REGION],
                          'c': [self.index[c] for c in KYIV_CITY_DISTRICTS], 'i': True})
        self.assertIn('Щербані', self.snapshot.to_json())


class TestCompactorEdgeCases(unittest.TestCase):
    """Test cases for small hand-built datasets."""

    def compact(self, records):
        return Compactor().compact(RawDataset.from_records(records, order_date=ORDER_DATE))

    def test_empty_dataset(self):
        snapshot = self.compact([])
        self.assertEqual(len(snapshot), 0)
        self.assertEqual(snapshot.index_to_code, [])

    def test_special_city_without_substitute_region(self):
        snapshot = self.compact([RawRecord(category='K', name='Київ', level1=KYIV)])

        self.assertEqual(snapshot.index_to_code, [KYIV])
        self.assertIsNone(snapshot.items[0].parent)
        self.assertTrue(snapshot.items[0].independent)

    def test_padded_special_city_code_stays_independent(self):
        snapshot = self.compact([RawRecord(category='K', name='Київ', level1=KYIV + ' ')])

        self.assertEqual(snapshot.index_to_code, [KYIV])
        self.assertTrue(snapshot.items[0].independent)
        self.assertIn('"i":true', snapshot.to_json())

    def test_padded_codes_resolve_parents(self):
        snapshot = self.compact([
            RawRecord(category='O', name='Київська', level1=' ' + KYIV_REGION),
            RawRecord(category=' K', name='Київ', level1=KYIV + '\t'),
            RawRecord(category='B', name='Печерський', level1=KYIV, level4=KYIV + ' ',
                      level5=KYIV_CITY_DISTRICTS[0]),
        ])

        self.assertEqual(snapshot.index_to_code, [KYIV_REGION, KYIV, KYIV_CITY_DISTRICTS[0]])
        self.assertEqual(snapshot.items[1].parent, 0)
        self.assertEqual(snapshot.items[2].parent, 1)

    def test_special_city_districts(self):
        snapshot = self.compact([
            RawRecord(category='K', name='Київ', level1=KYIV),
            RawRecord(category='B', name='Печерський', level1=KYIV, level4=KYIV,
                      level5=KYIV_CITY_DISTRICTS[0]),
        ])

        self.assertEqual(snapshot.items[0].children, [1])
        self.assertEqual(snapshot.items[1].parent, 0)

    def test_duplicate_special_city_skipped(self):
        snapshot = self.compact([
            RawRecord(category='K', name='Київ', level1=KYIV),
            RawRecord(category='K', name='Київ (дубль)', level1=KYIV),
        ])

        self.assertEqual(len(snapshot), 1)
        self.assertEqual(snapshot.items[0].name, 'Київ')

    def test_names_are_trimmed(self):
        snapshot = self.compact([RawRecord(category='O', name='  Полтавська ', level1=POLTAVA_REGION)])
        self.assertEqual(snapshot.items[0].name, 'Полтавська')

    def test_record_without_code_skipped(self):
        compactor = Compactor()
        snapshot = compactor.compact(RawDataset.from_records([
            RawRecord(category='O', name='Полтавська', level1=POLTAVA_REGION),
            RawRecord(category='P', name='Без коду', level1=POLTAVA_REGION),
        ]))

        self.assertEqual(len(snapshot), 1)
        self.assertEqual(compactor.stats.stage('area_districts').unresolved, 1)

    def test_settlement_falls_back_to_district_parent(self):
        snapshot = self.compact([
            RawRecord(category='O', name='Полтавська', level1=POLTAVA_REGION),
            RawRecord(category='P', name='Полтавський', level1=POLTAVA_REGION,
                      level2=POLTAVA_DISTRICT),
            RawRecord(category='C', name='Щербані', level1=POLTAVA_REGION,
                      level2=POLTAVA_DISTRICT, level4=SHCHERBANI),
        ])

        self.assertEqual(snapshot.items[2].parent, 1)
        self.assertEqual(snapshot.items[1].children, [2])


if __name__ == '__main__':
    unittest.main()
