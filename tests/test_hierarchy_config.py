"""
Unit tests for the compaction stage table.
"""

import unittest

from katottg_geo.categories import CategoryCode
from katottg_geo.hierarchy.hierarchy_config import (
    COMPACTION_STAGES,
    KYIV_CODE,
    KYIV_REGION_CODE,
    SEVASTOPOL_CODE,
    SEVASTOPOL_REGION_CODE,
    SPECIAL_CITY_REGIONS,
    get_stage,
    get_stage_rank
)


class TestCompactionStages(unittest.TestCase):
    """Test cases for stage lookup and ordering."""

    def test_stage_names_unique(self):
        names = [stage.name for stage in COMPACTION_STAGES]
        self.assertEqual(len(names), len(set(names)))

    def test_every_category_has_a_stage(self):
        covered = {category for stage in COMPACTION_STAGES for category in stage.categories}
        self.assertEqual(covered, set(CategoryCode))

    def test_get_stage(self):
        stage = get_stage('city_districts')

        self.assertEqual(stage.code_fields, ('level5',))
        self.assertEqual(stage.parent_fields, ('level4',))
        self.assertFalse(stage.is_root)
        self.assertIsNone(get_stage('unknown'))

    def test_root_stages(self):
        self.assertTrue(get_stage('regions').is_root)
        self.assertFalse(get_stage('special_cities').is_root)

    def test_special_city_regions(self):
        self.assertEqual(SPECIAL_CITY_REGIONS[KYIV_CODE], KYIV_REGION_CODE)
        self.assertEqual(SPECIAL_CITY_REGIONS[SEVASTOPOL_CODE], SEVASTOPOL_REGION_CODE)

    def test_stage_rank(self):
        self.assertEqual(get_stage_rank('O'), 0)
        self.assertEqual(get_stage_rank('K'), 0)
        self.assertEqual(get_stage_rank('K', independent=True), 3)
        self.assertLess(get_stage_rank('M'), get_stage_rank('B'))
        self.assertLess(get_stage_rank('H'), get_stage_rank('C'))
        self.assertIsNone(get_stage_rank('Z'))


if __name__ == '__main__':
    unittest.main()
