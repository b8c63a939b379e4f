import unittest

from albioncalc.core.focus import (FocusCostInput, compare_focus_costs, compute_focus_cost, daily_focus_budget,
                                   fce_for_cost_fraction, lookup_fce)
from albioncalc.core.tables import FCECategory
from albioncalc.errors import UnknownCategoryError
from albioncalc.utils.loader import load_tables


class TestFocusLookup(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.tables = load_tables().focus

    def test_gear_subcategory(self):
        rates = lookup_fce(self.tables, 'gear', 'Sword')
        self.assertEqual((rates.base_focus, rates.spec_unique_fce, rates.spec_mutual_fce), (250, 30, 30))
        self.assertEqual(rates.bonus_city, 'Bridgewatch')
        self.assertEqual(lookup_fce(self.tables, 'gear', 'cape').spec_unique_fce, 0)

    def test_artifact_and_crystal_rates(self):
        artifact = lookup_fce(self.tables, 'gear', 'sword', is_artifact=True)
        self.assertEqual((artifact.base_focus, artifact.spec_unique_fce, artifact.spec_mutual_fce), (250, 15, 30))
        crystal = lookup_fce(self.tables, 'gear', 'sword', is_artifact=True, is_crystal=True)
        self.assertEqual(crystal.spec_unique_fce, 2.15)

    def test_item_id_fills_artifact_tier_and_enchantment(self):
        rates = lookup_fce(self.tables, 'gear', 'sword', item_id='T6_MAIN_SWORD_UNDEAD@1')
        self.assertEqual((rates.base_focus, rates.spec_unique_fce), (250, 15))
        self.assertEqual(lookup_fce(self.tables, 'gear', 'sword', item_id='T6_MAIN_SWORD@1').spec_unique_fce, 30)

        refined = lookup_fce(self.tables, 'refining', 'ore', item_id='T6_METALBAR_LEVEL2@2')
        self.assertEqual(refined.base_focus, 560)
        explicit = lookup_fce(self.tables, 'refining', 'ore', tier=4, item_id='T6_METALBAR')
        self.assertEqual(explicit.base_focus, 56)

    def test_food_and_potion(self):
        self.assertEqual(lookup_fce(self.tables, 'food', 'stew').base_focus, 56)
        self.assertEqual(lookup_fce(self.tables, 'potion', 'poison').spec_mutual_fce, 30)

    def test_refining_tier_and_enchantment(self):
        rates = lookup_fce(self.tables, 'refining', 'ore', tier=6, enchantment=2)
        self.assertEqual(rates.base_focus, 560)
        self.assertEqual(rates.spec_unique_fce, 250)
        self.assertEqual(lookup_fce(self.tables, 'refining', 'hide', tier=8).base_focus, 896)

    def test_unknown_categories(self):
        for args in (('gear', 'lute'), ('food', 'cake'), ('refining', 'ore', 3), ('furniture', 'chair')):
            with self.subTest(args=args):
                with self.assertRaises(UnknownCategoryError) as ctx:
                    lookup_fce(self.tables, *args)
                self.assertIsInstance(ctx.exception, KeyError)


class TestFocusCost(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.tables = load_tables().focus
        cls.rates = FCECategory(base_focus=200, spec_unique_fce=70, spec_mutual_fce=50)

    def test_no_fce_is_base_cost(self):
        result = compute_focus_cost(FocusCostInput(0, 0), self.rates, self.tables)
        self.assertEqual(result.actual_cost, 200)
        self.assertEqual(result.reduction_factor, 1)
        self.assertEqual(result.percent_of_base, 100)

    def test_every_10000_fce_halves_the_cost(self):
        half = compute_focus_cost(FocusCostInput(100, 100), self.rates, self.tables)
        self.assertEqual(half.mastery_fce, 3000)
        self.assertEqual(half.unique_fce, 7000)
        self.assertEqual(half.total_fce, 10000)
        self.assertAlmostEqual(half.actual_cost, 100)
        self.assertAlmostEqual(half.percent_of_base, 50)

        quarter = compute_focus_cost(FocusCostInput(100, 100, (100, 100)), self.rates, self.tables)
        self.assertEqual(quarter.mutual_fce, 10000)
        self.assertAlmostEqual(quarter.actual_cost, 50)

    def test_uncapped(self):
        result = compute_focus_cost(FocusCostInput(100, 120, (120,) * 10), self.rates, self.tables)
        self.assertGreater(result.actual_cost, 0)
        self.assertLess(result.actual_cost, 200 / 2 ** 7)

    def test_compare(self):
        comparison = compare_focus_costs(FocusCostInput(0, 100), self.rates, self.tables, mastery_level=100)
        self.assertAlmostEqual(comparison.current_cost, 200 / 2 ** 0.7)
        self.assertAlmostEqual(comparison.target_cost, 100)
        self.assertAlmostEqual(comparison.savings, 200 / 2 ** 0.7 - 100)
        self.assertGreater(comparison.savings_percent, 0)

    def test_fce_for_cost_fraction(self):
        self.assertAlmostEqual(fce_for_cost_fraction(0.5, self.tables), 10000)
        self.assertAlmostEqual(fce_for_cost_fraction(0.25, self.tables), 20000)
        self.assertEqual(fce_for_cost_fraction(1, self.tables), 0)
        with self.assertRaises(ValueError):
            fce_for_cost_fraction(0, self.tables)
        with self.assertRaises(ValueError):
            fce_for_cost_fraction(1.5, self.tables)

    def test_daily_budget(self):
        budget = daily_focus_budget(25, 300, self.tables)
        self.assertEqual(budget.total_focus_needed, 7500)
        self.assertEqual(budget.focus_covered, 7500)
        self.assertEqual(budget.affordable_crafts, 400)
        self.assertTrue(budget.can_afford)

        short = daily_focus_budget(50, 300, self.tables)
        self.assertEqual(short.focus_covered, 10000)
        self.assertEqual(short.affordable_crafts, 200)
        self.assertFalse(short.can_afford)

        with self.assertRaises(ValueError):
            daily_focus_budget(0, 10, self.tables)


if __name__ == '__main__':
    unittest.main()
