import unittest

from albioncalc.core.data import GameData, ResistanceProfile
from albioncalc.core.rotation import aggregate_rotation
from albioncalc.core.spell_book import SpellBook
from albioncalc.errors import UnknownItemError
from albioncalc.utils.loader import load_tables

CLOTH = ResistanceProfile('Cloth', 50, 80)
LEATHER = ResistanceProfile('Leather', 100, 100)
PLATE = ResistanceProfile('Plate', 150, 150)


class TestRotation(unittest.TestCase):
    def setUp(self):
        data = GameData.from_dicts(
            items={'T4_MAIN_TEST': {'hands': '1h', 'ability_power': 120, 'attack_damage': 40}},
            spells={
                'SLAM': {'direct': [{'attribute': 'health', 'change': -50, 'effect_type': 'physical'}]},
                'BOLT': {'direct': [{'attribute': 'health', 'change': -50, 'effect_type': 'magic'}]},
            },
        )
        self.items = data.items
        self.book = SpellBook(data.spells)

    def rotate(self, spells, include_autos=True, profiles=(CLOTH, LEATHER, PLATE)):
        return aggregate_rotation(self.items, self.book, 'T4_MAIN_TEST', 0, spells, profiles, include_autos)

    def test_burst_and_sustain_with_autos(self):
        result = self.rotate(['SLAM'])
        rows = result.by_label()
        # spell 60 raw, auto 48 raw; two autos per burst
        self.assertEqual((rows['Cloth'].burst, rows['Cloth'].sustain), (104, 347))
        self.assertEqual((rows['Leather'].burst, rows['Leather'].sustain), (78, 260))
        self.assertEqual((rows['Plate'].burst, rows['Plate'].sustain), (62, 207))
        self.assertEqual(rows['Plate'].auto_attack, 19)

    def test_without_autos(self):
        rows = self.rotate(['SLAM'], include_autos=False).by_label()
        self.assertEqual(rows['Cloth'].burst, 40)
        self.assertEqual(rows['Cloth'].sustain, 133)
        self.assertEqual(rows['Cloth'].auto_attack, 0)

    def test_per_spell_breakdown(self):
        rows = self.rotate([None, 'SLAM', 'BOLT'], include_autos=False).by_label()
        self.assertEqual(rows['Cloth'].spells, [('SLAM', 40), ('BOLT', 33)])
        self.assertEqual(rows['Cloth'].burst, 73)

    def test_empty_slots_are_skipped(self):
        self.assertEqual(self.rotate([None, 'SLAM', None]).by_label(), self.rotate(['SLAM']).by_label())

    def test_too_many_spells(self):
        with self.assertRaises(ValueError):
            self.rotate(['SLAM', 'SLAM', 'BOLT', 'BOLT'])

    def test_unknown_weapon(self):
        with self.assertRaises(UnknownItemError):
            aggregate_rotation(self.items, self.book, 'T4_NOPE', 0, [], [CLOTH])

    def test_default_profiles_from_tables(self):
        profiles = load_tables().profiles()
        self.assertEqual([p.label for p in profiles], ['Cloth', 'Leather', 'Plate'])
        self.assertEqual((profiles[0].armor, profiles[0].magic_resist), (50, 80))
        result = self.rotate(['SLAM'], profiles=profiles)
        self.assertEqual([row.burst for row in result.profiles], [104, 78, 62])


if __name__ == '__main__':
    unittest.main()
