import unittest
from concurrent.futures import ThreadPoolExecutor

from albioncalc.core.data import CraftSpell, GameData
from albioncalc.core.spell_pool import SpellPoolCache, resolve_spell_pool, slot_options


def items(raw):
    return GameData.from_dicts(items=raw).items


BASE = {
    'BASE': {'spell_list': {'add': [
        {'spell_id': 'S1', 'slots': [1]},
        {'spell_id': 'S2', 'slots': [2]},
        {'spell_id': 'PASSIVE_P'},
    ]}},
}


class TestResolveSpellPool(unittest.TestCase):
    def test_remove_then_add_same_id(self):
        index = items({'W': {'spell_list': {'remove': ['S1'], 'add': [{'spell_id': 'S1', 'slots': [1]}]}}})
        pool = resolve_spell_pool('W', index)
        self.assertEqual(pool, [CraftSpell('S1', (1,))])

    def test_reference_remove_and_overwrite(self):
        raw = dict(BASE)
        raw['CHILD'] = {'spell_list': {
            'reference': 'BASE',
            'remove': ['S2'],
            'add': [{'spell_id': 'S1', 'tag': 'SIGNATURE'}, {'spell_id': 'S3', 'slots': '2|3'}],
        }}
        pool = resolve_spell_pool('CHILD', items(raw))
        self.assertEqual([e.spell_id for e in pool], ['S1', 'PASSIVE_P', 'S3'])
        # empty slot list on the add keeps the inherited slots
        self.assertEqual(pool[0].slots, (1,))
        self.assertEqual(pool[0].tag, 'SIGNATURE')
        self.assertEqual(pool[2].slots, (2, 3))

    def test_removed_id_re_added_goes_last(self):
        raw = dict(BASE)
        raw['CHILD'] = {'spell_list': {'reference': 'BASE', 'remove': ['S1'],
                                       'add': [{'spell_id': 'S1', 'slots': [3]}]}}
        pool = resolve_spell_pool('CHILD', items(raw))
        self.assertEqual([e.spell_id for e in pool], ['S2', 'PASSIVE_P', 'S1'])
        self.assertEqual(pool[-1].slots, (3,))

    def test_reference_cycle_terminates(self):
        index = items({
            'A': {'spell_list': {'reference': 'B', 'add': ['SA']}},
            'B': {'spell_list': {'reference': 'A', 'add': ['SB']}},
        })
        self.assertEqual([e.spell_id for e in resolve_spell_pool('A', index)], ['SB', 'SA'])

    def test_unknown_weapon(self):
        self.assertEqual(resolve_spell_pool('MISSING', items(BASE)), [])


class TestSlotOptions(unittest.TestCase):
    def test_passives_excluded_and_empty_slots_match_any(self):
        pool = [
            CraftSpell('S1', (1,)),
            CraftSpell('ANY'),
            CraftSpell('PASSIVE_X'),
            CraftSpell('P2', tag='passive_defense'),
            CraftSpell('S3', (2, 3)),
        ]
        self.assertEqual([e.spell_id for e in slot_options(pool, 1)], ['S1', 'ANY'])
        self.assertEqual([e.spell_id for e in slot_options(pool, 3)], ['ANY', 'S3'])


class TestSpellPoolCache(unittest.TestCase):
    def test_cache_fills_lazily(self):
        cache = SpellPoolCache(items(BASE))
        self.assertEqual(len(cache), 0)
        pool = cache.get('BASE')
        self.assertIn('BASE', cache)
        pool.clear()
        self.assertEqual(len(cache.get('BASE')), 3)

    def test_pre_resolved_pools_are_used(self):
        cache = SpellPoolCache({}, resolved={'W': [CraftSpell('X', (1,))]})
        self.assertEqual(cache.get('W'), [CraftSpell('X', (1,))])

    def test_unknown_weapons_are_not_cached(self):
        cache = SpellPoolCache(items(BASE))
        for i in range(100):
            self.assertEqual(cache.get(f'NOPE_{i}'), [])
        self.assertEqual(len(cache), 0)
        self.assertNotIn('NOPE_0', cache)

    def test_concurrent_reads(self):
        cache = SpellPoolCache(items(BASE))
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: cache.get('BASE'), range(32)))
        self.assertTrue(all(r == results[0] for r in results))
        self.assertEqual(len(cache), 1)


if __name__ == '__main__':
    unittest.main()
