"""Read-only records for items, spell graphs and derived damage packets."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from albioncalc.utils.numeric import to_float, to_int

PHYSICAL = 'physical'
MAGIC = 'magic'
TRUE = 'true'
DAMAGE_TYPES = (PHYSICAL, MAGIC, TRUE)

DEFAULT_ABILITY_POWER = 120.0


def _pick(raw, *keys, default=None):
    """First present key; index files come both snake_cased and camelCased."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _as_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def map_damage_type(raw) -> str:
    normalized = str(raw or '').lower()
    if 'magic' in normalized: return MAGIC
    if 'true' in normalized: return TRUE
    return PHYSICAL


# --- Items & weapon spell lists ---

@dataclass(frozen=True)
class CraftSpell:
    spell_id: str
    slots: Tuple[int, ...] = ()
    tag: Optional[str] = None

    @classmethod
    def from_dict(cls, raw):
        if isinstance(raw, str):
            return cls(raw)
        slots_raw = _pick(raw, 'slots', default=())
        if isinstance(slots_raw, str):
            slots_raw = [s for s in slots_raw.split('|') if s]
        slots = tuple(s for s in (to_int(v) for v in _as_list(slots_raw)) if s > 0)
        tag = _pick(raw, 'tag')
        return cls(
            spell_id=str(_pick(raw, 'spell_id', 'id', 'uniquename')),
            slots=slots,
            tag=str(tag) if tag else None,
        )


# A resolved pool entry has the same shape as an add operation.
SpellPoolEntry = CraftSpell


@dataclass(frozen=True)
class CraftSpellList:
    reference: Optional[str] = None
    add: Tuple[CraftSpell, ...] = ()
    remove: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw):
        if not raw:
            return cls()
        reference = _pick(raw, 'reference')
        return cls(
            reference=str(reference) if reference else None,
            add=tuple(CraftSpell.from_dict(s) for s in _as_list(_pick(raw, 'add', 'addSpells', 'craftspell'))),
            remove=tuple(str(_pick(s, 'spell_id', 'uniquename', 'id') if isinstance(s, dict) else s)
                         for s in _as_list(_pick(raw, 'remove', 'removeSpells', 'removespell'))),
        )

    @property
    def is_empty(self):
        return self.reference is None and not self.add and not self.remove


@dataclass(frozen=True)
class ItemRecord:
    item_id: str
    ability_power: float = DEFAULT_ABILITY_POWER
    hands: str = '1h'
    attack_damage: Optional[float] = None
    attack_type: Optional[str] = None
    base_item_power: Optional[float] = None
    weight: Optional[float] = None
    slot_type: str = 'weapon'
    spell_list: CraftSpellList = field(default_factory=CraftSpellList)

    @property
    def is_two_handed(self):
        return self.hands == '2h'

    @classmethod
    def from_dict(cls, item_id, raw):
        hands = _pick(raw, 'hands')
        if hands is None:
            hands = '2h' if str(_pick(raw, 'twohanded', 'two_handed', default='')).lower() == 'true' else '1h'
        attack_damage = _pick(raw, 'attack_damage', 'attackDamage', 'attackdamage')
        base_ip = _pick(raw, 'base_item_power', 'baseItemPower', 'itempower')
        weight = _pick(raw, 'weight')
        attack_type = _pick(raw, 'attack_type', 'attackType', 'attacktype')
        return cls(
            item_id=str(_pick(raw, 'id', default=item_id)),
            ability_power=to_float(_pick(raw, 'ability_power', 'abilityPower', 'abilitypower'),
                                   DEFAULT_ABILITY_POWER),
            hands='2h' if hands == '2h' else '1h',
            attack_damage=to_float(attack_damage) if attack_damage is not None else None,
            attack_type=str(attack_type) if attack_type else None,
            base_item_power=to_float(base_ip) if base_ip is not None else None,
            weight=to_float(weight) if weight is not None else None,
            slot_type=str(_pick(raw, 'slot_type', 'slotType', default='weapon')),
            spell_list=CraftSpellList.from_dict(
                _pick(raw, 'spell_list', 'craftingSpellList', 'craftingspelllist')),
        )


# --- Spell effect graph ---

@dataclass(frozen=True)
class ValueOverride:
    min_charges: int
    value: float


@dataclass(frozen=True)
class AttributeChange:
    """A direct change to an attribute. Negative health change is damage."""

    attribute: str
    change: float
    effect_type: str = ''
    aoe_bonus: float = 0.0
    overrides: Tuple[ValueOverride, ...] = ()

    @property
    def is_damage(self):
        return self.attribute.lower() == 'health' and self.change < 0

    @classmethod
    def from_dict(cls, raw):
        overrides = []
        for entry in _as_list(_pick(raw, 'value_overrides', 'overrides')):
            value = _pick(entry, 'value')
            if value is None:
                continue
            overrides.append(ValueOverride(
                min_charges=to_int(_pick(entry, 'min_charges', 'mincharges', 'min'), 0),
                value=to_float(value),
            ))
        overrides.sort(key=lambda o: o.min_charges)
        return cls(
            attribute=str(_pick(raw, 'attribute', default='')),
            change=to_float(_pick(raw, 'change')),
            effect_type=str(_pick(raw, 'effect_type', 'effecttype', 'damage_type', 'damagetype', default='')),
            aoe_bonus=to_float(_pick(raw, 'aoe_bonus', 'targetcountvaluebonusfactor')),
            overrides=tuple(overrides),
        )


@dataclass(frozen=True)
class AttributeChangeOverTime(AttributeChange):
    count: int = 1
    interval: Optional[float] = None

    @classmethod
    def from_dict(cls, raw):
        base = AttributeChange.from_dict(raw)
        interval = to_float(_pick(raw, 'interval', 'initialinterval'))
        return cls(
            attribute=base.attribute,
            change=base.change,
            effect_type=base.effect_type,
            aoe_bonus=base.aoe_bonus,
            overrides=base.overrides,
            count=max(1, to_int(_pick(raw, 'count'), 1)),
            interval=interval or None,
        )


@dataclass(frozen=True)
class ChannelEffect:
    count: int = 1
    interval: Optional[float] = None
    direct: Tuple[AttributeChange, ...] = ()
    over_time: Tuple[AttributeChangeOverTime, ...] = ()
    apply_spells: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw):
        interval = to_float(_pick(raw, 'effect_interval', 'interval', 'effectinterval'))
        return cls(
            count=max(1, to_int(_pick(raw, 'effect_count', 'count', 'effectcount'), 1)),
            interval=interval or None,
            direct=tuple(AttributeChange.from_dict(d) for d in _as_list(_pick(raw, 'direct'))),
            over_time=tuple(AttributeChangeOverTime.from_dict(d) for d in _as_list(_pick(raw, 'over_time', 'dot'))),
            apply_spells=tuple(str(s) for s in _as_list(_pick(raw, 'apply_spells', 'applyspell')) if s),
        )


@dataclass(frozen=True)
class SpellDefinition:
    spell_id: str
    direct: Tuple[AttributeChange, ...] = ()
    over_time: Tuple[AttributeChangeOverTime, ...] = ()
    channels: Tuple[ChannelEffect, ...] = ()
    areas: Tuple[str, ...] = ()
    auras: Tuple[str, ...] = ()
    apply_spells: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, spell_id, raw):
        raw = raw or {}
        return cls(
            spell_id=spell_id,
            direct=tuple(AttributeChange.from_dict(d) for d in _as_list(_pick(raw, 'direct'))),
            over_time=tuple(AttributeChangeOverTime.from_dict(d) for d in _as_list(_pick(raw, 'over_time', 'dot'))),
            channels=tuple(ChannelEffect.from_dict(c) for c in _as_list(_pick(raw, 'channels', 'channelingspell'))),
            areas=tuple(str(s) for s in _as_list(_pick(raw, 'areas', 'spelleffectarea')) if s),
            auras=tuple(str(s) for s in _as_list(_pick(raw, 'auras', 'aura')) if s),
            apply_spells=tuple(str(s) for s in _as_list(_pick(raw, 'apply_spells', 'applyspell')) if s),
        )


@dataclass(frozen=True)
class DamagePacket:
    label: str
    base: float
    damage_type: str = PHYSICAL
    count: int = 1
    interval: Optional[float] = None
    aoe_bonus_per_target: Optional[float] = None

    def prefixed(self, prefix):
        return replace(self, label=f"{prefix}{self.label}")

    @classmethod
    def from_dict(cls, raw):
        return cls(
            label=str(_pick(raw, 'label', default='')),
            base=abs(to_float(_pick(raw, 'base'))),
            damage_type=map_damage_type(_pick(raw, 'damage_type', 'damageType')),
            count=max(1, to_int(_pick(raw, 'count'), 1)),
            interval=to_float(_pick(raw, 'interval')) or None,
            aoe_bonus_per_target=to_float(_pick(raw, 'aoe_bonus_per_target', 'aoeBonusPerTarget')) or None,
        )


@dataclass(frozen=True)
class ResistanceProfile:
    label: str
    armor: float
    magic_resist: float


# --- Loaded index bundle ---

@dataclass(frozen=True)
class GameData:
    """Everything the combat track reads. Built once, shared by reference."""

    items: Dict[str, ItemRecord] = field(default_factory=dict)
    spells: Dict[str, SpellDefinition] = field(default_factory=dict)
    resolved_spells: Dict[str, Tuple[DamagePacket, ...]] = field(default_factory=dict)
    resolved_pools: Dict[str, Tuple[SpellPoolEntry, ...]] = field(default_factory=dict)

    @classmethod
    def from_dicts(cls, items=None, spells=None, resolved_spells=None, resolved_pools=None):
        resolved = {}
        for spell_id, entry in (resolved_spells or {}).items():
            components = entry.get('components', []) if isinstance(entry, dict) else entry
            resolved[str(spell_id)] = tuple(DamagePacket.from_dict(p) for p in _as_list(components))
        return cls(
            items={str(k): ItemRecord.from_dict(str(k), v or {}) for k, v in (items or {}).items()},
            spells={str(k): SpellDefinition.from_dict(str(k), v) for k, v in (spells or {}).items()},
            resolved_spells=resolved,
            resolved_pools={str(k): tuple(CraftSpell.from_dict(e) for e in _as_list(v))
                            for k, v in (resolved_pools or {}).items()},
        )
