import logging

from albioncalc.core.engine import Engine
from albioncalc.core.spell_pool import ABILITY_SLOTS


def run_report(
        weapon_id="T4_2H_CLAYMORE",
        item_power=1000,
        spells=None,
        include_autos=True,
        targets_hit=1,
        items_path=None,
        spells_path=None,
        tables_path=None,
        log_callback=print,
        status_callback=None,
):
    """Print the damage sheet of one weapon build and return the raw numbers.

    With no ``items_path`` the bundled sample index is used. When ``spells``
    is not given the first selectable spell of each slot is picked.
    """

    def log(msg):
        if log_callback: log_callback(str(msg))

    if status_callback: status_callback("Loading data...", 0.1)
    if items_path:
        engine = Engine.from_files(items_path, spells_path, tables_path=tables_path)
    else:
        engine = Engine.with_sample_data(tables_path)

    log(f">>> Weapon: {weapon_id} @ {item_power} IP")
    for slot in ABILITY_SLOTS:
        options = [e.spell_id for e in engine.slot_options(weapon_id, slot)]
        log(f"  Slot {slot}: {', '.join(options) or '-'}")

    if spells is None:
        spells = []
        for slot in ABILITY_SLOTS:
            options = engine.slot_options(weapon_id, slot)
            spells.append(options[0].spell_id if options else None)
    log(f"  Rotation: {spells} (autos: {include_autos})")

    if status_callback: status_callback("Evaluating spells...", 0.5)

    for spell_id in spells:
        if not spell_id:
            continue
        packets = engine.resolve_damage_packets(spell_id)
        log(f"\n--- {spell_id} ---")
        if not packets:
            log("  (no damage)")
        for packet in packets:
            log(f"  {packet.label:<22} {packet.base:>7.1f} {packet.damage_type:<8} x{packet.count}")

    result = engine.evaluate_rotation(weapon_id, item_power, spells, include_autos, targets_hit=targets_hit)

    log(f"\n{'=' * 40}")
    log(f"{'Profile':<10} | {'Burst':>7} | {'Sustain':>8}")
    log(f"{'-' * 40}")
    for row in result.profiles:
        log(f"{row.label:<10} | {row.burst:>7} | {row.sustain:>8}")
        for spell_id, total in row.spells:
            log(f"    {spell_id:<20}: {total:>6}")
        if include_autos:
            log(f"    {'Auto Attack x2':<20}: {row.auto_attack * 2:>6}")
    log(f"{'=' * 40}\n")

    if status_callback: status_callback("Complete", 1.0)

    return {
        "weapon": weapon_id,
        "item_power": item_power,
        "spells": result.spell_ids,
        "profiles": {row.label: {"burst": row.burst, "sustain": row.sustain} for row in result.profiles},
    }


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run_report()
