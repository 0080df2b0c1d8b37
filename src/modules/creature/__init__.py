"""
Creature Module
===============

Player-facing creature actions and the static rarity table.

- service.CreatureService: Feed, hydrate, heal, hibernation and dress operations
- constants.RarityTable: Per-rarity level cap, power range and stat increase range

Submodules are imported directly; progression rules depend on the rarity
table while the actions depend on progression.
"""
