"""
Brood game modules.

- progression: rarity table, experience curve, level-ups
- condition: hunger, hydration and health decay
- creature: feed, hydrate, heal, hibernation, dresses
- generation: continuous and batch SPIDER token generation
- breeding: compatibility, cost and offspring
- summon, webtrap: SPIDER sinks and feeder income
- economy: transaction ledger
- game: async command surface and storage
- shared: exceptions, results, formulas, clock and randomness
"""
