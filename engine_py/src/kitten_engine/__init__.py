"""Turn-based card elimination engine (seeded, reactive plays, combos, favors)."""

__version__ = "1.0.0"
