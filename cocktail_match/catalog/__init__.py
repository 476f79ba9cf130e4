"""
Cocktail catalog package.

Responsibilities:
- Read the raw cocktail library from disk.
- Normalise rows into the canonical raw schema.
- Derive flavor, style, mood and occasion tags once, at load time.
- Hold the typed catalog snapshot in memory for the recommendation core.
"""
