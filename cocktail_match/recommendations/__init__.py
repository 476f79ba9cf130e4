"""
Cocktail recommendation core.

Responsibilities:
- Validate quiz answers into a typed preference vector.
- Score every catalog cocktail, with fuzzy fallbacks when tags miss.
- Rank deterministically and pick a primary recommendation.
- Select diverse alternates and remember what each session has seen.
"""
