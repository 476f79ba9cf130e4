"""Cocktail Match: quiz-driven cocktail recommendations."""
