"""
API Routes package
"""
from . import auth, decks, cards, study

__all__ = ['auth', 'decks', 'cards', 'study']
