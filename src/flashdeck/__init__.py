"""
Flashdeck: vocabulary flashcard decks with study sessions and AI-assisted card generation.
"""
__version__ = "1.0.0"
