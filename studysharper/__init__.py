"""StudySharper web edge: proxy flashcards, client HTTP et workflows d'édition."""

__version__ = "0.1.0"
