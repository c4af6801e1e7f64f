"""LexiMind: an AI-assisted vocabulary explorer and wordbook."""

__version__ = "0.1.0"
