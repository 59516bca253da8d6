"""ImpactGuard - change impact and risk review for uncommitted code."""

__version__ = "0.1.0"
