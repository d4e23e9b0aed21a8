"""HeroForge: game account, character and inventory backend."""

__version__ = "0.1.0"
