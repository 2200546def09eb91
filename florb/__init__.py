"""Florb Forge - procedural collectible generator and world map economy"""

__version__ = "1.0.0"
