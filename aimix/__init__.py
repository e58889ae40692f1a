"""AIMIX — genre-aware mix parameter engine.

Turns a folder of stems and a genre label into per-track gain and pan.
"""

__version__ = "0.1.0"
