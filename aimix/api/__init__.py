"""AIMIX HTTP surface."""
