"""Tile catalog and role tables."""
