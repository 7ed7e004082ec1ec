"""Nearest spot finder: resolve an origin, search nearby places, rank by distance."""
