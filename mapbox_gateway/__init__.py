"""Mapbox gateway: an async facade over the Mapbox routing, terrain,
geocoding and matrix APIs."""

__version__ = "0.1.0"
