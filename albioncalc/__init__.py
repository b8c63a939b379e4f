"""Albion Online combat and progression calculators."""

__version__ = "0.1.0"
