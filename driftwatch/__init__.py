"""Analyse, record and report configuration drift across services."""

__version__ = "0.1.0"