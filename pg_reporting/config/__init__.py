"""
Configuration package for the PG reporting engine.

Holds environment settings and the logging configuration.
"""

from pg_reporting.config.settings import settings, get_settings

__all__ = ['settings', 'get_settings']
