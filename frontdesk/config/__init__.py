"""
Configuration package for the front-desk service.
"""

from frontdesk.config.settings import Settings, get_settings

__all__ = ['Settings', 'get_settings']
