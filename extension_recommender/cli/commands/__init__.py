# extension_recommender/cli/commands/__init__.py
"""CLI command modules"""

from . import recommend, info, model, server

__all__ = ['recommend', 'info', 'model', 'server']
