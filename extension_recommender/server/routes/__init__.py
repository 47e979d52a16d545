# extension_recommender/server/routes/__init__.py
"""API route modules"""

from . import recommend, admin

__all__ = ['recommend', 'admin']
