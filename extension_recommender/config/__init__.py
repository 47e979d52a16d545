# extension_recommender/config/__init__.py
"""Configuration"""

from .settings import Config

__all__ = ['Config']
