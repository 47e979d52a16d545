# extension_recommender/utils/__init__.py
"""Shared utilities"""
