# extension_recommender/cli/__init__.py
"""Command line interface"""
