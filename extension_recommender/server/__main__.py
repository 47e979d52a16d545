"""
Module entry point for running the recommendation server.

This allows the server to be started with:
    python -m extension_recommender.server
"""

from .app import main

if __name__ == "__main__":
    main()
