# extension_recommender/__init__.py
"""Extension recommendations from a frozen ONNX model and feature encoding table"""

__version__ = "0.1.0"
