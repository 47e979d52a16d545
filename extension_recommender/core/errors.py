# extension_recommender/core/errors.py


class RecommenderError(Exception):
    """Base class for all recommender failures"""


class ArtifactLoadError(RecommenderError):
    """The model or encoding artifact is missing, unreadable or malformed"""


class InferenceError(RecommenderError):
    """The scoring model failed or returned output of the wrong shape"""
