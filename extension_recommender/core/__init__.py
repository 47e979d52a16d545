# extension_recommender/core/__init__.py
"""Encode -> infer -> rank pipeline"""

from .encoding import EncodingTable, EncodingSchema
from .errors import RecommenderError, ArtifactLoadError, InferenceError
from .signals import SessionInputs, SignalSet, normalize_inputs
from .tensor_builder import TensorBuilder, ScratchPool
from .scorer import Scorer, OnnxScorer
from .ranker import SessionResult, rank_results
from .session import SessionOperations

__all__ = [
    'EncodingTable',
    'EncodingSchema',
    'RecommenderError',
    'ArtifactLoadError',
    'InferenceError',
    'SessionInputs',
    'SignalSet',
    'normalize_inputs',
    'TensorBuilder',
    'ScratchPool',
    'Scorer',
    'OnnxScorer',
    'SessionResult',
    'rank_results',
    'SessionOperations',
]
