# extension_recommender/core/session.py
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .encoding import DEFAULT_ENTITY_CATEGORY, EncodingTable
from .errors import ArtifactLoadError
from .ranker import DEFAULT_CONFIDENCE_PASS, SessionResult, rank_results
from .scorer import DEFAULT_OUTPUT_NAME, OnnxScorer, Scorer
from .signals import SessionInputs, normalize_inputs
from .tensor_builder import TensorBuilder
from ..utils.logging import get_logger

logger = get_logger('core.session')

MODEL_FILE = "model.onnx"
ENCODING_FILE = "feature_encoding.json"


class SessionOperations:
    """
    Recommends extensions for a set of environment signals.

    Artifacts are loaded lazily on the first ``run`` (or explicitly with
    ``load_session``) and then shared read-only by every call. Calls may
    run concurrently; each one checks out its own scratch buffers.

    Args:
        model_dir: Directory holding the model and encoding files
        model_file: ONNX model file name inside model_dir
        encoding_file: Feature encoding JSON file name inside model_dir
        entity_category: Encoding category holding candidate extension ids
        input_name: Model input name (None: model's first input)
        output_name: Model output holding the scores
        providers: ONNX Runtime execution providers
        intra_op_num_threads: ONNX Runtime intra-op threads
        pool_size: Number of idle scratch buffer pairs to keep
        scorer: Pre-built scorer, skips loading the ONNX model
        table: Pre-built encoding table, skips reading the encoding file
    """

    def __init__(
        self,
        model_dir: Optional[Union[str, Path]] = None,
        model_file: str = MODEL_FILE,
        encoding_file: str = ENCODING_FILE,
        entity_category: str = DEFAULT_ENTITY_CATEGORY,
        input_name: Optional[str] = None,
        output_name: Optional[str] = DEFAULT_OUTPUT_NAME,
        providers: Optional[Sequence[str]] = None,
        intra_op_num_threads: int = 1,
        pool_size: int = 4,
        scorer: Optional[Scorer] = None,
        table: Optional[EncodingTable] = None
    ):
        self.model_dir = Path(model_dir).expanduser() if model_dir is not None else None
        self.model_file = model_file
        self.encoding_file = encoding_file
        self.entity_category = entity_category
        self.input_name = input_name
        self.output_name = output_name
        self.providers = providers
        self.intra_op_num_threads = intra_op_num_threads
        self.pool_size = pool_size

        self._given_scorer = scorer
        self._given_table = table
        self._scorer: Optional[Scorer] = scorer
        self._table: Optional[EncodingTable] = table
        self._builder: Optional[TensorBuilder] = None
        self._load_lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> 'SessionOperations':
        """Create session operations from a Config instance"""
        model = config.get_section('model')
        inference = config.get_section('inference')
        return cls(
            model_dir=config.model_dir,
            model_file=model['model_file'],
            encoding_file=model['encoding_file'],
            entity_category=model['entity_category'],
            input_name=model.get('input_name'),
            output_name=model.get('output_name'),
            providers=model.get('execution_providers'),
            intra_op_num_threads=model.get('intra_op_num_threads', 1),
            pool_size=inference.get('scratch_pool_size', 4),
        )

    @property
    def model_path(self) -> Optional[Path]:
        return self.model_dir / self.model_file if self.model_dir else None

    @property
    def encoding_path(self) -> Optional[Path]:
        return self.model_dir / self.encoding_file if self.model_dir else None

    @property
    def is_loaded(self) -> bool:
        return self._builder is not None

    @property
    def table(self) -> EncodingTable:
        """Loaded encoding table"""
        self.load_session()
        assert self._table is not None
        return self._table

    def load_session(self):
        """
        Load the encoding table and model once

        Raises:
            ArtifactLoadError: If an artifact is missing or malformed
        """
        if self._builder is not None:
            return

        with self._load_lock:
            if self._builder is not None:
                return

            if (self._table is None or self._scorer is None) and self.model_dir is None:
                raise ArtifactLoadError("No model directory configured")

            if self._table is None:
                self._table = EncodingTable.load(
                    self.encoding_path, entity_category=self.entity_category
                )

            if self._scorer is None:
                self._scorer = OnnxScorer(
                    self.model_path,
                    input_name=self.input_name,
                    output_name=self.output_name,
                    providers=self.providers,
                    intra_op_num_threads=self.intra_op_num_threads
                )

            width = self._scorer.input_width
            if width is not None and width != self._table.features_size:
                logger.error(
                    f"Model expects {width} features, encoding has {self._table.features_size}"
                )
                raise ArtifactLoadError(
                    f"Model '{self._scorer.name}' expects {width} features but the "
                    f"encoding defines {self._table.features_size}"
                )

            self._builder = TensorBuilder(self._table, pool_size=self.pool_size)
            logger.info(f"✓ Session ready: {self._table!r}, scorer '{self._scorer.name}'")

    def unload(self):
        """Drop loaded artifacts; the next run loads them again"""
        with self._load_lock:
            self._builder = None
            self._scorer = self._given_scorer
            self._table = self._given_table

    def run(
        self,
        inputs: Union[SessionInputs, Dict[str, Any], None] = None,
        confidence_pass: float = DEFAULT_CONFIDENCE_PASS
    ) -> List[SessionResult]:
        """
        Recommend extensions for the given signals

        Args:
            inputs: SessionInputs or a dict of its fields
            confidence_pass: Minimum confidence for a result to be returned

        Returns:
            Results sorted by descending confidence

        Raises:
            ArtifactLoadError: If the artifacts cannot be loaded
            InferenceError: If the model invocation fails
        """
        if inputs is None:
            inputs = SessionInputs()
        elif not isinstance(inputs, SessionInputs):
            inputs = SessionInputs.model_validate(inputs)

        self.load_session()
        table = self._table
        builder = self._builder
        scorer = self._scorer

        signals = normalize_inputs(inputs)
        logger.debug(f"Signals: {dict((k, sorted(v)) for k, v in signals.items())}")

        if table.entity_size == 0:
            return []

        with builder.assemble(signals) as matrix:
            scores = scorer.score(matrix)

        results = rank_results(
            scores, table.extension_ids, signals, confidence_pass=confidence_pass
        )
        logger.debug(f"{len(results)} result(s) above confidence {confidence_pass}")
        return results
