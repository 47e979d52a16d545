# extension_recommender/core/scorer.py
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

from .errors import ArtifactLoadError, InferenceError
from ..utils.logging import get_logger

logger = get_logger('core.scorer')

DEFAULT_OUTPUT_NAME = "output_1"

# ONNX tensor element types we know how to feed
_ONNX_INPUT_DTYPES = {
    'tensor(uint8)': np.uint8,
    'tensor(int32)': np.int32,
    'tensor(int64)': np.int64,
    'tensor(float)': np.float32,
    'tensor(double)': np.float64,
}


class Scorer(ABC):
    """
    Base interface for scoring models.

    A scorer takes the assembled (entities x features) matrix and returns
    one confidence per row, index-aligned with the matrix rows.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Scorer identifier"""
        pass

    @property
    def input_width(self) -> Optional[int]:
        """Feature width the model declares, or None when it is dynamic"""
        return None

    @abstractmethod
    def score(self, matrix: np.ndarray) -> np.ndarray:
        """
        Score every row of the matrix.
        Returns: (rows,) float32 numpy array
        """
        pass


class OnnxScorer(Scorer):
    """
    Scores candidate rows with a frozen ONNX model through ONNX Runtime.

    Args:
        model_path: Path to model.onnx
        input_name: Model input to feed; defaults to the model's first input
        output_name: Output holding one score per row; falls back to the
            model's first output when the model has no output by that name
        providers: ONNX Runtime execution providers
        intra_op_num_threads: Threads used inside a single operator
    """

    def __init__(
        self,
        model_path: Union[str, Path],
        input_name: Optional[str] = None,
        output_name: Optional[str] = DEFAULT_OUTPUT_NAME,
        providers: Optional[Sequence[str]] = None,
        intra_op_num_threads: int = 1
    ):
        import onnxruntime as ort

        self.model_path = Path(model_path)
        logger.info(f"Initializing ONNX session for {self.model_path}")
        logger.debug(f"onnxruntime version: {ort.__version__}")

        if not self.model_path.is_file():
            logger.error(f"Model file not found: {self.model_path}")
            raise ArtifactLoadError(f"Model file not found: {self.model_path}")

        sess_opt = ort.SessionOptions()
        sess_opt.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        sess_opt.intra_op_num_threads = intra_op_num_threads
        sess_opt.inter_op_num_threads = 1

        try:
            self.session = ort.InferenceSession(
                str(self.model_path),
                sess_opt,
                providers=list(providers or ['CPUExecutionProvider'])
            )
        except Exception as e:
            logger.error(f"Failed to load model: {type(e).__name__}: {e}", exc_info=True)
            raise ArtifactLoadError(f"Cannot load model {self.model_path}: {e}") from e

        inputs = self.session.get_inputs()
        if input_name is None:
            model_input = inputs[0]
        else:
            matching = [i for i in inputs if i.name == input_name]
            if not matching:
                raise ArtifactLoadError(
                    f"Model has no input '{input_name}' (inputs: {[i.name for i in inputs]})"
                )
            model_input = matching[0]
        self.input_name = model_input.name
        self.input_dtype = _ONNX_INPUT_DTYPES.get(model_input.type, np.float32)
        shape = model_input.shape or []
        self._input_width = shape[1] if len(shape) == 2 and isinstance(shape[1], int) else None

        output_names: List[str] = [o.name for o in self.session.get_outputs()]
        if output_name in output_names:
            self.output_name = output_name
        else:
            self.output_name = output_names[0]
            if output_name is not None:
                logger.warning(
                    f"Model has no output '{output_name}', using '{self.output_name}'"
                )

        logger.info(
            f"✓ ONNX model loaded (input='{self.input_name}' {model_input.type}, "
            f"output='{self.output_name}')"
        )

    @property
    def name(self) -> str:
        return self.model_path.name

    @property
    def input_width(self) -> Optional[int]:
        return self._input_width

    def score(self, matrix: np.ndarray) -> np.ndarray:
        rows = matrix.shape[0]
        if rows == 0:
            return np.zeros(0, dtype=np.float32)

        feed = matrix if matrix.dtype == self.input_dtype else matrix.astype(self.input_dtype)

        try:
            outputs = self.session.run([self.output_name], {self.input_name: feed})
        except Exception as e:
            logger.error(f"Model invocation failed: {type(e).__name__}: {e}", exc_info=True)
            raise InferenceError(f"Model invocation failed: {e}") from e

        scores = np.asarray(outputs[0], dtype=np.float32).reshape(-1)
        if scores.shape[0] != rows:
            raise InferenceError(
                f"Model returned {scores.shape[0]} scores for {rows} candidate rows"
            )
        return scores
