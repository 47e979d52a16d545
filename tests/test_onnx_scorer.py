"""Tests for the ONNX Runtime scorer with a model built on the fly."""

import json

import numpy as np
import pytest

from extension_recommender.core.errors import ArtifactLoadError, InferenceError
from extension_recommender.core.scorer import OnnxScorer
from extension_recommender.core.session import SessionOperations
from extension_recommender.core.tensor_builder import TensorBuilder

from conftest import CSHARP, DOCKER, ENCODING, PYTHON, LinearScorer, build_onnx_model


def test_model_io_is_detected(model_dir):
    scorer = OnnxScorer(model_dir / "model.onnx")

    assert scorer.input_name == "inputs"
    assert scorer.input_dtype == np.uint8
    assert scorer.output_name == "output_1"
    assert scorer.name == "model.onnx"
    assert scorer.input_width == 18


def test_scores_match_reference_model(model_dir, encoding_table, weights):
    scorer = OnnxScorer(model_dir / "model.onnx")
    matrix = TensorBuilder(encoding_table).build({"OpenedFileTypes": frozenset({".py"})})

    scores = scorer.score(matrix)

    assert scores.shape == (4,)
    np.testing.assert_allclose(scores, LinearScorer(weights).score(matrix), rtol=1e-5)


def test_session_from_model_dir(model_dir):
    session = SessionOperations(model_dir=model_dir)

    python = session.run({"opened_file_types": [".py"]})
    dotnet = session.run({"workspace_dependencies": ["workspace.sln"]})
    docker = session.run({"workspace_config_types": ["dockerfile"]}, 0.5)

    assert PYTHON in {r.extension_id for r in python}
    assert CSHARP in {r.extension_id for r in dotnet}
    assert {r.extension_id: r.confidence for r in docker}[DOCKER] > 0.5


def test_missing_output_name_falls_back_to_first_output(tmp_path, weights):
    build_onnx_model(tmp_path / "model.onnx", weights, output_name="probabilities")

    scorer = OnnxScorer(tmp_path / "model.onnx")

    assert scorer.output_name == "probabilities"


def test_explicit_input_name(tmp_path, weights):
    build_onnx_model(tmp_path / "model.onnx", weights, input_name="features")

    assert OnnxScorer(tmp_path / "model.onnx", input_name="features").input_name == "features"
    with pytest.raises(ArtifactLoadError):
        OnnxScorer(tmp_path / "model.onnx", input_name="inputs")


def test_missing_model_file(tmp_path):
    with pytest.raises(ArtifactLoadError, match="not found"):
        OnnxScorer(tmp_path / "model.onnx")


def test_corrupt_model_file(tmp_path):
    path = tmp_path / "model.onnx"
    path.write_bytes(b"definitely not a protobuf")

    with pytest.raises(ArtifactLoadError):
        OnnxScorer(path)


def test_wrong_matrix_width_is_an_inference_error(model_dir):
    scorer = OnnxScorer(model_dir / "model.onnx")

    with pytest.raises(InferenceError):
        scorer.score(np.zeros((4, 3), dtype=np.uint8))


def test_empty_matrix_skips_the_model(model_dir):
    scorer = OnnxScorer(model_dir / "model.onnx")

    assert scorer.score(np.zeros((0, 18), dtype=np.uint8)).shape == (0,)


def test_model_without_matching_encoding_fails_at_load(tmp_path, weights):
    # Encoding with one extension fewer than the model was built for
    encoding = json.loads(json.dumps(ENCODING))
    del encoding["Extension"][CSHARP]
    encoding["Extension"] = {k: i for i, k in enumerate(encoding["Extension"])}
    offset = len(encoding["Extension"])
    for name, tokens in encoding.items():
        if name != "Extension":
            for token in tokens:
                tokens[token] = offset
                offset += 1
    (tmp_path / "feature_encoding.json").write_text(json.dumps(encoding))
    build_onnx_model(tmp_path / "model.onnx", weights)

    session = SessionOperations(model_dir=tmp_path)

    with pytest.raises(ArtifactLoadError, match="expects 18 features"):
        session.run({})
    assert not session.is_loaded
