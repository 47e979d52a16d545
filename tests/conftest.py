"""Shared fixtures: a small encoding table and models scoring it the same way."""

import json
import logging

import numpy as np
import pytest

from extension_recommender.config.model_config import reset_session_operations
from extension_recommender.config.settings import Config
from extension_recommender.core.encoding import EncodingTable
from extension_recommender.core.scorer import Scorer
from extension_recommender.core.session import SessionOperations

PYTHON = "ms-python.python"
DOCKER = "ms-azuretools.vscode-docker"
CSHARP = "ms-dotnettools.csharp"
PRETTIER = "esbenp.prettier-vscode"

ENCODING = {
    "Extension": {PYTHON: 0, DOCKER: 1, CSHARP: 2, PRETTIER: 3},
    "PreviouslyInstalled": {PYTHON: 4, DOCKER: 5, CSHARP: 6, PRETTIER: 7},
    "OpenedFileTypes": {".py": 8, ".cs": 9, ".js": 10},
    "ActivatedExts": {PYTHON: 11},
    "WorkspaceDependencies": {"workspace.sln": 12, "prettier": 13},
    "WorkspaceFileTypes": {"py": 14, "cs": 15},
    "WorkspaceConfigTypes": {"dockerfile": 16, "package.json": 17},
}

BIAS = -3.0

# (category, token, extension, weight)
SIGNAL_WEIGHTS = [
    ("OpenedFileTypes", ".py", PYTHON, 5.0),
    ("WorkspaceFileTypes", "py", PYTHON, 4.0),
    ("ActivatedExts", PYTHON, PYTHON, 2.0),
    # Weak on its own: sigmoid(0.2) ~ 0.55
    ("WorkspaceConfigTypes", "dockerfile", DOCKER, 3.2),
    ("WorkspaceDependencies", "workspace.sln", CSHARP, 5.0),
    ("OpenedFileTypes", ".cs", CSHARP, 4.0),
    ("WorkspaceFileTypes", "cs", CSHARP, 3.0),
    ("OpenedFileTypes", ".js", PRETTIER, 3.6),
    ("WorkspaceDependencies", "prettier", PRETTIER, 4.0),
    ("WorkspaceConfigTypes", "package.json", PRETTIER, 2.0),
]


def make_weights(encoding=ENCODING):
    """
    (features x entities) weights. Marker column i carries entity i's bias,
    signal columns carry the signal's contribution to each entity.
    """
    extensions = encoding["Extension"]
    features_size = sum(len(tokens) for tokens in encoding.values())
    weights = np.zeros((features_size, len(extensions)), dtype=np.float32)
    for index in extensions.values():
        weights[index, index] = BIAS
    for category, token, extension, weight in SIGNAL_WEIGHTS:
        weights[encoding[category][token], extensions[extension]] = weight
    return weights


class LinearScorer(Scorer):
    """sigmoid(sum of the weights of a row's active columns for its own entity)"""

    def __init__(self, weights):
        self.weights = weights
        self.entity_size = weights.shape[1]
        self.calls = 0

    @property
    def name(self) -> str:
        return "linear"

    def score(self, matrix):
        self.calls += 1
        x = matrix.astype(np.float32)
        logits = ((x @ self.weights) * x[:, :self.entity_size]).sum(axis=1)
        return (1.0 / (1.0 + np.exp(-logits))).astype(np.float32)


def build_onnx_model(path, weights, input_name="inputs", output_name="output_1"):
    """Write an ONNX model computing the same function as LinearScorer"""
    import onnx
    from onnx import TensorProto, helper, numpy_helper

    features_size, entity_size = weights.shape
    initializers = [
        numpy_helper.from_array(weights.astype(np.float32), name="W"),
        numpy_helper.from_array(np.array([0], dtype=np.int64), name="starts"),
        numpy_helper.from_array(np.array([entity_size], dtype=np.int64), name="ends"),
        numpy_helper.from_array(np.array([1], dtype=np.int64), name="axes"),
    ]
    nodes = [
        helper.make_node("Cast", [input_name], ["x"], to=TensorProto.FLOAT),
        helper.make_node("MatMul", ["x", "W"], ["a"]),
        helper.make_node("Slice", ["x", "starts", "ends", "axes"], ["markers"]),
        helper.make_node("Mul", ["a", "markers"], ["p"]),
        helper.make_node("ReduceSum", ["p", "axes"], ["logits"], keepdims=1),
        helper.make_node("Sigmoid", ["logits"], [output_name]),
    ]
    graph = helper.make_graph(
        nodes,
        "extension_scorer",
        [helper.make_tensor_value_info(input_name, TensorProto.UINT8, ["N", features_size])],
        [helper.make_tensor_value_info(output_name, TensorProto.FLOAT, ["N", 1])],
        initializer=initializers,
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
    model.ir_version = 7
    onnx.checker.check_model(model)
    onnx.save(model, str(path))


@pytest.fixture
def encoding_data():
    return json.loads(json.dumps(ENCODING))


@pytest.fixture
def encoding_table(encoding_data):
    return EncodingTable.from_dict(encoding_data)


@pytest.fixture
def weights():
    return make_weights()


@pytest.fixture
def scorer(weights):
    return LinearScorer(weights)


@pytest.fixture
def session(encoding_table, scorer):
    return SessionOperations(table=encoding_table, scorer=scorer)


@pytest.fixture
def model_dir(tmp_path, weights):
    """Directory holding model.onnx and feature_encoding.json"""
    directory = tmp_path / "artifacts"
    directory.mkdir()
    (directory / "feature_encoding.json").write_text(json.dumps(ENCODING))
    build_onnx_model(directory / "model.onnx", weights)
    return directory


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Isolated configuration directory used by Config() and the singleton"""
    home = tmp_path / "home"
    monkeypatch.setenv(Config.HOME_ENV_VAR, str(home))
    monkeypatch.delenv("EXTENSION_RECOMMENDER_DEBUG", raising=False)
    reset_session_operations()
    yield home
    reset_session_operations()

    # The CLI attaches handlers to streams that close with the test
    logger = logging.getLogger("extension_recommender")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
