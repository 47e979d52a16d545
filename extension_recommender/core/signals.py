# extension_recommender/core/signals.py
import re
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Category -> normalized tokens. Categories without signal are absent.
SignalSet = Dict[str, FrozenSet[str]]

PREVIOUSLY_INSTALLED = "PreviouslyInstalled"
OPENED_FILE_TYPES = "OpenedFileTypes"
ACTIVATED_EXTS = "ActivatedExts"
WORKSPACE_DEPENDENCIES = "WorkspaceDependencies"
WORKSPACE_FILE_TYPES = "WorkspaceFileTypes"
WORKSPACE_CONFIG_TYPES = "WorkspaceConfigTypes"

_LEADING_WORD_CHAR = re.compile(r'^(\w)', re.ASCII)
_LEADING_DOT = re.compile(r'^\.')


class SessionInputs(BaseModel):
    """
    Caller signals about the current environment.

    Every field is optional. Field names are accepted in snake_case or in
    the camelCase used by existing JSON payloads (``openedFileTypes``...).
    """

    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    previously_installed: Optional[List[str]] = Field(None, alias="previouslyInstalled", description="Extensions already installed")
    opened_file_types: Optional[List[str]] = Field(None, alias="openedFileTypes", description="Extensions of files opened in the editor")
    activated_extensions: Optional[List[str]] = Field(None, alias="activatedExtensions", description="Extensions activated in this session")
    workspace_dependencies: Optional[List[str]] = Field(None, alias="workspaceDependencies", description="Dependencies declared by the workspace")
    workspace_file_types: Optional[List[str]] = Field(None, alias="workspaceFileTypes", description="File types present in the workspace")
    workspace_config_types: Optional[List[str]] = Field(None, alias="workspaceConfigTypes", description="Config files present in the workspace")


def _lowercase(token: str) -> str:
    return token.lower()


def _dot_prefixed(token: str) -> str:
    """'py' -> '.py'; tokens starting with a non-word char are kept"""
    return _LEADING_WORD_CHAR.sub(r'.\1', token.lower(), count=1)


def _dot_stripped(token: str) -> str:
    return _LEADING_DOT.sub('', token.lower(), count=1)


# Input field -> (target category, normalization)
NORMALIZATION_RULES: Tuple[Tuple[str, str, Callable[[str], str]], ...] = (
    ('previously_installed', PREVIOUSLY_INSTALLED, _lowercase),
    ('opened_file_types', OPENED_FILE_TYPES, _dot_prefixed),
    ('activated_extensions', ACTIVATED_EXTS, _lowercase),
    ('workspace_dependencies', WORKSPACE_DEPENDENCIES, _lowercase),
    ('workspace_file_types', WORKSPACE_FILE_TYPES, _dot_stripped),
    ('workspace_config_types', WORKSPACE_CONFIG_TYPES, _lowercase),
)


def normalize_inputs(inputs: SessionInputs) -> SignalSet:
    """
    Convert caller inputs into canonical per-category token sets

    Args:
        inputs: Raw caller signals

    Returns:
        SignalSet with one entry per non-empty input field
    """
    signals: SignalSet = {}
    for field_name, category, normalize in NORMALIZATION_RULES:
        values = getattr(inputs, field_name)
        if not values:
            continue
        signals[category] = frozenset(normalize(value) for value in values)
    return signals
