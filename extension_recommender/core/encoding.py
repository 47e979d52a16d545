# extension_recommender/core/encoding.py
import json
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Any, Union

from pydantic import BaseModel, Field, StrictInt, ValidationError, model_validator

from .errors import ArtifactLoadError
from ..utils.logging import get_logger

logger = get_logger('core.encoding')

DEFAULT_ENTITY_CATEGORY = "Extension"


class EncodingSchema(BaseModel):
    """
    Validated shape of the feature encoding artifact.

    The artifact is a mapping of category name -> token -> column index.
    One category holds the candidate extensions; its indices are both the
    marker columns and the row indices of the assembled matrix, so they must
    be exactly 0..N-1. Across all categories the indices must cover
    0..featuresSize-1 with no index used twice.
    """

    entity_category: str = Field(DEFAULT_ENTITY_CATEGORY, description="Category holding candidate extension ids")
    categories: Dict[str, Dict[str, StrictInt]] = Field(..., description="Category -> token -> column index")

    @model_validator(mode='after')
    def validate_layout(self):
        # An empty table is a valid, if useless, layout
        if not self.categories:
            return self

        if self.entity_category not in self.categories:
            raise ValueError(
                f"Entity category '{self.entity_category}' missing from encoding "
                f"(found: {sorted(self.categories)})"
            )

        entity_indices = sorted(self.categories[self.entity_category].values())
        if entity_indices != list(range(len(entity_indices))):
            raise ValueError(
                f"Entity category '{self.entity_category}' indices must be 0..{len(entity_indices) - 1}"
            )

        features_size = sum(len(tokens) for tokens in self.categories.values())
        seen: Dict[int, str] = {}
        for name, tokens in self.categories.items():
            for token, index in tokens.items():
                if index < 0 or index >= features_size:
                    raise ValueError(
                        f"Index {index} for {name}/{token} outside feature width {features_size}"
                    )
                if index in seen:
                    raise ValueError(
                        f"Index {index} for {name}/{token} already used by {seen[index]}"
                    )
                seen[index] = f"{name}/{token}"

        return self


class EncodingTable:
    """
    Immutable feature layout shared by every inference call.

    Attributes:
        entity_category: Name of the candidate extension category
        extension_ids: Extension id -> row index (== marker column)
        feature_encodings: Non-entity category -> token -> column index
        features_size: Width of one feature vector
        entity_size: Number of candidate extensions (matrix rows)
    """

    def __init__(self, schema: EncodingSchema):
        self.entity_category = schema.entity_category

        # Entities are kept in index order so iteration matches row order
        entities = schema.categories.get(schema.entity_category, {})
        self.extension_ids: Mapping[str, int] = MappingProxyType(
            dict(sorted(entities.items(), key=lambda item: item[1]))
        )
        self.feature_encodings: Mapping[str, Mapping[str, int]] = MappingProxyType({
            name: MappingProxyType(dict(tokens))
            for name, tokens in schema.categories.items()
            if name != schema.entity_category
        })

        self.entity_size = len(self.extension_ids)
        self.features_size = self.entity_size + sum(
            len(tokens) for tokens in self.feature_encodings.values()
        )

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        entity_category: str = DEFAULT_ENTITY_CATEGORY
    ) -> 'EncodingTable':
        """
        Build a table from an already parsed encoding artifact

        Raises:
            ArtifactLoadError: If the mapping violates the layout rules
        """
        try:
            schema = EncodingSchema(entity_category=entity_category, categories=data)
        except ValidationError as e:
            logger.error(f"Invalid feature encoding: {e}")
            raise ArtifactLoadError(f"Invalid feature encoding: {e}") from e
        return cls(schema)

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        entity_category: str = DEFAULT_ENTITY_CATEGORY
    ) -> 'EncodingTable':
        """
        Load and validate the feature encoding JSON file

        Args:
            path: Path to feature_encoding.json
            entity_category: Category holding candidate extension ids

        Returns:
            EncodingTable

        Raises:
            ArtifactLoadError: If the file is unreadable, not UTF-8 JSON, or malformed
        """
        path = Path(path)
        logger.info(f"Loading feature encoding from {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read feature encoding: {type(e).__name__}: {e}")
            raise ArtifactLoadError(f"Cannot read feature encoding {path}: {e}") from e

        table = cls.from_dict(data, entity_category=entity_category)
        logger.info(
            f"✓ Feature encoding loaded: {table.features_size} features, "
            f"{table.entity_size} candidate extensions"
        )
        return table

    def category_sizes(self) -> Dict[str, int]:
        """Number of tokens per category, entity category included"""
        sizes = {self.entity_category: self.entity_size}
        sizes.update({name: len(tokens) for name, tokens in self.feature_encodings.items()})
        return sizes

    def __repr__(self):
        return (
            f"EncodingTable(features={self.features_size}, "
            f"entities={self.entity_size}, categories={len(self.feature_encodings)})"
        )
