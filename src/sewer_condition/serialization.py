"""Serialization of classification results."""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from .interfaces.classifier import ClassificationResult
from .models.classification import SectionClassification, SplitSectionPair


class ClassificationSerializer:
    """
    Converts classification results to plain dictionaries and JSON.

    Output is deterministic: keys are sorted, so identical results always
    serialize to identical bytes.
    """

    @staticmethod
    def to_dict(result: ClassificationResult) -> dict[str, Any]:
        """
        Convert a result to a JSON-ready dictionary.

        A ``SplitSectionPair`` becomes ``{"split": true, "records": [...]}``
        with the service record first; a single record gets
        ``{"split": false, "records": [record]}``.
        """
        if isinstance(result, SplitSectionPair):
            return {
                "split": True,
                "original_item_number": result.original_item_number,
                "records": [ClassificationSerializer.record_to_dict(r) for r in result.records],
            }
        return {
            "split": False,
            "original_item_number": result.item_number,
            "records": [ClassificationSerializer.record_to_dict(result)],
        }

    @staticmethod
    def record_to_dict(record: SectionClassification) -> dict[str, Any]:
        """Convert one SectionClassification to a dictionary."""
        data = ClassificationSerializer._to_primitive(record)
        data["is_observation_only"] = record.is_observation_only
        return data

    @staticmethod
    def serialize(result: ClassificationResult, indent: int = 2) -> str:
        """
        Serialize a result to a JSON string.

        Args:
            result: Section classification or split pair.
            indent: JSON indentation.

        Returns:
            JSON string with sorted keys.
        """
        return json.dumps(
            ClassificationSerializer.to_dict(result),
            ensure_ascii=False,
            indent=indent,
            sort_keys=True,
        )

    @staticmethod
    def _to_primitive(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if is_dataclass(value) and not isinstance(value, type):
            return {f.name: ClassificationSerializer._to_primitive(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, dict):
            return {str(k): ClassificationSerializer._to_primitive(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [ClassificationSerializer._to_primitive(v) for v in value]
        return value
