"""Signature manifest serialization and deserialization.

This module converts signature manifests to and from JSON. Hand-written
manifests may give parameter and return types as Swift type text
(``"CGFloat?"``); such strings are parsed into the type model on load.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from modsynth.core.models import SignatureManifest
from modsynth.core.type_syntax import TypeSyntaxError, parse_type


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def serialize(manifest: SignatureManifest) -> str:
    """Serialize a manifest to a JSON string.

    Args:
        manifest: The manifest to serialize.

    Returns:
        JSON string representation of the manifest.

    Raises:
        SerializationError: If serialization fails.
    """
    try:
        data = manifest.model_dump(mode="json")
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(
            message="Failed to serialize manifest",
            details=str(e),
        ) from e


def deserialize(json_str: str) -> SignatureManifest:
    """Deserialize a JSON string to a manifest.

    Args:
        json_str: JSON string representation of a manifest.

    Returns:
        The deserialized manifest.

    Raises:
        SerializationError: If deserialization fails with detailed error info.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    return deserialize_from_dict(data)


def serialize_to_dict(manifest: SignatureManifest) -> dict[str, Any]:
    """Serialize a manifest to a dictionary.

    Args:
        manifest: The manifest to serialize.

    Returns:
        Dictionary representation of the manifest.
    """
    return manifest.model_dump(mode="json")


def deserialize_from_dict(data: dict[str, Any]) -> SignatureManifest:
    """Deserialize a dictionary to a manifest.

    Args:
        data: Dictionary representation of a manifest.

    Returns:
        The deserialized manifest.

    Raises:
        SerializationError: If deserialization fails.
    """
    if not isinstance(data, dict):
        raise SerializationError(
            message="Manifest validation failed",
            details=f"expected an object, got {type(data).__name__}",
        )
    try:
        expanded = _expand_type_text(data)
        return SignatureManifest.model_validate(expanded)
    except TypeSyntaxError as e:
        raise SerializationError(
            message="Invalid type text in manifest",
            details=f"{e.message} ({e.details})" if e.details else e.message,
        ) from e
    except ValidationError as e:
        errors = e.errors()
        error_details = []
        for err in errors:
            loc = ".".join(str(x) for x in err["loc"])
            error_details.append(f"{loc}: {err['msg']}")
        raise SerializationError(
            message="Manifest validation failed",
            details="; ".join(error_details),
        ) from e


def _expand_type_text(data: dict[str, Any]) -> dict[str, Any]:
    """Replace string-valued types with parsed type trees."""
    signatures = data.get("signatures")
    if not isinstance(signatures, list):
        return data

    expanded = []
    for signature in signatures:
        if not isinstance(signature, dict):
            expanded.append(signature)
            continue
        generics = [g.get("name") for g in signature.get("generic_parameters", []) if isinstance(g, dict)]
        generics = [g for g in generics if isinstance(g, str)]
        signature = dict(signature)
        if isinstance(signature.get("return_type"), str):
            signature["return_type"] = parse_type(signature["return_type"], generics).model_dump(mode="json")
        parameters = []
        for parameter in signature.get("parameters", []):
            if isinstance(parameter, dict) and isinstance(parameter.get("type"), str):
                parameter = {**parameter, "type": parse_type(parameter["type"], generics).model_dump(mode="json")}
            parameters.append(parameter)
        if "parameters" in signature:
            signature["parameters"] = parameters
        expanded.append(signature)
    return {**data, "signatures": expanded}
