"""Signature validation module.

This module checks extracted signatures for inconsistencies that would
produce broken generated code: references to undeclared generic parameters,
repeated parameter names or labels, and defaults without source text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from modsynth.core.models import GenericRef, OperationSignature
from modsynth.core.type_syntax import iter_type_nodes


class ValidationErrorType(str, Enum):
    """Types of validation errors."""

    UNDECLARED_GENERIC = "undeclared_generic"
    DUPLICATE_PARAMETER_NAME = "duplicate_parameter_name"
    DUPLICATE_LABEL = "duplicate_label"
    DANGLING_DEFAULT = "dangling_default"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    signature_name: str
    parameter_name: str
    message: str


@dataclass
class ValidationResult:
    """Result of signature validation."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    def add_error(
        self,
        error_type: ValidationErrorType,
        signature_name: str,
        parameter_name: str,
        message: str,
    ) -> None:
        """Add a validation error."""
        self.errors.append(
            ValidationError(
                error_type=error_type,
                signature_name=signature_name,
                parameter_name=parameter_name,
                message=message,
            )
        )
        self.is_valid = False


def validate_signature(signature: OperationSignature) -> ValidationResult:
    """Validate one signature.

    Args:
        signature: The signature to validate.

    Returns:
        ValidationResult containing validation status and any errors found.
    """
    result = ValidationResult(is_valid=True)
    declared = {g.name for g in signature.generic_parameters}
    seen_names: set[str] = set()
    seen_labels: set[str] = set()

    for parameter in signature.parameters:
        for node in iter_type_nodes(parameter.type):
            if isinstance(node, GenericRef) and node.name not in declared:
                result.add_error(
                    error_type=ValidationErrorType.UNDECLARED_GENERIC,
                    signature_name=signature.name,
                    parameter_name=parameter.name,
                    message=f"'{signature.name}' parameter '{parameter.name}' references "
                    f"undeclared generic '{node.name}'",
                )

        if parameter.name in seen_names:
            result.add_error(
                error_type=ValidationErrorType.DUPLICATE_PARAMETER_NAME,
                signature_name=signature.name,
                parameter_name=parameter.name,
                message=f"'{signature.name}' declares parameter '{parameter.name}' more than once",
            )
        seen_names.add(parameter.name)

        if parameter.label is not None:
            if parameter.label in seen_labels:
                result.add_error(
                    error_type=ValidationErrorType.DUPLICATE_LABEL,
                    signature_name=signature.name,
                    parameter_name=parameter.name,
                    message=f"'{signature.name}' uses label '{parameter.label}' more than once",
                )
            seen_labels.add(parameter.label)

        if parameter.has_default and parameter.default_value is None and not parameter.is_optional:
            result.add_error(
                error_type=ValidationErrorType.DANGLING_DEFAULT,
                signature_name=signature.name,
                parameter_name=parameter.name,
                message=f"'{signature.name}' parameter '{parameter.name}' has a default "
                f"but no default value text",
            )

    return result


def validate_signatures(signatures: list[OperationSignature]) -> ValidationResult:
    """Validate several signatures, merging their errors.

    Args:
        signatures: Signatures to validate.

    Returns:
        Combined ValidationResult.
    """
    combined = ValidationResult(is_valid=True)
    for signature in signatures:
        result = validate_signature(signature)
        if not result.is_valid:
            combined.errors.extend(result.errors)
            combined.is_valid = False
    return combined
