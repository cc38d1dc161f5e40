"""Generation service for coordinating a whole run.

This module provides the GenerationService, which groups extracted
signatures by operation name, generates one merged variant type per group
on a thread pool, and collects per-group results so that one failing group
never stops the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from modsynth.core.config import ModsynthConfig, get_config
from modsynth.core.models import (
    GeneratedCode,
    GroupSummary,
    OperationSignature,
    OverloadGroup,
    StyleCase,
    group_signatures,
)
from modsynth.core.validator import validate_signatures
from modsynth.generator.call_site import LiteralTypeOracle, TypeOracle, parse_call
from modsynth.generator.enum_generator import GenerationError, MergedTypeGenerator
from modsynth.generator.erasure import ErasureTable
from modsynth.generator.guards import Environment
from modsynth.generator.resolution import Resolution

logger = logging.getLogger(__name__)


@dataclass
class GroupResult:
    """Result of generating one overload group."""

    operation_name: str
    type_name: str
    signature_count: int = 0
    code: GeneratedCode | None = None
    summary: GroupSummary | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the group was generated."""
        return self.error is None and self.code is not None


@dataclass
class GenerationRun:
    """Result of a generation run."""

    groups: list[GroupResult] = field(default_factory=list)
    support: GeneratedCode | None = None
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [f"{g.operation_name}: {g.error}" for g in self.groups if g.error is not None]

    @property
    def success(self) -> bool:
        """Check if every group was generated."""
        return len(self.errors) == 0

    @property
    def generated(self) -> list[GeneratedCode]:
        """Support file first, then successful groups in name order."""
        files = [self.support] if self.support is not None else []
        files.extend(g.code for g in self.groups if g.code is not None)
        return files

    @property
    def summaries(self) -> list[GroupSummary]:
        return [g.summary for g in self.groups if g.summary is not None]


@dataclass
class ResolveResult:
    """Outcome of dry-running one call expression."""

    operation_name: str
    type_name: str
    resolution: Resolution
    forwarded: str

    @property
    def variant_name(self) -> str:
        return self.resolution.variant.name


class GenerationService:
    """Service for generating merged variant types from signatures."""

    def __init__(self, config: ModsynthConfig | None = None) -> None:
        """Initialize the service.

        Args:
            config: Settings; the global configuration when omitted.
        """
        self._config = config or get_config()

    def generator(self, styles: dict[str, set[StyleCase]] | None = None) -> MergedTypeGenerator:
        """Build a generator whose custom erasers are limited to discovered styles.

        Args:
            styles: Style enumeration result, or None to keep every custom eraser.
        """
        table = ErasureTable(marker=self._config.erased_name_prefix)
        if styles is not None:
            table = table.with_discovered_styles(styles)
        return MergedTypeGenerator(self._config, table)

    def groups(
        self, signatures: list[OperationSignature], include_underscored: bool | None = None
    ) -> tuple[list[OverloadGroup], list[str]]:
        """Group signatures and drop underscore-prefixed names unless included.

        Returns:
            Tuple of (kept groups, skipped operation names).
        """
        include = not self._config.skip_underscore_prefixed if include_underscored is None else include_underscored
        kept, skipped = [], []
        for group in group_signatures(signatures):
            if group.name.startswith("_") and not include:
                skipped.append(group.name)
            else:
                kept.append(group)
        return kept, skipped

    def run(
        self,
        signatures: list[OperationSignature],
        styles: dict[str, set[StyleCase]] | None = None,
        include_underscored: bool | None = None,
    ) -> GenerationRun:
        """Generate every group plus the shared support file.

        Args:
            signatures: Extracted signatures in declaration order.
            styles: Discovered style constants, if any were enumerated.
            include_underscored: Override the configured underscore filter.

        Returns:
            GenerationRun with one GroupResult per group, sorted by name.
        """
        run = GenerationRun()
        groups, run.skipped = self.groups(signatures, include_underscored)
        if run.skipped:
            logger.info(f"Skipping {len(run.skipped)} underscore-prefixed operations")

        validation = validate_signatures([s for g in groups for s in g.signatures])
        for error in validation.errors:
            logger.warning(error.message)
            run.warnings.append(error.message)

        generator = self.generator(styles)
        run.support = generator.generate_support_file()

        with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
            results = list(pool.map(lambda g: self._generate_group(generator, g), groups))

        run.groups = sorted(results, key=lambda r: r.operation_name)
        logger.info(
            f"Generated {sum(1 for g in run.groups if g.success)} of {len(run.groups)} groups"
        )
        return run

    def _generate_group(self, generator: MergedTypeGenerator, group: OverloadGroup) -> GroupResult:
        type_name = generator.type_name_for(group.name)
        result = GroupResult(
            operation_name=group.name,
            type_name=type_name,
            signature_count=len(group.signatures),
        )
        try:
            result.code = generator.generate(type_name, group.signatures)
            result.summary = generator.summarize(type_name, group.signatures)
        except GenerationError as e:
            result.error = f"{e.message} ({e.details})" if e.details else e.message
            logger.warning(f"Failed to generate {type_name}: {result.error}")
        except Exception as e:
            result.error = f"Unexpected error: {e}"
            logger.exception(f"Unexpected error generating {type_name}")
        return result

    def resolve(
        self,
        signatures: list[OperationSignature],
        call: str,
        environment: Environment | None = None,
        oracle: TypeOracle | None = None,
        styles: dict[str, set[StyleCase]] | None = None,
    ) -> ResolveResult:
        """Resolve a call expression such as ``padding(.top, 8)`` and forward it.

        Raises:
            CallSyntaxError: If the call text is malformed.
            GenerationError: If no group has the call's operation name, or it
                cannot be generated.
            ResolutionError: If the call matches no variant.
        """
        operation, call_site = parse_call(call)
        members = [s for s in signatures if s.name == operation]
        if not members:
            raise GenerationError(f"No signatures named '{operation}'")

        generator = self.generator(styles)
        type_name = generator.type_name_for(operation)
        merged = generator.merge(type_name, members)
        plan = generator.resolution.plan(merged)
        oracle = oracle or LiteralTypeOracle(opaque_reference_type=self._config.opaque_reference_type)
        resolution = plan.resolve(call_site, oracle=oracle, environment=environment)
        forwarded = generator.dispatch.forward(resolution, environment)
        return ResolveResult(
            operation_name=operation,
            type_name=type_name,
            resolution=resolution,
            forwarded=forwarded,
        )
