"""Composition validator that orchestrates the enum consistency checks.

This module implements the CompositionValidator class: it groups the
fragments of one composition run by type name, evaluates every group against
the configured rules, and accumulates faults and warnings into a single
CompositionResult. A fault in one group never stops the remaining groups
from being checked.
"""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
import contextvars
from typing import Any
import uuid

from ..config import CompositionConfig
from ..core import (
    CompositionRunLogger,
    ConfigurationError,
    DefinitionGroup,
    MalformedDefinitionError,
    TypeDefinitionFragment,
    bound_context,
    get_logger,
)
from .errors import (
    MALFORMED_DEFINITION,
    CompositionFault,
    CompositionResult,
    CompositionWarning,
)
from .grouping import group_definitions_by_name
from .rules import CompositionRule, MatchingEnumsRule


def describe_malformed(fragment: TypeDefinitionFragment) -> str:
    """Explain why a fragment cannot take part in the consistency checks."""
    if not fragment.service_name:
        return (
            f"Definition of `{fragment.type_name}` has no service name and is "
            "excluded from enum consistency checks"
        )
    return (
        f"[{fragment.service_name}] enum `{fragment.type_name}` has no value list "
        "and is excluded from enum consistency checks"
    )


class CompositionValidator:
    """Runs the enum consistency rules over one composition run.

    Groups are independent of each other, so they may be evaluated in a
    worker pool; results are merged back in group order either way.
    """

    def __init__(
        self,
        config: CompositionConfig | None = None,
        rules: list[CompositionRule] | None = None,
    ):
        """Initialize the validator.

        Args:
            config: Composition configuration (defaults from environment)
            rules: Rules evaluated per group (default: matching enums)
        """
        self.config = config or CompositionConfig()
        self.rules: list[CompositionRule] = (
            rules if rules is not None else [MatchingEnumsRule()]
        )
        self.logger = get_logger(__name__)

    def validate(
        self, fragments: Iterable[TypeDefinitionFragment]
    ) -> CompositionResult:
        """Validate all fragments of a composition run.

        Uses a worker pool when ``config.max_workers`` is greater than one.

        Args:
            fragments: Every type definition collected for the run

        Returns:
            CompositionResult with all faults and warnings

        Raises:
            MalformedDefinitionError: If the malformed policy is ``error`` and
                any fragment is malformed
        """
        return self._run(list(fragments), self.config.max_workers)

    def validate_groups_concurrently(
        self, fragments: Iterable[TypeDefinitionFragment], max_workers: int = 4
    ) -> CompositionResult:
        """Validate with groups evaluated in a thread pool.

        The returned faults are identical, and identically ordered, to those
        from a sequential ``validate``.
        """
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
        return self._run(list(fragments), max_workers)

    def _run(
        self, fragments: list[TypeDefinitionFragment], max_workers: int
    ) -> CompositionResult:
        with bound_context(run_id=str(uuid.uuid4())[:8]):
            with CompositionRunLogger(self.logger, "enum_consistency") as run_logger:
                warnings = self._check_malformed(fragments)

                groups = group_definitions_by_name(fragments)
                run_logger.log_progress(
                    "definitions_grouped",
                    fragment_count=len(fragments),
                    type_count=len(groups),
                    max_workers=max_workers,
                )

                if max_workers > 1 and len(groups) > 1:
                    per_group = self._evaluate_in_pool(
                        list(groups.values()), max_workers
                    )
                else:
                    per_group = [self._evaluate_group(g) for g in groups.values()]

                result = CompositionResult(
                    is_valid=True,
                    errors=[],
                    warnings=[],
                    type_count=len(groups),
                    fragment_count=len(fragments),
                )
                for faults in per_group:
                    result.extend_errors(faults)
                result.extend_warnings(warnings)

                if self.config.strict and result.warnings:
                    result = self._promote_warnings(result)

                self.logger.info(
                    "composition_checked",
                    type_count=result.type_count,
                    error_count=result.error_count,
                    warning_count=result.warning_count,
                    is_valid=result.is_valid,
                )
            return result

    def _evaluate_in_pool(
        self, groups: list[DefinitionGroup], max_workers: int
    ) -> list[list[CompositionFault]]:
        """Evaluate groups in a thread pool, keeping group order.

        Each task runs in a copy of the submitting context so the run's bound
        log context reaches the worker threads.
        """
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(contextvars.copy_context().run, self._evaluate_group, g)
                for g in groups
            ]
            return [future.result() for future in futures]

    def _evaluate_group(self, group: DefinitionGroup) -> list[CompositionFault]:
        """Run every rule against one group."""
        faults: list[CompositionFault] = []
        for rule in self.rules:
            faults.extend(rule.check_group(group))

        self.logger.debug(
            "type_group_checked",
            type_name=group.type_name,
            fragment_count=len(group),
            fault_count=len(faults),
        )
        for fault in faults:
            self.logger.warning(
                "composition_fault",
                code=fault.code,
                type_name=fault.type_name,
                services=list(fault.impacted_services),
            )
        return faults

    def _check_malformed(
        self, fragments: list[TypeDefinitionFragment]
    ) -> list[CompositionWarning]:
        """Apply the malformed-definition policy.

        Returns:
            One warning per malformed fragment under the ``warn`` policy,
            nothing under ``ignore``

        Raises:
            MalformedDefinitionError: Under the ``error`` policy
        """
        policy = self.config.malformed_policy
        if policy == "ignore":
            return []

        malformed = [f for f in fragments if not f.is_well_formed]
        if not malformed:
            return []

        if policy == "error":
            raise MalformedDefinitionError(
                f"{len(malformed)} malformed type definition(s): "
                + "; ".join(describe_malformed(f) for f in malformed),
                malformed,
            )

        return [
            CompositionWarning(
                code=MALFORMED_DEFINITION,
                message=describe_malformed(fragment),
                type_name=fragment.type_name,
                service_name=fragment.service_name,
                source=fragment.source,
            )
            for fragment in malformed
        ]

    @staticmethod
    def _promote_warnings(result: CompositionResult) -> CompositionResult:
        """Turn warnings into faults for strict mode."""
        promoted = [
            CompositionFault(
                code=warning.code,
                type_name=warning.type_name or "",
                message=warning.message,
                impacted_services=(
                    {warning.service_name: (warning.type_name or "",)}
                    if warning.service_name
                    else {}
                ),
            )
            for warning in result.warnings
        ]
        return CompositionResult(
            is_valid=False,
            errors=result.errors + promoted,
            warnings=[],
            type_count=result.type_count,
            fragment_count=result.fragment_count,
        )

    def get_validator_info(self) -> dict[str, Any]:
        """Get information about the validator configuration.

        Returns:
            Dictionary with validator configuration details
        """
        return {
            "rules": [rule.name for rule in self.rules],
            "strict": self.config.strict,
            "malformed_policy": self.config.malformed_policy,
            "max_workers": self.config.max_workers,
        }
