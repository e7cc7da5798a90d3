"""Unit tests for the enum consistency rules.

Covers signature computation, signature grouping, the ENUM_MISMATCH
consistency checker, the ENUM_MISMATCH_TYPE kind conflict reporter, and the
rule that routes groups between them.
"""

import pytest

from fedcompose.core import DefinitionGroup, TypeDefinitionFragment
from fedcompose.validation import (
    EnumConsistencyChecker,
    FaultCode,
    KindConflictReporter,
    MatchingEnumsRule,
    build_signature_groups,
    enum_signature,
)


def enum(type_name, service, values):
    return TypeDefinitionFragment.enum(type_name, service, values)


def other(type_name, service):
    return TypeDefinitionFragment.other(type_name, service)


def group_of(*fragments):
    return DefinitionGroup(type_name=fragments[0].type_name, fragments=fragments)


class TestEnumSignature:
    """Test order-independent signature computation."""

    def test_signature_is_sorted_and_comma_joined(self):
        """Test that values are sorted before joining."""
        assert enum_signature(["RED", "BLUE", "GREEN"]) == "BLUE,GREEN,RED"

    def test_signature_ignores_declaration_order(self):
        """Test that [A, B] and [B, A] share a signature."""
        assert enum_signature(["A", "B"]) == enum_signature(["B", "A"])

    def test_empty_value_set(self):
        """Test signature of an enum with no values."""
        assert enum_signature([]) == ""


class TestBuildSignatureGroups:
    """Test partitioning of fragments by signature."""

    def test_groups_preserve_first_seen_order(self):
        """Test that groups are emitted in order of first occurrence."""
        groups = build_signature_groups(
            [
                enum("Color", "C", ["RED", "GREEN"]),
                enum("Color", "A", ["RED", "BLUE"]),
                enum("Color", "B", ["BLUE", "RED"]),
            ]
        )

        assert [g.services for g in groups] == [("C",), ("A", "B")]
        assert groups[1].values == frozenset({"RED", "BLUE"})

    def test_skips_fragments_without_service_or_values(self):
        """Test that malformed fragments are left out silently."""
        groups = build_signature_groups(
            [
                enum("Color", None, ["RED"]),
                enum("Color", "A", None),
                enum("Color", "B", ["RED", "BLUE"]),
            ]
        )

        assert len(groups) == 1
        assert groups[0].services == ("B",)


class TestEnumConsistencyChecker:
    """Test the ENUM_MISMATCH check for all-enum groups."""

    def test_identical_values_produce_no_fault(self):
        """Test that N reordered but identical enums are consistent."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Color", "A", ["RED", "BLUE", "GREEN"]),
            enum("Color", "B", ["GREEN", "RED", "BLUE"]),
            enum("Color", "C", ["BLUE", "GREEN", "RED"]),
        )

        assert checker.check(group) is None

    def test_single_definition_is_consistent(self):
        """Test that a type defined once never mismatches."""
        checker = EnumConsistencyChecker()

        assert checker.check(group_of(enum("Color", "A", ["RED"]))) is None

    def test_value_mismatch_reports_two_groups(self):
        """Test A,B {RED, BLUE} against C {RED, GREEN}."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Color", "A", ["RED", "BLUE"]),
            enum("Color", "B", ["BLUE", "RED"]),
            enum("Color", "C", ["RED", "GREEN"]),
        )

        fault = checker.check(group)

        assert fault is not None
        assert fault.code == FaultCode.ENUM_MISMATCH
        assert fault.type_name == "Color"
        assert fault.service_groups == (("A", "B"), ("C",))
        assert fault.message == (
            "The `Color` enum does not have identical values in all services. "
            "Groups of services with identical values are: [A, B], [C]"
        )

    def test_three_way_split(self):
        """Test three mutually distinct value sets."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Size", "A", ["S", "M"]),
            enum("Size", "B", ["M", "L"]),
            enum("Size", "C", ["S", "L"]),
        )

        fault = checker.check(group)

        assert fault is not None
        assert fault.service_groups == (("A",), ("B",), ("C",))
        assert fault.message.endswith("[A], [B], [C]")

    def test_impacted_services_are_populated(self):
        """Test that every enum-declaring service is impacted."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Color", "A", ["RED", "BLUE"]),
            enum("Color", "B", ["RED", "BLUE"]),
            enum("Color", "C", ["RED", "GREEN"]),
        )

        fault = checker.check(group)

        assert fault is not None
        assert set(fault.impacted_services) == {"A", "B", "C"}
        assert fault.impacted_services["A"] == ("Color.BLUE",)
        assert fault.impacted_services["C"] == ("Color.GREEN",)

    def test_subset_service_points_at_type(self):
        """Test that a service with only shared values is pointed at the type."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Color", "A", ["RED"]),
            enum("Color", "B", ["RED", "BLUE"]),
        )

        fault = checker.check(group)

        assert fault is not None
        assert fault.impacted_services == {"A": ("Color",), "B": ("Color.BLUE",)}

    def test_partition_completeness(self):
        """Test that the groups cover exactly the enum-declaring services."""
        checker = EnumConsistencyChecker()
        fragments = [
            enum("Kind", "svc1", ["X"]),
            enum("Kind", "svc2", ["Y"]),
            enum("Kind", "svc3", ["X"]),
            enum("Kind", "svc4", ["X", "Y"]),
        ]

        fault = checker.check(group_of(*fragments))

        assert fault is not None
        reported = [s for services in fault.service_groups for s in services]
        assert sorted(reported) == ["svc1", "svc2", "svc3", "svc4"]
        assert set(fault.impacted_services) == set(reported)

    def test_malformed_fragment_does_not_crash_or_appear(self):
        """Test an enum fragment with no service name next to valid ones."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Color", None, ["PURPLE"]),
            enum("Color", "A", ["RED"]),
            enum("Color", "B", ["BLUE"]),
        )

        fault = checker.check(group)

        assert fault is not None
        assert fault.service_groups == (("A",), ("B",))
        assert "None" not in fault.message

    def test_malformed_fragment_can_hide_a_mismatch(self):
        """Test that excluded fragments do not count as a distinct group."""
        checker = EnumConsistencyChecker()
        group = group_of(
            enum("Color", None, ["PURPLE"]),
            enum("Color", "A", ["RED"]),
        )

        assert checker.check(group) is None


class TestKindConflictReporter:
    """Test the ENUM_MISMATCH_TYPE report for mixed-kind groups."""

    def test_kind_mismatch(self):
        """Test Status as an enum in A and an object in B."""
        reporter = KindConflictReporter()
        group = group_of(
            enum("Status", "A", ["ACTIVE", "DONE"]),
            other("Status", "B"),
        )

        fault = reporter.report(group)

        assert fault.code == FaultCode.ENUM_MISMATCH_TYPE
        assert fault.service_groups == (("A",), ("B",))
        assert fault.message == "[A] Status -> Status is an enum in [A], but not in [B]"
        assert fault.impacted_services == {"A": ("Status",), "B": ("Status",)}

    def test_lists_keep_declaration_order(self):
        """Test that service lists follow fragment order."""
        reporter = KindConflictReporter()
        group = group_of(
            other("Status", "D"),
            enum("Status", "B", ["X"]),
            other("Status", "C"),
            enum("Status", "A", ["X"]),
        )

        fault = reporter.report(group)

        assert fault.service_groups == (("B", "A"), ("D", "C"))
        assert fault.message.startswith("[B] Status -> ")
        assert "is an enum in [B, A], but not in [D, C]" in fault.message

    def test_unnamed_fragments_are_dropped(self):
        """Test that fragments lacking a service name are left out of both lists."""
        reporter = KindConflictReporter()
        group = group_of(
            enum("Status", "A", ["X"]),
            other("Status", None),
            other("Status", "B"),
        )

        fault = reporter.report(group)

        assert fault.service_groups == (("A",), ("B",))

    def test_empty_enum_side_omits_prefix(self):
        """Test that an all-unnamed enum side still reports, without a prefix."""
        reporter = KindConflictReporter()
        group = group_of(
            enum("Status", None, ["X"]),
            other("Status", "B"),
        )

        fault = reporter.report(group)

        assert fault.message == "Status is an enum in [], but not in [B]"
        assert fault.impacted_services == {"B": ("Status",)}


class TestMatchingEnumsRule:
    """Test routing of groups to the right check."""

    @pytest.fixture
    def rule(self):
        return MatchingEnumsRule()

    def test_all_enum_group_uses_consistency_checker(self, rule):
        """Test that mismatched all-enum groups yield ENUM_MISMATCH."""
        faults = rule.check_group(
            group_of(enum("Color", "A", ["RED"]), enum("Color", "B", ["BLUE"]))
        )

        assert [f.code for f in faults] == [FaultCode.ENUM_MISMATCH]

    def test_mixed_group_uses_conflict_reporter(self, rule):
        """Test that mixed groups yield ENUM_MISMATCH_TYPE."""
        faults = rule.check_group(
            group_of(enum("Status", "A", ["X"]), other("Status", "B"))
        )

        assert [f.code for f in faults] == [FaultCode.ENUM_MISMATCH_TYPE]

    def test_none_enum_group_is_ignored(self, rule):
        """Test that groups without enums are out of scope."""
        faults = rule.check_group(group_of(other("User", "A"), other("User", "B")))

        assert faults == []

    def test_consistent_group_yields_nothing(self, rule):
        """Test that a consistent all-enum group yields no fault."""
        faults = rule.check_group(
            group_of(enum("Color", "A", ["A", "B"]), enum("Color", "B", ["B", "A"]))
        )

        assert faults == []
