"""Tests for caller traversal and impact levels."""

import pytest

from apidelta import AnalysisConfiguration, ImpactLevel, analyze_all_impacts, analyze_impact, compute_diff
from apidelta.analyzers.impact_analyzer import ImpactAnalyzer, export_index

from conftest import ref


@pytest.fixture
def modified_diff(make_snapshot, function_export):
    """Diff in which ``utilityFunc`` gains a required parameter."""
    def _make(extra_exports=()):
        old = make_snapshot("v1", {"src/util.ts": [function_export("utilityFunc")] + list(extra_exports)})
        new = make_snapshot("v2", {
            "src/util.ts": [function_export("utilityFunc", params=["x: string"])] + list(extra_exports)
        })
        return compute_diff(old, new)
    return _make


class TestTraversal:
    """Test direct and transitive caller discovery."""

    def test_direct_and_transitive_callers(self, modified_diff, make_call_graph):
        graph = make_call_graph(edges=[
            ("caller1", "utilityFunc"), ("caller2", "utilityFunc"), ("caller3", "caller1")
        ])
        reports = analyze_all_impacts(modified_diff(), graph)
        report = reports[ref("utilityFunc")]
        assert report.direct_callers == (ref("caller1"), ref("caller2"))
        assert report.transitive_callers == (ref("caller3"),)
        assert report.blast_radius == 3
        assert report.impact_level == ImpactLevel.MEDIUM

    def test_empty_graph_gives_isolated_reports(self, modified_diff, make_call_graph):
        reports = analyze_all_impacts(modified_diff(), make_call_graph())
        report = reports[ref("utilityFunc")]
        assert report.blast_radius == 0
        assert report.direct_callers == ()
        assert report.impact_level == ImpactLevel.NONE

    def test_every_change_gets_a_report(self, make_snapshot, function_export, make_call_graph):
        old = make_snapshot("v1", {"m.ts": [function_export("a"), function_export("b")]})
        new = make_snapshot("v2", {"m.ts": [function_export("b", returns="string"), function_export("c")]})
        diff = compute_diff(old, new)
        reports = analyze_all_impacts(diff, make_call_graph(edges=[("x", "b")]))
        assert list(reports) == [ref("a"), ref("b"), ref("c")]
        assert reports[ref("b")].blast_radius == 1

    def test_two_node_cycle_terminates(self, make_call_graph):
        graph = make_call_graph(edges=[("a", "b"), ("b", "a")])
        report = analyze_impact(ref("b"), graph)
        assert report.direct_callers == (ref("a"),)
        assert report.transitive_callers == ()
        assert report.blast_radius == 1

    def test_self_call_is_not_a_caller(self, make_call_graph):
        graph = make_call_graph(edges=[("r", "r"), ("x", "r")])
        report = analyze_impact(ref("r"), graph)
        assert report.direct_callers == (ref("x"),)
        assert report.blast_radius == 1

    def test_each_caller_counted_once(self, make_call_graph):
        graph = make_call_graph(edges=[("a", "t"), ("b", "t"), ("top", "a"), ("top", "b")])
        report = analyze_impact(ref("t"), graph)
        assert report.transitive_callers == (ref("top"),)
        assert report.blast_radius == 3

    def test_large_cycle(self, make_call_graph):
        names = [f"n{i}" for i in range(50)]
        edges = list(zip(names, names[1:] + names[:1]))
        report = analyze_impact(ref("n0"), make_call_graph(edges=edges))
        assert report.blast_radius == 49
        assert ref("n0") not in report.transitive_callers

    @pytest.mark.parametrize("max_depth,expected", [
        (1, ()),
        (2, (ref("c2"),)),
        (None, (ref("c2"), ref("c3"))),
    ])
    def test_max_depth(self, make_call_graph, max_depth, expected):
        graph = make_call_graph(edges=[("c1", "t"), ("c2", "c1"), ("c3", "c2")])
        config = AnalysisConfiguration(max_depth=max_depth)
        report = analyze_impact(ref("t"), graph, configuration=config)
        assert report.direct_callers == (ref("c1"),)
        assert report.transitive_callers == expected


class TestAffectedModulesAndExports:
    """Test module and export attribution of callers."""

    def test_affected_modules(self, make_call_graph):
        graph = make_call_graph(
            edges=[("a", "t"), ("b", "t"), ("c", "a")],
            modules={"a": "src/a.ts", "b": "src/a.ts", "c": "src/c.ts"}
        )
        report = analyze_impact(ref("t"), graph)
        assert report.affected_modules == ("src/a.ts", "src/c.ts")

    def test_affected_modules_deduplicated_in_discovery_order(self, make_call_graph):
        names = [f"c{i}" for i in range(300)]
        graph = make_call_graph(
            edges=[(name, "t") for name in names],
            modules={name: f"src/m{int(name[1:]) % 7}.ts" for name in names}
        )
        report = analyze_impact(ref("t"), graph)
        assert report.affected_modules == tuple(f"src/m{i}.ts" for i in range(7))

    def test_exported_callers_raise_impact(self, modified_diff, function_export, make_call_graph):
        diff = modified_diff([function_export("publicA"), function_export("publicB")])
        graph = make_call_graph(edges=[("publicA", "utilityFunc"), ("publicB", "utilityFunc")])
        report = analyze_all_impacts(diff, graph)[ref("utilityFunc")]
        assert report.affected_exports == ("publicA", "publicB")
        assert report.blast_radius == 2
        assert report.impact_level == ImpactLevel.HIGH

    def test_export_index_by_module_id(self, make_snapshot, function_export):
        snapshot = make_snapshot("s", {"m.ts": [function_export("f"), function_export("g", resolvable=False)]})
        index = export_index(snapshot)
        assert index["m.ts#f"] == "f"
        assert index[ref("f")] == "f"
        assert index["m.ts#g"] == "g"


class TestImpactLevels:
    """Test level thresholds and elevation rules."""

    @pytest.fixture
    def analyzer(self):
        return ImpactAnalyzer()

    @pytest.mark.parametrize("radius,expected", [
        (0, ImpactLevel.NONE),
        (1, ImpactLevel.LOW),
        (2, ImpactLevel.LOW),
        (3, ImpactLevel.MEDIUM),
        (9, ImpactLevel.MEDIUM),
        (10, ImpactLevel.HIGH),
        (24, ImpactLevel.HIGH),
        (25, ImpactLevel.CRITICAL),
    ])
    def test_radius_thresholds(self, analyzer, radius, expected):
        assert analyzer.impact_level(radius, 0) == expected

    def test_export_thresholds(self, analyzer):
        assert analyzer.impact_level(1, 2) == ImpactLevel.HIGH
        assert analyzer.impact_level(1, 5) == ImpactLevel.CRITICAL
        assert analyzer.impact_level(30, 2) == ImpactLevel.CRITICAL

    def test_monotonic_in_blast_radius(self, analyzer):
        for exports in range(0, 7):
            ranks = [analyzer.impact_level(radius, exports).rank for radius in range(0, 40)]
            assert ranks == sorted(ranks)

    def test_more_callers_never_lower_the_level(self, make_call_graph):
        ranks = []
        for count in range(0, 40):
            edges = [(f"caller{i}", "target") for i in range(count)]
            graph = make_call_graph(edges=edges, nodes=["target"])
            report = analyze_impact(ref("target"), graph)
            assert report.blast_radius == count
            ranks.append(report.impact_level.rank)
        assert ranks == sorted(ranks)
        assert ranks[0] == ImpactLevel.NONE.rank
        assert ranks[-1] == ImpactLevel.CRITICAL.rank

    def test_more_transitive_callers_never_lower_the_level(self, make_call_graph):
        ranks = []
        for depth in range(0, 30):
            names = ["target"] + [f"up{i}" for i in range(depth)]
            edges = [(caller, callee) for callee, caller in zip(names, names[1:])]
            graph = make_call_graph(edges=edges, nodes=["target"])
            ranks.append(analyze_impact(ref("target"), graph).impact_level.rank)
        assert ranks == sorted(ranks)

    def test_isolated_entry_point_is_low(self, make_call_graph):
        graph = make_call_graph(nodes=["main"])
        report = analyze_impact(ref("main"), graph, entry_points={ref("main")})
        assert report.blast_radius == 0
        assert report.impact_level == ImpactLevel.LOW

    def test_elevation_can_be_disabled(self, make_call_graph):
        config = AnalysisConfiguration(elevate_isolated_entry_points=False)
        report = analyze_impact(ref("main"), make_call_graph(nodes=["main"]),
                                entry_points={ref("main")}, configuration=config)
        assert report.impact_level == ImpactLevel.NONE

    def test_derived_entry_flag_does_not_elevate(self, make_call_graph):
        graph = make_call_graph(nodes=["main"])
        assert graph.node(ref("main")).is_entry_point
        assert analyze_impact(ref("main"), graph).impact_level == ImpactLevel.NONE

    def test_absent_entry_point_is_elevated(self, make_call_graph):
        report = analyze_impact("#/definitions/ghost", make_call_graph(), entry_points={"#/definitions/ghost"})
        assert report.impact_level == ImpactLevel.LOW

    def test_custom_thresholds(self, make_call_graph):
        config = AnalysisConfiguration(low_threshold=2, medium_threshold=4,
                                       high_threshold=6, critical_threshold=8)
        graph = make_call_graph(edges=[("a", "t")])
        assert analyze_impact(ref("t"), graph, configuration=config).impact_level == ImpactLevel.NONE

    def test_to_dict(self, make_call_graph):
        data = analyze_impact(ref("t"), make_call_graph(edges=[("a", "t")])).to_dict()
        assert data["impact_level"] == "low"
        assert data["direct_callers"] == [ref("a")]
