"""Tests for impact analysis and the changed-file deep scan."""

from plan_wolf.graph import (
    DependencyGraph,
    analyze_impact,
    build_dependency_graph,
    deep_scan,
    impacted_features,
)
from plan_wolf.graph.impact import RISK_CRITICAL, RISK_HIGH, RISK_LOW, RISK_MEDIUM
from plan_wolf.scanning import SourceFile


def _chain_graph():
    # main -> App -> api ; util isolated
    return build_dependency_graph(
        [
            SourceFile("src/main.js", "import './components/App.js'"),
            SourceFile("src/components/App.js", "import '../services/api.js'"),
            SourceFile("src/services/api.js", ""),
            SourceFile("src/utils/util.js", ""),
        ]
    )


class TestAnalyzeImpact:
    def test_isolated_change_affects_only_itself(self):
        result = analyze_impact(["src/utils/util.js"], _chain_graph())
        assert result.affected == {"src/utils/util.js"}
        assert result.risk_level == RISK_LOW

    def test_transitive_importers(self):
        result = analyze_impact(["src/services/api.js"], _chain_graph())
        assert result.affected == {"src/services/api.js", "src/components/App.js", "src/main.js"}

    def test_critical_file_wins(self):
        result = analyze_impact(["src/main.js"], _chain_graph(), critical_files=["src/main.js"])
        assert result.risk_level == RISK_CRITICAL
        assert result.touched_critical == ["src/main.js"]

    def test_size_thresholds(self):
        result = analyze_impact(
            ["src/services/api.js"], _chain_graph(), high_threshold=5, medium_threshold=2
        )
        assert result.risk_level == RISK_MEDIUM
        result = analyze_impact(
            ["src/services/api.js"], _chain_graph(), high_threshold=2, medium_threshold=1
        )
        assert result.risk_level == RISK_HIGH

    def test_unknown_file_still_affected(self):
        result = analyze_impact(["docs/readme.md"], DependencyGraph())
        assert result.affected == {"docs/readme.md"}

    def test_no_changes(self):
        result = analyze_impact([], _chain_graph())
        assert not result.has_changes
        assert result.affected == set()

    def test_diamond_visits_each_file_once(self):
        graph = build_dependency_graph(
            [
                SourceFile("a.js", "import './b.js'\nimport './c.js'"),
                SourceFile("b.js", "import './d.js'"),
                SourceFile("c.js", "import './d.js'"),
                SourceFile("d.js", ""),
            ]
        )
        assert analyze_impact(["d.js"], graph).affected == {"a.js", "b.js", "c.js", "d.js"}


class TestImpactedFeatures:
    def test_labels(self):
        labels = impacted_features(
            ["src/modals/Settings.js", "src/stores/state.js", "src/main.js"],
            critical_files=["src/main.js"],
        )
        assert labels == ["Modal: Settings", "State Management", "src/main.js (CRITICAL)"]


class TestDeepScan:
    def test_clean_file(self):
        result = deep_scan(SourceFile("src/a.js", "export const a = () => 1\n"))
        assert result.penalty() == 0
        assert result.describe() == []

    def test_markers_and_dangling_onclick(self):
        content = (
            "// TODO one\n// TODO two\n// FIXME three\n"
            "const html = '<button onclick=\"known()\">a</button><button onclick=\"ghost()\">b</button>'\n"
        )
        result = deep_scan(SourceFile("src/v.js", content), defined_handlers=["known"])
        assert result.markers == 3
        assert result.dangling_onclick == ["ghost"]
        assert result.penalty() == 2
        assert "src/v.js: dangling onclick handler(s) ghost" in result.describe()

    def test_translated_strings_not_counted(self):
        long_text = "This sentence is clearly much longer than forty characters"
        content = f"const a = t('{long_text}')\nconst b = '{long_text}'\n"
        result = deep_scan(SourceFile("src/v.js", content))
        assert result.long_strings == 1

    def test_penalty_is_bounded(self):
        body = "\n".join(["// TODO x"] * 3 + ["function noop() {}"] + ["const x = 1"] * 900)
        body += "\nconst h = '<a onclick=\"missing()\">'"
        result = deep_scan(SourceFile("src/big.js", body))
        assert result.oversized
        assert result.empty_functions == 1
        assert result.penalty(max_penalty=3) == 3
