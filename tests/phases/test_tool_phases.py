"""Tests for the phases that score external tool runs."""

import json
from dataclasses import replace

from conftest import NO_TOOLS, FakeRunner, failed, make_context, missing, ok

from plan_wolf.config import AuditConfig
from plan_wolf.memory import Memory, RunRecord
from plan_wolf.phases.build import bundle_points, find_main_bundle, production_build
from plan_wolf.phases.code_quality import code_quality_audit
from plan_wolf.phases.performance import performance_audit
from plan_wolf.phases.unit_tests import unit_test_audit

TOOLS = dict(
    NO_TOOLS,
    lint_command="lint",
    lint_report_command="lint-report",
    i18n_lint_command="i18n",
    privacy_lint_command="privacy",
    wiring_test_command="test-wiring",
    integration_test_command="test-integration",
    test_command="test-all",
    build_command="build",
    performance_command="perf",
)


def _ctx(root, results=None, memory=None, **overrides):
    config = AuditConfig(**{**TOOLS, **overrides})
    return make_context(root, config=config, runner=FakeRunner(results), memory=memory)


def _write_kb(path, kb):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * (kb * 1024))


class TestCodeQuality:
    def test_all_clean(self, tmp_path):
        phase = code_quality_audit(_ctx(tmp_path))
        assert (phase.score, phase.max_score) == (15, 15)
        assert phase.details == []

    def test_warnings_only(self, tmp_path):
        results = {
            "lint": failed("lint"),
            "lint-report": failed("lint-report", "3 problems (0 errors, 3 warnings)"),
        }
        phase = code_quality_audit(_ctx(tmp_path, results))
        assert phase.score == 13
        assert "Linter: 0 errors, 3 warnings" in phase.findings
        assert phase.details == ["Run the linter with --fix to auto-correct lint problems"]

    def test_lint_errors_earn_nothing(self, tmp_path):
        results = {"lint": failed("lint", "2 problems (2 errors, 0 warnings)")}
        phase = code_quality_audit(_ctx(tmp_path, results, lint_report_command=""))
        assert phase.score == 10

    def test_failing_i18n_and_privacy(self, tmp_path):
        results = {"i18n": failed("i18n"), "privacy": failed("privacy")}
        phase = code_quality_audit(_ctx(tmp_path, results))
        assert phase.score == 5 + 2 + 1
        assert "i18n lint failing: missing translation keys" in phase.details
        assert "Privacy lint failing: unregistered storage keys" in phase.details

    def test_missing_tools_earn_no_points(self, tmp_path):
        results = {"lint": missing("lint"), "i18n": missing("i18n"), "privacy": missing("privacy")}
        phase = code_quality_audit(_ctx(tmp_path, results))
        assert phase.score == 0
        assert "Linter: not run (tool not installed)" in phase.findings
        assert phase.details[0].startswith("Lint tool unavailable")

    def test_disabled_linter_is_silent(self, tmp_path):
        phase = code_quality_audit(_ctx(tmp_path, lint_command=""))
        assert phase.score == 10
        assert "Linter: not run (not configured)" in phase.findings
        assert phase.details == []


class TestUnitTests:
    def test_everything_passes(self, tmp_path):
        results = {"test-all": ok("test-all", " Tests  42 passed (42)\n")}
        phase = unit_test_audit(_ctx(tmp_path, results))
        assert phase.score == 20

    def test_failures_reduce_score(self, tmp_path):
        results = {
            "test-integration": failed("test-integration"),
            "test-all": failed("test-all", "Tests  40 passed | 3 failed (43)"),
        }
        phase = unit_test_audit(_ctx(tmp_path, results))
        assert phase.score == 7 + 2 + 4
        assert "3 tests failing, fix these first" in phase.details
        assert "Integration tests FAIL: modals do not render correctly" in phase.details

    def test_many_failures_floor_at_zero(self, tmp_path):
        results = {"test-all": failed("test-all", "Tests 1 passed | 30 failed")}
        assert unit_test_audit(_ctx(tmp_path, results)).score == 13

    def test_unparseable_run_scores_zero(self, tmp_path):
        results = {"test-all": failed("test-all", "Error: cannot find module vitest")}
        phase = unit_test_audit(_ctx(tmp_path, results))
        assert phase.score == 13
        assert "Tests: results could not be read" in phase.findings

    def test_timed_out_wiring_suite(self, tmp_path):
        from plan_wolf.tools import CommandResult

        results = {
            "test-wiring": CommandResult("test-wiring", ok=False, timed_out=True),
            "test-all": ok("test-all", "Tests 5 passed"),
        }
        phase = unit_test_audit(_ctx(tmp_path, results))
        assert phase.score == 13
        assert "Wiring tests: FAIL (timed out)" in phase.findings


class TestBuild:
    def test_bundle_points(self):
        assert bundle_points(700, 750) == 5
        assert bundle_points(1500, 750) == 2
        assert bundle_points(100000, 750) == 1

    def test_find_main_bundle_prefers_entry_chunk(self, tmp_path):
        assets = tmp_path / "assets"
        _write_kb(assets / "vendor-1.js", 300)
        _write_kb(assets / "index-abc.js", 10)
        assert find_main_bundle(assets).name == "index-abc.js"

    def test_find_main_bundle_falls_back_to_largest(self, tmp_path):
        assets = tmp_path / "assets"
        _write_kb(assets / "a.js", 3)
        _write_kb(assets / "b.js", 30)
        assert find_main_bundle(assets).name == "b.js"
        assert find_main_bundle(tmp_path / "nothing") is None

    def test_small_bundle_full_points(self, tmp_path):
        _write_kb(tmp_path / "dist" / "assets" / "index-abc.js", 100)
        phase = production_build(_ctx(tmp_path))
        assert phase.score == 15
        assert phase.metrics["bundle_size_kb"] == 100

    def test_large_bundle(self, tmp_path):
        _write_kb(tmp_path / "dist" / "assets" / "index-abc.js", 1500)
        phase = production_build(_ctx(tmp_path))
        assert phase.score == 12
        assert phase.details == ["Main bundle 1500KB exceeds the 750KB limit, trim imports"]

    def test_failed_build(self, tmp_path):
        phase = production_build(_ctx(tmp_path, {"build": failed("build")}))
        assert phase.score == 0
        assert phase.details == ["Build FAIL: production build does not compile"]

    def test_growth_since_last_run(self, tmp_path):
        _write_kb(tmp_path / "dist" / "assets" / "index-abc.js", 100)
        memory = Memory(runs=[RunRecord(date="d", score=80, confidence="HIGH", bundle_size_kb=50)])
        phase = production_build(_ctx(tmp_path, memory=memory))
        assert "Bundle grew by +50KB since the last run" in phase.details

    def test_oversized_asset(self, tmp_path):
        _write_kb(tmp_path / "dist" / "assets" / "index-abc.js", 10)
        _write_kb(tmp_path / "dist" / "assets" / "hero.png", 600)
        phase = production_build(_ctx(tmp_path))
        assert "Oversized asset dist/assets/hero.png (600KB)" in phase.details

    def test_custom_limit(self, tmp_path):
        _write_kb(tmp_path / "dist" / "assets" / "index-abc.js", 100)
        config = AuditConfig(**TOOLS)
        config = replace(config, thresholds=replace(config.thresholds, bundle_limit_kb=50))
        ctx = make_context(tmp_path, config=config)
        assert production_build(ctx).score == 12


class TestPerformance:
    def test_scores_average(self, tmp_path):
        report = {"categories": {"performance": {"score": 0.8}, "seo": {"score": 1.0}}}
        phase = performance_audit(_ctx(tmp_path, {"perf": ok("perf", json.dumps(report))}))
        assert phase.scored
        assert phase.score == 9
        assert phase.metrics["performance_scores"] == {"performance": 80.0, "seo": 100.0}

    def test_low_performance_detail(self, tmp_path):
        phase = performance_audit(_ctx(tmp_path, {"perf": ok("perf", "Performance: 31")}))
        assert phase.score == 3
        assert phase.details == ["Performance score 31/100, reduce bundle KB and defer scripts"]

    def test_tool_failure_is_unscored(self, tmp_path):
        phase = performance_audit(_ctx(tmp_path, {"perf": missing("perf")}))
        assert not phase.scored
        assert phase.details == ["Performance auditor failed (tool not installed)"]

    def test_unparseable_output_is_unscored(self, tmp_path):
        phase = performance_audit(_ctx(tmp_path, {"perf": ok("perf", "done.")}))
        assert not phase.scored
        assert phase.details == ["Performance auditor output could not be parsed"]
