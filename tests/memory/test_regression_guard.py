"""Tests for replaying stored error checks."""

from conftest import FakeRunner, failed

from plan_wolf.memory import ErrorCheck, ErrorRecord, replay_checks


class TestReplayChecks:
    def test_records_without_check_are_skipped(self, tmp_path):
        report = replay_checks([ErrorRecord("Build", "Build FAIL")], tmp_path, FakeRunner())
        assert report.checked == 0
        assert report.regressions == 0

    def test_file_exists(self, tree):
        root = tree({"src/a.js": ""})
        errors = [
            ErrorRecord("Features", "a missing", file="src/a.js", check=ErrorCheck("file_exists")),
            ErrorRecord("Features", "b missing", file="src/b.js", check=ErrorCheck("file_exists")),
        ]
        report = replay_checks(errors, root, FakeRunner())
        assert report.checked == 2
        assert report.details == ["REGRESSION: b missing (file removed: src/b.js)"]

    def test_content_contains(self, tree):
        root = tree({"src/main.js": "window.closeModal = () => {}\n"})
        errors = [
            ErrorRecord("Wiring", "close handler", file="src/main.js",
                        check=ErrorCheck("content_contains", value="closeModal")),
            ErrorRecord("Wiring", "help handler", file="src/main.js",
                        check=ErrorCheck("content_contains", value="closeHelp")),
        ]
        report = replay_checks(errors, root, FakeRunner())
        assert report.details == ["REGRESSION: help handler"]

    def test_test_passes(self, tmp_path):
        runner = FakeRunner({"npx vitest run tests/x": failed("npx vitest run tests/x")})
        errors = [
            ErrorRecord("Tests", "x broken", check=ErrorCheck("test_passes", cmd="npx vitest run tests/x")),
            ErrorRecord("Tests", "y broken", check=ErrorCheck("test_passes", cmd="npx vitest run tests/y")),
        ]
        report = replay_checks(errors, tmp_path, runner)
        assert report.checked == 2
        assert report.details == ["REGRESSION: x broken (test failing: exit code 1)"]
        assert runner.calls == ["npx vitest run tests/x", "npx vitest run tests/y"]

    def test_unknown_check_type_dropped_on_load(self):
        record = ErrorRecord.from_dict({"phase": "p", "description": "d", "check": {"type": "magic"}})
        assert record.check is None
