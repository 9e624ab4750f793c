"""Shared test fixtures for Plan Wolf."""

from pathlib import Path

import pytest

from plan_wolf.config import AuditConfig
from plan_wolf.graph import build_dependency_graph
from plan_wolf.memory import Memory
from plan_wolf.phases import AuditContext
from plan_wolf.scanning import scan, scan_text_corpus
from plan_wolf.tools import CommandResult
from plan_wolf.wiring import build_registry


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def write_tree(root: Path, files: dict) -> Path:
    """Create ``files`` ({relative path: content}) under ``root``."""
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


class FakeRunner:
    """Stands in for CommandRunner: canned results keyed by command string.

    Unknown commands succeed with empty output; empty commands are skipped,
    matching the real runner.
    """

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls = []

    def run(self, command, timeout=120):
        self.calls.append(command)
        if not command.strip():
            return CommandResult(command=command, ok=False, skipped=True)
        if command in self.results:
            return self.results[command]
        return CommandResult(command=command, ok=True, returncode=0)


def ok(command, output=""):
    return CommandResult(command=command, ok=True, returncode=0, output=output)


def failed(command, output="", returncode=1):
    return CommandResult(command=command, ok=False, returncode=returncode, output=output)


def missing(command):
    return CommandResult(command=command, ok=False, missing=True)


# Commands every phase might call; blanked so tests only run what they set
NO_TOOLS = dict(
    lint_command="",
    lint_report_command="",
    i18n_lint_command="",
    privacy_lint_command="",
    wiring_test_command="",
    integration_test_command="",
    test_command="",
    build_command="",
    performance_command="",
)


def make_context(root, config=None, runner=None, memory=None, changed=None):
    """Build an AuditContext over the tree at ``root`` the way the engine does."""
    config = config or AuditConfig(**NO_TOOLS)
    files = scan(root, config.source_dir, config.extensions, config.excluded_dirs)
    corpus = scan_text_corpus(root, config.corpus_dirs, config.extensions, config.excluded_dirs)
    return AuditContext(
        root=Path(root),
        config=config,
        files=files,
        corpus=corpus,
        graph=build_dependency_graph(files),
        registry=build_registry(files, global_object=config.global_object),
        memory=memory or Memory(),
        runner=runner or FakeRunner(),
        changed_files=list(changed or []),
    )


@pytest.fixture
def tree(tmp_path):
    """Factory writing a small project tree under tmp_path."""

    def _make(files):
        return write_tree(tmp_path, files)

    return _make


@pytest.fixture
def no_tools_config():
    return AuditConfig(**NO_TOOLS)


@pytest.fixture
def web_app(tmp_path):
    """A small app with one cycle, one dead export and wired handlers."""
    return write_tree(
        tmp_path,
        {
            "src/main.js": (
                "import { renderApp } from './components/App.js'\n"
                "import './services/api.js'\n"
                "window.openSettings = () => {}\n"
                "window.closeSettings = () => {}\n"
                "renderApp()\n"
            ),
            "src/components/App.js": (
                "import { fetchData } from '../services/api.js'\n"
                "export function renderApp() {\n"
                "  return `<button onclick=\"openSettings()\">s</button>"
                "<button onclick=\"closeSettings()\">x</button>`\n"
                "}\n"
            ),
            "src/services/api.js": (
                "import { renderApp } from '../components/App.js'\n"
                "export function fetchData() { return renderApp }\n"
                "export const unusedThing = 1\n"
            ),
            "src/utils/format.js": "export function formatPrice(n) { return n }\n",
        },
    )
