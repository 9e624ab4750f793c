"""Tests for import extraction, specifier resolution and graph construction."""

from plan_wolf.graph import build_dependency_graph, extract_relative_imports, resolve_specifier
from plan_wolf.scanning import SourceFile


def _files(**contents):
    return [SourceFile(path, content) for path, content in contents.items()]


class TestExtractRelativeImports:
    def test_static_forms(self):
        content = (
            "import a from './a'\n"
            "import { b, c } from \"../lib/b.js\"\n"
            "import './side-effect.js'\n"
            "export * from './reexport'\n"
            "export { x } from './x.js'\n"
            "const r = require('./legacy')\n"
        )
        specs = [s for s, dynamic in extract_relative_imports(content) if not dynamic]
        assert set(specs) == {"./a", "../lib/b.js", "./side-effect.js", "./reexport", "./x.js", "./legacy"}

    def test_multiline_import(self):
        content = "import {\n  one,\n  two,\n} from './many.js'\n"
        assert extract_relative_imports(content) == [("./many.js", False)]

    def test_dynamic_import_is_flagged(self):
        assert extract_relative_imports("const m = await import('./lazy.js')") == [("./lazy.js", True)]

    def test_bare_modules_are_ignored(self):
        content = "import React from 'react'\nimport { x } from '@scope/pkg'\n"
        assert extract_relative_imports(content) == []


class TestResolveSpecifier:
    KNOWN = {"src/a.js", "src/lib/b.ts", "src/views/index.js"}

    def test_appends_default_extension(self):
        assert resolve_specifier("./a", "src/main.js", self.KNOWN) == "src/a.js"

    def test_explicit_extension(self):
        assert resolve_specifier("./a.js", "src/main.js", self.KNOWN) == "src/a.js"

    def test_tries_other_extensions(self):
        assert resolve_specifier("./lib/b", "src/main.js", self.KNOWN, (".js", ".ts")) == "src/lib/b.ts"

    def test_directory_index(self):
        assert resolve_specifier("./views", "src/main.js", self.KNOWN) == "src/views/index.js"

    def test_parent_directory(self):
        assert resolve_specifier("../a", "src/lib/b.ts", self.KNOWN) == "src/a.js"

    def test_unknown_target(self):
        assert resolve_specifier("./nope", "src/main.js", self.KNOWN) is None

    def test_escaping_the_root(self):
        assert resolve_specifier("../../x", "src/main.js", self.KNOWN) is None


class TestBuildDependencyGraph:
    def test_no_relative_imports_means_no_edges(self):
        graph = build_dependency_graph(
            _files(**{"src/a.js": "import x from 'lodash'", "src/b.js": "const y = 1"})
        )
        assert graph.edge_count == 0
        assert graph.all_nodes == {"src/a.js", "src/b.js"}
        assert graph.forward == {"src/a.js": [], "src/b.js": []}

    def test_forward_and_reverse_agree(self):
        graph = build_dependency_graph(
            _files(
                **{
                    "src/main.js": "import './a.js'\nimport './b.js'",
                    "src/a.js": "import './b.js'",
                    "src/b.js": "",
                }
            )
        )
        assert graph.forward["src/main.js"] == ["src/a.js", "src/b.js"]
        assert sorted(graph.reverse["src/b.js"]) == ["src/a.js", "src/main.js"]
        assert graph.edge_count == 3
        for source, targets in graph.forward.items():
            for target in targets:
                assert source in graph.reverse[target]

    def test_unresolved_targets_dropped(self):
        graph = build_dependency_graph(_files(**{"src/a.js": "import './missing.js'"}))
        assert graph.edge_count == 0

    def test_self_import_dropped(self):
        graph = build_dependency_graph(_files(**{"src/a.js": "import './a.js'"}))
        assert graph.edge_count == 0

    def test_duplicate_import_counted_once(self):
        graph = build_dependency_graph(
            _files(**{"src/a.js": "import { x } from './b'\nconst l = import('./b')", "src/b.js": ""})
        )
        assert graph.edge_count == 1
        assert ("src/a.js", "src/b.js") in graph.dynamic_edges

    def test_imported_files_and_summary(self):
        graph = build_dependency_graph(
            _files(**{"src/a.js": "import './b.js'", "src/b.js": "", "src/c.js": ""})
        )
        assert graph.imported_files == {"src/b.js"}
        assert graph.importers_of("src/b.js") == ["src/a.js"]
        assert graph.summary() == {"total_files": 3, "total_links": 1}
