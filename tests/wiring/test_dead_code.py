"""Tests for dead export and dead local function detection."""

import pytest

from plan_wolf.graph import build_dependency_graph
from plan_wolf.scanning import SourceFile
from plan_wolf.wiring import DeadCodeResult, DeadSymbol, find_dead_code, is_whitelisted
from plan_wolf.wiring.dead_code import exported_symbols


def _find(files, corpus=None):
    return find_dead_code(files, build_dependency_graph(files), corpus)


class TestWhitelist:
    @pytest.mark.parametrize("name", ["init", "getUser", "renderApp", "on_click", "setup2"])
    def test_lifecycle_names(self, name):
        assert is_whitelisted(name)

    @pytest.mark.parametrize("name", ["online", "settle", "unused", "userCount"])
    def test_ordinary_names(self, name):
        assert not is_whitelisted(name)


class TestExportedSymbols:
    def test_reexports_belong_to_the_other_file(self):
        content = "export { a } from './a'\nexport { b }\nexport default function main() {}\n"
        assert exported_symbols(content) == ["b"]


class TestFindDeadCode:
    def test_unimported_unused_export_is_dead(self):
        result = _find([SourceFile("src/a.ts", "export function unused() {}\n")])
        assert result.dead_exports == [DeadSymbol("unused", "src/a.ts")]
        assert result.total_exports == 1
        assert result.dead_ratio == 1.0

    def test_imported_file_exports_are_live(self):
        result = _find(
            [
                SourceFile("src/a.js", "export const value = 1\n"),
                SourceFile("src/b.js", "import './a.js'\n"),
            ]
        )
        assert result.dead_exports == []

    def test_dynamic_import_keeps_file_alive(self):
        result = _find(
            [
                SourceFile("src/lazy.js", "export const heavy = 1\n"),
                SourceFile("src/main.js", "const m = import('./lazy.js')\n"),
            ]
        )
        assert result.dead_exports == []

    def test_textual_use_in_corpus_keeps_export_alive(self):
        files = [SourceFile("src/a.js", "export const formatPrice = 1\n")]
        corpus = [SourceFile("tests/a.test.js", "formatPrice(2)")]
        assert _find(files, corpus).dead_exports == []

    def test_whitelisted_exports_never_dead(self):
        result = _find([SourceFile("src/a.js", "export function initApp() {}\n")])
        assert result.dead_exports == []
        assert result.total_exports == 1

    def test_dead_local_function(self):
        content = "function helper() {}\nconst used = () => 1\nused()\n"
        result = _find([SourceFile("src/a.js", content)])
        assert result.dead_local_functions == [DeadSymbol("helper", "src/a.js")]

    def test_markup_is_not_inspected(self):
        result = _find([SourceFile("src/index.html", "<script>export const x = 1</script>")])
        assert result.total_exports == 0


class TestScore:
    def test_clean_tree_keeps_full_points(self):
        assert DeadCodeResult(total_exports=4).score(10) == 10

    def test_any_dead_export_costs_a_point(self):
        result = DeadCodeResult(dead_exports=[DeadSymbol("x", "a.js")], total_exports=100)
        assert result.score(10) == 9

    def test_deduction_is_proportional_and_capped(self):
        half = DeadCodeResult(dead_exports=[DeadSymbol("x", "a.js")], total_exports=2)
        everything = DeadCodeResult(dead_exports=[DeadSymbol("x", "a.js")], total_exports=1)
        assert half.score(10) == 7
        assert everything.score(10) == 5

    def test_dead_local_functions_cost_one_per_ten(self):
        locals_ = [DeadSymbol(f"f{i}", "a.js") for i in range(20)]
        assert DeadCodeResult(dead_local_functions=locals_).score(10) == 8
