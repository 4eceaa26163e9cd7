"""
Unit tests for catalog.py

Tests source precedence, the refresh cooldown, lazy symbol and package loading,
per-file tables and the live scan of the focused document.
"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from completion.catalog import CommandCatalog
from completion.host import DocumentSnapshot
from completion.suggestion import SuggestionKind
from core import data_files
from core.data_files import DataSourceError
from core.settings import CatalogSettings, PACKAGES_ENABLED_KEY, SYMBOLS_ENABLED_KEY
from extraction.scanner import scan_text

DATA_DIR = Path(__file__).parent / "fixtures" / "data"


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeHost:
    """In-memory editor host."""

    def __init__(self, files=None, flags=None, relevant=None, active=None):
        self.files = dict(files or {})
        self.flags = {SYMBOLS_ENABLED_KEY: False, PACKAGES_ENABLED_KEY: True}
        self.flags.update(flags or {})
        self.relevant = list(relevant if relevant is not None else self.files)
        self.active = active

    def read_file(self, path):
        return self.files[path]

    def file_exists(self, path):
        return path in self.files or Path(path).is_file()

    def get_config(self, key):
        return self.flags.get(key)

    def current_document(self):
        if self.active is None:
            return None
        return DocumentSnapshot(text=self.files[self.active], path=self.active)

    def relevant_file_set(self):
        return self.relevant

    def selections(self):
        return None

    async def present_choice(self, items, placeholder):
        return None

    def apply_edits(self, ranges, texts):
        pass


def make_catalog(host, clock=None, cooldown=1.0):
    settings = CatalogSettings(cooldown_seconds=cooldown, data_dir=str(DATA_DIR))
    return CommandCatalog.from_data_dir(host, settings, clock=clock or FakeClock())


def by_key(catalog):
    """Map suggestion labels to suggestions for assertions."""
    return {s.label: s for s in catalog.provide()}


class TestInitialization(unittest.TestCase):
    def test_defaults_loaded(self):
        catalog = make_catalog(FakeHost())
        self.assertIn("cite", catalog.default_commands)
        self.assertEqual(catalog.default_commands["cite"].label, "\\cite")

    def test_environment_snippet_replaces_same_named_command(self):
        catalog = make_catalog(FakeHost())
        itemize = catalog.default_commands["itemize"]
        self.assertEqual(itemize.kind, SuggestionKind.SNIPPET)
        self.assertIn("\\item $0", itemize.insert_template)

    def test_special_brackets(self):
        catalog = make_catalog(FakeHost())
        self.assertEqual(set(catalog.special_brackets), {"(", "left("})
        self.assertIs(catalog.special_brackets["("], catalog.default_commands["latexinlinemath"])

    def test_initialize_accepts_plain_records(self):
        catalog = CommandCatalog(FakeHost(), data_dir=DATA_DIR)
        catalog.initialize({"cite": {"snippet": "cite{${1}}"}}, ["figure"])
        self.assertEqual(catalog.default_commands["cite"].insert_template, "cite{${1}}")
        self.assertIn("figure", catalog.default_commands)

    def test_missing_default_data_is_fatal(self):
        with tempfile.TemporaryDirectory() as empty:
            settings = CatalogSettings(data_dir=empty)
            with self.assertRaises(DataSourceError):
                CommandCatalog.from_data_dir(FakeHost(), settings)


class TestPrecedence(unittest.TestCase):
    def test_default_beats_every_later_source(self):
        host = FakeHost(
            files={
                "a.tex": "\\cite{x}{y}",
                "main.tex": "\\usepackage{amsmath}\n\\cite{z}",
            },
            relevant=["a.tex"],
            active="main.tex",
        )
        catalog = make_catalog(host)
        catalog.record_package_usage("main.tex")
        catalog.rescan_file("a.tex")
        cite = by_key(catalog)["\\cite"]
        self.assertEqual(cite.detail, "default cite")
        self.assertEqual(cite.insert_template, "cite{${1}}")

    def test_symbols_beat_packages_but_not_defaults(self):
        host = FakeHost(
            files={"main.tex": "\\usepackage{amsmath}"},
            flags={SYMBOLS_ENABLED_KEY: True},
        )
        catalog = make_catalog(host)
        catalog.record_package_usage("main.tex")
        items = by_key(catalog)
        self.assertEqual(items["\\alpha"].detail, "symbol alpha")
        self.assertEqual(items["\\textbf"].detail, "default textbf")

    def test_packages_in_discovery_order(self):
        host = FakeHost(files={"main.tex": "\\usepackage{mathtools}\n\\usepackage{amsmath}"})
        catalog = make_catalog(host)
        catalog.record_package_usage("main.tex")
        items = by_key(catalog)
        self.assertEqual(items["\\eqref"].detail, "mathtools eqref")
        self.assertIn("\\boxed", items)
        self.assertIn("\\coloneqq", items)

    def test_package_beats_file_tables(self):
        host = FakeHost(
            files={"main.tex": "\\usepackage{amsmath}\n\\boxed{a}{b}"},
        )
        catalog = make_catalog(host)
        catalog.record_package_usage("main.tex")
        catalog.rescan_file("main.tex")
        self.assertEqual(by_key(catalog)["\\boxed"].detail, "amsmath boxed")

    def test_file_order_follows_relevant_set(self):
        host = FakeHost(
            files={"a.tex": "\\mymacro{1}", "b.tex": "\\mymacro{1}{2}"},
            relevant=["b.tex", "a.tex"],
        )
        catalog = make_catalog(host)
        catalog.rescan_file("a.tex")
        catalog.rescan_file("b.tex")
        self.assertEqual(by_key(catalog)["\\mymacro"].insert_template, "mymacro{${1}}{${2}}")

    def test_file_table_beats_live_scan(self):
        host = FakeHost(
            files={"main.tex": "\\mymacro{1}"},
            active="main.tex",
        )
        catalog = make_catalog(host)
        catalog.rescan_file("main.tex")
        host.files["main.tex"] = "\\mymacro{1}{2}"
        self.assertEqual(by_key(catalog)["\\mymacro"].insert_template, "mymacro{${1}}")

    def test_merged_order_is_insertion_order(self):
        host = FakeHost(
            files={"a.tex": "\\zeta \\cite", "live.tex": "\\aardvark"},
            relevant=["a.tex"],
            active="live.tex",
        )
        catalog = make_catalog(host)
        catalog.rescan_file("a.tex")
        labels = [s.label for s in catalog.provide()]
        defaults = [s.label for s in catalog.default_commands.values()]
        self.assertEqual(labels[: len(defaults)], defaults)
        self.assertEqual(labels[len(defaults):], ["\\zeta", "\\aardvark"])

    def test_similar_names_are_independent_keys(self):
        host = FakeHost(files={"main.tex": "\\mycite{abc}"}, active="main.tex")
        catalog = make_catalog(host)
        items = by_key(catalog)
        self.assertEqual(items["\\cite"].detail, "default cite")
        self.assertEqual(items["\\mycite"].insert_template, "mycite{${1}}")
        self.assertEqual(items["\\mycite"].triggered_action, "editor.action.triggerSuggest")


class TestFileTables(unittest.TestCase):
    def test_unscanned_relevant_file_contributes_nothing(self):
        host = FakeHost(files={"a.tex": "\\onlyhere"}, relevant=["a.tex"])
        catalog = make_catalog(host)
        self.assertNotIn("\\onlyhere", by_key(catalog))

    def test_scanned_file_outside_relevant_set_ignored(self):
        host = FakeHost(files={"a.tex": "\\onlyhere"}, relevant=[])
        catalog = make_catalog(host)
        catalog.rescan_file("a.tex")
        self.assertNotIn("\\onlyhere", by_key(catalog))

    def test_rescan_replaces_table_wholesale(self):
        host = FakeHost(files={"a.tex": "\\old \\kept"})
        catalog = make_catalog(host)
        catalog.rescan_file("a.tex")
        host.files["a.tex"] = "\\kept{x}"
        catalog.rescan_file("a.tex")
        self.assertEqual(set(catalog.commands_in_files["a.tex"]), {"kept"})

    def test_provide_does_not_mutate_file_tables(self):
        host = FakeHost(files={"a.tex": "\\foo", "live.tex": "\\bar"}, active="live.tex")
        catalog = make_catalog(host)
        catalog.rescan_file("a.tex")
        before = dict(catalog.commands_in_files)
        catalog.provide()
        self.assertEqual(catalog.commands_in_files, before)
        self.assertNotIn("live.tex", catalog.commands_in_files)

    def test_forget_file(self):
        host = FakeHost(files={"a.tex": "\\foo"})
        catalog = make_catalog(host)
        catalog.rescan_file("a.tex")
        catalog.forget_file("a.tex")
        catalog.forget_file("never-scanned.tex")
        self.assertNotIn("\\foo", by_key(catalog))

    def test_record_package_usage_appends_new_names_only(self):
        host = FakeHost(files={
            "a.tex": "\\usepackage{amsmath,hyperref}",
            "b.tex": "\\usepackage[all]{hyperref, xcolor}",
        })
        catalog = make_catalog(host)
        self.assertEqual(catalog.record_package_usage("a.tex"), ["amsmath", "hyperref"])
        self.assertEqual(catalog.record_package_usage("b.tex"), ["xcolor"])
        self.assertEqual(catalog.used_packages, ["amsmath", "hyperref", "xcolor"])

    def test_add_extraction_adopts_prescanned_file(self):
        host = FakeHost(files={"a.tex": ""}, relevant=["a.tex"])
        catalog = make_catalog(host)
        catalog.used_packages.append("amsmath")
        catalog.add_extraction(
            scan_text(
                "\\usepackage{amsmath,mathtools}\n\\newcommand{\\vect}[1]{#1}\n\\vect{x}",
                "a.tex",
            )
        )
        self.assertEqual(catalog.used_packages, ["amsmath", "mathtools"])
        self.assertEqual(catalog.find_macro_definition("\\vect").line, 1)
        items = by_key(catalog)
        self.assertEqual(items["\\vect"].insert_template, "vect{${1}}")
        self.assertEqual(items["\\coloneqq"].label, "\\coloneqq")


class TestMacroDefinitions(unittest.TestCase):
    def test_first_definition_across_scans_wins(self):
        host = FakeHost(files={
            "macros.tex": "\n\n\n\\newcommand\\foo{1}",
            "main.tex": "\\renewcommand\\foo{2}\n\\newcommand{\\bar}{3}",
        }, active="main.tex")
        catalog = make_catalog(host)
        catalog.rescan_file("macros.tex")
        catalog.provide()
        foo = catalog.find_macro_definition("foo")
        self.assertEqual((foo.file_path, foo.line), ("macros.tex", 3))
        self.assertEqual(catalog.find_macro_definition("\\bar").file_path, "main.tex")
        self.assertIsNone(catalog.find_macro_definition("baz"))


class TestCooldown(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.host = FakeHost(files={"a.tex": "\\first"})
        self.catalog = make_catalog(self.host, clock=self.clock)
        self.catalog.rescan_file("a.tex")

    def test_within_window_returns_same_snapshot(self):
        first = self.catalog.provide()
        self.host.files["a.tex"] = "\\second"
        self.catalog.rescan_file("a.tex")
        self.clock.advance(0.5)
        second = self.catalog.provide()
        self.assertIs(first, second)
        self.assertNotIn("\\second", [s.label for s in second])

    def test_after_window_reflects_changes(self):
        first = self.catalog.provide()
        self.host.files["a.tex"] = "\\second"
        self.catalog.rescan_file("a.tex")
        self.clock.advance(1.5)
        second = self.catalog.provide()
        self.assertIsNot(first, second)
        labels = [s.label for s in second]
        self.assertIn("\\second", labels)
        self.assertNotIn("\\first", labels)

    def test_cached_call_has_no_side_effects(self):
        self.catalog.provide()
        self.host.flags[SYMBOLS_ENABLED_KEY] = True
        with patch.object(self.catalog, "load_symbols") as load_symbols:
            self.catalog.provide()
        load_symbols.assert_not_called()

    def test_invalidate_forces_recompute(self):
        first = self.catalog.provide()
        self.catalog.invalidate()
        self.assertIsNot(first, self.catalog.provide())

    def test_configurable_cooldown(self):
        catalog = make_catalog(self.host, clock=self.clock, cooldown=0.0)
        self.assertIsNot(catalog.provide(), catalog.provide())


class TestFeatureFlags(unittest.TestCase):
    def test_symbols_loaded_lazily_once(self):
        clock = FakeClock()
        host = FakeHost(flags={SYMBOLS_ENABLED_KEY: True})
        catalog = make_catalog(host, clock=clock)
        self.assertEqual(catalog.default_symbols, {})
        with patch(
            "completion.catalog.load_entry_table",
            wraps=data_files.load_entry_table,
        ) as loader:
            catalog.provide()
            clock.advance(5)
            catalog.provide()
        self.assertEqual(loader.call_count, 1)
        self.assertIn("alpha", catalog.default_symbols)

    def test_empty_symbol_table_loaded_once(self):
        clock = FakeClock()
        host = FakeHost(flags={SYMBOLS_ENABLED_KEY: True})
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "unimathsymbols.json").write_text("{}", encoding="utf-8")
            catalog = CommandCatalog(host, data_dir=tmpdir, clock=clock)
            catalog.initialize({"cite": {}}, [])
            with patch(
                "completion.catalog.load_entry_table",
                wraps=data_files.load_entry_table,
            ) as loader:
                for _ in range(3):
                    catalog.provide()
                    clock.advance(5)
        self.assertEqual(loader.call_count, 1)
        self.assertTrue(catalog.symbols_loaded)
        self.assertEqual(catalog.default_symbols, {})

    def test_symbols_disabled_not_loaded(self):
        catalog = make_catalog(FakeHost())
        self.assertNotIn("\\alpha", by_key(catalog))
        self.assertEqual(catalog.default_symbols, {})

    def test_missing_symbol_table_is_fatal(self):
        host = FakeHost(flags={SYMBOLS_ENABLED_KEY: True})
        catalog = CommandCatalog(host, data_dir="/nonexistent/data")
        catalog.initialize({}, [])
        with self.assertRaises(DataSourceError):
            catalog.provide()

    def test_package_flag_disabled_ignores_package_data(self):
        files = {"main.tex": "\\usepackage{amsmath}"}
        enabled = make_catalog(FakeHost(files=files))
        enabled.record_package_usage("main.tex")
        disabled = make_catalog(FakeHost(files=files, flags={PACKAGES_ENABLED_KEY: False}))
        disabled.record_package_usage("main.tex")

        self.assertIn("\\eqref", by_key(enabled))
        disabled_labels = set(by_key(disabled))
        self.assertNotIn("\\eqref", disabled_labels)
        self.assertNotIn("\\boxed", disabled_labels)
        self.assertFalse(disabled.package_cache.is_loaded("amsmath"))


if __name__ == "__main__":
    unittest.main()
