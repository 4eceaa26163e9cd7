"""Tests for data table loading."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.data_files import (
    DataSourceError,
    load_data_payload,
    load_entry_table,
    load_name_list,
    resolve_data_path,
)


class TestDataFiles(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _write(self, name: str, text: str) -> Path:
        path = self.root / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_json_entry_table(self) -> None:
        path = self._write("commands.json", '{"cite": {"command": "cite", "snippet": "cite{${1}}"}}')
        table = load_entry_table(path)
        self.assertEqual(table["cite"]["snippet"], "cite{${1}}")

    def test_load_yaml_entry_table(self) -> None:
        path = self._write("commands.yml", "emph:\n  command: emph\n  snippet: 'emph{${1}}'\n")
        table = load_entry_table(path)
        self.assertEqual(table["emph"]["command"], "emph")

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(DataSourceError):
            load_data_payload(self.root / "missing.json")

    def test_unparseable_json_raises(self) -> None:
        path = self._write("broken.json", "{not json")
        with self.assertRaises(DataSourceError):
            load_entry_table(path)

    def test_entry_table_must_be_object(self) -> None:
        path = self._write("list.json", "[1, 2]")
        with self.assertRaises(DataSourceError):
            load_entry_table(path)

    def test_entry_records_must_be_objects(self) -> None:
        path = self._write("bad.json", '{"cite": "cite{}"}')
        with self.assertRaises(DataSourceError):
            load_entry_table(path)

    def test_load_name_list(self) -> None:
        path = self._write("environments.json", '["itemize", " figure "]')
        self.assertEqual(load_name_list(path), ["itemize", "figure"])

    def test_name_list_rejects_empty_names(self) -> None:
        path = self._write("environments.json", '["itemize", ""]')
        with self.assertRaises(DataSourceError):
            load_name_list(path)

    def test_resolve_relative_data_path(self) -> None:
        resolved = resolve_data_path("/opt/data", "commands.json")
        self.assertEqual(str(resolved), "/opt/data/commands.json")
        self.assertEqual(str(resolve_data_path("/opt/data", "/abs/x.json")), "/abs/x.json")


if __name__ == "__main__":
    unittest.main()
