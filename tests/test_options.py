"""Tests for scan options and settings files."""

import logging

from scanner.options import (
    ALWAYS_INCLUDED_EXTENSIONS,
    DEFAULT_CRITICAL_LIMIT,
    DEFAULT_EXCLUDE_FOLDERS,
    DEFAULT_EXTENSIONS,
    ScanOptions,
    find_config_file,
    load_options,
    merge_exclude_folders,
    normalize_extensions,
    normalize_folders,
    normalize_main_file,
)


class TestNormalization:
    """Tests for setting normalization."""

    def test_extensions(self):
        """Test extensions are trimmed, lowercased and dot-prefixed."""
        assert normalize_extensions([" TS ", ".Py", "", ".", "jsx"]) == {".ts", ".py", ".jsx"}

    def test_extensions_from_string(self):
        """Test a comma-separated string is accepted."""
        assert normalize_extensions("ts, .js") == {".ts", ".js"}

    def test_non_string_entries_dropped(self, caplog):
        """Test non-string entries are ignored with a warning."""
        with caplog.at_level(logging.WARNING):
            result = normalize_extensions(["ts", 3, None])

        assert result == {".ts"}
        assert "non-string" in caplog.text

    def test_malformed_value(self):
        """Test a value of the wrong type yields nothing."""
        assert normalize_extensions(42) == set()
        assert normalize_extensions(None) == set()

    def test_folders(self):
        """Test folder names are trimmed and lowercased."""
        assert normalize_folders([" Node_Modules/", "\\Build", ""]) == {"node_modules", "build"}

    def test_main_file(self):
        """Test main file paths become root-relative forward-slash paths."""
        assert normalize_main_file(".\\src\\app.ts") == "src/app.ts"
        assert normalize_main_file("  ./main.py ") == "main.py"
        assert normalize_main_file("") is None
        assert normalize_main_file(["main.py"]) is None


class TestScanOptions:
    """Tests for ScanOptions defaults and mapping."""

    def test_defaults(self):
        """Test default option values."""
        options = ScanOptions()

        assert options.include_extensions == set()
        assert options.exclude_folders == set(DEFAULT_EXCLUDE_FOLDERS)
        assert options.main_file is None
        assert options.max_workers >= 1
        assert options.critical_limit == DEFAULT_CRITICAL_LIMIT
        assert options.partial_on_cancel

    def test_active_extensions_default(self):
        """Test an empty filter means the default extension set."""
        assert ScanOptions().active_extensions == set(DEFAULT_EXTENSIONS)

    def test_active_extensions_always_include_executables(self):
        """Test .exe is analyzed under any filter."""
        active = ScanOptions(include_extensions=["ts"]).active_extensions

        assert active == {".ts"} | ALWAYS_INCLUDED_EXTENSIONS

    def test_bounds(self):
        """Test worker and limit values are clamped."""
        options = ScanOptions(max_workers=0, critical_limit=-3)

        assert options.max_workers == 1
        assert options.critical_limit == 0

    def test_from_mapping_camel_case(self):
        """Test camelCase keys."""
        options = ScanOptions.from_mapping({
            "includeExtensions": ["ts", "tsx"],
            "excludeFolders": ["vendor"],
            "mainFile": "./src/index.ts",
            "maxWorkers": "3",
            "readTimeout": 2,
            "criticalLimit": 5,
        })

        assert options.include_extensions == {".ts", ".tsx"}
        assert options.exclude_folders == {"vendor"}
        assert options.main_file == "src/index.ts"
        assert options.max_workers == 3
        assert options.read_timeout == 2.0
        assert options.critical_limit == 5

    def test_from_mapping_snake_case_and_namespace(self):
        """Test snake_case keys under the projectGraph namespace."""
        options = ScanOptions.from_mapping({
            "projectGraph": {"include_extensions": "py", "main_file": "app.py"},
        })

        assert options.include_extensions == {".py"}
        assert options.main_file == "app.py"

    def test_from_mapping_ignores_bad_numbers(self):
        """Test malformed numbers keep the defaults."""
        options = ScanOptions.from_mapping({"criticalLimit": "lots", "unknownKey": 1})

        assert options.critical_limit == DEFAULT_CRITICAL_LIMIT


class TestSettingsFiles:
    """Tests for loading settings files."""

    def test_yaml(self, tmp_path):
        """Test loading YAML settings."""
        path = tmp_path / ".project-graph.yaml"
        path.write_text("includeExtensions:\n  - ts\nmainFile: src/app.ts\n", encoding="utf-8")

        options = load_options(path)

        assert options.include_extensions == {".ts"}
        assert options.main_file == "src/app.ts"

    def test_toml(self, tmp_path):
        """Test loading TOML settings."""
        path = tmp_path / ".project-graph.toml"
        path.write_text('[projectGraph]\nexcludeFolders = ["fixtures"]\ncriticalLimit = 3\n', encoding="utf-8")

        options = load_options(path)

        assert options.exclude_folders == {"fixtures"}
        assert options.critical_limit == 3

    def test_json(self, tmp_path):
        """Test loading JSON settings."""
        path = tmp_path / ".project-graph.json"
        path.write_text('{"includeExtensions": [".py"]}', encoding="utf-8")

        assert load_options(path).include_extensions == {".py"}

    def test_malformed_yaml_uses_defaults(self, tmp_path, caplog):
        """Test a broken settings file never aborts a scan."""
        path = tmp_path / ".project-graph.yaml"
        path.write_text("includeExtensions: [ts\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            options = load_options(path)

        assert options.include_extensions == set()
        assert "Malformed settings file" in caplog.text

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing settings file yields defaults."""
        options = load_options(tmp_path / "nope.yaml")

        assert options.exclude_folders == set(DEFAULT_EXCLUDE_FOLDERS)

    def test_non_mapping_uses_defaults(self, tmp_path):
        """Test a settings file holding a list yields defaults."""
        path = tmp_path / ".project-graph.yaml"
        path.write_text("- ts\n- js\n", encoding="utf-8")

        assert load_options(path).include_extensions == set()

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test an empty YAML file yields defaults."""
        path = tmp_path / ".project-graph.yml"
        path.write_text("", encoding="utf-8")

        assert load_options(path).include_extensions == set()

    def test_find_config_file(self, tmp_path):
        """Test settings discovery directly under the root."""
        assert find_config_file(tmp_path) is None

        (tmp_path / ".project-graph.json").write_text("{}", encoding="utf-8")
        (tmp_path / ".project-graph.yaml").write_text("{}", encoding="utf-8")

        assert find_config_file(tmp_path) == tmp_path / ".project-graph.yaml"

    def test_merge_exclude_folders(self):
        """Test extra folders are added to the defaults."""
        merged = merge_exclude_folders(["Fixtures"])

        assert "fixtures" in merged
        assert set(DEFAULT_EXCLUDE_FOLDERS) <= merged
        assert merge_exclude_folders(None) == set(DEFAULT_EXCLUDE_FOLDERS)
