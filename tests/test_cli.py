"""Tests for the command line interface."""

import json

from cli import main, parse_args
from tests.conftest import SAMPLE_PROJECT


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test default argument values."""
        parsed = parse_args([])

        assert parsed.root == "."
        assert parsed.format == "ascii"
        assert parsed.orientation == "LR"
        assert parsed.include_ext is None

    def test_scan_options(self):
        """Test scan flags."""
        parsed = parse_args(["src", "--include-ext", "ts", ".py", "--top", "3", "--workers", "2"])

        assert parsed.root == "src"
        assert parsed.include_ext == ["ts", ".py"]
        assert parsed.top == 3
        assert parsed.workers == 2


class TestMain:
    """Tests for the main entry point."""

    def test_json_to_stdout(self, make_tree, capsys):
        """Test a JSON report on stdout."""
        root = make_tree(SAMPLE_PROJECT)

        assert main([str(root), "-f", "json", "-q"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["mainFile"] == "src/main.ts"
        assert data["unresolved"] == {"src/util.ts": ["./missing"]}

    def test_ascii_default(self, make_tree, capsys):
        """Test the text summary is the default format."""
        root = make_tree(SAMPLE_PROJECT)

        assert main([str(root), "-q"]) == 0

        out = capsys.readouterr().out
        assert "Critical files:" in out
        assert "Folder tree:" in out

    def test_missing_root(self, tmp_path, capsys):
        """Test a missing root directory is an error."""
        assert main([str(tmp_path / "missing"), "-q"]) == 1

        assert "is not a directory" in capsys.readouterr().err

    def test_output_file(self, make_tree, tmp_path_factory, capsys):
        """Test writing output to a file."""
        root = make_tree(SAMPLE_PROJECT)
        output = tmp_path_factory.mktemp("out") / "graph.mmd"

        assert main([str(root), "-f", "mermaid", "-o", str(output), "-q"]) == 0

        assert output.read_text(encoding="utf-8").startswith("flowchart LR")
        assert capsys.readouterr().out == ""

    def test_include_ext(self, make_tree, capsys):
        """Test the extension filter flag."""
        root = make_tree({"a.ts": 'import "./b";\n', "b.ts": "", "c.py": "import os\n"})

        assert main([str(root), "-f", "json", "-q", "--include-ext", "py"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [entry["path"] for entry in data["files"]] == ["c.py"]
        assert data["totalFiles"] == 3

    def test_exclude_dir(self, make_tree, capsys):
        """Test extra excluded folders keep the defaults."""
        root = make_tree({
            "a.ts": "",
            "fixtures/b.ts": "",
            "node_modules/c/index.js": "",
        })

        assert main([str(root), "-f", "json", "-q", "--exclude-dir", "fixtures"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [entry["path"] for entry in data["files"]] == ["a.ts"]

    def test_top(self, make_tree, capsys):
        """Test limiting the number of critical files."""
        root = make_tree(SAMPLE_PROJECT)

        assert main([str(root), "-f", "json", "-q", "--top", "1"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["criticalFiles"] == ["src/main.ts"]

    def test_main_file_flag(self, make_tree, capsys):
        """Test pinning the main file."""
        root = make_tree(SAMPLE_PROJECT)

        assert main([str(root), "-f", "json", "-q", "--main-file", "src/util.ts"]) == 0

        assert json.loads(capsys.readouterr().out)["mainFile"] == "src/util.ts"

    def test_config_file_discovered(self, make_tree, capsys):
        """Test a settings file in the root is picked up."""
        files = dict(SAMPLE_PROJECT)
        files[".project-graph.yaml"] = "includeExtensions: [json]\n"
        root = make_tree(files)

        assert main([str(root), "-f", "json", "-q"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [entry["path"] for entry in data["files"]] == ["config.json"]

    def test_explicit_config_and_override(self, make_tree, tmp_path_factory, capsys):
        """Test --config is read and command line flags win over it."""
        root = make_tree(SAMPLE_PROJECT)
        config = tmp_path_factory.mktemp("cfg") / "settings.toml"
        config.write_text('includeExtensions = ["json"]\ncriticalLimit = 1\n', encoding="utf-8")

        assert main([str(root), "-f", "json", "-q", "--config", str(config), "--include-ext", "ts"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert sorted(entry["path"] for entry in data["files"]) == ["src/main.ts", "src/util.ts"]
        assert len(data["criticalFiles"]) == 1

    def test_absolute_main_file(self, make_tree, capsys):
        """Test an absolute main file path under the root is made relative."""
        root = make_tree(SAMPLE_PROJECT)
        absolute = root / "src" / "util.ts"

        assert main([str(root), "-f", "json", "-q", "--main-file", str(absolute)]) == 0

        assert json.loads(capsys.readouterr().out)["mainFile"] == "src/util.ts"
