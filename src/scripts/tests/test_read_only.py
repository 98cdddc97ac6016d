#!/usr/bin/env python3
"""
Read-only policy tests for the Voice Memos clip tools.

The Voice Memos library belongs to the Voice Memos app. These tests scan the
production sources to make sure nothing can modify it:
- Every SQLite connection is opened through a mode=ro URI
- No SQL string literal contains a write statement
- No file is opened for writing outside temporary and log directories

Run with: python3 -m pytest src/scripts/tests/test_read_only.py -v
"""

import ast
import re
from pathlib import Path
from typing import List, Tuple

import pytest


# SQL statements that modify a database
WRITE_SQL_PATTERN = re.compile(
    r"\b(INSERT\s+INTO|UPDATE\s+\w+\s+SET|DELETE\s+FROM|CREATE\s+(TABLE|INDEX|VIEW|TRIGGER)|"
    r"DROP\s+(TABLE|INDEX|VIEW|TRIGGER)|ALTER\s+TABLE|REPLACE\s+INTO|VACUUM)\b",
    re.IGNORECASE,
)

# open() modes that write
WRITE_MODE_CHARS = set("wax+")


def get_python_source_files() -> List[Path]:
    """
    Get all production Python files.

    Returns:
        List of .py files under src/voicememos and src/scripts, excluding tests.
    """
    src_root = Path(__file__).resolve().parent.parent.parent
    python_files = []

    for search_dir in ["voicememos", "scripts"]:
        search_path = src_root / search_dir
        if not search_path.exists():
            continue
        for py_file in search_path.rglob("*.py"):
            if py_file.name.startswith("test_") or "tests" in py_file.parts:
                continue
            python_files.append(py_file)

    return python_files


def parse_file(file_path: Path) -> ast.AST:
    with open(file_path, "r", encoding="utf-8") as f:
        return ast.parse(f.read(), filename=str(file_path))


def call_name(node: ast.Call) -> str:
    """Dotted name of the called function, or "" when it is not a plain name."""
    func = node.func
    parts = []
    while isinstance(func, ast.Attribute):
        parts.append(func.attr)
        func = func.value
    if isinstance(func, ast.Name):
        parts.append(func.id)
        return ".".join(reversed(parts))
    return ""


def find_sqlite_connects(tree: ast.AST) -> List[ast.Call]:
    return [
        node for node in ast.walk(tree)
        if isinstance(node, ast.Call) and call_name(node) == "sqlite3.connect"
    ]


def find_string_literals(tree: ast.AST) -> List[Tuple[int, str]]:
    """Collect string constants, including the literal parts of f-strings."""
    literals = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            literals.append((node.lineno, node.value))
    return literals


class TestSourceDiscovery:
    """Sanity checks for the scanner itself."""

    def test_finds_production_files(self):
        """Test that the scan covers the package and the scripts."""
        names = {path.name for path in get_python_source_files()}

        assert "database.py" in names
        assert "play_random_memo.py" in names
        assert not any(name.startswith("test_") for name in names)


class TestDatabaseAccess:
    """Every database connection must be read-only."""

    def test_sqlite_connect_only_in_database_module(self):
        """Test that only database.py opens SQLite connections."""
        offenders = [
            path.name for path in get_python_source_files()
            if find_sqlite_connects(parse_file(path)) and path.name != "database.py"
        ]

        assert offenders == [], f"sqlite3.connect used outside database.py: {offenders}"

    def test_connections_use_uri_mode(self):
        """Test that sqlite3.connect is always called with uri=True."""
        for path in get_python_source_files():
            for node in find_sqlite_connects(parse_file(path)):
                keywords = {kw.arg: kw.value for kw in node.keywords}
                assert "uri" in keywords, f"{path.name}:{node.lineno} connects without uri=True"
                assert isinstance(keywords["uri"], ast.Constant) and keywords["uri"].value is True

    def test_uri_requests_read_only_mode(self):
        """Test that the connection URI carries mode=ro."""
        src_root = Path(__file__).resolve().parent.parent.parent
        source = (src_root / "voicememos" / "database.py").read_text(encoding="utf-8")

        assert "?mode=ro" in source

    def test_no_write_sql(self):
        """Test that no production string literal contains a write statement."""
        violations = []
        for path in get_python_source_files():
            for lineno, literal in find_string_literals(parse_file(path)):
                if WRITE_SQL_PATTERN.search(literal):
                    violations.append(f"{path.name}:{lineno}: {literal.strip()[:60]}")

        assert violations == [], "Write SQL found:\n" + "\n".join(violations)

    def test_pattern_detects_writes(self):
        """Test that the scanner would catch common write statements."""
        for statement in (
            "INSERT INTO ZCLOUDRECORDING VALUES (1)",
            "UPDATE ZCLOUDRECORDING SET ZTITLE = 'x'",
            "delete from ZCLOUDRECORDING",
            "DROP TABLE ZCLOUDRECORDING",
            "CREATE TABLE t (a)",
        ):
            assert WRITE_SQL_PATTERN.search(statement), statement

        assert not WRITE_SQL_PATTERN.search("SELECT ZDATE, ZDURATION FROM ZCLOUDRECORDING WHERE ZDURATION > ?")


class TestFileAccess:
    """Production code must not open files for writing."""

    @pytest.mark.parametrize("path", get_python_source_files(), ids=lambda p: p.name)
    def test_open_calls_are_read_only(self, path: Path):
        """Test that builtin open() is only called with read modes."""
        for node in ast.walk(parse_file(path)):
            if not (isinstance(node, ast.Call) and call_name(node) == "open"):
                continue

            mode = None
            if len(node.args) >= 2 and isinstance(node.args[1], ast.Constant):
                mode = node.args[1].value
            for kw in node.keywords:
                if kw.arg == "mode" and isinstance(kw.value, ast.Constant):
                    mode = kw.value.value

            assert not (WRITE_MODE_CHARS & set(mode or "r")), (
                f"{path.name}:{node.lineno} opens a file with mode {mode!r}"
            )
