#!/usr/bin/env python3
"""
Fail if core reaches into the MCP server layer.
Checks all Python files under src/trello_mcp/core/; only server.py may
import the mcp SDK server modules.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "trello_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "mcp.server",
    "mcp.types",
    "trello_mcp.server",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    tree = ast.parse(path.read_text())
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            mods = [alias.name for alias in node.names]
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            # "from mcp import types" names the submodule in the alias
            mods = [node.module] + [f"{node.module}.{a.name}" for a in node.names]
        else:
            continue
        for mod in mods:
            if is_forbidden(mod):
                errors.append(f"{path}: forbidden import '{mod}'")
    return errors


def main(core_dir: Path = CORE_DIR) -> int:
    violations: list[str] = []
    for py_file in sorted(core_dir.rglob("*.py")):
        violations.extend(scan_file(py_file))

    if violations:
        for v in violations:
            print(v, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
