"""Tests for architecture import boundaries.

These tests ensure that the layer boundaries are maintained:
- Nothing outside the CLI imports from the CLI
- The domain layer imports neither the application nor infrastructure layers
- The application layer only talks to infrastructure through its ports
"""

from __future__ import annotations

import ast
from pathlib import Path
import re

import pytest

# Root of the sheet_merger package
PACKAGE_ROOT = Path(__file__).parent.parent.parent.parent / "sheet_merger"


def get_python_files(directory: Path) -> list[Path]:
    return list(directory.rglob("*.py"))


def extract_imports_from_file(file_path: Path) -> list[str]:
    """Extract all imported module names from a Python file.

    Args:
        file_path: Path to Python file

    Returns:
        List of module names, relative imports without their leading dots
    """
    tree = ast.parse(file_path.read_text(encoding="utf-8"))
    imports: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imports.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            imports.append(node.module)
    return imports


def find_violations(layer: str, forbidden_pattern: str) -> list[str]:
    pattern = re.compile(forbidden_pattern)
    violations = []
    for py_file in get_python_files(PACKAGE_ROOT / layer):
        forbidden = [
            imp for imp in extract_imports_from_file(py_file) if pattern.search(imp)
        ]
        if forbidden:
            rel_path = py_file.relative_to(PACKAGE_ROOT.parent)
            violations.append(f"{rel_path}: {forbidden}")
    return violations


class TestCLIImportBoundary:
    """The CLI is the outermost layer; nothing else may import it."""

    @pytest.mark.parametrize("layer", ["domain", "application", "infrastructure"])
    def test_layer_does_not_import_cli(self, layer):
        violations = find_violations(layer, r"(^|\.)cli(\.|$)")

        assert not violations, f"{layer} imports CLI modules:\n" + "\n".join(
            violations
        )


class TestInnerLayers:
    """Tests keeping the domain and application layers free of adapters."""

    def test_domain_is_self_contained(self):
        violations = find_violations(
            "domain", r"(^|\.)(application|infrastructure)(\.|$)"
        )

        assert not violations, "Domain imports outer layers:\n" + "\n".join(violations)

    def test_application_does_not_import_infrastructure(self):
        violations = find_violations("application", r"(^|\.)infrastructure(\.|$)")

        assert not violations, "Application imports infrastructure:\n" + "\n".join(
            violations
        )
