#!/usr/bin/env python3
"""Core isolation validation script.

Enforces the architectural rule that core/, types/, and utils/ directories
never depend on the command-line presentation layer in app/. The analysis
engine must stay usable as a library without click, terminal rendering or
watch-mode machinery.

This script scans for:
- Imports from dir_analyzer.app (absolute or relative)
- Direct use of click or terminal styling in the protected packages

Exit codes:
    0: No violations found (clean)
    1: Violations detected (architectural rule broken)
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Final

# ANSI color codes for terminal output
RED: Final[str] = "\033[91m"
GREEN: Final[str] = "\033[92m"
YELLOW: Final[str] = "\033[93m"
RESET: Final[str] = "\033[0m"

# Directories that must not depend on the presentation layer
PROTECTED_DIRS: Final[tuple[str, ...]] = ("core", "types", "utils")

APP_IMPORT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:from\s+(?:dir_analyzer\.app|\.\.app)\b|import\s+dir_analyzer\.app\b)"
)
CLICK_IMPORT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*(?:from\s+click\b|import\s+click\b)")


def check_file(file_path: Path) -> list[tuple[int, str]]:
    """Check a single Python file for isolation violations.

    Args:
        file_path: Path to the Python file to check.

    Returns:
        List of (line_number, violation_description) tuples.
    """
    violations: list[tuple[int, str]] = []

    try:
        lines = file_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        print(f"{YELLOW}Warning: Could not read {file_path}: {e}{RESET}", file=sys.stderr)
        return violations

    for line_num, line in enumerate(lines, start=1):
        if APP_IMPORT_PATTERN.search(line):
            violations.append((line_num, f"Import from presentation layer: {line.strip()}"))
        if CLICK_IMPORT_PATTERN.search(line):
            violations.append((line_num, f"CLI toolkit import: {line.strip()}"))

    return violations


def scan_directory(base_path: Path, protected_dir: str) -> dict[Path, list[tuple[int, str]]]:
    """Scan a protected directory for violations.

    Args:
        base_path: Root path of the dir_analyzer package.
        protected_dir: Name of protected directory (core, types, or utils).

    Returns:
        Dictionary mapping file paths to their violations.
    """
    dir_path = base_path / protected_dir
    if not dir_path.exists():
        print(
            f"{YELLOW}Warning: Protected directory {dir_path} does not exist{RESET}",
            file=sys.stderr,
        )
        return {}

    violations_by_file: dict[Path, list[tuple[int, str]]] = {}
    for py_file in dir_path.rglob("*.py"):
        if "__pycache__" in py_file.parts:
            continue
        file_violations = check_file(py_file)
        if file_violations:
            violations_by_file[py_file] = file_violations

    return violations_by_file


def main() -> int:
    """Main entry point for the core isolation check.

    Returns:
        Exit code: 0 if no violations, 1 if violations found.
    """
    project_root = Path(__file__).parent.parent
    src_path = project_root / "src" / "dir_analyzer"

    if not src_path.exists():
        print(f"{RED}Error: Could not find src/dir_analyzer directory{RESET}", file=sys.stderr)
        return 1

    print("Checking core isolation in core, types, and utils modules...")
    print(f"Scanning: {src_path}\n")

    all_violations: dict[Path, list[tuple[int, str]]] = {}
    for protected_dir in PROTECTED_DIRS:
        all_violations.update(scan_directory(src_path, protected_dir))

    if not all_violations:
        print(f"{GREEN}✓ No core isolation violations found!{RESET}")
        return 0

    total_violations = sum(len(v) for v in all_violations.values())
    print(f"{RED}✗ Found {total_violations} core isolation violations:{RESET}\n")

    for file_path, violations in sorted(all_violations.items()):
        try:
            rel_path = file_path.relative_to(project_root)
        except ValueError:
            rel_path = file_path

        print(f"{RED}{rel_path}{RESET}")
        for line_num, description in violations:
            print(f"  {line_num}: {description}")
        print()

    print(f"{RED}Core isolation check failed!{RESET}")
    print("\nMove presentation code (click, rendering, watch mode) to app/.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
