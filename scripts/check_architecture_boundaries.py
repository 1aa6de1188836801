#!/usr/bin/env python3
from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
PACKAGE_ROOT = REPO_ROOT / "coagent_ui"
BASELINE_FILE = REPO_ROOT / "scripts" / "architecture-boundary-baseline.txt"

# Agent runtime libraries may only be touched by the adapter layer.
RUNTIME_LIBRARIES = ("langgraph", "langchain_core", "langchain")
ADAPTER_MODULES = {"coagent_ui.interface.adapters"}


@dataclass(frozen=True)
class Violation:
    code: str
    file: str
    line: int
    imported: str
    message: str

    def key(self) -> str:
        return f"{self.code}|{self.file}:{self.line}|{self.imported}"


def iter_python_files(root: Path) -> list[Path]:
    return sorted(root.rglob("*.py"))


def module_name_from_path(path: Path) -> str:
    rel = path.relative_to(PACKAGE_ROOT)
    parts = rel.with_suffix("").parts
    if parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(("coagent_ui", *parts))


def resolve_import(module_name: str, node: ast.ImportFrom, *, is_package: bool) -> str | None:
    current_pkg = module_name if is_package else module_name.rsplit(".", 1)[0]
    if node.level == 0:
        return node.module

    pkg_parts = current_pkg.split(".")
    pop_count = node.level - 1
    if pop_count > len(pkg_parts):
        return None
    base = pkg_parts[: len(pkg_parts) - pop_count]
    if node.module:
        return ".".join(base + [node.module])
    return ".".join(base)


def extract_imports(path: Path) -> list[tuple[int, str]]:
    module_name = module_name_from_path(path)
    is_package = path.name == "__init__.py"
    tree = ast.parse(path.read_text(), filename=str(path))
    out: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                out.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            resolved = resolve_import(module_name, node, is_package=is_package)
            if resolved:
                out.append((node.lineno, resolved))
    return out


def layer_of(module_name: str) -> str | None:
    parts = module_name.split(".")
    return parts[1] if len(parts) >= 2 else None


def _is_runtime_library(imported: str) -> bool:
    root = imported.split(".", 1)[0]
    return root in RUNTIME_LIBRARIES


def collect_violations() -> list[Violation]:
    violations: list[Violation] = []

    for file_path in iter_python_files(PACKAGE_ROOT):
        module_name = module_name_from_path(file_path)
        layer = layer_of(module_name)
        rel_file = str(file_path.relative_to(REPO_ROOT))

        for lineno, imported in extract_imports(file_path):
            # Rule LAY001: domain stays independent of the layers built on it
            if layer in {"domain", "shared", "config"} and imported.startswith(
                ("coagent_ui.interface", "coagent_ui.application")
            ):
                violations.append(
                    Violation(
                        code="LAY001",
                        file=rel_file,
                        line=lineno,
                        imported=imported,
                        message=f"{layer} importing an outer layer is forbidden",
                    )
                )

            # Rule LAY002: interface cannot reach back into application
            if layer == "interface" and imported.startswith("coagent_ui.application"):
                violations.append(
                    Violation(
                        code="LAY002",
                        file=rel_file,
                        line=lineno,
                        imported=imported,
                        message="interface importing application is forbidden",
                    )
                )

            # Rule RTL001: agent runtime imports only in the adapter module
            if _is_runtime_library(imported) and module_name not in ADAPTER_MODULES:
                violations.append(
                    Violation(
                        code="RTL001",
                        file=rel_file,
                        line=lineno,
                        imported=imported,
                        message="agent runtime import outside interface.adapters",
                    )
                )

    dedup = {v.key(): v for v in violations}
    return sorted(dedup.values(), key=lambda v: (v.code, v.file, v.line, v.imported))


def read_baseline() -> set[str]:
    if not BASELINE_FILE.exists():
        return set()
    keys: set[str] = set()
    for line in BASELINE_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        keys.add(line)
    return keys


def main() -> int:
    violations = collect_violations()
    if len(sys.argv) > 1 and sys.argv[1] == "--print-current":
        for v in violations:
            print(v.key())
        return 0

    baseline = read_baseline()
    current = {v.key() for v in violations}
    new_violations = sorted(current - baseline)
    resolved = sorted(baseline - current)

    if resolved:
        print("Resolved baseline violations (consider updating baseline):")
        for item in resolved:
            print(f"  - {item}")

    if new_violations:
        print("New architecture boundary violations detected:")
        for item in new_violations:
            print(f"  - {item}")
        return 1

    print("Architecture boundary check passed (no new violations).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
