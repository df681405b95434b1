"""Unified command line interface for the garden engine scripts.

Usage::

    python -m scripts <command> [args]
    python -m scripts --list

Every module in the ``scripts`` package with a ``main`` entrypoint is a
command; ``crop_timeline.py`` becomes ``crop-timeline``.
"""

from __future__ import annotations

import argparse
import ast
import pkgutil
import runpy
import sys
from pathlib import Path
from typing import Dict

_SKIP = {"cli", "__init__", "__main__"}


def _discover_commands() -> Dict[str, str]:
    """Return mapping of command names to module paths."""
    package_dir = Path(__file__).resolve().parent
    commands: Dict[str, str] = {}
    for mod in pkgutil.iter_modules([str(package_dir)]):
        if mod.ispkg or mod.name in _SKIP:
            continue
        commands[mod.name.replace("_", "-")] = f"scripts.{mod.name}"
    return commands


def _summary(module_name: str) -> str:
    """Return the first docstring line of a script without importing it."""
    path = Path(__file__).resolve().parent / f"{module_name.rsplit('.', 1)[-1]}.py"
    doc = ast.get_docstring(ast.parse(path.read_text(encoding="utf-8"))) or ""
    return doc.strip().splitlines()[0] if doc.strip() else ""


def main(argv: list[str] | None = None) -> None:
    """Run a script subcommand."""
    commands = _discover_commands()
    parser = argparse.ArgumentParser(description="Garden engine utilities")
    parser.add_argument("--list", action="store_true", help="list available commands")
    parser.add_argument("command", nargs="?", choices=sorted(commands))
    parser.add_argument("args", nargs=argparse.REMAINDER)
    ns = parser.parse_args(argv)

    if ns.list:
        width = max(len(name) for name in commands)
        for name in sorted(commands):
            print(f"{name.ljust(width)}  {_summary(commands[name])}")
        return
    if ns.command is None:
        parser.error("a command is required")

    module_name = commands[ns.command]
    sys.argv = [module_name] + ns.args
    runpy.run_module(module_name, run_name="__main__", alter_sys=True)


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
