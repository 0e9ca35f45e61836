"""Check the layer contracts declared under ``[tool.importlinter]``."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import click
from importlinter.cli import lint_imports_command

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "pyproject.toml"


def lint_imports(argv: Sequence[str] | None = None) -> int:
    """Run Import Linter against the project config; return its exit code."""
    args = list(argv) if argv is not None else []
    if "--config" not in args:
        args = ["--config", str(DEFAULT_CONFIG), *args]
    try:
        return lint_imports_command.main(
            args=args, prog_name="fitbuddy-lint-imports", standalone_mode=False
        ) or 0
    except SystemExit as exc:
        return int(exc.code or 0)
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return 1


if __name__ == "__main__":
    sys.exit(lint_imports(sys.argv[1:]))
