#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import subprocess
import sys
import venv
from pathlib import Path

ROOT = Path(__file__).resolve().parent

# command -> (pip extra to install, module run with the venv interpreter)
COMMANDS: dict[str, tuple[str, list[str]]] = {
    "api": ("api", ["-m", "uvicorn", "seismic_ttf.api.main:app", "--host", "127.0.0.1", "--port", "8000"]),
    "score": ("", ["-m", "seismic_ttf.scripts_score_signal"]),
    "generate": ("", ["-m", "seismic_ttf.scripts_generate_synthetic"]),
    "test": ("test", ["-m", "pytest"]),
}


def _venv_python(venv_dir: Path) -> Path:
    if os.name == "nt":
        return venv_dir / "Scripts" / "python.exe"
    return venv_dir / "bin" / "python"


def _interpreter(venv_dir: Path | None) -> Path:
    if venv_dir is None:
        return Path(sys.executable)
    py = _venv_python(venv_dir)
    if not py.exists():
        print(f"Creating virtual environment at {venv_dir}")
        venv.create(venv_dir, with_pip=True)
    return py


def _install(py: Path, extra: str) -> None:
    target = f".[{extra}]" if extra else "."
    print(f"Installing seismic-ttf ({target})...")
    subprocess.check_call([str(py), "-m", "pip", "install", "-e", target], cwd=ROOT)


def build_command(py: Path, command: str, extra_args: list[str]) -> list[str]:
    _, module_args = COMMANDS[command]
    return [str(py), *module_args, *extra_args]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run the seismic time-to-failure tools from a ready virtual environment.",
        epilog="Launcher options go before the command. Examples: run.py score data/synthetic/seg_0620e6.csv --seed 1 | "
        "run.py generate --n-files 3 | run.py api -- --reload",
    )
    parser.add_argument("command", choices=sorted(COMMANDS), help="api: serve HTTP; score: one CSV; generate: synthetic segments; test: pytest.")
    parser.add_argument("--venv", default=str(ROOT / ".venv"), help="Virtual environment directory (default: .venv).")
    parser.add_argument("--system", action="store_true", help="Use the current interpreter instead of a venv.")
    parser.add_argument("--no-install", action="store_true", help="Skip `pip install -e` (environment already set up).")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed through to the command, after '--'.")
    args = parser.parse_args(argv)

    if sys.version_info < (3, 11):
        print("Python 3.11+ is required.", file=sys.stderr)
        return 1

    extra_args = args.args
    if extra_args and extra_args[0] == "--":
        extra_args = extra_args[1:]

    py = _interpreter(None if args.system else Path(args.venv).expanduser())
    if not args.no_install:
        _install(py, COMMANDS[args.command][0])

    return subprocess.call(build_command(py, args.command, extra_args), cwd=ROOT)


if __name__ == "__main__":
    raise SystemExit(main())
