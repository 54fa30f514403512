import importlib.util
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def run_module():
    spec = importlib.util.spec_from_file_location("run_launcher", ROOT / "run.py")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


@pytest.mark.parametrize(
    "command, module",
    [
        ("score", "seismic_ttf.scripts_score_signal"),
        ("generate", "seismic_ttf.scripts_generate_synthetic"),
        ("test", "pytest"),
    ],
)
def test_commands_dispatch_to_modules(run_module, command, module):
    cmd = run_module.build_command(Path("py"), command, ["x"])
    assert cmd == ["py", "-m", module, "x"]


def test_extras_per_command(run_module):
    assert run_module.COMMANDS["api"][0] == "api"
    assert run_module.COMMANDS["test"][0] == "test"
    assert run_module.COMMANDS["score"][0] == ""


def test_main_passes_args_through(run_module, monkeypatch):
    calls = []
    monkeypatch.setattr(run_module.subprocess, "call", lambda cmd, cwd: calls.append(cmd) or 0)
    rc = run_module.main(["--system", "--no-install", "score", "--", "seg_0620e6.csv", "--seed", "1"])
    assert rc == 0
    assert calls == [[sys.executable, "-m", "seismic_ttf.scripts_score_signal", "seg_0620e6.csv", "--seed", "1"]]
