"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a scripted stand-in for ctest that runs as a real subprocess.
"""

import sys
from pathlib import Path

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

for module_name in list(sys.modules.keys()):
    if module_name.startswith("ctestdeck"):
        del sys.modules[module_name]

from ctestdeck.config.models import RunnerConfig  # noqa: E402

FAKE_CTEST = """\
import json
import pathlib
import sys
import time

here = pathlib.Path.cwd()
(here / "argv.json").write_text(json.dumps(sys.argv[1:]))

output = here / "output.txt"
if output.exists():
    for line in output.read_text().splitlines(keepends=True):
        sys.stdout.write(line)
        sys.stdout.flush()
        time.sleep(0.005)

if (here / "stderr.txt").exists():
    sys.stderr.write((here / "stderr.txt").read_text())
    sys.stderr.flush()

if (here / "hang").exists():
    time.sleep(60)

code = here / "exit_code"
sys.exit(int(code.read_text()) if code.exists() else 0)
"""


@pytest.fixture
def fake_ctest(tmp_path: Path) -> list[str]:
    """Command that behaves like ctest, scripted by files in its cwd."""
    script = tmp_path / "fake_ctest.py"
    script.write_text(FAKE_CTEST)
    return [sys.executable, str(script)]


@pytest.fixture
def runner_config(fake_ctest: list[str]) -> RunnerConfig:
    return RunnerConfig(ctest_command=fake_ctest, terminate_grace_sec=2.0)


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    path = tmp_path / "build"
    path.mkdir()
    (path / "CMakeCache.txt").write_text("# cache\n")
    (path / "CTestTestfile.cmake").write_text("add_test(a a)\n")
    return path
