from __future__ import annotations

import shutil
import stat
import sys
from pathlib import Path

import pytest

from kmatrix.logging_config import configure_logging

# Stand-in for `vng -r <version> -- <cmd...>`. It reproduces the launcher's
# error wording for unknown kernels and runs the command otherwise.
FAKE_VNG = '''#!{python}
import subprocess
import sys
import time

args = sys.argv[1:]
version = args[args.index("-r") + 1]
cmd = args[args.index("--") + 1:]

if version == "wrong-name":
    sys.stderr.write("error: failed to retrieve content from kernel.ubuntu.com\\n")
    sys.exit(1)
if version == "v5.37.1":
    sys.stderr.write("error: kernel image v5.37.1 does not exist\\n")
    sys.exit(1)
if version == "sleepy":
    time.sleep(60)

code = subprocess.call(cmd)
if code != 0:
    sys.stderr.write(f"command {{cmd[0]}} exited with code {{code}}\\n")
sys.exit(code)
'''


@pytest.fixture
def fake_vng(tmp_path: Path) -> str:
    path = tmp_path / "vng"
    path.write_text(FAKE_VNG.format(python=sys.executable), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def true_bin() -> str:
    found = shutil.which("true")
    if found is None:
        pytest.skip("'true' not available")
    return found


@pytest.fixture
def false_bin() -> str:
    found = shutil.which("false")
    if found is None:
        pytest.skip("'false' not available")
    return found


@pytest.fixture
def echo_bin() -> str:
    found = shutil.which("echo")
    if found is None:
        pytest.skip("'echo' not available")
    return found


@pytest.fixture(autouse=True)
def _logging() -> None:
    configure_logging("debug")
