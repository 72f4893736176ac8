import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from killswitch_graduator.workspace.project import Project

CHECKOUT_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
SEARCH_ID = "9b2f8e1c-3d4a-4b5c-8d6e-7f8091a2b3c4"

FLAGS_MODULE = f'''
from killswitch import KillSwitch


def is_checkout_disabled():
    return KillSwitch.is_activated("{CHECKOUT_ID}", "2023-01-01")


def is_search_disabled():
    # Graduation date: March 3, 2022
    return KillSwitch.is_activated("{SEARCH_ID}")


def is_beta_disabled():
    return KillSwitch.is_activated("not-a-uuid", "2020-01-01")


def is_future_disabled():
    return KillSwitch.is_activated("11111111-1111-1111-1111-111111111111", "2999-01-01")


def plain_helper():
    return compute()
'''


@pytest.fixture
def write_files(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """Write dedented sources under tmp_path and return the root."""
    def _write(files: Dict[str, str]) -> Path:
        for relative, source in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source).lstrip("\n"))
        return tmp_path
    return _write


@pytest.fixture
def make_project(write_files) -> Callable[[Dict[str, str]], Project]:
    """Write sources and load them as a Project."""
    def _make(files: Dict[str, str]) -> Project:
        return Project.from_directory(write_files(files))
    return _make


@pytest.fixture
def flags_project(make_project) -> Project:
    return make_project({
        "app/__init__.py": "",
        "app/flags.py": FLAGS_MODULE,
        "app/checkout.py": """
            from app.flags import is_checkout_disabled


            def run():
                if not is_checkout_disabled():
                    do_work()
        """,
    })
