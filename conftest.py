import io
from datetime import date

import pytest
from rich.console import Console

import main
from library import Library

TODAY = date(2026, 1, 5)


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # CLI --output writes to os.environ; keep every test starting in plain mode
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")


@pytest.fixture
def lib():
    # Empty catalog with a fixed "today" so due dates are predictable
    return Library(loan_period_days=14, clock=lambda: TODAY)


@pytest.fixture
def seeded_lib(monkeypatch):
    lib = main.build_library(seed=True, loan_period_days=14, clock=lambda: TODAY)
    monkeypatch.setattr(main.LibraryManager, "_instance", lib)
    return lib


@pytest.fixture
def menu_console(monkeypatch):
    console = Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)
    monkeypatch.setattr(main, "console", console)
    return console
