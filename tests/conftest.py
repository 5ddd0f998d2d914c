import sys
import types

import pytest


@pytest.fixture
def no_pyzbar(monkeypatch):
    """Make ``import pyzbar`` fail as if the package were not installed."""
    monkeypatch.setitem(sys.modules, "pyzbar", None)
    monkeypatch.setitem(sys.modules, "pyzbar.pyzbar", None)


@pytest.fixture
def fake_pyzbar(monkeypatch):
    """Install a stand-in decoder; tests set ``decoded`` to what it returns."""
    calls = []
    state = types.SimpleNamespace(decoded=[], calls=calls)

    def decode(image):
        calls.append(image)
        return [
            types.SimpleNamespace(data=text if isinstance(text, bytes) else text.encode("utf-8"))
            for text in state.decoded
        ]

    package = types.ModuleType("pyzbar")
    module = types.ModuleType("pyzbar.pyzbar")
    module.decode = decode
    package.pyzbar = module
    monkeypatch.setitem(sys.modules, "pyzbar", package)
    monkeypatch.setitem(sys.modules, "pyzbar.pyzbar", module)
    return state
