import logging

import pytest


class ScriptedRandom:
    """Hands out scripted values in order, then `default` forever."""

    def __init__(self, values=(), default=0.99):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
