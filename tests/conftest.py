"""
Shared fixtures for the loader animation tests.
"""

import asyncio

import pytest

from core.path_model import PathParser, Size
from core.animation.animation_controller import FillableLoader


def make_line_nodes(count: int = 100):
    """Zig-zag outline of exactly `count` nodes inside a 200x100 box."""
    commands = ["M 0 90"]
    for i in range(1, count):
        x = 200.0 * i / (count - 1)
        y = 10.0 if i % 2 else 90.0
        commands.append(f"L {x} {y}")
    return PathParser.parse(" ".join(commands))


@pytest.fixture
def line_nodes():
    return make_line_nodes(100)


@pytest.fixture
def reference_size():
    return Size(200.0, 100.0)


@pytest.fixture
def line_loader(line_nodes, reference_size):
    loader = FillableLoader.from_nodes(line_nodes, reference_size,
                                       stroke_duration_millis=2000,
                                       fill_duration_millis=8000)
    yield loader
    loader.close()


@pytest.fixture
def cat_loader():
    loader = FillableLoader()
    yield loader
    loader.close()


@pytest.fixture
def pump():
    """Let pending tasks run a few event loop iterations."""
    async def _pump(iterations: int = 5):
        for _ in range(iterations):
            await asyncio.sleep(0)
    return _pump
