"""Pytest configuration and shared instance fixtures.

Also ensures the 'src' directory (src layout) is on sys.path for imports.
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path so 'import pfsp_wt' works without installing
_src = Path(__file__).resolve().parents[1] / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from pfsp_wt.instance import Instance  # noqa: E402

SAMPLE_TEXT = """3 2
1 2 2 3
1 4 2 1
1 1 2 5
Reldue
-1 5 -1 1
-1 4 -1 2
-1 9 -1 1
"""


@pytest.fixture
def sample_instance() -> Instance:
    """3 jobs x 2 machines; order [1, 2, 3] has weighted tardiness 9."""
    return Instance.from_lists(
        processing_times=[[2, 3], [4, 1], [1, 5]],
        due_dates=[5, 4, 9],
        priorities=[1, 2, 1],
        name="sample_3x2",
    )


def make_random_instance(n: int, m: int, seed: int) -> Instance:
    rng = random.Random(seed)
    p = [[rng.randint(1, 20) for _ in range(m)] for _ in range(n)]
    horizon = sum(sum(row) for row in p) // m
    due = [rng.randint(horizon // 4, horizon) for _ in range(n)]
    prio = [rng.randint(1, 5) for _ in range(n)]
    return Instance.from_lists(p, due, prio, name=f"rand_{n}x{m}_{seed}")


@pytest.fixture
def small_instance() -> Instance:
    return make_random_instance(8, 4, seed=7)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "3x2_1"
    path.write_text(SAMPLE_TEXT)
    return path


@pytest.fixture
def instance_factory():
    """Build seeded random instances: ``instance_factory(n, m, seed)``."""
    return make_random_instance
