from __future__ import annotations
import random
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import pytest

from range_pipeline import RangePipeline, RewriteTable, load_almanac

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def example_path() -> Path:
    return DATA_DIR / "almanac_example.txt"


@pytest.fixture
def example_almanac(example_path):
    return load_almanac(example_path)


@pytest.fixture
def example_pipeline(example_almanac) -> RangePipeline:
    return RangePipeline.from_almanac(example_almanac)


@pytest.fixture
def seed_to_soil() -> RewriteTable:
    return RewriteTable.from_triples([(50, 98, 2), (52, 50, 48)], "seed", "soil")


def random_table(rng: random.Random, domain: int = 40, max_rules: int = 5) -> RewriteTable:
    """Non-overlapping rules with random offsets inside [0, domain)."""
    cuts = sorted(rng.sample(range(domain + 1), 2 * rng.randint(0, max_rules)))
    triples = []
    for src_start, src_end in zip(cuts[0::2], cuts[1::2]):
        if src_end == src_start:
            continue
        dest = rng.randint(0, domain)
        triples.append((dest, src_start, src_end - src_start))
    rng.shuffle(triples)
    return RewriteTable.from_triples(triples)


@pytest.fixture
def random_tables():
    rng = random.Random(20231205)
    return [random_table(rng) for _ in range(25)]
