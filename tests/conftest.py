"""Shared fixtures for the aptertree test suite."""

import pytest

from aptertree import ApterTree
from tree_builders import build_sample_tree


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: large randomised runs, skipped by run_tests.py by default"
    )


@pytest.fixture
def sample_tree() -> ApterTree:
    return build_sample_tree()


@pytest.fixture
def three_node_tree() -> ApterTree:
    tree = ApterTree()
    tree.insert("root")
    tree.insert("a", 0)
    tree.insert("b", 0)
    return tree


@pytest.fixture
def empty_tree() -> ApterTree:
    return ApterTree()
