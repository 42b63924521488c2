"""Pytest configuration and fixtures for Cube Sandbox tests."""

import random

import pytest


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def world(seeded_rng):
    """A freshly created world with the default four bodies."""
    from sandbox.world import WorldState

    return WorldState.create(seeded_rng)
