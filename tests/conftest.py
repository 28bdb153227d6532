"""Shared fixtures for didpack tests."""

import asyncio

import pytest

import didpack
from didpack.keys import generate_keypair
from .test_vectors import (
    ALICE_SEED_HEX,
    BOB_SEED_HEX,
    CAROL_SEED_HEX,
    MALLORY_SEED_HEX,
)


@pytest.fixture(scope="session")
def sodium():
    """Process-wide primitives, made ready once."""
    return asyncio.run(didpack.ready())


@pytest.fixture
def alice(sodium):
    """Alice's keypair."""
    return generate_keypair(bytes.fromhex(ALICE_SEED_HEX), sodium)


@pytest.fixture
def bob(sodium):
    """Bob's keypair."""
    return generate_keypair(bytes.fromhex(BOB_SEED_HEX), sodium)


@pytest.fixture
def carol(sodium):
    """Carol's keypair."""
    return generate_keypair(bytes.fromhex(CAROL_SEED_HEX), sodium)


@pytest.fixture
def mallory(sodium):
    """A keypair no message is addressed to."""
    return generate_keypair(bytes.fromhex(MALLORY_SEED_HEX), sodium)
