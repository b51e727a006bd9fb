"""
Schema-specific pytest configuration and fixtures.
"""
import pytest


@pytest.fixture
def release_target():
    """A packaging rule as it appears in build.yaml after variable substitution."""
    return {
        "phony": True,
        "prerequisites": ["target/release/grid-world"],
        "order_only": ["build/release"],
        "command": {
            "kind": "stage",
            "artifact": "target/release/grid-world",
            "destination": "build/release",
        },
    }


@pytest.fixture
def compile_target():
    return {
        "sources": ["grid-world/src"],
        "command": {"kind": "run", "argv": ["cargo", "build", "--release"]},
    }
