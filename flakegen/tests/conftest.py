"""Shared fixtures for flakegen tests."""

import pytest

from flakegen.nix_gen.models import FlakeDescriptor


@pytest.fixture
def make_descriptor():
    """Factory for FlakeDescriptor with a Go project on x86_64-linux as the base.

    Any field can be overridden by keyword:

        def test_something(make_descriptor):
            d = make_descriptor(language="python", packages=["python3"])
    """

    def _make(**overrides) -> FlakeDescriptor:
        fields = {
            "name": "myapp",
            "language": "go",
            "packages": ["go"],
            "platform": "x86_64-linux",
        }
        fields.update(overrides)
        return FlakeDescriptor(**fields)

    return _make
