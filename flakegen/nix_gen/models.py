"""Pydantic model for the flake descriptor.

A FlakeDescriptor is assembled once per run from CLI input, the package
resolver and the host platform, then handed to the generator. It is frozen:
nothing downstream of construction may change it.

Package entries are deliberately left as the user typed them. Duplicates are
kept and empty entries from a trailing comma in `-p` are passed through.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from flakegen.config import DEFAULT_NIXPKGS_URL

DEFAULT_DESCRIPTION = "Dev Shell Flake"


class FlakeDescriptor(BaseModel):
    """Everything the flake template references.

    Field names are the template's variable names. Renaming one here means
    renaming it in generator.FLAKE_TEMPLATE and the hook templates.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = DEFAULT_DESCRIPTION
    packages: list[str]
    platform: str
    language: str
    nixpkgs_url: str = DEFAULT_NIXPKGS_URL
