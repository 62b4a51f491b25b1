"""Flake generator — renders flake.nix from a FlakeDescriptor.

This module is the single place where a FlakeDescriptor (Python) becomes Nix
text. Rendering is a single Jinja2 pass over two templates:

  - "hook": the language shellHook fragment from nix_gen.hooks
  - "flake.nix": the outer flake, which includes "hook" by name inside
    its `shellHook = '' ... '';` block

Generated structure (python, on x86_64-linux):

    {
      description = "Dev Shell Flake";

      inputs = {
        nixpkgs.url = "nixpkgs/nixos-unstable";
      };

      outputs = { self, nixpkgs, ... }: let
        system = "x86_64-linux"; # Change to your system if needed
        pkgs = import nixpkgs {
          inherit system;
        };
      in {
        devShells.${system}.default = pkgs.mkShell {
          buildInputs = with pkgs; [
            python3
          ];

          shellHook = ''
            ...
          '';
        };
      };
    }

Both templates are static. A parse or render failure therefore means a bug in
this package, and is raised as TemplateParseError / TemplateExecError rather
than a jinja2 exception.
"""

from __future__ import annotations

import logging

import logfire
from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError, TemplateSyntaxError

from flakegen.errors import TemplateExecError, TemplateParseError
from flakegen.nix_gen.hooks import select_hook
from flakegen.nix_gen.models import FlakeDescriptor

logger = logging.getLogger(__name__)

HOOK_TEMPLATE_NAME = "hook"
FLAKE_TEMPLATE_NAME = "flake.nix"

FLAKE_TEMPLATE = """\
{
  description = {{ description | nix_string }};

  inputs = {
    nixpkgs.url = {{ nixpkgs_url | nix_string }};
  };

  outputs = { self, nixpkgs, ... }: let
    system = {{ platform | nix_string }}; # Change to your system if needed
    pkgs = import nixpkgs {
      inherit system;
    };
  in {
    devShells.${system}.default = pkgs.mkShell {
      buildInputs = with pkgs; [
{% for package in packages %}
        {{ package }}
{% endfor %}
      ];

      shellHook = ''{% include "hook" %}'';
    };
  };
}
"""


def _nix_string(value: str) -> str:
    """Wrap a Python string as a Nix string literal.

    Escapes Nix special characters within double-quoted strings:
      \\  →  \\\\   (must be first to avoid double-escaping)
      "   →  \\"
      $   →  \\$    (prevents Nix string interpolation)
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'"{escaped}"'


def _nix_indented(value: str) -> str:
    """Escape a Python string for interpolation inside a Nix indented string.

    Inside '' ... '' the escapes are:
      ''  →  '''   (must be first; otherwise the next rule is re-escaped)
      ${  →  ''${  (prevents Nix string interpolation)

    Example: "my${app}" → "my''${app}"
    """
    return value.replace("''", "'''").replace("${", "''${")


def build_environment(hook_source: str) -> Environment:
    """Build the Jinja2 environment holding the hook and flake templates.

    Both sources are parsed up front so a syntax error surfaces here, before
    any output is produced.

    Args:
        hook_source: The shellHook template text (may be empty).

    Returns:
        An Environment from which FLAKE_TEMPLATE_NAME can be rendered.

    Raises:
        TemplateParseError: If either template has a syntax error.
    """
    env = Environment(
        loader=DictLoader(
            {
                HOOK_TEMPLATE_NAME: hook_source,
                FLAKE_TEMPLATE_NAME: FLAKE_TEMPLATE,
            }
        ),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["nix_string"] = _nix_string
    env.filters["nix_indented"] = _nix_indented

    for template_name, source in (
        (HOOK_TEMPLATE_NAME, hook_source),
        (FLAKE_TEMPLATE_NAME, FLAKE_TEMPLATE),
    ):
        try:
            env.parse(source, name=template_name)
        except TemplateSyntaxError as e:
            raise TemplateParseError(
                f"Failed to parse {template_name} template (line {e.lineno}): {e.message}"
            ) from e

    return env


def generate_flake(descriptor: FlakeDescriptor) -> str:
    """Render flake.nix for a descriptor.

    The shellHook is selected from descriptor.language; every descriptor field
    is available to both templates by name.

    Args:
        descriptor: The assembled, immutable flake descriptor.

    Returns:
        The complete flake.nix text.

    Raises:
        TemplateParseError: If a static template fails to parse.
        TemplateExecError: If rendering references data the descriptor lacks.
    """
    with logfire.span(
        "flake.render",
        name=descriptor.name,
        language=descriptor.language,
        platform=descriptor.platform,
        package_count=len(descriptor.packages),
    ):
        env = build_environment(select_hook(descriptor.language))

        try:
            rendered = env.get_template(FLAKE_TEMPLATE_NAME).render(descriptor.model_dump())
        except TemplateError as e:
            logfire.error("Flake render failed: {error}", error=str(e))
            raise TemplateExecError(f"Failed to render template: {e}") from e

        logger.debug("Rendered flake for '%s' (%d bytes)", descriptor.name, len(rendered))
        return rendered
