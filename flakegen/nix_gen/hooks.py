"""Language-specific shellHook fragments.

A hook runs every time the user enters the dev shell (`nix develop`). Each
fragment is a Jinja2 template with a single variable, `name`, filled in by the
generator when the flake is rendered. `name` always goes through the
`nix_indented` filter because the fragment lands inside a Nix `'' ... ''`
string.

The literal text of a fragment must not contain `''` or `${`, which Nix would
treat as syntax.
"""

from __future__ import annotations

PYTHON_HOOK = """
        echo "🐍 Welcome to the {{ name | nix_indented }} dev shell!"

        # Create a virtualenv in ./venv on first entry
        if [ ! -d venv ]; then
          echo "🔧 Creating virtual environment in ./venv"
          python3 -m venv venv
        fi
        source ./venv/bin/activate
        echo "✅ Virtualenv activated"
      """

GO_HOOK = """
        echo "🐹 Welcome to the {{ name | nix_indented }} dev shell!"

        if [ ! -e go.mod ]; then
          echo "🔧 Creating go mod file"
          go mod init {{ name | nix_indented }}
        fi
      """

EMPTY_HOOK = ""

_HOOKS = {
    "python": PYTHON_HOOK,
    "go": GO_HOOK,
}


def select_hook(language: str) -> str:
    """Return the shellHook template for `language` (case-insensitive).

    Languages without a hook get an empty fragment, which renders as a no-op
    shellHook.
    """
    return _HOOKS.get(language.lower(), EMPTY_HOOK)
