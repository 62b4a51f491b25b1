"""flakegen — Nix dev-shell flake generator.

Layout:
  flakegen.cli      — argument parsing and the `flakegen` entry point
  flakegen.config   — FLAKEGEN_* settings
  flakegen.errors   — error taxonomy and exit codes
  flakegen.nix_gen  — descriptor model, package/hook tables, rendering
"""

__version__ = "0.1.0"
