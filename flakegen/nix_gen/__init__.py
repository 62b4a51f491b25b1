"""nix_gen — flake.nix generation for flakegen.

This package owns everything between parsed CLI input and rendered Nix:
- The FlakeDescriptor model (the one record a render consumes)
- Per-language default packages and shell hooks
- Host platform → Nix system string mapping
- Jinja2 rendering of the final flake
"""
