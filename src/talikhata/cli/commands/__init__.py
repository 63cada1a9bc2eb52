"""CLI command groups; each module exposes register_commands(cli)."""
