"""Starter .gitpilot.toml template."""

DEFAULT_TOML = """\
# GitPilot Configuration
version = "1.0"

[git]
executable = "git"        # name on PATH or absolute path to the git binary

[logging]
level = "warning"         # debug | info | warning | error
json = false              # emit one JSON object per log line

[output]
format = "terminal"       # terminal | json
show_summary = true
"""
