"""AppFast bootstrap — installer for a new SvelteAppFast project."""

__version__ = "0.1.0"
