"""IdeaDice: writing prompts with an autosaved, lockable history."""

__version__ = "0.1.0"
