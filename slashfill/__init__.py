"""SlashFill: fill `/` blanks in notes with model completions."""

__version__ = "0.1.0"
