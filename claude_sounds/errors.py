"""Exception hierarchy for claude-code-sounds.

Library functions raise these; only ``cli.main`` turns them into an error
message and a non-zero exit code.
"""


class SoundsError(Exception):
    """Base exception for installer failures."""
    pass


class ThemeError(SoundsError):
    """Raised when a theme descriptor cannot be read or parsed."""
    pass


class ThemeNotFoundError(ThemeError):
    """Raised when a named theme does not exist in the themes directory."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available or []
        message = f"Theme '{name}' not found."
        if self.available:
            message += f" Available: {', '.join(self.available)}"
        super().__init__(message)


class MissingDependencyError(SoundsError):
    """Raised when a required external command is not on PATH."""

    def __init__(self, missing: list[str], hint: str = ""):
        self.missing = missing
        message = f"Missing dependencies: {', '.join(missing)}."
        if hint:
            message += f" {hint}"
        super().__init__(message)


class DownloadError(SoundsError):
    """Raised when a theme's download script fails."""
    pass


class PromptCancelled(SoundsError):
    """Raised when the user quits an interactive prompt."""
    pass
