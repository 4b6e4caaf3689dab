"""Custom exceptions for ideadeps."""


class IdeaDepsError(Exception):
    """Base exception for all ideadeps errors."""


class UnknownScopeError(IdeaDepsError):
    """Raised when a label does not name one of the primitive scopes."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(
            f"Unknown scope '{label}'. Expected one of PROVIDED, COMPILE, TEST, RUNTIME."
        )


class DescriptorError(IdeaDepsError):
    """Raised when a module descriptor file is missing or invalid."""


class BuildFileError(IdeaDepsError):
    """Raised when no readable build file is found for a project."""
