"""Build file parsers — auto-registered on import."""

from ideadeps.parsers import gradle_build  # noqa: F401
