"""Process-level setup shared by the CLI and library entry points."""
