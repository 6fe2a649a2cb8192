"""Universally Unique Lexicographically Sortable Identifiers.

Modules: ``ulid`` (the ULID type, parsing and time helpers), ``monotonic``
(monotonic entropy and default generation) and ``cli`` (the ``ulid`` command).
"""

__version__ = "2.1.0"
__all__ = ["ulid", "monotonic", "cli"]