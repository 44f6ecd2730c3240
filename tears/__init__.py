"""
Tears - Suggestions for approaching someone who is sad.

This package maps whether a person trusts you, and the mood they are in, to a
suggested action. The core (models, suggestion table, selection state and
derivation) is shared by thin adapters: an HTTP/SSE server and a CLI.
"""

__version__ = "0.1.0"
