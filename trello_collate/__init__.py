"""Trello Collate.

Mirrors bracket-tagged Trello cards onto per-bucket rollup cards as
checklist items, keeping each rollup checklist in sync with its bucket.
"""

__version__ = "0.1.0"
