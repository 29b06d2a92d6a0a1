"""
PrepDrill - German preposition and case drill trainer.

Presents verb/preposition/case items, grades answers, and tracks per-item
mastery across sessions and datasets.
"""

__version__ = "0.1.0"
