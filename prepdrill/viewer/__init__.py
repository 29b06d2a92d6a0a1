"""
PrepDrill Viewer - Rendering helpers for the Streamlit app.
"""

from .drill import (
    get_drill_css,
    render_item_card,
    render_answer_reveal,
    render_score,
    render_progress_table,
)

__all__ = [
    "get_drill_css",
    "render_item_card",
    "render_answer_reveal",
    "render_score",
    "render_progress_table",
]
