"""
Drill renderer - Item card, answer reveal and score display.

Provides:
- Item card rendering (primary text + translation)
- Answer reveal with per-field right/wrong marking
- Score and learned-items overview
"""

import html
from typing import Optional

from prepdrill.classroom import AnswerCheck, ItemProgress, MasteryState
from prepdrill.schemas import Guess, Item


STATE_LABELS = {
    MasteryState.NEW: "New",
    MasteryState.IN_PROGRESS: "Practising",
    MasteryState.LEARNED: "Learned",
}


def get_drill_css() -> str:
    """Get CSS styles for drill display."""
    return """
    <style>
    .drill-card {
        background: #e3f2fd;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1em 0;
        border-left: 4px solid #1976D2;
        text-align: center;
    }
    .drill-text {
        font-size: 2em;
        font-weight: 700;
        color: #1565C0;
    }
    .drill-translation {
        color: #888;
        font-style: italic;
        margin-top: 0.3em;
    }
    .drill-reveal {
        background: white;
        border: 1px solid #ddd;
        border-radius: 8px;
        padding: 1em;
        margin-top: 1em;
    }
    .drill-right {
        color: #388E3C;
        font-weight: 600;
    }
    .drill-wrong {
        color: #C62828;
        font-weight: 600;
    }
    .drill-expected {
        color: #1565C0;
        margin-left: 0.5em;
    }
    .drill-example {
        margin-top: 0.8em;
        line-height: 1.6;
    }
    .drill-score {
        color: #666;
        font-size: 1.05em;
        margin-top: 1.5em;
    }
    .drill-table td.learned {
        color: #388E3C;
    }
    </style>
    """


def render_item_card(item: Item, language: str) -> str:
    """Render the item being asked."""
    parts = ['<div class="drill-card">']
    parts.append(f'<div class="drill-text">{html.escape(item.primary_text)}</div>')
    translation = item.translation_for(language)
    if translation:
        parts.append(f'<div class="drill-translation">({html.escape(translation)})</div>')
    parts.append('</div>')
    return ''.join(parts)


def _render_field(label: str, guessed: Optional[str], expected: Optional[str], correct: Optional[bool]) -> str:
    if correct is None:
        return ""
    css = "drill-right" if correct else "drill-wrong"
    shown = html.escape(guessed or "-")
    line = f'<div><b>{label}:</b> <span class="{css}">{shown}</span>'
    if not correct and expected:
        line += f'<span class="drill-expected">({html.escape(expected)})</span>'
    return line + '</div>'


def render_answer_reveal(
    item: Item,
    guess: Guess,
    check: Optional[AnswerCheck],
    language: str,
) -> str:
    """
    Render the revealed answer.

    Args:
        item: Item that was asked
        guess: What the learner entered
        check: Grading result, or None when the learner gave up
        language: Language for the example translation

    Returns:
        HTML string for the reveal box
    """
    parts = ['<div class="drill-reveal">']

    if check is None:
        if item.expected_preposition:
            parts.append(f'<div><b>Preposition:</b> {html.escape(item.expected_preposition)}</div>')
        if item.expected_case:
            parts.append(f'<div><b>Case:</b> {html.escape(item.expected_case)}</div>')
    else:
        parts.append(_render_field("Preposition", guess.preposition, item.expected_preposition, check.preposition_correct))
        parts.append(_render_field("Case", guess.case, item.expected_case, check.case_correct))

    if item.example:
        parts.append(f'<div class="drill-example"><b>Example:</b> {html.escape(item.example)}</div>')
        translation = item.example_translation_for(language)
        if translation:
            parts.append(f'<div><b>Translation:</b> {html.escape(translation)}</div>')

    parts.append('</div>')
    return ''.join(parts)


def render_score(score: int, learned: int, total: int) -> str:
    """Render score line."""
    return (
        f'<div class="drill-score"><b>Score:</b> {score} | '
        f'<b>Learned:</b> {learned}/{total}</div>'
    )


def render_progress_table(rows: list[ItemProgress]) -> str:
    """Render the learned-items overview table."""
    if not rows:
        return ""

    parts = ['<table class="drill-table">']
    parts.append('<tr><th>Item</th><th>Preposition</th><th>Case</th><th>Streak</th><th>Status</th></tr>')
    for row in rows:
        css = ' class="learned"' if row.learned else ''
        parts.append(
            f'<tr><td>{html.escape(row.item.primary_text)}</td>'
            f'<td>{html.escape(row.item.expected_preposition or "")}</td>'
            f'<td>{html.escape(row.item.expected_case or "")}</td>'
            f'<td>{row.consecutive_correct}</td>'
            f'<td{css}>{STATE_LABELS[row.state]}</td></tr>'
        )
    parts.append('</table>')
    return ''.join(parts)
