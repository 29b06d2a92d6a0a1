"""Tests for the HTML drill renderers."""

from prepdrill.classroom import AnswerCheck, ItemProgress, MasteryState
from prepdrill.schemas import Guess
from prepdrill.viewer import (
    render_answer_reveal,
    render_item_card,
    render_progress_table,
    render_score,
)

from conftest import make_item


ITEM = make_item(
    "denken", "an", "Akk",
    example="Ich denke an dich.",
    translations={"en": "to think of", "fr": "penser à"},
    example_translations={"en": "I think of you."},
)


class TestItemCard:

    def test_shows_text_and_translation(self):
        card = render_item_card(ITEM, "fr")
        assert "denken" in card
        assert "penser à" in card

    def test_falls_back_to_english(self):
        assert "to think of" in render_item_card(ITEM, "es")

    def test_escapes_text(self):
        assert "&lt;b&gt;" in render_item_card(make_item("<b>"), "en")


class TestAnswerReveal:

    def test_marks_wrong_field(self):
        check = AnswerCheck(preposition_correct=False, case_correct=True)
        html = render_answer_reveal(ITEM, Guess(preposition="auf", case="Akk"), check, "en")
        assert 'drill-wrong">auf' in html
        assert 'drill-right">Akk' in html
        assert "(an)" in html
        assert "I think of you." in html

    def test_ungraded_field_hidden(self):
        check = AnswerCheck(preposition_correct=True, case_correct=None)
        html = render_answer_reveal(ITEM, Guess(preposition="an"), check, "en")
        assert "Case:" not in html

    def test_give_up_shows_answer(self):
        html = render_answer_reveal(ITEM, Guess(), None, "en")
        assert "<b>Preposition:</b> an" in html
        assert "<b>Case:</b> Akk" in html


class TestScoreAndTable:

    def test_score(self):
        assert "2/5" in render_score(2, 2, 5)

    def test_progress_table(self):
        rows = [
            ItemProgress(index=0, item=ITEM, key="k0", consecutive_correct=3, learned=True,
                         state=MasteryState.LEARNED),
            ItemProgress(index=1, item=make_item("warten", "auf"), key="k1", consecutive_correct=1,
                         learned=False, state=MasteryState.IN_PROGRESS),
        ]
        table = render_progress_table(rows)
        assert table.count("<tr>") == 3
        assert 'class="learned"' in table
        assert "Learned</td>" in table
        assert "Practising</td>" in table

    def test_empty_table(self):
        assert render_progress_table([]) == ""
