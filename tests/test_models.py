"""Tests for edufy.ui.models – feedback cues, display fields and level unlocking."""

from __future__ import annotations

import pytest

from conftest import make_game, make_items
from edufy.core.engine import Outcome
from edufy.core.items import Choice, Item
from edufy.core.levels import Level
from edufy.ui.models import (
    FeedbackCue,
    GameCardState,
    LevelState,
    answer_notes,
    build_level_states,
    display_text,
    feedback_for,
    field_text,
    open_options,
)


@pytest.fixture()
def sample_level() -> Level:
    return Level(number=1, items=make_items(3), required_score=2)


# ===========================================================================
# Dataclasses
# ===========================================================================

class TestLevelState:
    def test_creation(self, sample_level: Level):
        ls = LevelState(level=sample_level, unlocked=True, completed=True)
        assert ls.level is sample_level
        assert ls.unlocked is True
        assert ls.completed is True
        assert ls.is_current is False  # default

    def test_equality(self, sample_level: Level):
        a = LevelState(level=sample_level, unlocked=True, completed=False)
        b = LevelState(level=sample_level, unlocked=True, completed=False)
        assert a == b

    def test_mutable(self, sample_level: Level):
        ls = LevelState(level=sample_level, unlocked=False, completed=False)
        ls.unlocked = True
        ls.is_current = True
        assert ls.unlocked is True
        assert ls.is_current is True


class TestGameCardState:
    def test_defaults(self):
        game = make_game([Level(number=1, items=make_items(2), required_score=2)])
        state = GameCardState(game=game, completed_levels=0)
        assert state.game is game
        assert state.game_complete is False


# ===========================================================================
# feedback_for
# ===========================================================================

class TestFeedbackFor:
    def test_correct(self):
        cue = feedback_for(Outcome.CORRECT)
        assert cue.expression == "😄"
        assert cue.corner == "bottom-left"
        assert cue.toast_kind == "success"
        assert cue.sound == "success"

    @pytest.mark.parametrize("outcome", [Outcome.INCORRECT, Outcome.TIME_UP])
    def test_mistakes_look_worried(self, outcome: Outcome):
        cue = feedback_for(outcome)
        assert cue.expression == "😟"
        assert cue.corner == "top-right"
        assert cue.toast_kind == "error"
        assert cue.sound == "failure"

    def test_time_up_message(self):
        assert feedback_for(Outcome.TIME_UP).toast == "Time's Up!"

    def test_level_complete_celebrates(self):
        cue = feedback_for(Outcome.LEVEL_COMPLETE)
        assert cue.toast_kind == "celebrate"
        assert cue.sound == "achievement"

    def test_game_complete(self):
        cue = feedback_for(Outcome.GAME_COMPLETE)
        assert cue.expression == "🏆"
        assert "completed all levels" in cue.toast
        assert cue.sound == "game-end"

    def test_level_started_shows_description(self):
        cue = feedback_for(Outcome.LEVEL_STARTED, "Find the happy face")
        assert cue.message == "Find the happy face"
        assert cue.corner == "bottom-right"
        assert cue.toast == ""
        assert cue.sound == "game-start"

    def test_level_started_fallback(self):
        assert feedback_for(Outcome.LEVEL_STARTED).message == "Let's play!"

    def test_every_outcome_has_a_cue(self):
        for outcome in Outcome:
            assert isinstance(feedback_for(outcome), FeedbackCue)

    def test_cue_frozen(self):
        with pytest.raises(AttributeError):
            feedback_for(Outcome.CORRECT).message = "x"  # type: ignore[misc]


# ===========================================================================
# field_text / display_text
# ===========================================================================

class TestFieldText:
    @pytest.fixture()
    def apple(self) -> Item:
        return Item(
            id="apple",
            name="Apple",
            glyph="🍎",
            text="A red fruit",
            category="fruit",
            extras={"sound": "Crunch!", "tips": ["Look closely", "Think about color"], "count": 3},
        )

    @pytest.mark.parametrize(
        "field_name,expected",
        [
            ("id", "apple"),
            ("name", "Apple"),
            ("glyph", "🍎"),
            ("text", "A red fruit"),
            ("category", "fruit"),
            ("sound", "Crunch!"),
            ("count", "3"),
            ("missing", ""),
        ],
    )
    def test_item_fields(self, apple: Item, field_name: str, expected: str):
        assert field_text(apple, field_name) == expected

    def test_list_extras_joined(self, apple: Item):
        assert field_text(apple, "tips") == "Look closely Think about color"

    def test_no_category(self):
        assert field_text(Item(id="x", name="X"), "category") == ""

    def test_none_extra(self):
        assert field_text(Item(id="x", name="X", extras={"hint": None}), "hint") == ""

    def test_choice(self):
        choice = Choice(id="q#0", text="Say hello", correct=True)
        assert field_text(choice, "text") == "Say hello"
        assert field_text(choice, "name") == "Say hello"
        assert field_text(choice, "glyph") == ""


class TestDisplayText:
    def test_joins_non_empty(self):
        item = Item(id="red", name="Red", glyph="🔴")
        assert display_text(item, ["glyph", "text", "name"]) == "🔴\nRed"

    def test_custom_separator(self):
        item = Item(id="red", name="Red", glyph="🔴")
        assert display_text(item, ["glyph", "name"], " ") == "🔴 Red"

    def test_nothing_to_show(self):
        assert display_text(Item(id="red", name="Red"), ["glyph"]) == ""


# ===========================================================================
# build_level_states
# ===========================================================================

class TestBuildLevelStates:
    @pytest.fixture()
    def game(self):
        return make_game([Level(number=n, items=make_items(3), required_score=2) for n in range(1, 5)])

    def test_fresh_session(self, game):
        states = build_level_states(game, set(), 0)
        assert [s.unlocked for s in states] == [True, False, False, False]
        assert [s.completed for s in states] == [False] * 4
        assert [s.is_current for s in states] == [True, False, False, False]

    def test_completion_unlocks_next(self, game):
        states = build_level_states(game, {0, 1}, 2)
        assert [s.unlocked for s in states] == [True, True, True, False]
        assert [s.completed for s in states] == [True, True, False, False]
        assert states[2].is_current is True

    def test_gap_keeps_later_levels_locked(self, game):
        # level 3 finished but level 2 was skipped via unlock-all earlier
        states = build_level_states(game, {2}, 0)
        assert [s.unlocked for s in states] == [True, False, False, True]

    def test_unlock_all(self, game):
        states = build_level_states(game, [], 3, unlock_all=True)
        assert all(s.unlocked for s in states)
        assert states[3].is_current is True

    def test_levels_attached(self, game):
        states = build_level_states(game, [], 0)
        assert [s.level.number for s in states] == [1, 2, 3, 4]


# ===========================================================================
# answer_notes
# ===========================================================================

class TestAnswerNotes:
    @pytest.fixture()
    def quiz_item(self) -> Item:
        return Item(
            id="playground",
            name="Playground",
            choices=(
                Choice(id="playground#0", text="Say hi", correct=True),
                Choice(id="playground#1", text="Grab the toy"),
            ),
            extras={
                "explanation": "Shared interests make friends.",
                "follow_up": ["What games do you like?", "Do you play often?"],
                "tips": ["Use friendly words"],
            },
        )

    def test_correct_shows_explanation_follow_ups_and_tips(self, quiz_item: Item):
        assert answer_notes(Outcome.CORRECT, quiz_item) == (
            "Shared interests make friends.\n"
            "💬 What games do you like?\n"
            "💬 Do you play often?\n"
            "💡 Use friendly words"
        )

    def test_no_list_repr(self, quiz_item: Item):
        assert "[" not in answer_notes(Outcome.CORRECT, quiz_item)

    def test_incorrect_leads_with_the_right_answer(self, quiz_item: Item):
        lines = answer_notes(Outcome.INCORRECT, quiz_item).split("\n")
        assert lines[0] == "✅ Say hi"
        assert "Shared interests make friends." in lines

    def test_incorrect_without_tips_still_explains(self):
        item = Item(
            id="feelings",
            name="Feelings",
            choices=(Choice(id="feelings#0", text="Ask if they're okay", correct=True),),
            extras={"explanation": "It's kind to check on friends."},
        )
        assert answer_notes(Outcome.INCORRECT, item) == "✅ Ask if they're okay\nIt's kind to check on friends."

    def test_string_follow_up(self):
        item = Item(id="x", name="X", extras={"follow_up": "Why?"})
        assert answer_notes(Outcome.CORRECT, item) == "💬 Why?"

    def test_plain_item(self):
        assert answer_notes(Outcome.CORRECT, Item(id="red", name="Red")) == ""

    @pytest.mark.parametrize("outcome", [Outcome.LEVEL_STARTED, Outcome.TIME_UP, Outcome.LEVEL_COMPLETE])
    def test_other_outcomes(self, quiz_item: Item, outcome: Outcome):
        assert answer_notes(outcome, quiz_item) == ""

    def test_no_item(self):
        assert answer_notes(Outcome.CORRECT, None) == ""


# ===========================================================================
# open_options
# ===========================================================================

class TestOpenOptions:
    @pytest.fixture()
    def steps(self) -> tuple:
        return make_items(3, prefix="step")

    def test_placed_steps_dropped(self, steps):
        wake, brush, breakfast = steps
        assert open_options((brush, wake, breakfast), steps, 1) == [brush, breakfast]

    def test_first_step_keeps_everything(self, steps):
        assert open_options(steps, steps, 0) == list(steps)

    def test_current_step_kept_when_repeated(self):
        a, b = make_items(2)
        sequence = (a, b, a)
        assert open_options((a, b), sequence, 2) == [a]

    def test_position_past_end(self, steps):
        assert open_options(steps, steps, 3) == []
