"""Tests for the history replay engine and the game view."""
from collections import Counter

import numpy as np
import pytest

from hanabi_intent.actions import ColorHint, Discard, Play
from hanabi_intent.context import BeliefState
from hanabi_intent.errors import ReplayError
from hanabi_intent.replay import HistoryReplay
from hanabi_intent.state import GameView

NAMES = ["Alice", "Bob", "Charlie", "Dana"]


def replay_for(seat):
    return HistoryReplay(BeliefState.create(seat, NAMES))


class TestGameView:

    def test_own_hand_is_hidden(self, make_snapshot, hands4):
        view = GameView(1, NAMES, [make_snapshot(order=0, hands=hands4)])
        assert view.current.hands[1] is None
        assert view.current.hands[0] == tuple(hands4[0])

    def test_missing_turn_raises(self, make_snapshot):
        view = GameView(0, NAMES, [make_snapshot(order=0), make_snapshot(order=2)])
        assert view.order == 2
        with pytest.raises(ReplayError):
            view.state_at(1)

    def test_previous_action_walks_back(self, make_snapshot):
        first = ColorHint(actor=0, target=2, color=0, positions=frozenset({0, 2}))
        second = Discard(actor=1, position=3)
        third = ColorHint(actor=0, target=1, color=4, positions=frozenset({2}))
        snapshots = [
            make_snapshot(order=0),
            make_snapshot(order=1, last_action=first),
            make_snapshot(order=2, last_action=second),
            make_snapshot(order=3, last_action=third),
        ]
        view = GameView(2, NAMES, snapshots)
        assert view.previous_action(0) == third
        assert view.previous_action(0, order=2) == first
        assert view.previous_action(1) == second
        assert view.previous_action(3) is None


class TestReplay:

    def test_seeding_removes_visible_opening_cards(self, make_snapshot, hands4, spread):
        replay = replay_for(0)
        replay.advance(GameView(0, NAMES, [make_snapshot(order=0, hands=hands4)]))

        ctx = replay.ctx
        expected = spread.copy()
        for card, count in Counter(card for hand in hands4[1:] for card in hand).items():
            expected[card] -= count
        assert np.array_equal(ctx.me.potential, expected)

        # seat 1 sees seats 2 and 3, but we cannot tell what it sees of us
        expected_bob = spread.copy()
        for card, count in Counter(card for hand in hands4[2:] for card in hand).items():
            expected_bob[card] -= count
        assert np.array_equal(ctx.players[1].potential, expected_bob)
        assert ctx.players[1].hand == hands4[1]
        assert ctx.me.hand is None

    def test_failed_play_comes_from_the_discard_pile(self, make_snapshot, hands4):
        # seat 0 plays R2 onto an empty red firework
        after_hands = [list(hand) for hand in hands4]
        after_hands[0][0] = (4, 4)
        snapshots = [
            make_snapshot(order=0, hands=hands4),
            make_snapshot(order=1, hands=after_hands, discard_pile=((0, 1),), life_tokens=2,
                          deck_count=19, last_action=Play(actor=0, position=0)),
        ]
        replay = replay_for(1)
        replay.advance(GameView(1, NAMES, snapshots))

        ledger = replay.ctx.ledger
        assert ledger.count((0, 1)) == 1
        assert ledger.count((0, 0)) == 3
        assert replay.ctx.players[0].hand[0] == (4, 4)
        assert replay.skipped == []

    def test_missing_history_is_skipped(self, make_snapshot, hands4):
        snapshots = [make_snapshot(order=0, hands=hands4), make_snapshot(order=2, hands=hands4)]
        replay = replay_for(2)
        replay.advance(GameView(2, NAMES, snapshots))
        assert replay.skipped == [0, 1]
        assert replay.last_order == 2

    def test_unrecorded_action_is_skipped(self, make_snapshot, hands4):
        snapshots = [make_snapshot(order=0, hands=hands4), make_snapshot(order=1, hands=hands4)]
        replay = replay_for(1)
        replay.advance(GameView(1, NAMES, snapshots))
        assert replay.skipped == [0]

    def test_later_calls_replay_from_the_previous_turn(self, make_snapshot, hands4):
        hint = ColorHint(actor=0, target=2, color=0, positions=frozenset({0, 2}))
        snapshots = [make_snapshot(order=0, hands=hands4), make_snapshot(order=1, hands=hands4, last_action=hint)]
        replay = replay_for(1)
        replay.advance(GameView(1, NAMES, snapshots))
        assert replay.ctx.players[0].intent == pytest.approx(0.75)

        own = ColorHint(actor=1, target=3, color=4, positions=frozenset({0, 1}))
        after_hands = [list(hand) for hand in hands4]
        after_hands[2][1] = (1, 4)
        later = [
            make_snapshot(order=2, hands=hands4, last_action=own),
            make_snapshot(order=3, hands=after_hands, discard_pile=((2, 3),),
                          deck_count=19, last_action=Discard(actor=2, position=1)),
        ]
        replay.advance(GameView(1, NAMES, snapshots + later))

        ctx = replay.ctx
        assert replay.last_order == 3
        # the earlier hint is not counted twice
        assert ctx.players[0].intent == pytest.approx(0.75)
        assert ctx.players[3].hints[0].hinter == 1
        assert ctx.ledger.count((2, 3)) == 1
        assert ctx.players[2].hand[1] == (1, 4)
        # replacing slot 1 leaves the red hint on slots 0 and 2 alone
        assert ctx.players[2].hints[0].positions == frozenset({0, 2})
