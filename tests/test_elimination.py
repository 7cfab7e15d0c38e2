"""Tests for the vote-out cascade and no-options-left detection."""

from src.rules_engine.elimination import (
    available_contestants,
    cascade_by_league,
    cascade_eliminations,
    has_no_options_left,
)
from src.rules_engine.season_state import Contestant, Pick


# ── Helpers ──────────────────────────────────────────────────────────

def _pick(player_id, contestant_id, episode_id="ep6", league_id="L1"):
    return Pick(
        league_id=league_id,
        player_id=player_id,
        episode_id=episode_id,
        contestant_id=contestant_id,
    )


def _contestant(cid, eliminated_at=None):
    return Contestant(
        id=cid,
        name=f"Contestant {cid}",
        season=50,
        is_eliminated=eliminated_at is not None,
        eliminated_at_episode=eliminated_at,
    )


# ── Cascade ──────────────────────────────────────────────────────────

class TestCascadeEliminations:
    def test_every_picker_of_loser_eliminated(self):
        picks = [_pick("P1", "X"), _pick("P2", "X"), _pick("P3", "Y")]
        assert cascade_eliminations(["X"], picks) == {"P1", "P2"}

    def test_empty_when_nobody_picked_a_loser(self):
        picks = [_pick("P1", "Y"), _pick("P2", "Z")]
        assert cascade_eliminations(["X"], picks) == set()

    def test_empty_inputs(self):
        assert cascade_eliminations([], []) == set()
        assert cascade_eliminations(["X"], []) == set()

    def test_player_with_several_losing_picks_listed_once(self):
        picks = [_pick("P1", "X"), _pick("P1", "W")]
        assert cascade_eliminations(["X", "W"], picks) == {"P1"}

    def test_debt_pick_with_one_loser_eliminates(self):
        picks = [_pick("P1", "Y"), _pick("P1", "X")]
        assert cascade_eliminations(["X"], picks) == {"P1"}

    def test_idempotent(self):
        picks = [_pick("P1", "X"), _pick("P2", "Y")]
        first = cascade_eliminations(["X"], picks)
        second = cascade_eliminations(["X"], picks)
        assert first == second == {"P1"}

    def test_episode_filter_ignores_other_episodes(self):
        picks = [_pick("P1", "X", episode_id="ep5"), _pick("P2", "X")]
        assert cascade_eliminations(["X"], picks, episode_id="ep6") == {"P2"}


class TestCascadeByLeague:
    def test_leagues_cascade_independently(self):
        picks = [
            _pick("P1", "X", league_id="L1"),
            _pick("P2", "Y", league_id="L1"),
            _pick("P1", "Y", league_id="L2"),
            _pick("P3", "X", league_id="L2"),
        ]
        assert cascade_by_league(["X"], picks) == {"L1": {"P1"}, "L2": {"P3"}}

    def test_unaffected_leagues_omitted(self):
        picks = [_pick("P1", "X", league_id="L1"), _pick("P2", "Y", league_id="L2")]
        assert cascade_by_league(["X"], picks) == {"L1": {"P1"}}


# ── Available contestants / no options left ──────────────────────────

class TestAvailableContestants:
    def test_excludes_eliminated_and_used(self):
        contestants = [_contestant("a"), _contestant("b"), _contestant("c", 2)]
        picks = [_pick("P1", "a", episode_id="ep1")]
        assert [c.id for c in available_contestants(contestants, picks)] == ["b"]

    def test_everyone_available_without_picks(self):
        contestants = [_contestant("a"), _contestant("b")]
        assert len(available_contestants(contestants, [])) == 2


class TestHasNoOptionsLeft:
    def test_all_survivors_used(self):
        contestants = [_contestant("a"), _contestant("b"), _contestant("c", 3)]
        picks = [
            _pick("P1", "a", episode_id="ep1"),
            _pick("P1", "b", episode_id="ep2"),
        ]
        assert has_no_options_left(picks, contestants) is True

    def test_one_unused_survivor_remains(self):
        contestants = [_contestant("a"), _contestant("b")]
        picks = [_pick("P1", "a", episode_id="ep1")]
        assert has_no_options_left(picks, contestants) is False

    def test_uses_whole_history(self):
        contestants = [_contestant("a"), _contestant("b")]
        picks = [
            _pick("P1", "a", episode_id="ep1"),
            _pick("P1", "b", episode_id="ep4"),
        ]
        assert has_no_options_left(picks, contestants) is True

    def test_true_when_nobody_remains(self):
        contestants = [_contestant("a", 1), _contestant("b", 2)]
        assert has_no_options_left([], contestants) is True
