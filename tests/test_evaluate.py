"""Tests for the position evaluator."""
import pytest

from jaguar.config import (
    EVAL_WEIGHTS,
    HEALTH_TIER_WEIGHTS,
    KISS_OF_MURDER_WEIGHTS,
    TACTIC_POSITION_WEIGHTS,
    TACTIC_WEIGHTS,
)
from jaguar.evaluate import (
    build_context,
    corner_enemy_term,
    current_kiss_term,
    determine_eval_no_snakes,
    enemy_starvation_term,
    evaluate,
    food_term,
    hazard_term,
    health_term,
    king_snake_term,
    move_count_term,
    neutral_placement,
    other_snakes_term,
    prior_kiss_of_murder_term,
    solo_term,
    tactics_term,
    tail_chase_term,
    wall_term,
)
from jaguar.geometry import get_distance
from jaguar.kiss import KissOfDeathState, KissOfMurderState, KissStatesForEvaluate


class TestEvaluate:
    """Tests for evaluate."""

    def test_dead_snake_gets_sentinel(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)])
        gone = make_snake("gone", [(1, 1), (1, 2)])
        gs = make_state([me])

        assert evaluate(gs, gone) == EVAL_WEIGHTS["no_me"]

    def test_longer_is_better(self, make_snake, make_state):
        """With nothing else changing, one more segment adds the length weight."""
        short = make_snake("me", [(5, 5), (5, 4), (5, 3)])
        longer = make_snake("me", [(5, 5), (5, 4), (5, 3), (5, 2)])

        short_eval = evaluate(make_state([short], ruleset="solo"), short)
        long_eval = evaluate(make_state([longer], ruleset="solo"), longer)

        assert long_eval - short_eval == pytest.approx(EVAL_WEIGHTS["length"])

    def test_prior_death_kiss_penalty(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4), (5, 3)])
        gs = make_state([me], ruleset="solo")

        plain = evaluate(gs, me)
        kissed = evaluate(gs, me, KissStatesForEvaluate(death_state=KissOfDeathState.CERTAINTY))

        assert kissed - plain == pytest.approx(-400)

    def test_tie_sits_between_win_and_death(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4), (5, 3)])
        other = make_snake("other", [(8, 8), (8, 7), (8, 6)])

        tie = determine_eval_no_snakes(make_state([me, other]), me)
        win = evaluate(make_state([me]), me)

        assert EVAL_WEIGHTS["no_me"] < tie < win


class TestTerms:
    """Tests for individual scoring terms."""

    def test_corner_counts_two_walls(self, make_snake, make_state):
        me = make_snake("me", [(0, 0), (0, 1)])
        ctx = build_context(make_state([me], ruleset="solo"), me)

        assert wall_term(ctx) == 2 * EVAL_WEIGHTS["wall"]

    def test_last_snake_standing(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)])
        ctx = build_context(make_state([me]), me)

        assert solo_term(ctx) == EVAL_WEIGHTS["solo"]
        assert other_snakes_term(ctx) == 0

    def test_opponent_penalty_shrinks(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)])
        others = [make_snake(f"o{i}", [(i * 3, 10), (i * 3, 9)]) for i in range(3)]
        ctx = build_context(make_state([me] + others), me)

        assert solo_term(ctx) == 0
        assert other_snakes_term(ctx) == -100 - 75 - 50

    def test_starving_opponent(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)])
        other = make_snake("other", [(9, 9), (9, 8)], health=10)
        ctx = build_context(make_state([me, other]), me)

        assert enemy_starvation_term(ctx) == 20 * EVAL_WEIGHTS["enemy_starvation"]

    def test_just_ate(self, make_snake, make_state):
        """A meal is worth more the hungrier we were."""
        me = make_snake("me", [(5, 5), (5, 4)], health=100)
        ctx = build_context(make_state([me], ruleset="solo"), me, prior_health=60)

        assert health_term(ctx) == EVAL_WEIGHTS["has_eaten"] + 40 * EVAL_WEIGHTS["has_eaten_hunger"]

    def test_cannot_survive_hazard(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)], health=10)
        ctx = build_context(make_state([me], ruleset="solo", hazard_damage=14), me)

        assert health_term(ctx) == EVAL_WEIGHTS["starving"]

    def test_no_moves(self, make_snake, make_state):
        me = make_snake("me", [(0, 0), (0, 1)])
        other = make_snake("other", [(2, 1), (2, 0), (1, 0), (1, 1)])
        ctx = build_context(make_state([me, other]), me)

        assert move_count_term(ctx) == -300

    def test_nearby_food(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)])
        ctx = build_context(make_state([me], ruleset="solo", food=[(5, 7)]), me)

        assert food_term(ctx) == pytest.approx(EVAL_WEIGHTS["food"] / 2)

    def test_avoided_murder_raised_by_cutoff(self, make_snake, make_state):
        """Letting prey go is fine when it is pinned against the wall."""
        me = make_snake("me", [(1, 5), (1, 4), (1, 3)])
        prey = make_snake("prey", [(0, 5), (0, 4), (0, 3)])
        prior = KissStatesForEvaluate(murder_state=KissOfMurderState.AVOIDANCE, prey=prey)
        ctx = build_context(make_state([me, prey]), me, prior_kisses=prior)

        assert prior_kiss_of_murder_term(ctx) == TACTIC_WEIGHTS["cutoff"]


class TestPositionTerms:
    """Tests for the hazard, centrality, corner, tail and tactics terms."""

    def test_next_to_hazard_wall(self, make_snake, make_state):
        hazards = {(x, y) for x in (0, 1) for y in range(11)}
        me = make_snake("me", [(2, 5), (3, 5)])
        ctx = build_context(make_state([me], ruleset="solo", hazards=hazards, hazard_damage=14), me)

        assert hazard_term(ctx) == EVAL_WEIGHTS["hazard_wall"]

    def test_inside_hazard(self, make_snake, make_state):
        hazards = {(x, y) for x in (0, 1) for y in range(11)}
        me = make_snake("me", [(1, 5), (2, 5)])
        ctx = build_context(make_state([me], ruleset="solo", hazards=hazards, hazard_damage=14), me)

        assert hazard_term(ctx) == EVAL_WEIGHTS["in_hazard"]

    def test_king_snake_wants_center(self, make_snake, make_state):
        """Only a clearly largest snake is pulled to the center."""
        king = make_snake("me", [(5, 7), (5, 8), (5, 9), (6, 9), (7, 9)])
        rival = make_snake("rival", [(1, 1), (1, 2), (1, 3)])
        ctx = build_context(make_state([king, rival]), king)

        assert king_snake_term(ctx) == 2 * EVAL_WEIGHTS["king_center"]

        close = make_snake("me", [(5, 7), (5, 8), (5, 9), (6, 9)])
        ctx = build_context(make_state([close, rival]), close)
        assert king_snake_term(ctx) == 0

    def test_cornered_with_enemy_near(self, make_snake, make_state):
        me = make_snake("me", [(1, 0), (2, 0)])
        near = make_snake("near", [(3, 1), (4, 1)])
        far = make_snake("far", [(8, 8), (8, 9)])

        assert corner_enemy_term(build_context(make_state([me, near]), me)) == EVAL_WEIGHTS["corner_enemy"]
        assert corner_enemy_term(build_context(make_state([me, far]), me)) == 0

    def test_tail_chase_in_long_duel(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4), (4, 4), (4, 5)])
        other = make_snake("other", [(9, 9), (9, 8), (9, 7)])

        late = build_context(make_state([me, other], turn=150), me)
        early = build_context(make_state([me, other], turn=10), me)

        assert tail_chase_term(late) == 5 * EVAL_WEIGHTS["tail_chase"]
        assert tail_chase_term(early) == 0

    def test_cutting_off_and_cut_off(self, make_snake, make_state):
        me = make_snake("me", [(1, 5), (1, 4), (1, 3)])
        target = make_snake("target", [(0, 5), (0, 4), (0, 3)])
        gs = make_state([me, target])

        assert tactics_term(build_context(gs, me)) == TACTIC_POSITION_WEIGHTS["cutting_off"]
        assert tactics_term(build_context(gs, target)) == TACTIC_POSITION_WEIGHTS["cut_off"]


class TestFoodAndHealth:
    """Tests for food and health edge cases."""

    def test_food_under_head(self, make_snake, make_state):
        """Food on the head cell is not scored as food to seek."""
        me = make_snake("me", [(5, 5), (5, 4)])
        gs = make_state([me], ruleset="solo", food=[(5, 5)])

        assert food_term(build_context(gs, me)) == 0
        assert evaluate(gs, me) > EVAL_WEIGHTS["no_me"]

    def test_low_health_without_hazard(self, make_snake, make_state):
        """Without hazard a few health points still buy several turns."""
        me = make_snake("me", [(5, 5), (5, 4)], health=5)
        ctx = build_context(make_state([me], ruleset="solo"), me)

        assert health_term(ctx) == HEALTH_TIER_WEIGHTS[-1][1]

    def test_last_health_point(self, make_snake, make_state):
        me = make_snake("me", [(5, 5), (5, 4)], health=1)
        ctx = build_context(make_state([me], ruleset="solo"), me)

        assert health_term(ctx) == EVAL_WEIGHTS["starving"]


class TestCurrentKisses:
    """Tests for how kiss grades of the current snapshot are scored."""

    def test_faceoff_scored_as_prior_kiss(self, make_snake, make_state):
        """A faceoff adds nothing now and its bonus once the move is made."""
        me = make_snake("me", [(5, 5), (5, 4), (5, 3), (5, 2)])
        prey = make_snake("prey", [(5, 7), (5, 8)])
        ctx = build_context(make_state([me, prey]), me)

        assert ctx.kiss_states.murder_state("up") == KissOfMurderState.FACEOFF
        assert current_kiss_term(ctx) == 0

        prior = KissStatesForEvaluate(murder_state=KissOfMurderState.FACEOFF, prey=prey)
        ctx = build_context(make_state([me, prey]), me, prior_kisses=prior)
        assert prior_kiss_of_murder_term(ctx) == KISS_OF_MURDER_WEIGHTS["faceoff"]


class TestNeutralPlacement:
    """Tests for where a tie puts the snakes."""

    def test_mirrored_about_center(self, make_snake, make_state):
        gs = make_state([make_snake("me", [(5, 5)])])

        assert neutral_placement(gs, (5.0, 5.0)) == ((3, 5), (7, 5))

    def test_narrow_board_keeps_snakes_apart(self, make_snake, make_state):
        gs = make_state([make_snake("me", [(0, 0)])], width=2, height=5)

        mine, theirs = neutral_placement(gs, (0.5, 2.0))

        assert get_distance(mine, theirs) >= 2

    def test_avoids_hazard(self, make_snake, make_state):
        hazards = {(3, 5), (7, 5)}
        gs = make_state([make_snake("me", [(5, 5)])], hazards=hazards, hazard_damage=14)

        mine, theirs = neutral_placement(gs, (5.0, 5.0))

        assert mine not in hazards and theirs not in hazards
        assert get_distance(mine, theirs) >= 2

    def test_tie_on_narrow_board(self, make_snake, make_state):
        """The tie value stays well above the dead sentinel on a cramped board."""
        me = make_snake("me", [(0, 0), (0, 1)])
        other = make_snake("other", [(1, 4), (1, 3)])

        tie = determine_eval_no_snakes(make_state([me, other], width=2, height=5), me)

        assert tie > EVAL_WEIGHTS["no_me"]
