"""Tests for tools/til/suggestions.py

The generator evaluates every rule against one snapshot, then keeps the
top suggestions by priority. Key behaviors:
- Streak nudges depend on whether today is logged
- Goal nudges only consider active goals
- Equal priorities keep rule evaluation order
- The review pick is reproducible with a seeded rng
"""

import random

from tools.til.config_models import SuggestionConfig
from tools.til.suggestions import days_until, generate_suggestions


def kinds(suggestions):
    return [s.kind for s in suggestions]


# ─────────────────────────────────────────────────────────────────────────────
# Streak Rules
# ─────────────────────────────────────────────────────────────────────────────


class TestStreakRules:
    """Tests for start/keep/milestone streak suggestions."""

    def test_start_streak_with_no_entries(self, fixed_now):
        """Nothing logged ever: start a streak."""
        result = generate_suggestions([], [], now=fixed_now)

        assert kinds(result) == ["start_streak"]
        assert result[0].priority == 10
        assert result[0].type == "streak"

    def test_start_streak_after_gap(self, make_entry, fixed_now):
        """Last entry three days ago: streak is 0."""
        result = generate_suggestions([make_entry(3)], [], now=fixed_now)

        assert "start_streak" in kinds(result)

    def test_keep_streak_when_today_missing(self, make_entry, fixed_now):
        """Streak alive from yesterday, nothing today yet."""
        entries = [make_entry(1), make_entry(2)]

        result = generate_suggestions(entries, [], now=fixed_now)

        keep = result[0]
        assert keep.kind == "keep_streak"
        assert keep.priority == 9
        assert keep.streak == 2
        assert keep.title == "Keep Your 2-Day Streak!"

    def test_logged_today_has_no_streak_nudge(self, make_entry, fixed_now):
        """A single react entry today yields nothing at all."""
        entries = [make_entry(0, tags=["react"])]

        result = generate_suggestions(entries, [], now=fixed_now)

        assert "start_streak" not in kinds(result)
        assert "keep_streak" not in kinds(result)
        assert "set_goal" not in kinds(result)
        assert result == []

    def test_milestone_streak(self, make_entry, fixed_now):
        """Logged today with a 7+ day run."""
        entries = [make_entry(d) for d in range(8)]

        result = generate_suggestions(entries, [], now=fixed_now)

        milestone = [s for s in result if s.kind == "milestone_streak"]
        assert len(milestone) == 1
        assert milestone[0].priority == 3
        assert milestone[0].streak == 8

    def test_no_milestone_below_seven(self, make_entry, fixed_now):
        """Six days is not a milestone."""
        entries = [make_entry(d) for d in range(6)]

        result = generate_suggestions(entries, [], now=fixed_now)

        assert "milestone_streak" not in kinds(result)


# ─────────────────────────────────────────────────────────────────────────────
# Goal Rules
# ─────────────────────────────────────────────────────────────────────────────


class TestGoalRules:
    """Tests for set-goal, almost-there and deadline suggestions."""

    def test_set_goal_after_four_entries(self, make_entry, fixed_now):
        """More than 3 entries and no active goal."""
        entries = [make_entry(d) for d in range(4)]

        result = generate_suggestions(entries, [], now=fixed_now)

        assert "set_goal" in kinds(result)

    def test_no_set_goal_with_three_entries(self, make_entry, fixed_now):
        """Exactly 3 entries is not enough."""
        entries = [make_entry(d) for d in range(3)]

        assert "set_goal" not in kinds(generate_suggestions(entries, [], now=fixed_now))

    def test_paused_goals_do_not_count_as_active(self, make_entry, make_goal, fixed_now):
        """Only active goals suppress set_goal."""
        entries = [make_entry(d, tags=["go"]) for d in range(9)]
        paused = make_goal(status="paused", target_entries=10)

        result = generate_suggestions(entries, [paused], now=fixed_now)

        assert "set_goal" in kinds(result)
        assert "almost_there" not in kinds(result)

    def test_almost_there_at_ninety_percent(self, make_entry, make_goal, fixed_now):
        """9 of 10 go entries on an active goal."""
        goal = make_goal(related_tags=["go"], target_entries=10)
        entries = [make_entry(d, tags=["go"]) for d in range(9)]

        result = generate_suggestions(entries, [goal], now=fixed_now)

        almost = [s for s in result if s.kind == "almost_there"]
        assert len(almost) == 1
        assert almost[0].priority == 8
        assert almost[0].progress == 90
        assert almost[0].goal_id == goal.id
        assert almost[0].action == "Log something about go"

    def test_no_almost_there_when_complete(self, make_entry, make_goal, fixed_now):
        """100% is done, not almost there."""
        goal = make_goal(target_entries=5)
        entries = [make_entry(d, tags=["go"]) for d in range(5)]

        assert "almost_there" not in kinds(generate_suggestions(entries, [goal], now=fixed_now))

    def test_one_almost_there_per_goal(self, make_entry, make_goal, fixed_now):
        """Two qualifying goals give two suggestions."""
        goals = [
            make_goal(title="Go", related_tags=["go"], target_entries=5),
            make_goal(title="Rust", related_tags=["rust"], target_entries=5),
        ]
        entries = [make_entry(0, tags=["go", "rust"]) for _ in range(4)]

        result = generate_suggestions(entries, goals, now=fixed_now)

        assert [s.goal_id for s in result if s.kind == "almost_there"] == [g.id for g in goals]

    def test_deadline_approaching(self, make_entry, make_goal, fixed_now):
        """Deadline three days out with low progress."""
        goal = make_goal(related_tags=["rust"], deadline="2026-10-17")

        result = generate_suggestions([make_entry(0)], [goal], now=fixed_now)

        deadline = [s for s in result if s.kind == "deadline_approaching"]
        assert len(deadline) == 1
        assert deadline[0].priority == 9
        assert deadline[0].description.startswith("3 days left")

    def test_no_deadline_nudge_when_far_away(self, make_entry, make_goal, fixed_now):
        """Ten days out is outside the window."""
        goal = make_goal(deadline="2026-10-24")

        assert "deadline_approaching" not in kinds(
            generate_suggestions([make_entry(0)], [goal], now=fixed_now)
        )

    def test_no_deadline_nudge_when_passed(self, make_entry, make_goal, fixed_now):
        """Past deadlines are ignored."""
        goal = make_goal(deadline="2026-10-01")

        assert "deadline_approaching" not in kinds(
            generate_suggestions([make_entry(0)], [goal], now=fixed_now)
        )

    def test_no_deadline_nudge_when_almost_done(self, make_entry, make_goal, fixed_now):
        """At 80%+ the almost-there nudge covers it."""
        goal = make_goal(target_entries=5, deadline="2026-10-17")
        entries = [make_entry(0, tags=["go"]) for _ in range(4)]

        result = generate_suggestions(entries, [goal], now=fixed_now)

        assert "deadline_approaching" not in kinds(result)
        assert "almost_there" in kinds(result)

    def test_days_until_rounds_up(self, fixed_now):
        """2.5 days reads as 3."""
        assert days_until("2026-10-17", fixed_now) == 3
        assert days_until("2026-10-14", fixed_now) == 0


# ─────────────────────────────────────────────────────────────────────────────
# Explore / Review / Consistency Rules
# ─────────────────────────────────────────────────────────────────────────────


class TestDiversifyRule:
    """Tests for the diversify suggestion."""

    def test_dominant_tag(self, make_entry, fixed_now):
        """Six python entries out of six."""
        entries = [make_entry(0, tags=["python"]) for _ in range(6)]

        result = generate_suggestions(entries, [], now=fixed_now)

        explore = [s for s in result if s.type == "explore"]
        assert len(explore) == 1
        assert explore[0].tag == "python"
        assert explore[0].priority == 5

    def test_needs_more_than_five_entries(self, make_entry, fixed_now):
        """Five entries is too few to judge."""
        entries = [make_entry(0, tags=["python"]) for _ in range(5)]

        assert "diversify" not in kinds(generate_suggestions(entries, [], now=fixed_now))

    def test_exactly_half_is_not_dominant(self, make_entry, fixed_now):
        """Three of six is not more than half."""
        entries = [make_entry(0, tags=["python"]) for _ in range(3)]
        entries += [make_entry(0, tags=[t]) for t in ("go", "sql", "css")]

        assert "diversify" not in kinds(generate_suggestions(entries, [], now=fixed_now))


class TestReviewRule:
    """Tests for the review suggestion."""

    def test_review_with_six_old_entries(self, make_entry, fixed_now):
        """More than five entries older than 14 days."""
        entries = [make_entry(d) for d in range(15, 21)]

        result = generate_suggestions(entries, [], now=fixed_now, rng=random.Random(1))

        review = [s for s in result if s.kind == "review"]
        assert len(review) == 1
        assert review[0].priority == 4
        assert review[0].entry_id in {e.id for e in entries}

    def test_no_review_with_five_old_entries(self, make_entry, fixed_now):
        """Five old entries is not enough."""
        entries = [make_entry(d) for d in range(15, 20)]

        assert "review" not in kinds(generate_suggestions(entries, [], now=fixed_now))

    def test_fourteen_days_is_not_old(self, make_entry, fixed_now):
        """Exactly 14 days old does not qualify."""
        entries = [make_entry(14) for _ in range(6)]

        assert "review" not in kinds(generate_suggestions(entries, [], now=fixed_now))

    def test_quote_is_truncated(self, make_entry, fixed_now):
        """Long content is cut to 80 characters plus an ellipsis."""
        entries = [make_entry(d, content="x" * 100) for d in range(15, 21)]

        review = [s for s in generate_suggestions(entries, [], now=fixed_now) if s.kind == "review"][0]

        assert review.description == f'Remember when you learned: "{"x" * 80}..."'

    def test_short_quote_kept_whole(self, make_entry, fixed_now):
        """Short content is quoted as is."""
        entries = [make_entry(d, content="tiny") for d in range(15, 21)]

        review = [s for s in generate_suggestions(entries, [], now=fixed_now) if s.kind == "review"][0]

        assert review.description == 'Remember when you learned: "tiny"'

    def test_seeded_pick_is_reproducible(self, make_entry, fixed_now):
        """Same seed, same entry, regardless of input order."""
        entries = [make_entry(d) for d in range(15, 30)]

        first = generate_suggestions(entries, [], now=fixed_now, rng=random.Random(42))
        second = generate_suggestions(list(reversed(entries)), [], now=fixed_now, rng=random.Random(42))

        assert [s.entry_id for s in first if s.kind == "review"] == [
            s.entry_id for s in second if s.kind == "review"
        ]


class TestConsistencyRule:
    """Tests for the consistency suggestion."""

    def test_names_the_missing_weekday(self, make_entry, fixed_now):
        """15 entries, none on a Wednesday."""
        # fixed_now is a Wednesday, so multiples of 7 days ago are too
        days = [d for d in range(1, 18) if d % 7 != 0]
        entries = [make_entry(d) for d in days]
        assert len(entries) == 15

        result = generate_suggestions(entries, [], now=fixed_now)

        consistency = [s for s in result if s.kind == "consistency"]
        assert len(consistency) == 1
        assert consistency[0].weekday == "Wednesday"
        assert consistency[0].title == "Wednesdays Are Quiet"
        assert consistency[0].priority == 2

    def test_needs_more_than_fourteen_entries(self, make_entry, fixed_now):
        """Exactly 14 entries is not enough."""
        entries = [make_entry(d) for d in range(14)]

        assert "consistency" not in kinds(generate_suggestions(entries, [], now=fixed_now))


# ─────────────────────────────────────────────────────────────────────────────
# Ranking
# ─────────────────────────────────────────────────────────────────────────────


class TestRanking:
    """Tests for sorting and truncation."""

    def test_keeps_top_four_in_priority_order(self, make_entry, make_goal, fixed_now):
        """Six candidates are cut to the four highest."""
        entries = [make_entry(d, tags=["python"]) for d in range(1, 21)]
        goals = [
            make_goal(title="Python", related_tags=["python"], target_entries=25),
            make_goal(title="Rust", related_tags=["rust"], deadline="2026-10-17"),
        ]

        result = generate_suggestions(entries, goals, now=fixed_now, rng=random.Random(3))

        assert kinds(result) == ["keep_streak", "deadline_approaching", "almost_there", "diversify"]
        priorities = [s.priority for s in result]
        assert priorities == sorted(priorities, reverse=True)

    def test_never_more_than_max(self, make_entry, make_goal, fixed_now):
        """The configured maximum is respected."""
        entries = [make_entry(d, tags=["python"]) for d in range(1, 21)]

        result = generate_suggestions(
            entries, [], now=fixed_now, config=SuggestionConfig(max_suggestions=2)
        )

        assert len(result) == 2

    def test_inputs_not_mutated(self, make_entry, make_goal, fixed_now):
        """Snapshots are left as they were."""
        entries = [make_entry(d, tags=["go"]) for d in range(20, 0, -1)]
        goals = [make_goal()]
        before = (list(entries), list(goals))

        generate_suggestions(entries, goals, now=fixed_now, rng=random.Random(0))

        assert (entries, goals) == before
