import pytest

from collabspace.services.motivation import (
    MOTIVATION_TIERS,
    get_motivation_tier,
    get_motivational_message,
)


@pytest.mark.parametrize(
    "streak,expected",
    [
        (0, "🌟 Start your journey today!"),
        (1, "🎉 Great start! Keep it going!"),
        (2, "🔥 2-day streak strong!"),
        (6, "🔥 6-day streak strong!"),
        (7, "💪 7-day streak amazing!"),
        (29, "💪 29-day streak amazing!"),
        (30, "🚀 30-day streak incredible!"),
        (99, "🚀 99-day streak incredible!"),
        (100, "🏆 100-day streak LEGENDARY!"),
        (1000, "🏆 1000-day streak LEGENDARY!"),
    ],
)
def test_message_bands(streak, expected):
    assert get_motivational_message(streak) == expected


def test_message_is_deterministic():
    assert all(get_motivational_message(n) == get_motivational_message(n) for n in range(0, 150))


def test_tiers_never_go_down_as_streak_grows():
    tiers = [get_motivation_tier(n) for n in range(0, 250)]
    assert tiers == sorted(tiers)
    assert tiers[0] == 0
    assert tiers[-1] == len(MOTIVATION_TIERS) - 1


def test_every_tier_has_a_distinct_message():
    templates = [template for _, template in MOTIVATION_TIERS]
    assert len(set(templates)) == len(templates)


def test_negative_and_missing_streaks_read_as_zero():
    assert get_motivational_message(-3) == get_motivational_message(0)
    assert get_motivational_message(None) == get_motivational_message(0)
