from typing import Optional

# (minimum streak, message template), lowest tier first
MOTIVATION_TIERS = (
    (0, "🌟 Start your journey today!"),
    (1, "🎉 Great start! Keep it going!"),
    (2, "🔥 {streak}-day streak strong!"),
    (7, "💪 {streak}-day streak amazing!"),
    (30, "🚀 {streak}-day streak incredible!"),
    (100, "🏆 {streak}-day streak LEGENDARY!"),
)


def get_motivation_tier(current_streak: Optional[int]) -> int:
    """Index into MOTIVATION_TIERS for a streak length; negatives count as 0."""
    streak = max(current_streak or 0, 0)
    tier = 0
    for index, (minimum, _) in enumerate(MOTIVATION_TIERS):
        if streak >= minimum:
            tier = index
    return tier


def get_motivational_message(current_streak: Optional[int]) -> str:
    streak = max(current_streak or 0, 0)
    _, template = MOTIVATION_TIERS[get_motivation_tier(streak)]
    return template.format(streak=streak)
