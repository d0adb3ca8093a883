"""
Progression Ledger

Level and experience bookkeeping. Every action that awards experience
routes it through award_experience() after its own changes are applied.
"""

from ..config.game_constants import EXP_PER_LEVEL
from ..models.schemas import EconomyState, Progression


def experience_to_next(level: int) -> int:
    """Experience needed to leave the given level."""
    return level * EXP_PER_LEVEL


def normalize(progression: Progression) -> Progression:
    """
    Roll surplus experience into levels.

    A single large award can cross several levels, so this loops until
    0 <= experience < level * 100 holds.
    """
    level = progression.level
    experience = progression.experience
    while experience >= experience_to_next(level):
        experience -= experience_to_next(level)
        level += 1
    if level == progression.level and experience == progression.experience:
        return progression
    return Progression(level=level, experience=experience)


def award_experience(state: EconomyState, amount: int) -> EconomyState:
    """Add experience to the state's progression; non-positive amounts are inert."""
    if amount <= 0:
        return state
    progression = normalize(
        Progression(
            level=state.progression.level,
            experience=state.progression.experience + amount,
        )
    )
    return state.model_copy(update={"progression": progression})


def level_progress_percent(progression: Progression) -> float:
    """Fill of the experience bar, 0-100."""
    percent = progression.experience / experience_to_next(progression.level) * 100
    return min(percent, 100.0)
