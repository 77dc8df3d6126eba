"""Program templates: per goal and weekly cadence, the ordered training days."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

SUPPORTED_CADENCES = (3, 5)
DEFAULT_GOAL = "general"


@dataclass(frozen=True)
class TrainingDay:
    day: int
    focus: Tuple[str, ...]
    title: str


@dataclass(frozen=True)
class ProgramTemplate:
    goal: str
    title: str
    description: str
    schedules: Mapping[int, Tuple[TrainingDay, ...]]

    def days_for(self, cadence: int) -> Tuple[TrainingDay, ...]:
        return self.schedules[cadence]


def _template(goal, title, description, three_days, five_days) -> ProgramTemplate:
    return ProgramTemplate(
        goal=goal,
        title=title,
        description=description,
        schedules=MappingProxyType({
            3: tuple(TrainingDay(d, tuple(f), t) for d, f, t in three_days),
            5: tuple(TrainingDay(d, tuple(f), t) for d, f, t in five_days),
        }),
    )


PROGRAM_TEMPLATES: Mapping[str, ProgramTemplate] = MappingProxyType({
    t.goal: t
    for t in (
        _template(
            "perte_poids",
            "Weight Loss Program",
            "Cardio and high-intensity work to maximise energy expenditure.",
            [
                (1, ["cardio", "full_body"], "Cardio & Full Body"),
                (3, ["legs", "abs"], "Lower Body & Core"),
                (5, ["cardio", "chest", "back"], "Cardio & Upper Body"),
            ],
            [
                (1, ["cardio", "legs"], "Cardio & Legs"),
                (2, ["chest", "shoulders"], "Upper Body - Push"),
                (3, ["cardio", "abs"], "Cardio & Core"),
                (4, ["back", "arms"], "Upper Body - Pull"),
                (5, ["cardio", "full_body"], "Cardio & Full Body"),
            ],
        ),
        _template(
            "prise_muscle",
            "Muscle Gain Program",
            "Strength-focused training with optimised recovery time.",
            [
                (1, ["chest", "shoulders", "arms"], "Upper Body"),
                (3, ["legs", "abs"], "Lower Body & Core"),
                (5, ["back", "arms", "abs"], "Back & Arms"),
            ],
            [
                (1, ["chest", "shoulders"], "Chest & Shoulders"),
                (2, ["back", "arms"], "Back & Arms"),
                (3, ["legs", "abs"], "Legs & Abs"),
                (4, ["chest", "shoulders", "arms"], "Upper Body"),
                (5, ["legs", "back", "abs"], "Lower Body & Back"),
            ],
        ),
        _template(
            "forme_physique",
            "General Fitness Program",
            "A balanced mix of cardio and strength to improve overall condition.",
            [
                (1, ["cardio", "full_body"], "Full Body #1"),
                (3, ["cardio", "full_body"], "Full Body #2"),
                (5, ["cardio", "full_body"], "Full Body #3"),
            ],
            [
                (1, ["chest", "abs", "cardio"], "Chest & Cardio"),
                (2, ["legs", "abs"], "Legs & Core"),
                (3, ["back", "shoulders", "cardio"], "Back & Cardio"),
                (4, ["arms", "abs"], "Arms & Core"),
                (5, ["cardio", "full_body"], "Full Body & Cardio"),
            ],
        ),
        _template(
            "endurance",
            "Endurance Program",
            "Builds cardiovascular and muscular endurance.",
            [
                (1, ["cardio", "legs"], "Lower Body Endurance"),
                (3, ["cardio", "chest", "back"], "Upper Body Endurance"),
                (5, ["cardio", "full_body"], "General Endurance"),
            ],
            [
                (1, ["cardio"], "Long Cardio"),
                (2, ["legs", "abs", "cardio"], "Lower Body Endurance"),
                (3, ["cardio"], "HIIT"),
                (4, ["chest", "back", "cardio"], "Upper Body Endurance"),
                (5, ["cardio", "full_body"], "Full Endurance"),
            ],
        ),
        _template(
            "general",
            "General Program",
            "A complete training program to build strength and endurance.",
            [
                (1, ["chest", "arms", "abs"], "Upper Body"),
                (3, ["legs", "abs", "cardio"], "Lower Body"),
                (5, ["back", "shoulders", "abs"], "Back & Shoulders"),
            ],
            [
                (1, ["chest", "shoulders"], "Push"),
                (2, ["back", "arms"], "Pull"),
                (3, ["legs", "abs"], "Legs"),
                (4, ["chest", "shoulders", "arms"], "Upper Body"),
                (5, ["cardio", "abs"], "Cardio & Core"),
            ],
        ),
    )
})

SUPPORTED_GOALS = tuple(PROGRAM_TEMPLATES)


def get_template(goal: str) -> ProgramTemplate:
    """Template for a normalized goal. Raises KeyError for unknown goals."""
    return PROGRAM_TEMPLATES[goal]
