"""Static exercise catalog, bucketed by skill tier and focus tag.

Buckets are tuples of frozen dataclasses wrapped in read-only mappings, built
once at import time. The catalog deliberately has no ``full_body`` bucket:
templates still name that tag and draws on it contribute nothing.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Set, Tuple

TIERS = ("beginner", "intermediate", "advanced")

FOCUS_TAGS = (
    "legs",
    "chest",
    "back",
    "abs",
    "cardio",
    "shoulders",
    "arms",
    "full_body",
)


@dataclass(frozen=True)
class CatalogExercise:
    """A prescribed exercise as authored in the catalog."""

    name: str
    sets: int
    reps: int
    description: str
    rest_seconds: int
    muscle_groups: Tuple[str, ...]
    duration_minutes: float = 0


def _bucket(*exercises: CatalogExercise) -> Tuple[CatalogExercise, ...]:
    return tuple(exercises)


_BEGINNER = {
    "legs": _bucket(
        CatalogExercise("Squats", 3, 10, "Bend the knees as if sitting down, keeping the back straight.", 60, ("legs",)),
        CatalogExercise("Forward lunges", 2, 8, "Take a long step forward and bend both knees to 90 degrees.", 45, ("legs",)),
        CatalogExercise("Step-ups", 3, 12, "Step onto a stair or a step, alternating legs.", 30, ("legs",)),
    ),
    "chest": _bucket(
        CatalogExercise("Knee push-ups", 3, 8, "Push-up position with the knees on the floor to lower the difficulty.", 60, ("chest", "arms")),
        CatalogExercise("Wall push-ups", 3, 12, "Standing push-ups against a wall, ideal for beginners.", 45, ("chest",)),
    ),
    "back": _bucket(
        CatalogExercise("Superman", 3, 10, "Lying face down, lift arms and legs off the floor at the same time.", 45, ("back",)),
        CatalogExercise("Water bottle rows", 3, 12, "Hinged forward, pull the elbows back holding water bottles.", 60, ("back", "arms")),
    ),
    "abs": _bucket(
        CatalogExercise("Crunches", 3, 12, "Lying on the back, lift the shoulders slightly while bracing the abs.", 45, ("abs",)),
        CatalogExercise("Knee plank", 3, 1, "Hold the plank position with the knees on the floor.", 30, ("abs", "back"), 0.5),
    ),
    "cardio": _bucket(
        CatalogExercise("Brisk walk", 1, 1, "Walk at a sustained pace for 20 minutes.", 0, ("cardio",), 20),
        CatalogExercise("Jumping jacks", 3, 20, "Jump spreading legs and arms, then return to the start position.", 45, ("cardio",)),
    ),
    "shoulders": _bucket(
        CatalogExercise("Bottle lateral raises", 3, 10, "Raise the arms to the sides up to shoulder height.", 45, ("shoulders",)),
    ),
    "arms": _bucket(
        CatalogExercise("Water bottle curls", 3, 12, "Bend the elbows to bring the bottles towards the shoulders.", 45, ("arms",)),
    ),
}

_INTERMEDIATE = {
    "legs": _bucket(
        CatalogExercise("Jump squats", 4, 12, "Squat down then jump into full extension.", 60, ("legs",)),
        CatalogExercise("Alternating jump lunges", 3, 10, "Switch legs in a lunge with a jump between each rep.", 60, ("legs",)),
        CatalogExercise("Dynamic step-ups", 3, 15, "Drive onto a step while lifting the opposite knee.", 45, ("legs",)),
    ),
    "chest": _bucket(
        CatalogExercise("Push-ups", 3, 15, "Push-ups on the hands and the tips of the toes.", 60, ("chest", "arms")),
        CatalogExercise("Decline push-ups", 3, 12, "Push-ups with the feet raised on a step.", 60, ("chest", "shoulders")),
    ),
    "back": _bucket(
        CatalogExercise("Assisted pull-ups", 3, 8, "Pull-ups with help from a band or the feet on the floor.", 90, ("back", "arms")),
        CatalogExercise("Inverted rows", 3, 12, "Lying under a sturdy table, pull yourself up.", 60, ("back",)),
    ),
    "abs": _bucket(
        CatalogExercise("Plank", 3, 1, "Hold the plank on the forearms and the tips of the toes.", 45, ("abs",), 1),
        CatalogExercise("Mountain climbers", 3, 20, "From a push-up position, drive the knees to the chest in turn.", 45, ("abs", "cardio")),
    ),
    "cardio": _bucket(
        CatalogExercise("Running", 1, 1, "Run at a moderate pace.", 0, ("cardio",), 20),
        CatalogExercise("Burpees", 3, 15, "Chain a squat, a push-up and a vertical jump.", 60, ("cardio", "full_body")),
    ),
    "shoulders": _bucket(
        CatalogExercise("Pike push-ups", 3, 12, "Push-ups with the hips raised, targeting the shoulders.", 60, ("shoulders", "arms")),
    ),
    "arms": _bucket(
        CatalogExercise("Chair dips", 3, 12, "Hands on a chair behind you, bend the elbows.", 60, ("arms", "chest")),
    ),
}

_ADVANCED = {
    "legs": _bucket(
        CatalogExercise("Pistol squats", 3, 8, "Single-leg squat with the other leg extended in front.", 90, ("legs",)),
        CatalogExercise("Box jumps", 4, 12, "Jump onto a stable box or bench.", 60, ("legs",)),
        CatalogExercise("Bulgarian split squats", 4, 10, "Lunges with the rear foot raised on a bench.", 60, ("legs",)),
    ),
    "chest": _bucket(
        CatalogExercise("Clap push-ups", 3, 12, "Explosive push-ups with the hands leaving the floor.", 90, ("chest", "arms")),
        CatalogExercise("Archer push-ups", 3, 8, "Push-ups with one arm extended to the side.", 60, ("chest", "arms")),
    ),
    "back": _bucket(
        CatalogExercise("Pull-ups", 4, 8, "Full pull-ups on a bar.", 90, ("back", "arms")),
        CatalogExercise("Weighted inverted rows", 4, 10, "Inverted rows wearing a loaded backpack.", 60, ("back",)),
    ),
    "abs": _bucket(
        CatalogExercise("Plank shoulder taps", 3, 20, "From a plank, tap the opposite shoulder in turn.", 45, ("abs",)),
        CatalogExercise("Dragon flags", 3, 8, "Lying on a bench, raise straight legs and control the descent.", 60, ("abs",)),
    ),
    "cardio": _bucket(
        CatalogExercise("Interval training (HIIT)", 8, 1, "30 seconds all-out effort, 30 seconds recovery.", 30, ("cardio",), 0.5),
        CatalogExercise("Burpees with push-up and tuck jump", 4, 15, "Full burpees with a push-up and an extended jump.", 60, ("cardio", "full_body")),
    ),
    "shoulders": _bucket(
        CatalogExercise("Wall handstand push-ups", 3, 8, "Push-ups in a handstand against a wall.", 90, ("shoulders", "arms")),
    ),
    "arms": _bucket(
        CatalogExercise("Muscle-ups", 3, 5, "A pull-up flowing into a dip over the bar.", 120, ("arms", "back", "chest")),
    ),
}

EXERCISE_CATALOG: Mapping[str, Mapping[str, Tuple[CatalogExercise, ...]]] = MappingProxyType({
    "beginner": MappingProxyType(_BEGINNER),
    "intermediate": MappingProxyType(_INTERMEDIATE),
    "advanced": MappingProxyType(_ADVANCED),
})


def get_bucket(tier: str, tag: str) -> Tuple[CatalogExercise, ...]:
    """Exercises for a tier/tag pair, or an empty tuple when there is none."""
    return EXERCISE_CATALOG.get(tier, {}).get(tag, ())


def exercise_names(tier: str) -> Set[str]:
    return {ex.name for bucket in EXERCISE_CATALOG.get(tier, {}).values() for ex in bucket}
