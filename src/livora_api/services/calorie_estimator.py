"""Calorie estimation from food-recognition concepts."""
import logging
from typing import Any, Dict, Iterable, Mapping, Tuple

logger = logging.getLogger(__name__)

UNKNOWN_FOOD = "unknown food"
DEFAULT_CALORIES = 250

# Typical calories per serving, (min, max) kcal
FOOD_CALORIE_RANGES: Mapping[str, Tuple[int, int]] = {
    # Fruits
    "apple": (70, 100),
    "banana": (90, 120),
    "orange": (60, 80),
    "strawberry": (30, 50),
    "mango": (130, 160),
    "grape": (90, 120),
    "fruit": (80, 120),
    # Vegetables
    "broccoli": (30, 50),
    "carrot": (40, 60),
    "tomato": (20, 40),
    "potato": (130, 180),
    "salad": (20, 40),
    "vegetable": (40, 80),
    # Proteins
    "chicken": (150, 250),
    "beef": (200, 350),
    "fish": (120, 220),
    "pork": (180, 300),
    "meat": (180, 300),
    # Dishes
    "pizza": (250, 350),
    "pasta": (200, 350),
    "sandwich": (300, 500),
    "burger": (350, 600),
    "fries": (300, 500),
    "rice": (150, 250),
    "bread": (80, 150),
    # Desserts
    "cake": (300, 500),
    "ice cream": (200, 350),
}


def _confidence(concept: Mapping[str, Any]) -> float:
    try:
        return float(concept.get("value") or 0)
    except (TypeError, ValueError):
        return 0.0


def estimate_calories(concepts: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Estimate calories for the most confident recognised food.

    Args:
        concepts: ``{"name": ..., "value": confidence}`` pairs from the
            vision model

    Returns:
        Dict with ``food_name``, ``calories`` (rounded midpoint of the food's
        range), ``min_calories``, ``max_calories`` and ``confidence``. Falls
        back to ``unknown food`` / 250 kcal when nothing is recognised.
    """
    ranked = sorted(
        (c for c in concepts or [] if isinstance(c, Mapping)),
        key=_confidence,
        reverse=True,
    )
    for concept in ranked:
        name = str(concept.get("name") or "").strip().lower()
        calorie_range = FOOD_CALORIE_RANGES.get(name)
        if calorie_range is None:
            continue
        low, high = calorie_range
        return {
            "food_name": name,
            "calories": int(round((low + high) / 2)),
            "min_calories": low,
            "max_calories": high,
            "confidence": _confidence(concept),
        }

    logger.debug("No known food among %d concepts", len(ranked))
    return {
        "food_name": UNKNOWN_FOOD,
        "calories": DEFAULT_CALORIES,
        "min_calories": None,
        "max_calories": None,
        "confidence": 0.0,
    }
