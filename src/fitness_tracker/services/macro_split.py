"""Macro target calculation from a calorie goal."""

import math
from dataclasses import replace

from fitness_tracker.domain.goals import MacroDistributionStrategy, MacroSplit
from fitness_tracker.domain.macros import TrackedMacro, new_id

KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_CARBS = 4.0
KCAL_PER_G_FAT = 9.0

STRATEGY_DESCRIPTIONS: dict[MacroDistributionStrategy, str] = {
    MacroDistributionStrategy.HIGH_PROTEIN: (
        "Protein 2.5g/kg (min 30%) • Fat 20% • Carbs Remainder"
    ),
    MacroDistributionStrategy.BALANCED: "Protein 25% • Fat 25% • Carbs Remainder",
    MacroDistributionStrategy.LOW_FAT: "Protein 1.6g/kg • Fat 15% • Carbs Remainder",
    MacroDistributionStrategy.LOW_CARB: "Protein 2.0g/kg • Carbs 10% • Fat Remainder",
    MacroDistributionStrategy.CUSTOM: "Manually set your macro targets",
}

_CANONICAL_NAMES = {
    "protein": ("protein",),
    "carbs": ("carbs", "carbohydrates", "carbohydrate"),
    "fats": ("fats", "fat"),
}

_DISPLAY_NAMES = {"protein": "Protein", "carbs": "Carbs", "fats": "Fats"}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def calculate_split(
    calories: float, body_weight_kg: float, strategy: MacroDistributionStrategy
) -> MacroSplit | None:
    """Return protein, fat and carb grams for a strategy.

    Returns None for the custom strategy and for a non-positive calorie goal.
    """
    if strategy == MacroDistributionStrategy.CUSTOM or calories <= 0:
        return None
    weight = max(body_weight_kg, 0.0)

    if strategy == MacroDistributionStrategy.HIGH_PROTEIN:
        protein_g = max(2.5 * weight, 0.30 * calories / KCAL_PER_G_PROTEIN)
        fat_kcal = 0.20 * calories
        fat_g = fat_kcal / KCAL_PER_G_FAT
        carbs_g = max(
            0.0, (calories - protein_g * KCAL_PER_G_PROTEIN - fat_kcal) / KCAL_PER_G_CARBS
        )
    elif strategy == MacroDistributionStrategy.BALANCED:
        protein_kcal = 0.25 * calories
        protein_g = protein_kcal / KCAL_PER_G_PROTEIN
        fat_kcal = 0.25 * calories
        fat_g = fat_kcal / KCAL_PER_G_FAT
        carbs_g = max(0.0, (calories - protein_kcal - fat_kcal) / KCAL_PER_G_CARBS)
    elif strategy == MacroDistributionStrategy.LOW_FAT:
        protein_g = 1.6 * weight
        fat_kcal = 0.15 * calories
        fat_g = fat_kcal / KCAL_PER_G_FAT
        carbs_g = max(
            0.0, (calories - protein_g * KCAL_PER_G_PROTEIN - fat_kcal) / KCAL_PER_G_CARBS
        )
    else:
        protein_g = 2.0 * weight
        carb_kcal = 0.10 * calories
        carbs_g = carb_kcal / KCAL_PER_G_CARBS
        fat_g = max(
            0.0, (calories - protein_g * KCAL_PER_G_PROTEIN - carb_kcal) / KCAL_PER_G_FAT
        )

    return MacroSplit(
        protein_g=round_half_up(protein_g),
        fat_g=round_half_up(fat_g),
        carbs_g=round_half_up(carbs_g),
    )


def apply_split(
    tracked_macros: list[TrackedMacro], split: MacroSplit
) -> list[TrackedMacro]:
    """Write split targets into the tracked macro list.

    Macros are matched by canonical name; missing ones are appended.
    """
    targets = {
        "protein": split.protein_g,
        "carbs": split.carbs_g,
        "fats": split.fat_g,
    }
    updated = list(tracked_macros)
    for canonical, target in targets.items():
        index = _find_canonical(updated, canonical)
        if index is None:
            updated.append(
                TrackedMacro(
                    id=new_id(),
                    name=_DISPLAY_NAMES[canonical],
                    unit="g",
                    target=float(target),
                )
            )
        else:
            updated[index] = replace(updated[index], target=float(target))
    return updated


def canonical_macro_name(name: str) -> str | None:
    """Return ``protein``, ``carbs`` or ``fats`` for a macro display name."""
    lowered = name.strip().lower()
    for canonical, aliases in _CANONICAL_NAMES.items():
        if lowered in aliases:
            return canonical
    return None


def _find_canonical(macros: list[TrackedMacro], canonical: str) -> int | None:
    for index, macro in enumerate(macros):
        if canonical_macro_name(macro.name) == canonical:
            return index
    return None
