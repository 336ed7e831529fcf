"""
Farm Advisor - Fertilizer Advisor.
Nutrient deficits against crop targets pick one of five product/timing plans;
a pH note is layered on top of whichever plan wins.
"""
import logging
from typing import Dict, Tuple

from rounding import round_half_up

logger = logging.getLogger(__name__)

# Required N/P/K (kg/ha) per crop
NUTRIENT_TARGETS: Dict[str, Dict[str, float]] = {
    "Rice": {"n": 100, "p": 50, "k": 50},
    "Wheat": {"n": 60, "p": 40, "k": 40},
    "Maize": {"n": 80, "p": 45, "k": 45},
    "Cotton": {"n": 80, "p": 40, "k": 40},
    "Sugarcane": {"n": 125, "p": 65, "k": 65},
    "Soybean": {"n": 40, "p": 40, "k": 40},
}
DEFAULT_NUTRIENT_TARGET: Dict[str, float] = {"n": 60, "p": 40, "k": 40}

ACIDIC_PH_LIMIT = 6.0
ALKALINE_PH_LIMIT = 7.5
MAINTENANCE_DOSE_KG = 50


def get_nutrient_target(crop: str) -> Dict[str, float]:
    """Target for ``crop``; unknown names get the generic default."""
    target = NUTRIENT_TARGETS.get(crop)
    if target is None:
        logger.info("No nutrient target for crop %r, using default", crop)
        return dict(DEFAULT_NUTRIENT_TARGET)
    return dict(target)


def compute_deficits(crop: str, nitrogen: float, phosphorus: float, potassium: float) -> Tuple[float, float, float]:
    """(n, p, k) shortfall below the crop target, each clamped at 0."""
    target = get_nutrient_target(crop)
    return (
        max(0.0, target["n"] - nitrogen),
        max(0.0, target["p"] - phosphorus),
        max(0.0, target["k"] - potassium),
    )


def _dosage(amount: float) -> str:
    return f"{round_half_up(amount):.0f} kg/hectare"


def _ph_note(ph_level: float) -> str:
    if ph_level < ACIDIC_PH_LIMIT:
        return " | Note: Consider applying lime to increase soil pH before fertilization."
    if ph_level > ALKALINE_PH_LIMIT:
        return " | Note: Consider adding sulfur or organic matter to reduce soil pH."
    return ""


def recommend_fertilizer(
    crop: str,
    nitrogen: float,
    phosphorus: float,
    potassium: float,
    ph_level: float,
) -> Dict[str, str]:
    """
    Fertilizer plan from deficits. Rules are checked in priority order, first match wins:
    all three short -> NPK complex; N short -> urea; P short -> SSP; K short -> MOP;
    otherwise a maintenance dose of balanced NPK.
    """
    n_deficit, p_deficit, k_deficit = compute_deficits(crop, nitrogen, phosphorus, potassium)

    if n_deficit > 20 and p_deficit > 10 and k_deficit > 10:
        fertilizer_type = "NPK Complex (20-20-20)"
        dosage = _dosage(max(n_deficit, p_deficit, k_deficit) * 2)
        timing = "Apply 50% at sowing/planting and 50% 30 days after planting"
    elif n_deficit > 15:
        fertilizer_type = "Urea (46-0-0)"
        dosage = _dosage(n_deficit * 2.2)
        timing = "Split application: 1/3 at sowing, 1/3 at 30 days, 1/3 at 60 days"
    elif p_deficit > 10:
        fertilizer_type = "Single Super Phosphate (SSP 16% P2O5)"
        dosage = _dosage(p_deficit * 6.25)
        timing = "Apply at time of sowing/planting as basal dose"
    elif k_deficit > 10:
        fertilizer_type = "Muriate of Potash (MOP 60% K2O)"
        dosage = _dosage(k_deficit * 1.67)
        timing = "Apply 50% at sowing and 50% at flowering stage"
    else:
        fertilizer_type = "Balanced NPK (12-32-16)"
        dosage = _dosage(MAINTENANCE_DOSE_KG)
        timing = "Apply at sowing/planting as maintenance dose"

    timing += _ph_note(ph_level)

    return {"type": fertilizer_type, "dosage": dosage, "timing": timing}
