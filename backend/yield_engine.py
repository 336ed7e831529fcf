"""
Farm Advisor - Yield Estimator.
Each factor's relative deviation from the crop optimum shrinks a multiplier on the
base yield; the estimate comes with a fixed +/-15% band and a per-factor rating.
"""
import logging
from typing import Dict, Any, Tuple

from rounding import round_half_up

logger = logging.getLogger(__name__)

# crop -> base yield (t/ha) and the optimal value per factor
YIELD_PROFILES: Dict[str, Dict[str, Any]] = {
    "Rice": {"base_yield": 4.5, "optimal": {"nitrogen": 100, "phosphorus": 50, "potassium": 50, "ph_level": 6.5, "temperature": 27, "humidity": 85, "rainfall": 200}},
    "Wheat": {"base_yield": 3.5, "optimal": {"nitrogen": 60, "phosphorus": 40, "potassium": 40, "ph_level": 6.5, "temperature": 20, "humidity": 60, "rainfall": 75}},
    "Maize": {"base_yield": 5.0, "optimal": {"nitrogen": 80, "phosphorus": 45, "potassium": 45, "ph_level": 6.5, "temperature": 22, "humidity": 70, "rainfall": 75}},
    "Cotton": {"base_yield": 2.5, "optimal": {"nitrogen": 80, "phosphorus": 40, "potassium": 40, "ph_level": 7.0, "temperature": 25, "humidity": 65, "rainfall": 75}},
    "Sugarcane": {"base_yield": 70.0, "optimal": {"nitrogen": 125, "phosphorus": 65, "potassium": 65, "ph_level": 6.5, "temperature": 27, "humidity": 80, "rainfall": 150}},
    "Soybean": {"base_yield": 2.8, "optimal": {"nitrogen": 40, "phosphorus": 40, "potassium": 40, "ph_level": 6.5, "temperature": 25, "humidity": 70, "rainfall": 75}},
}
FALLBACK_CROP = "Wheat"

# factor -> (display name, penalty per unit of relative deviation, labels best..worst)
FACTOR_RULES: Tuple[Tuple[str, str, float, Tuple[str, str, str, str]], ...] = (
    ("nitrogen", "Nitrogen", 0.30, ("Excellent", "Good", "Fair", "Poor")),
    ("phosphorus", "Phosphorus", 0.25, ("Excellent", "Good", "Fair", "Poor")),
    ("potassium", "Potassium", 0.25, ("Excellent", "Good", "Fair", "Poor")),
    ("ph_level", "pH Level", 0.20, ("Optimal", "Good", "Fair", "Needs adjustment")),
    ("temperature", "Temperature", 0.25, ("Ideal", "Suitable", "Manageable", "Challenging")),
    ("humidity", "Humidity", 0.15, ("Ideal", "Suitable", "Acceptable", "Challenging")),
    ("rainfall", "Rainfall", 0.30, ("Ideal", "Sufficient", "Adequate", "Insufficient")),
)

RATING_THRESHOLDS = (0.9, 0.7, 0.5)
CONFIDENCE_BAND = 0.15


def get_yield_profile(crop: str) -> Dict[str, Any]:
    profile = YIELD_PROFILES.get(crop)
    if profile is None:
        logger.info("No yield profile for crop %r, using %s", crop, FALLBACK_CROP)
        profile = YIELD_PROFILES[FALLBACK_CROP]
    return profile


def factor_multiplier(actual: float, optimal: float, sensitivity: float) -> float:
    """1 at the optimum, falling by ``sensitivity`` per 100% deviation. Can go negative."""
    return 1 - abs(actual - optimal) / optimal * sensitivity


def rate_factor(multiplier: float, labels: Tuple[str, str, str, str]) -> str:
    for threshold, label in zip(RATING_THRESHOLDS, labels):
        if multiplier > threshold:
            return label
    return labels[-1]


def estimate_yield(
    crop: str,
    nitrogen: float,
    phosphorus: float,
    potassium: float,
    ph_level: float,
    temperature: float,
    humidity: float,
    rainfall: float,
) -> Dict[str, Any]:
    """
    Yield estimate in tons/hectare.

    Returns:
        Dict with ``yield``, ``confidenceInterval`` ({lower, upper}) and ``factors``
        (display name -> rating).
    """
    profile = get_yield_profile(crop)
    optimal = profile["optimal"]
    actual = {
        "nitrogen": nitrogen,
        "phosphorus": phosphorus,
        "potassium": potassium,
        "ph_level": ph_level,
        "temperature": temperature,
        "humidity": humidity,
        "rainfall": rainfall,
    }

    factors: Dict[str, str] = {}
    multipliers = []
    for key, display, sensitivity, labels in FACTOR_RULES:
        m = factor_multiplier(actual[key], optimal[key], sensitivity)
        # Ratings see the raw multiplier; only the average is floored at 0
        factors[display] = rate_factor(m, labels)
        multipliers.append(max(0.0, m))

    avg_factor = sum(multipliers) / len(multipliers)
    predicted = profile["base_yield"] * avg_factor
    variance = predicted * CONFIDENCE_BAND

    return {
        "yield": round_half_up(predicted, 2),
        "confidenceInterval": {
            "lower": round_half_up(predicted - variance, 2),
            "upper": round_half_up(predicted + variance, 2),
        },
        "factors": factors,
    }
