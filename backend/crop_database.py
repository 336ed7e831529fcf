"""
Farm Advisor - Crop Matcher
Rule-based crop suggestion from seven soil/climate measurements: N, P, K, pH,
temperature, humidity and rainfall. Each reference crop carries an acceptable range
per factor; values inside the range earn the full weighted share, values outside
lose it linearly with distance. No ML model, no external API.
"""

import logging
from typing import List, Dict, Any, Tuple

logger = logging.getLogger(__name__)

# --- Factors ---
# Order matters: it is the order used in the reasoning text and the score breakdown.
FACTORS: Tuple[str, ...] = (
    "nitrogen",
    "phosphorus",
    "potassium",
    "ph_level",
    "temperature",
    "humidity",
    "rainfall",
)

# Importance weight per factor; a crop profile may override any of these.
DEFAULT_FACTOR_WEIGHTS: Dict[str, float] = {
    "nitrogen": 1.5,
    "phosphorus": 1.5,
    "potassium": 1.5,
    "ph_level": 1.2,
    "temperature": 1.3,
    "humidity": 1.0,
    "rainfall": 1.2,
}

# Score (percent) below which the reasoning suggests soil amendments.
WELL_SUITED_THRESHOLD = 70

ALTERNATE_COUNT = 3


# --- Crop Database ---
# ranges: factor -> (min, max). N/P/K in kg/ha, temperature in °C, humidity in %, rainfall in mm.
CROP_PROFILES: List[Dict[str, Any]] = [
    {
        "name": "Rice",
        "season": "Kharif (Monsoon)",
        "ranges": {
            "nitrogen": (80, 120), "phosphorus": (40, 60), "potassium": (40, 60),
            "ph_level": (5.5, 7.0), "temperature": (20, 35), "humidity": (80, 90),
            "rainfall": (150, 300),
        },
    },
    {
        "name": "Wheat",
        "season": "Rabi (Winter)",
        "ranges": {
            "nitrogen": (40, 80), "phosphorus": (30, 50), "potassium": (30, 50),
            "ph_level": (6.0, 7.5), "temperature": (15, 25), "humidity": (50, 70),
            "rainfall": (50, 100),
        },
    },
    {
        "name": "Maize",
        "season": "Kharif",
        "ranges": {
            "nitrogen": (60, 100), "phosphorus": (30, 60), "potassium": (30, 60),
            "ph_level": (5.5, 7.0), "temperature": (18, 27), "humidity": (60, 80),
            "rainfall": (50, 100),
        },
    },
    {
        "name": "Cotton",
        "season": "Kharif",
        "ranges": {
            "nitrogen": (60, 100), "phosphorus": (30, 50), "potassium": (30, 50),
            "ph_level": (6.0, 8.0), "temperature": (21, 30), "humidity": (50, 80),
            "rainfall": (50, 100),
        },
    },
    {
        "name": "Sugarcane",
        "season": "Year-round",
        "ranges": {
            "nitrogen": (100, 150), "phosphorus": (50, 80), "potassium": (50, 80),
            "ph_level": (6.0, 7.5), "temperature": (20, 35), "humidity": (70, 90),
            "rainfall": (100, 200),
        },
    },
    {
        "name": "Soybean",
        "season": "Kharif",
        "ranges": {
            "nitrogen": (30, 50), "phosphorus": (30, 50), "potassium": (30, 50),
            "ph_level": (6.0, 7.0), "temperature": (20, 30), "humidity": (60, 80),
            "rainfall": (50, 100),
        },
    },
]

CROP_NAMES: Tuple[str, ...] = tuple(p["name"] for p in CROP_PROFILES)


def _profile_weights(profile: Dict[str, Any]) -> Dict[str, float]:
    weights = dict(DEFAULT_FACTOR_WEIGHTS)
    weights.update(profile.get("weights", {}))
    return weights


def _factor_points(value: float, low: float, high: float, weight: float) -> float:
    """
    Weighted points for one factor: full ``weight * 100`` inside [low, high];
    outside, reduced by the out-of-range distance as a fraction of the range width
    (capped at 1), so a value one full range-width away (or further) earns nothing.
    """
    full = 100 * weight
    if low <= value <= high:
        return full
    distance = low - value if value < low else value - high
    range_width = high - low
    if range_width <= 0:
        return 0.0
    penalty = min(distance / range_width, 1) * full
    return max(0.0, full - penalty)


def score_crop(profile: Dict[str, Any], measurement: Dict[str, float]) -> float:
    """Suitability of one crop profile as a 0-100 percentage."""
    weights = _profile_weights(profile)
    score = 0.0
    max_score = 0.0
    for factor in FACTORS:
        low, high = profile["ranges"][factor]
        weight = weights[factor]
        max_score += 100 * weight
        score += _factor_points(float(measurement[factor]), low, high, weight)
    return score / max_score * 100 if max_score else 0.0


def score_crops(
    nitrogen: float,
    phosphorus: float,
    potassium: float,
    ph_level: float,
    temperature: float,
    humidity: float,
    rainfall: float,
) -> List[Dict[str, Any]]:
    """All reference crops ranked by suitability, best first. Ties keep table order."""
    measurement = {
        "nitrogen": nitrogen,
        "phosphorus": phosphorus,
        "potassium": potassium,
        "ph_level": ph_level,
        "temperature": temperature,
        "humidity": humidity,
        "rainfall": rainfall,
    }
    scored = [
        {"crop": p["name"], "score": score_crop(p, measurement), "season": p["season"]}
        for p in CROP_PROFILES
    ]
    # sort() is stable, so equal scores stay in table order
    scored.sort(key=lambda c: c["score"], reverse=True)
    return scored


def _number(value: float) -> str:
    """100.0 -> "100", 6.5 -> "6.5"."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _reasoning(measurement: Dict[str, float], top: Dict[str, Any]) -> str:
    m = {k: _number(v) for k, v in measurement.items()}
    text = (
        f"Based on your soil nutrient levels (N: {m['nitrogen']}, P: {m['phosphorus']}, K: {m['potassium']}) "
        f"and environmental conditions (pH: {m['ph_level']}, Temp: {m['temperature']}°C, "
        f"Humidity: {m['humidity']}%, Rainfall: {m['rainfall']}mm), "
        f"{top['crop']} is the most suitable crop for {top['season']} season. "
    )
    if top["score"] < WELL_SUITED_THRESHOLD:
        text += "However, soil amendments may be needed to optimize conditions."
    else:
        text += "Your soil conditions are well-suited for this crop."
    return text


def match_crop(
    nitrogen: float,
    phosphorus: float,
    potassium: float,
    ph_level: float,
    temperature: float,
    humidity: float,
    rainfall: float,
) -> Dict[str, Any]:
    """
    Pick the best-matching crop for a measurement.

    Args:
        nitrogen, phosphorus, potassium: Soil nutrients in kg/ha
        ph_level: Soil pH (0-14)
        temperature: Temperature in Celsius
        humidity: Relative humidity percentage
        rainfall: Rainfall in mm

    Returns:
        Dict with ``crop``, ``confidence`` (0-1), three ``alternates`` and ``reasoning``.
    """
    ranked = score_crops(nitrogen, phosphorus, potassium, ph_level, temperature, humidity, rainfall)
    top = ranked[0]
    measurement = {
        "nitrogen": nitrogen,
        "phosphorus": phosphorus,
        "potassium": potassium,
        "ph_level": ph_level,
        "temperature": temperature,
        "humidity": humidity,
        "rainfall": rainfall,
    }
    logger.debug("Crop ranking: %s", [(c["crop"], round(c["score"], 2)) for c in ranked])
    return {
        "crop": top["crop"],
        "confidence": top["score"] / 100,
        "alternates": [c["crop"] for c in ranked[1:1 + ALTERNATE_COUNT]],
        "reasoning": _reasoning(measurement, top),
    }
