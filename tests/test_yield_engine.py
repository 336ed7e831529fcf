"""
Tests for the Yield Estimator.
"""
import pytest

from yield_engine import (
    YIELD_PROFILES,
    estimate_yield,
    factor_multiplier,
    get_yield_profile,
    rate_factor,
)

WHEAT_OPTIMUM = dict(nitrogen=60, phosphorus=40, potassium=40, ph_level=6.5, temperature=20, humidity=60, rainfall=75)


def test_wheat_at_optimum_returns_base_yield():
    result = estimate_yield("Wheat", **WHEAT_OPTIMUM)
    assert result["yield"] == 3.5
    assert result["confidenceInterval"] == {"lower": 2.98, "upper": 4.03}
    assert result["factors"] == {
        "Nitrogen": "Excellent",
        "Phosphorus": "Excellent",
        "Potassium": "Excellent",
        "pH Level": "Optimal",
        "Temperature": "Ideal",
        "Humidity": "Ideal",
        "Rainfall": "Ideal",
    }


def test_unknown_crop_falls_back_to_wheat():
    assert get_yield_profile("Barley") is YIELD_PROFILES["Wheat"]
    assert estimate_yield("Barley", **WHEAT_OPTIMUM) == estimate_yield("Wheat", **WHEAT_OPTIMUM)


def test_factor_multiplier():
    assert factor_multiplier(60, 60, 0.3) == 1
    # 50% above optimum with sensitivity 0.3
    assert factor_multiplier(90, 60, 0.3) == pytest.approx(0.85)
    assert factor_multiplier(30, 60, 0.3) == pytest.approx(0.85)


@pytest.mark.parametrize("value, expected", [
    (0.95, "Excellent"),
    (0.9, "Good"),
    (0.75, "Good"),
    (0.7, "Fair"),
    (0.6, "Fair"),
    (0.5, "Poor"),
    (-2.0, "Poor"),
])
def test_rating_thresholds(value, expected):
    assert rate_factor(value, ("Excellent", "Good", "Fair", "Poor")) == expected


def test_dimension_specific_vocabulary():
    # Rice rainfall 100 vs optimum 200: 1 - 0.5 * 0.3 = 0.85 -> second tier
    result = estimate_yield("Rice", nitrogen=100, phosphorus=50, potassium=50, ph_level=6.5,
                            temperature=27, humidity=85, rainfall=100)
    assert result["factors"]["Rainfall"] == "Sufficient"
    assert result["factors"]["Temperature"] == "Ideal"

    # pH 2.0 vs 6.5: 1 - (4.5 / 6.5) * 0.2 ~= 0.86
    result = estimate_yield("Rice", nitrogen=100, phosphorus=50, potassium=50, ph_level=2.0,
                            temperature=27, humidity=85, rainfall=600)
    assert result["factors"]["pH Level"] == "Good"
    assert result["factors"]["Rainfall"] == "Insufficient"


def test_negative_factor_rated_but_floored_for_average():
    # Nitrogen 10x optimum: multiplier 1 - 9 * 0.3 = -1.7
    result = estimate_yield("Wheat", **dict(WHEAT_OPTIMUM, nitrogen=600))
    assert result["factors"]["Nitrogen"] == "Poor"
    # six factors at 1.0, nitrogen floored to 0 -> 6/7 of base
    assert result["yield"] == round(3.5 * 6 / 7, 2)


@pytest.mark.parametrize("crop", list(YIELD_PROFILES) + ["Unknown"])
@pytest.mark.parametrize("measurement", [
    dict(nitrogen=0, phosphorus=0, potassium=0, ph_level=0, temperature=0, humidity=0, rainfall=0),
    dict(nitrogen=90, phosphorus=42, potassium=38, ph_level=6.1, temperature=24, humidity=72, rainfall=120),
    dict(nitrogen=1000, phosphorus=1000, potassium=1000, ph_level=14, temperature=50, humidity=100, rainfall=3000),
])
def test_band_brackets_estimate_symmetrically(crop, measurement):
    result = estimate_yield(crop, **measurement)
    band = result["confidenceInterval"]
    assert band["lower"] <= result["yield"] <= band["upper"]
    assert (band["upper"] - result["yield"]) == pytest.approx(result["yield"] - band["lower"], abs=0.011)
    assert result["yield"] >= 0


def test_two_decimal_tie_rounds_up(monkeypatch):
    # base 2.125 at the Wheat optimum gives an exact x.xx5 estimate
    monkeypatch.setitem(YIELD_PROFILES, "Trial", {"base_yield": 2.125, "optimal": dict(YIELD_PROFILES["Wheat"]["optimal"])})
    result = estimate_yield("Trial", **WHEAT_OPTIMUM)
    assert result["yield"] == 2.13
