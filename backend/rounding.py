"""
Farm Advisor - fixed-point rounding for the numbers shown to farmers.
"""
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round to ``places`` decimals, ties going up (112.5 -> 113, 2.125 -> 2.13).

    Works on the exact binary value of ``value``, so 2.675 (stored just below)
    still rounds to 2.67. Built-in round() sends ties to the even digit instead.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
