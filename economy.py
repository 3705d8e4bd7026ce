"""
Derived economic indices.
Pure formulas mapping raw region indicators onto the 0-10 index scales.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from region import RegionState


# Above this GDP per capita (thousands, PPP) the finance index saturates
FINANCE_INDEX_SATURATION = 70.0

# (coefficient, exponent) pairs of the finance index curve
FINANCE_INDEX_TERMS = (
    (0.0000008, 4.1),
    (-0.0000078, 3.5),
    (-0.005, 2.3),
    (0.016, 2.0),
    (0.175, 1.0),
)
FINANCE_INDEX_CONSTANT = -0.17


def calculate_finance_index(gdp_capita: float) -> float:
    """
    Map GDP per capita onto the finance index.

    financeIndex = 0.0000008 x^4.1 - 0.0000078 x^3.5 - 0.005 x^2.3
                   + 0.016 x^2 + 0.175 x - 0.17, and 10 when x >= 70
    where x is GDP per capita in thousands. Calibrated so that 40k gives ~8.

    The raw curve is returned; it dips slightly below zero for very poor
    regions (f(0) == -0.17) and is clamped by the region bounds policy.
    """
    if gdp_capita < 0:
        raise ValueError(f"GDP per capita must be non-negative, got {gdp_capita}")

    x = gdp_capita / 1000
    if x >= FINANCE_INDEX_SATURATION:
        return 10.0

    total = FINANCE_INDEX_CONSTANT
    for coefficient, exponent in FINANCE_INDEX_TERMS:
        total += coefficient * x ** exponent
    return total


def regional_gdp(region: "RegionState") -> float:
    """Total regional output (GDP per capita times population)."""
    return region.gdp_capita * region.total_population
