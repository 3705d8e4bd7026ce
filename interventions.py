"""
Interventions the player can fund in the selected region.

An Intervention is a plain descriptor. Its cost and effect are looked up by id
in the formula registries below, so the catalogue stays serializable and
independent of any UI toolkit.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, NamedTuple, Tuple

from logger import setup_logger
from region import RegionState
from world import WorldState, get_selected_region, replace_region

logger = setup_logger()

CostFormula = Callable[[RegionState], float]
EffectFormula = Callable[[RegionState], RegionState]

COST_FORMULAS: Dict[str, CostFormula] = {}
EFFECT_FORMULAS: Dict[str, EffectFormula] = {}


def cost_formula(formula_id: str):
    """Register a pure cost function under formula_id."""
    def decorator(func: CostFormula) -> CostFormula:
        COST_FORMULAS[formula_id] = func
        return func
    return decorator


def effect_formula(formula_id: str):
    """Register a pure effect function under formula_id."""
    def decorator(func: EffectFormula) -> EffectFormula:
        EFFECT_FORMULAS[formula_id] = func
        return func
    return decorator


# --- Cost formulas ---------------------------------------------------------

@cost_formula("free")
def _free(cs: RegionState) -> float:
    return 0.0


@cost_formula("education_scaled")
def _education_cost(cs: RegionState) -> float:
    return cs.education_index ** 1.5 * 100000


@cost_formula("tech_scaled")
def _tech_cost(cs: RegionState) -> float:
    return cs.tech_index ** 1.5 * 100000


@cost_formula("gdp_share_small")
def _financial_boost_cost(cs: RegionState) -> float:
    return cs.gdp_capita * cs.total_population / 25000


@cost_formula("gdp_share_large")
def _economic_boost_cost(cs: RegionState) -> float:
    return cs.gdp_capita * cs.total_population / 2000


# --- Effect formulas -------------------------------------------------------

@effect_formula("none")
def _no_effect(cs: RegionState) -> RegionState:
    return cs


@effect_formula("education_reform")
def _education_reform(cs: RegionState) -> RegionState:
    return replace(cs, education_index=cs.education_index + 0.3)


@effect_formula("research_grant")
def _research_grant(cs: RegionState) -> RegionState:
    return replace(
        cs,
        tech_index=cs.tech_index + cs.education_index * 0.01,
        tech_index_delta=cs.tech_index_delta + cs.education_index * 0.01,
    )


@effect_formula("financial_boost")
def _financial_boost(cs: RegionState) -> RegionState:
    return replace(
        cs,
        gdp_capita=cs.gdp_capita * 1.00001,
        happiness=cs.happiness + 0.15,
        happiness_delta=cs.happiness_delta - 0.01,
        food_index=cs.food_index + (10 - cs.food_index) * 0.1,
    )


@effect_formula("economic_boost")
def _economic_boost(cs: RegionState) -> RegionState:
    return replace(cs, gdp_capita_multiplier=cs.gdp_capita_multiplier + 0.01)


# --- Catalogue -------------------------------------------------------------

@dataclass(frozen=True)
class Intervention:
    name: str
    description: str
    additional_description: str
    cost_formula_id: str
    effect_formula_id: str


INTERVENTIONS: Tuple[Intervention, ...] = (
    Intervention(
        name="Education reform",
        description="Provide financial aid for having more schools and teachers.",
        additional_description="Improves education, which over time decreases birth rate and increases finance/tech.",
        cost_formula_id="education_scaled",
        effect_formula_id="education_reform",
    ),
    Intervention(
        name="Research grant",
        description="Begin a series of technological research projects in the region.",
        additional_description="Boosts tech level based on current education level, with long-term effects in finance, health, and happiness.",
        cost_formula_id="tech_scaled",
        effect_formula_id="research_grant",
    ),
    # Renewable energy and peacekeepers are offered but have no modelled effect yet
    Intervention(
        name="Renewable energy grant",
        description="Provide financial stimulus for improving the energy infrastructure.",
        additional_description="Short-term financial boost and long-term improvement for global warming and happiness.",
        cost_formula_id="free",
        effect_formula_id="none",
    ),
    Intervention(
        name="Peacekeepers",
        description="Send a group of peacekeepers and negotiators in the region.",
        additional_description="Immediate decrease in conflict levels, providing relief in food and happiness and decreasing emigration.",
        cost_formula_id="free",
        effect_formula_id="none",
    ),
    Intervention(
        name="Financial boost",
        description="Provide money to a region as immediate financial relief.",
        additional_description="Does little to help the economy grow, but can alleviate happiness and food stability in the short term.",
        cost_formula_id="gdp_share_small",
        effect_formula_id="financial_boost",
    ),
    Intervention(
        name="Economic boost",
        description="Invest money in a region to boost their economic growth permanently.",
        additional_description="Helps the economy grow over time, providing long-term benefits to happiness, education, and food stability.",
        cost_formula_id="gdp_share_large",
        effect_formula_id="economic_boost",
    ),
)


def get_intervention(name: str) -> Intervention:
    """Look up a catalogue entry by its display name (case-insensitive)."""
    for intervention in INTERVENTIONS:
        if intervention.name.lower() == name.lower():
            return intervention
    raise KeyError(f"Unknown intervention: {name}")


def intervention_cost(intervention: Intervention, region: RegionState) -> float:
    return COST_FORMULAS[intervention.cost_formula_id](region)


def apply_effect(intervention: Intervention, region: RegionState) -> RegionState:
    return EFFECT_FORMULAS[intervention.effect_formula_id](region)


# --- Applying to the world -------------------------------------------------

class Outcome(Enum):
    APPLIED = "applied"
    NO_SELECTION = "no_selection"
    INSUFFICIENT_FUNDS = "insufficient_funds"


class InterventionResult(NamedTuple):
    world: WorldState
    outcome: Outcome
    cost: float


def can_afford(world: WorldState, intervention: Intervention) -> bool:
    """True when a region is selected and the budget covers the cost."""
    region = get_selected_region(world)
    if region is None:
        return False
    return intervention_cost(intervention, region) <= world.global_budget


def apply_intervention(world: WorldState, intervention: Intervention) -> InterventionResult:
    """
    Fund an intervention in the selected region.

    Declined actions (nothing selected, or cost above the budget) return the
    world unchanged; the caller decides how to surface them.
    """
    region = get_selected_region(world)
    if region is None:
        logger.debug(f"{intervention.name}: no region selected")
        return InterventionResult(world, Outcome.NO_SELECTION, 0.0)

    cost = intervention_cost(intervention, region)
    if cost > world.global_budget:
        logger.info(
            f"{intervention.name} declined for {region.name}: "
            f"cost ${cost:,.0f} exceeds budget ${world.global_budget:,.0f}"
        )
        return InterventionResult(world, Outcome.INSUFFICIENT_FUNDS, cost)

    next_world = replace_region(world, apply_effect(intervention, region))
    next_world = replace(next_world, global_budget=world.global_budget - cost)
    logger.info(f"{intervention.name} funded in {region.name} for ${cost:,.0f}")
    return InterventionResult(next_world, Outcome.APPLIED, cost)


def apply_interventions(
    world: WorldState, interventions: Iterable[Intervention]
) -> Tuple[WorldState, List[InterventionResult]]:
    """Apply queued interventions in order; each sees the previous result."""
    results = []
    for intervention in interventions:
        result = apply_intervention(world, intervention)
        world = result.world
        results.append(result)
    return world, results
