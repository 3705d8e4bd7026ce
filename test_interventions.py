import pytest
from dataclasses import fields, replace
from pathlib import Path

from config import SimulationConfig
from interventions import (
    COST_FORMULAS,
    EFFECT_FORMULAS,
    INTERVENTIONS,
    Intervention,
    Outcome,
    apply_intervention,
    apply_interventions,
    can_afford,
    get_intervention,
    intervention_cost,
)
from region import RegionName
from world import get_region_by_name, get_selected_region, initial_world_state, select_region


@pytest.fixture
def config():
    return SimulationConfig(num_days=10, game_speed=1, output_dir=Path("."))


@pytest.fixture
def world(config):
    return select_region(initial_world_state(config), RegionName.EUROPE)


@pytest.fixture
def fixed_cost_intervention(monkeypatch):
    """Intervention costing exactly 1000 with the education reform effect."""
    monkeypatch.setitem(COST_FORMULAS, "test_fixed", lambda cs: 1000.0)
    return Intervention(
        name="Test grant",
        description="",
        additional_description="",
        cost_formula_id="test_fixed",
        effect_formula_id="education_reform",
    )


class TestCatalogue:
    def test_six_interventions(self):
        names = [i.name for i in INTERVENTIONS]
        assert names == [
            "Education reform", "Research grant", "Renewable energy grant",
            "Peacekeepers", "Financial boost", "Economic boost",
        ]

    def test_formulas_registered(self):
        for intervention in INTERVENTIONS:
            assert intervention.cost_formula_id in COST_FORMULAS
            assert intervention.effect_formula_id in EFFECT_FORMULAS

    def test_lookup_is_case_insensitive(self):
        assert get_intervention("education REFORM").name == "Education reform"

    def test_unknown_lookup_raises(self):
        with pytest.raises(KeyError):
            get_intervention("Moon base")


class TestCosts:
    def test_education_cost(self, world):
        europe = get_selected_region(world)
        cost = intervention_cost(get_intervention("Education reform"), europe)
        assert cost == pytest.approx(europe.education_index ** 1.5 * 100000)

    def test_research_cost(self, world):
        europe = get_selected_region(world)
        cost = intervention_cost(get_intervention("Research grant"), europe)
        assert cost == pytest.approx(europe.tech_index ** 1.5 * 100000)

    def test_gdp_share_costs(self, world):
        europe = get_selected_region(world)
        gdp = europe.gdp_capita * europe.total_population
        assert intervention_cost(get_intervention("Financial boost"), europe) == pytest.approx(gdp / 25000)
        assert intervention_cost(get_intervention("Economic boost"), europe) == pytest.approx(gdp / 2000)

    def test_unmodelled_interventions_are_free(self, world):
        europe = get_selected_region(world)
        assert intervention_cost(get_intervention("Peacekeepers"), europe) == 0.0
        assert intervention_cost(get_intervention("Renewable energy grant"), europe) == 0.0


class TestApplyIntervention:
    def test_declined_when_too_expensive(self, world, fixed_cost_intervention):
        poor = replace(world, global_budget=100.0)
        result = apply_intervention(poor, fixed_cost_intervention)

        assert result.outcome == Outcome.INSUFFICIENT_FUNDS
        assert result.world is poor
        assert result.world.global_budget == 100.0
        assert result.cost == 1000.0
        assert not can_afford(poor, fixed_cost_intervention)

    def test_exact_budget_is_enough(self, world, fixed_cost_intervention):
        exact = replace(world, global_budget=1000.0)
        result = apply_intervention(exact, fixed_cost_intervention)
        assert result.outcome == Outcome.APPLIED
        assert result.world.global_budget == 0.0

    def test_no_selection(self, config):
        world = initial_world_state(config)
        result = apply_intervention(world, get_intervention("Education reform"))
        assert result.outcome == Outcome.NO_SELECTION
        assert result.world is world
        assert not can_afford(world, get_intervention("Education reform"))

    def test_selected_region_missing(self, world):
        africa_only = replace(world, regions=(get_region_by_name(world, RegionName.AFRICA),))
        result = apply_intervention(africa_only, get_intervention("Education reform"))
        assert result.outcome == Outcome.NO_SELECTION

    def test_education_reform_changes_only_education(self, world):
        before = get_selected_region(world)
        cost = intervention_cost(get_intervention("Education reform"), before)

        result = apply_intervention(world, get_intervention("Education reform"))
        after = get_selected_region(result.world)

        assert result.outcome == Outcome.APPLIED
        assert after.education_index == pytest.approx(before.education_index + 0.3)
        for f in fields(before):
            if f.name != "education_index":
                assert getattr(after, f.name) == getattr(before, f.name), f.name
        assert result.world.global_budget == pytest.approx(world.global_budget - cost)

    def test_other_regions_untouched(self, world):
        result = apply_intervention(world, get_intervention("Education reform"))
        for old, new in zip(world.regions, result.world.regions):
            if old.name != RegionName.EUROPE:
                assert new == old

    def test_research_grant(self, world):
        before = get_selected_region(world)
        after = get_selected_region(apply_intervention(world, get_intervention("Research grant")).world)
        assert after.tech_index == pytest.approx(before.tech_index + before.education_index * 0.01)
        assert after.tech_index_delta == pytest.approx(before.tech_index_delta + before.education_index * 0.01)

    def test_financial_boost(self, world):
        before = get_selected_region(world)
        rich = replace(world, global_budget=1e12)
        after = get_selected_region(apply_intervention(rich, get_intervention("Financial boost")).world)
        assert after.gdp_capita == pytest.approx(before.gdp_capita * 1.00001)
        assert after.happiness == pytest.approx(before.happiness + 0.15)
        assert after.happiness_delta == pytest.approx(before.happiness_delta - 0.01)
        assert after.food_index == pytest.approx(before.food_index + (10 - before.food_index) * 0.1)

    def test_economic_boost(self, world):
        before = get_selected_region(world)
        rich = replace(world, global_budget=1e15)
        after = get_selected_region(apply_intervention(rich, get_intervention("Economic boost")).world)
        assert after.gdp_capita_multiplier == pytest.approx(before.gdp_capita_multiplier + 0.01)

    def test_economic_boost_over_default_budget(self, world):
        result = apply_intervention(world, get_intervention("Economic boost"))
        assert result.outcome == Outcome.INSUFFICIENT_FUNDS

    def test_free_interventions_change_nothing(self, world):
        for name in ("Peacekeepers", "Renewable energy grant"):
            result = apply_intervention(world, get_intervention(name))
            assert result.outcome == Outcome.APPLIED
            assert result.world.regions == world.regions
            assert result.world.global_budget == world.global_budget

    def test_effects_are_not_clamped(self, world):
        saturated = replace(get_selected_region(world), education_index=9.9)
        world = replace(world, regions=(saturated,))
        after = get_selected_region(apply_intervention(world, get_intervention("Education reform")).world)
        assert after.education_index == pytest.approx(10.2)


class TestSequentialApplication:
    def test_second_reform_sees_first(self, world):
        reform = get_intervention("Education reform")
        start = get_selected_region(world).education_index

        final, results = apply_interventions(world, [reform, reform])

        assert [r.outcome for r in results] == [Outcome.APPLIED, Outcome.APPLIED]
        assert get_selected_region(final).education_index == pytest.approx(start + 0.6)
        # Second cost is computed from the already reformed region
        assert results[1].cost == pytest.approx((start + 0.3) ** 1.5 * 100000)
        assert final.global_budget == pytest.approx(world.global_budget - results[0].cost - results[1].cost)

    def test_budget_runs_out(self, world, fixed_cost_intervention):
        world = replace(world, global_budget=1500.0)
        final, results = apply_interventions(world, [fixed_cost_intervention, fixed_cost_intervention])

        assert [r.outcome for r in results] == [Outcome.APPLIED, Outcome.INSUFFICIENT_FUNDS]
        assert final.global_budget == 500.0

    def test_empty_queue(self, world):
        final, results = apply_interventions(world, [])
        assert final is world
        assert results == []


class TestActionParsing:
    def test_parse_action(self):
        from main import parse_action
        day, region, intervention = parse_action("North America:research grant@30")
        assert day == 30
        assert region == RegionName.NORTH_AMERICA
        assert intervention.name == "Research grant"

    @pytest.mark.parametrize("text", ["Europe:Education reform", "Atlantis:Education reform@3", "Europe:Moon base@3"])
    def test_bad_actions(self, text):
        import argparse
        from main import parse_action
        with pytest.raises(argparse.ArgumentTypeError):
            parse_action(text)
