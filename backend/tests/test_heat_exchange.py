"""
Tests for the air-to-air heat exchanger solver.

Summer reference: outdoor air 33 °C / 60% recovered against room exhaust
at 26 °C / 50%. Winter reference: outdoor air -15 °C / 80% against
22 °C / 50% exhaust, where the exhaust side condenses.
"""

import pytest

from psychrochain.config import STANDARD_PRESSURE_KPA, Season
from psychrochain.engine.process_engine import apply_process
from psychrochain.engine.processes.heat_exchange import (
    airflow_ratio,
    effective_airflow,
    required_heat_exchange_efficiency,
)
from psychrochain.engine.state_resolver import resolve_input
from psychrochain.errors import InvalidProcessParameters, UpstreamUnresolved
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import Process, ProcessParameters, ProcessType
from psychrochain.models.state_point import DryBulbRH, StatePoint

C = PsychrometricConstants()
P = STANDARD_PRESSURE_KPA


def approx(value: float, rel_tol: float = 0.01, abs_tol: float = 0.1):
    return pytest.approx(value, rel=rel_tol, abs=abs_tol)


def point(point_id: str, tdb: float, rh: float) -> StatePoint:
    return resolve_input(DryBulbRH(dry_bulb_temp=tdb, relative_humidity=rh), C, P, id=point_id, name=point_id.upper())


SUMMER = {"oa": point("oa", 33.0, 60.0), "ea": point("ea", 26.0, 50.0)}
WINTER = {"oa": point("oa", -15.0, 80.0), "ea": point("ea", 22.0, 50.0)}


def exchanger(**params) -> Process:
    params.setdefault("exhaust_point_id", "ea")
    params.setdefault("supply_airflow", 1000.0)
    params.setdefault("exhaust_airflow", 1000.0)
    return Process(
        id="hx",
        type=ProcessType.HEAT_EXCHANGE,
        season=Season.SUMMER,
        from_point_id="oa",
        to_point_id="sa",
        parameters=ProcessParameters(**params),
    )


# ---------------------------------------------------------------------------
# Total heat exchange
# ---------------------------------------------------------------------------

class TestTotalHeatExchange:

    def setup_method(self):
        self.outcome = apply_process(exchanger(heat_exchange_efficiency=70.0), SUMMER, C, P)
        self.supply = self.outcome.to_point
        self.exhaust_out = self.outcome.exhaust_outlet

    def test_supply_enthalpy(self):
        oa, ea = SUMMER["oa"], SUMMER["ea"]
        expected = oa.enthalpy + 0.7 * (ea.enthalpy - oa.enthalpy)
        assert self.supply.enthalpy == pytest.approx(expected, abs=1e-9)

    def test_supply_humidity(self):
        oa, ea = SUMMER["oa"], SUMMER["ea"]
        assert self.supply.humidity == pytest.approx(oa.humidity + 0.7 * (ea.humidity - oa.humidity))

    def test_supply_tdb(self):
        assert self.supply.dry_bulb_temp == approx(28.37, abs_tol=0.05)

    def test_energy_balance(self):
        """Whatever the supply side loses, the exhaust side gains."""
        oa, ea = SUMMER["oa"], SUMMER["ea"]
        assert self.supply.enthalpy - oa.enthalpy == pytest.approx(ea.enthalpy - self.exhaust_out.enthalpy)
        assert self.supply.humidity - oa.humidity == pytest.approx(ea.humidity - self.exhaust_out.humidity)

    def test_heat_is_signed(self):
        results = self.outcome.results
        # Supply air is cooled in summer
        assert results.total_heat < 0
        assert results.total_heat == approx(-6.36, abs_tol=0.05)
        assert results.total_heat == pytest.approx(results.sensible_heat + results.latent_heat)

    def test_default_exhaust_outlet(self):
        assert self.exhaust_out.id == "hx_exhaust_out"
        assert self.exhaust_out.name == "EA (exhaust out)"
        assert self.exhaust_out.season == Season.SUMMER
        assert self.exhaust_out.is_resolved

    def test_no_warnings(self):
        assert self.outcome.warnings == []


class TestSeparateEfficiencies:

    def test_sensible_and_latent(self):
        outcome = apply_process(
            exchanger(sensible_efficiency=70.0, latent_efficiency=50.0), SUMMER, C, P
        )
        oa, ea = SUMMER["oa"], SUMMER["ea"]
        assert outcome.to_point.dry_bulb_temp == pytest.approx(28.1, abs=1e-9)
        assert outcome.to_point.humidity == pytest.approx(oa.humidity + 0.5 * (ea.humidity - oa.humidity))
        assert outcome.exhaust_outlet.dry_bulb_temp == pytest.approx(30.9, abs=1e-9)

    def test_sensible_only_wheel(self):
        outcome = apply_process(
            exchanger(sensible_efficiency=60.0, latent_efficiency=0.0), SUMMER, C, P
        )
        assert outcome.to_point.humidity == pytest.approx(SUMMER["oa"].humidity, abs=1e-12)
        assert outcome.results.latent_heat == approx(0.0, abs_tol=0.01)


# ---------------------------------------------------------------------------
# Airflow de-rating
# ---------------------------------------------------------------------------

class TestAirflowDerating:

    def test_unequal_airflows(self):
        outcome = apply_process(
            exchanger(heat_exchange_efficiency=70.0, exhaust_airflow=800.0), SUMMER, C, P
        )
        oa, ea = SUMMER["oa"], SUMMER["ea"]
        expected = oa.enthalpy + 0.7 * 0.8 * (ea.enthalpy - oa.enthalpy)
        assert outcome.to_point.enthalpy == pytest.approx(expected, abs=1e-9)
        assert len(outcome.warnings) == 1
        assert "de-rated" in outcome.warnings[0]

    def test_outlet_airflow_limits_side(self):
        outcome = apply_process(
            exchanger(heat_exchange_efficiency=70.0, supply_airflow_in=1000.0, supply_airflow_out=900.0),
            SUMMER, C, P,
        )
        assert outcome.results.airflow == 900.0
        assert "0.900" in outcome.warnings[0]

    def test_helpers(self):
        assert effective_airflow(1000.0, 900.0) == 900.0
        assert effective_airflow(1000.0, None) == 1000.0
        assert effective_airflow(None, 900.0) == 0.0
        assert airflow_ratio(800.0, 1000.0) == 0.8
        assert airflow_ratio(0.0, 0.0) == 0.0


# ---------------------------------------------------------------------------
# Winter: condensing exhaust side
# ---------------------------------------------------------------------------

class TestWinterCondensingExhaust:

    def setup_method(self):
        self.outcome = apply_process(
            exchanger(heat_exchange_efficiency=80.0, exhaust_outlet_point_id="eo"), WINTER, C, P
        )

    def test_supply_still_resolved(self):
        assert self.outcome.to_point.is_resolved
        assert self.outcome.to_point.dry_bulb_temp == approx(14.68, abs_tol=0.05)

    def test_supply_gains_heat(self):
        assert self.outcome.results.total_heat > 0

    def test_exhaust_outlet_dropped_with_warning(self):
        assert self.outcome.exhaust_outlet is None
        assert len(self.outcome.warnings) == 1
        assert "Exhaust outlet" in self.outcome.warnings[0]


class TestWinterDryExhaust:

    def test_named_exhaust_outlet(self):
        points = {"oa": point("oa", -5.0, 80.0), "ea": point("ea", 22.0, 40.0)}
        outcome = apply_process(
            exchanger(heat_exchange_efficiency=70.0, exhaust_outlet_point_id="eo"), points, C, P
        )
        assert outcome.exhaust_outlet.id == "eo"
        assert outcome.exhaust_outlet.dry_bulb_temp == approx(3.15, abs_tol=0.1)
        assert outcome.warnings == []


# ---------------------------------------------------------------------------
# Invalid parameters
# ---------------------------------------------------------------------------

class TestHeatExchangeInvalid:

    def test_exhaust_point_required(self):
        with pytest.raises(InvalidProcessParameters, match="exhaust_point_id"):
            apply_process(exchanger(heat_exchange_efficiency=70.0, exhaust_point_id=None), SUMMER, C, P)

    def test_unknown_exhaust_point(self):
        with pytest.raises(UpstreamUnresolved):
            apply_process(exchanger(heat_exchange_efficiency=70.0, exhaust_point_id="ra"), SUMMER, C, P)

    def test_both_efficiency_models(self):
        with pytest.raises(InvalidProcessParameters, match="not both"):
            apply_process(
                exchanger(heat_exchange_efficiency=70.0, sensible_efficiency=70.0, latent_efficiency=50.0),
                SUMMER, C, P,
            )

    def test_latent_missing(self):
        with pytest.raises(InvalidProcessParameters, match="latent_efficiency"):
            apply_process(exchanger(sensible_efficiency=70.0), SUMMER, C, P)

    def test_efficiency_above_100(self):
        with pytest.raises(InvalidProcessParameters, match="heat_exchange_efficiency"):
            apply_process(exchanger(heat_exchange_efficiency=120.0), SUMMER, C, P)

    def test_exhaust_airflow_required(self):
        with pytest.raises(InvalidProcessParameters) as info:
            apply_process(exchanger(heat_exchange_efficiency=70.0, exhaust_airflow=None), SUMMER, C, P)
        assert info.value.field == "exhaust_airflow"


class TestRequiredEfficiency:

    def test_recovers_applied_efficiency(self):
        supply = apply_process(exchanger(heat_exchange_efficiency=65.0), SUMMER, C, P).to_point
        assert required_heat_exchange_efficiency(SUMMER["oa"], SUMMER["ea"], supply) == pytest.approx(65.0)

    def test_clipped(self):
        assert required_heat_exchange_efficiency(SUMMER["oa"], SUMMER["ea"], SUMMER["oa"]) == 0.0
        hotter = point("x", 40.0, 60.0)
        assert required_heat_exchange_efficiency(SUMMER["oa"], SUMMER["ea"], hotter) == 0.0

    def test_same_enthalpy(self):
        with pytest.raises(InvalidProcessParameters):
            required_heat_exchange_efficiency(SUMMER["ea"], SUMMER["ea"], SUMMER["ea"])
