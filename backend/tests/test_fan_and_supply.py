"""
Tests for fan heat gain and the air supply pass-through.
"""

import pytest

from psychrochain.config import STANDARD_PRESSURE_KPA
from psychrochain.engine.process_engine import apply_process
from psychrochain.engine.state_resolver import resolve_input
from psychrochain.errors import InvalidProcessParameters
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import Process, ProcessParameters, ProcessType
from psychrochain.models.state_point import DryBulbRH

C = PsychrometricConstants()
P = STANDARD_PRESSURE_KPA

START = resolve_input(DryBulbRH(dry_bulb_temp=10.0, relative_humidity=50.0), C, P, id="in")


def process(process_type: ProcessType, **params) -> Process:
    return Process(
        id="p",
        type=process_type,
        from_point_id="in",
        to_point_id="out",
        parameters=ProcessParameters(**params),
    )


class TestFanHeating:

    def test_heat_gain(self):
        outcome = apply_process(
            process(ProcessType.FAN_HEATING, airflow=1000.0, fan_power=2.0, fan_efficiency=0.0),
            [START], C, P,
        )
        # 2 kW × 3600 / (1239.3 kg/h × 1.0128)
        assert outcome.to_point.dry_bulb_temp == pytest.approx(15.74, abs=0.02)
        assert outcome.to_point.humidity == START.humidity
        assert outcome.results.sensible_heat == 2.0
        assert outcome.results.temperature_diff == pytest.approx(5.74, abs=0.02)

    def test_only_sensible_results(self):
        results = apply_process(
            process(ProcessType.FAN_HEATING, airflow=1000.0, fan_power=2.0, fan_efficiency=60.0),
            [START], C, P,
        ).results
        assert results.latent_heat is None
        assert results.total_heat is None
        assert results.humidity_diff is None
        assert results.enthalpy_diff is None

    def test_fan_efficiency_required(self):
        with pytest.raises(InvalidProcessParameters, match="fan_efficiency") as exc:
            apply_process(process(ProcessType.FAN_HEATING, airflow=1000.0, fan_power=2.0), [START], C, P)
        assert exc.value.field == "fan_efficiency"

    def test_efficiency_reduces_gain(self):
        outcome = apply_process(
            process(ProcessType.FAN_HEATING, airflow=1000.0, fan_power=2.0, fan_efficiency=60.0),
            [START], C, P,
        )
        assert outcome.results.sensible_heat == pytest.approx(0.8)
        assert outcome.results.temperature_diff == pytest.approx(2.29, abs=0.02)

    def test_fan_power_required(self):
        with pytest.raises(InvalidProcessParameters, match="fan_power"):
            apply_process(process(ProcessType.FAN_HEATING, airflow=1000.0, fan_efficiency=60.0), [START], C, P)

    def test_efficiency_out_of_range(self):
        with pytest.raises(InvalidProcessParameters, match="fan_efficiency"):
            apply_process(
                process(ProcessType.FAN_HEATING, airflow=1000.0, fan_power=2.0, fan_efficiency=150.0),
                [START], C, P,
            )


class TestAirSupply:

    def test_pass_through(self):
        outcome = apply_process(process(ProcessType.AIR_SUPPLY, airflow=1000.0), [START], C, P)
        end = outcome.to_point
        assert end.id == "out"
        assert end.dry_bulb_temp == START.dry_bulb_temp
        assert end.humidity == START.humidity
        assert outcome.results.temperature_diff is None
        assert outcome.results.enthalpy_diff is None
        assert outcome.results.mass_flow == pytest.approx(1000.0 / START.specific_volume)
        assert outcome.results.total_heat is None

    def test_airflow_optional(self):
        outcome = apply_process(process(ProcessType.AIR_SUPPLY), [START], C, P)
        assert outcome.results.airflow is None
        assert outcome.results.mass_flow is None
