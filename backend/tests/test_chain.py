"""
Tests for running a sequence of processes over a project's state points.

Reference system (summer): outdoor air 33 °C / 60% mixed 300/700 m³/h with
room return air at 26 °C / 50%, cooled by a 3 kW coil at SHF 0.8 and
delivered to the room.
"""

import pytest

from psychrochain.config import STANDARD_PRESSURE_KPA, Season
from psychrochain.engine.chain import run_process_chain, runs_in_season
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import (
    MixingRatios,
    MixingStream,
    Process,
    ProcessParameters,
    ProcessType,
)
from psychrochain.models.state_point import StatePoint

C = PsychrometricConstants()
P = STANDARD_PRESSURE_KPA


def make_points() -> list[StatePoint]:
    return [
        StatePoint(id="oa", name="Outdoor", season=Season.SUMMER, dry_bulb_temp=33.0, relative_humidity=60.0),
        StatePoint(id="ra", name="Return", dry_bulb_temp=26.0, relative_humidity=50.0),
        StatePoint(id="ma", name="Mixed"),
        StatePoint(id="ca", name="Off coil"),
        StatePoint(id="sa", name="Supply"),
    ]


def make_processes(cooling_shf: float = 0.8) -> list[Process]:
    # Deliberately out of order; the chain sorts by `order`
    return [
        Process(
            id="supply", type=ProcessType.AIR_SUPPLY, order=3,
            from_point_id="ca", to_point_id="sa",
            parameters=ProcessParameters(airflow=1000.0),
        ),
        Process(
            id="mix", type=ProcessType.MIXING, order=1,
            from_point_id="oa", to_point_id="ma",
            parameters=ProcessParameters(mixing_ratios=MixingRatios(
                stream1=MixingStream(point_id="oa", airflow=300.0),
                stream2=MixingStream(point_id="ra", airflow=700.0),
            )),
        ),
        Process(
            id="cool", type=ProcessType.COOLING, season=Season.SUMMER, order=2,
            from_point_id="ma", to_point_id="ca",
            parameters=ProcessParameters(airflow=1000.0, capacity=3.0, shf=cooling_shf),
        ),
        Process(
            id="preheat", type=ProcessType.HEATING, season=Season.WINTER, order=2,
            from_point_id="ma", to_point_id="ca",
            parameters=ProcessParameters(airflow=1000.0, target_temp=35.0),
        ),
    ]


def by_id(items) -> dict:
    return {item.id: item for item in items}


# ---------------------------------------------------------------------------
# Successful summer run
# ---------------------------------------------------------------------------

class TestSummerChain:

    def setup_method(self):
        self.result = run_process_chain(make_points(), make_processes(), C, P, season=Season.SUMMER)
        self.points = by_id(self.result.points)
        self.processes = by_id(self.result.processes)

    def test_no_failures(self):
        assert self.result.failures == {}

    def test_every_point_resolved(self):
        assert all(p.is_resolved for p in self.result.points)

    def test_mixed_point_between_inputs(self):
        ma = self.points["ma"]
        assert 26.0 < ma.dry_bulb_temp < 33.0
        assert self.points["ra"].humidity < ma.humidity < self.points["oa"].humidity

    def test_coil_leaving_state(self):
        ca = self.points["ca"]
        assert ca.dry_bulb_temp == pytest.approx(20.76, abs=0.05)
        assert ca.humidity == pytest.approx(0.01225, abs=3e-5)

    def test_supply_equals_coil_leaving(self):
        assert self.points["sa"].dry_bulb_temp == self.points["ca"].dry_bulb_temp
        assert self.points["sa"].humidity == self.points["ca"].humidity

    def test_identity_kept(self):
        assert self.points["ca"].name == "Off coil"
        assert self.points["oa"].season == Season.SUMMER

    def test_results_written_to_processes(self):
        assert self.processes["cool"].results.total_heat == 3.0
        assert self.processes["mix"].results.airflow == 1000.0
        assert self.processes["supply"].results.airflow == 1000.0

    def test_off_season_process_not_run(self):
        assert self.processes["preheat"].results is None

    def test_process_list_order_preserved(self):
        assert [p.id for p in self.result.processes] == ["supply", "mix", "cool", "preheat"]

    def test_rerun_is_stable(self):
        again = run_process_chain(self.result.points, self.result.processes, C, P, season=Season.SUMMER)
        assert by_id(again.points) == self.points
        assert again.failures == {}


class TestInputsUntouched:

    def test_caller_lists_not_modified(self):
        points = make_points()
        processes = make_processes()
        run_process_chain(points, processes, C, P, season=Season.SUMMER)
        assert points == make_points()
        assert all(p.results is None for p in processes)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailingStep:

    def setup_method(self):
        self.result = run_process_chain(
            make_points(), make_processes(cooling_shf=2.0), C, P, season=Season.SUMMER
        )
        self.points = by_id(self.result.points)

    def test_failure_recorded(self):
        assert self.result.failures["cool"].startswith("InvalidProcessParameters:")

    def test_downstream_reported(self):
        assert self.result.failures["supply"].startswith("UpstreamUnresolved:")

    def test_upstream_still_resolved(self):
        assert self.points["ma"].is_resolved
        assert "mix" not in self.result.failures

    def test_downstream_points_unresolved(self):
        assert not self.points["ca"].is_resolved
        assert not self.points["sa"].is_resolved
        assert self.points["ca"].name == "Off coil"

    def test_failed_process_has_no_results(self):
        processes = by_id(self.result.processes)
        assert processes["cool"].results is None
        assert processes["mix"].results is not None


class TestChainEdges:

    def test_bad_input_point_becomes_warning(self):
        points = make_points()
        points[1] = StatePoint(id="ra", dry_bulb_temp=26.0, relative_humidity=150.0)
        result = run_process_chain(points, make_processes(), C, P, season=Season.SUMMER)
        assert any(w.startswith("ra:") for w in result.warnings)
        assert result.failures["mix"].startswith("UpstreamUnresolved:")
        assert not by_id(result.points)["ra"].is_resolved

    def test_process_order_matters(self):
        processes = make_processes()
        processes[1] = processes[1].model_copy(update={"order": 5})
        result = run_process_chain(make_points(), processes, C, P, season=Season.SUMMER)
        assert result.failures["cool"].startswith("UpstreamUnresolved:")

    def test_stale_produced_values_are_ignored(self):
        points = make_points()
        points[2] = StatePoint(id="ma", name="Mixed", dry_bulb_temp=99.0, relative_humidity=1.0)
        result = run_process_chain(points, make_processes(), C, P, season=Season.SUMMER)
        assert by_id(result.points)["ma"].dry_bulb_temp < 33.0
        assert result.warnings == []

    def test_no_season_runs_everything(self):
        result = run_process_chain(make_points(), make_processes(), C, P)
        # Both coils write "ca"; preheat runs after cool at the same order
        assert by_id(result.processes)["preheat"].results is not None

    def test_winter_runs_heating(self):
        result = run_process_chain(make_points(), make_processes(), C, P, season=Season.WINTER)
        processes = by_id(result.processes)
        assert processes["cool"].results is None
        assert processes["preheat"].results is not None
        assert by_id(result.points)["ca"].dry_bulb_temp == pytest.approx(35.0)

    def test_runs_in_season(self):
        process = make_processes()[1]
        assert runs_in_season(process, None)
        assert runs_in_season(process, Season.WINTER)
        assert not runs_in_season(make_processes()[2], Season.WINTER)
