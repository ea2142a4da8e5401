"""
Tests for the airflow balance validator.

Reference system: once-through, 1000 m³/h outdoor intake supplied to the
space and 1000 m³/h exhausted from it.
"""

import pytest

from psychrochain.config import STANDARD_PRESSURE_KPA, Season
from psychrochain.engine.airflow import stream_mass_flow, validate_airflow_balance
from psychrochain.engine.state_resolver import resolve_input
from psychrochain.errors import UpstreamUnresolved
from psychrochain.models.airflow import AirStream, AirStreamType
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.state_point import DryBulbRH, StatePoint

C = PsychrometricConstants()
P = STANDARD_PRESSURE_KPA

OA = resolve_input(DryBulbRH(dry_bulb_temp=33.0, relative_humidity=60.0), C, P, id="oa")


def stream(stream_id: str, stream_type: AirStreamType, airflow: float, **kwargs) -> AirStream:
    return AirStream(id=stream_id, type=stream_type, airflow=airflow, **kwargs)


def balanced_streams() -> list[AirStream]:
    return [
        stream("oa", AirStreamType.OA, 1000.0),
        stream("sa", AirStreamType.SA, 1000.0),
        stream("ea", AirStreamType.EA, 1000.0),
    ]


# ---------------------------------------------------------------------------
# Totals and the balanced case
# ---------------------------------------------------------------------------

class TestBalancedSystem:

    def setup_method(self):
        self.balance = validate_airflow_balance(balanced_streams())

    def test_totals(self):
        assert self.balance.total_supply == 1000.0
        assert self.balance.total_intake == 1000.0
        assert self.balance.total_return == 0.0
        assert self.balance.total_exhaust == 1000.0

    def test_balanced(self):
        assert self.balance.is_balanced
        assert self.balance.errors == []
        assert self.balance.warnings == []

    def test_relief_and_toilet_exhaust_count_as_exhaust(self):
        streams = [
            stream("oa", AirStreamType.OA, 1000.0),
            stream("sa", AirStreamType.SA, 1000.0),
            stream("ra", AirStreamType.RA, 300.0),
            stream("ea", AirStreamType.EA, 500.0),
            stream("tea", AirStreamType.TEA, 200.0),
            stream("rea", AirStreamType.REA, 300.0),
        ]
        balance = validate_airflow_balance(streams)
        assert balance.total_exhaust == 1000.0
        assert balance.is_balanced
        assert balance.warnings == []

    def test_mixed_and_intermediate_ignored(self):
        streams = balanced_streams() + [
            stream("ma", AirStreamType.MIXED, 1000.0),
            stream("x", AirStreamType.INTERMEDIATE, 1000.0),
        ]
        assert validate_airflow_balance(streams).is_balanced

    def test_within_threshold(self):
        streams = balanced_streams()
        streams[2] = stream("ea", AirStreamType.EA, 960.0)
        # 4% off
        balance = validate_airflow_balance(streams)
        assert balance.is_balanced
        assert balance.warnings == []


# ---------------------------------------------------------------------------
# Imbalances
# ---------------------------------------------------------------------------

class TestImbalance:

    def test_recirculation_without_exhaust(self):
        streams = [
            stream("sa", AirStreamType.SA, 1000.0),
            stream("ra", AirStreamType.RA, 1000.0),
        ]
        balance = validate_airflow_balance(streams)
        assert not balance.is_balanced
        assert balance.total_exhaust == 0.0
        assert len(balance.errors) == 1
        assert "does not match exhaust" in balance.errors[0]
        assert "100.0% off" in balance.errors[0]

    def test_partial_exhaust(self):
        streams = [
            stream("oa", AirStreamType.OA, 300.0),
            stream("sa", AirStreamType.SA, 1000.0),
            stream("ra", AirStreamType.RA, 700.0),
            stream("ea", AirStreamType.EA, 300.0),
        ]
        balance = validate_airflow_balance(streams)
        assert not balance.is_balanced
        assert balance.errors == ["Supply air 1000 m³/h does not match exhaust 300 m³/h (70.0% off)"]
        assert balance.warnings == []

    def test_threshold_is_respected(self):
        streams = balanced_streams()
        streams[2] = stream("ea", AirStreamType.EA, 900.0)
        assert not validate_airflow_balance(streams).is_balanced
        assert validate_airflow_balance(streams, threshold=0.15).is_balanced

    def test_space_imbalance_is_warning(self):
        streams = [
            stream("oa", AirStreamType.OA, 1000.0),
            stream("sa", AirStreamType.SA, 1000.0),
            stream("ea", AirStreamType.EA, 800.0),
            stream("rea", AirStreamType.REA, 200.0),
        ]
        balance = validate_airflow_balance(streams)
        assert balance.is_balanced
        assert len(balance.warnings) == 1
        assert "return + space exhaust" in balance.warnings[0]

    def test_positive_pressure_is_warning(self):
        streams = balanced_streams()
        streams[0] = stream("oa", AirStreamType.OA, 1200.0)
        balance = validate_airflow_balance(streams)
        assert balance.is_balanced
        assert len(balance.warnings) == 1
        assert "positive pressure" in balance.warnings[0]

    def test_negative_pressure_is_warning(self):
        streams = balanced_streams()
        streams[0] = stream("oa", AirStreamType.OA, 800.0)
        balance = validate_airflow_balance(streams)
        assert balance.is_balanced
        assert "negative pressure" in balance.warnings[0]

    def test_negative_airflow(self):
        streams = balanced_streams() + [stream("bad", AirStreamType.EA, -50.0)]
        balance = validate_airflow_balance(streams)
        assert not balance.is_balanced
        assert any("negative airflow" in e for e in balance.errors)
        # Excluded from the totals
        assert balance.total_exhaust == 1000.0

    def test_missing_supply(self):
        streams = [s for s in balanced_streams() if s.type != AirStreamType.SA]
        balance = validate_airflow_balance(streams)
        assert not balance.is_balanced
        assert any("No supply air" in e for e in balance.errors)

    def test_no_streams(self):
        balance = validate_airflow_balance([])
        assert balance.is_balanced
        assert balance.total_supply == 0.0


class TestSeasonFilter:

    def test_only_season_streams_counted(self):
        streams = balanced_streams() + [
            stream("sa_w", AirStreamType.SA, 1000.0, season=Season.WINTER),
        ]
        assert not validate_airflow_balance(streams).is_balanced
        summer = validate_airflow_balance(streams, season=Season.SUMMER)
        assert summer.is_balanced
        assert summer.total_supply == 1000.0


# ---------------------------------------------------------------------------
# Mass flows
# ---------------------------------------------------------------------------

class TestMassFlow:

    def setup_method(self):
        self.expected = 1000.0 / OA.specific_volume

    def _streams(self, mass_flow: float, state_point_id: str = "oa") -> list[AirStream]:
        streams = balanced_streams()
        streams[0] = stream("oa", AirStreamType.OA, 1000.0, mass_flow=mass_flow, state_point_id=state_point_id)
        return streams

    def test_stream_mass_flow(self):
        assert stream_mass_flow(self._streams(0.0)[0], OA, C, P) == pytest.approx(self.expected)
        # 1000 m³/h at 0.894 m³/kg'
        assert self.expected == pytest.approx(1118.7, abs=2.0)

    def test_consistent_mass_flow(self):
        balance = validate_airflow_balance(self._streams(self.expected), [OA], C, P)
        assert balance.is_balanced
        assert balance.warnings == []

    def test_inconsistent_mass_flow(self):
        balance = validate_airflow_balance(self._streams(self.expected * 1.2), {"oa": OA}, C, P)
        assert not balance.is_balanced
        assert "is inconsistent with" in balance.errors[0]

    def test_pressure_defaults_to_standard(self):
        balance = validate_airflow_balance(self._streams(self.expected), [OA], C)
        assert balance.is_balanced

    def test_unknown_point_warns(self):
        balance = validate_airflow_balance(self._streams(self.expected, "nowhere"), [OA], C, P)
        assert balance.is_balanced
        assert "mass flow not checked" in balance.warnings[0]

    def test_no_constants_warns(self):
        balance = validate_airflow_balance(self._streams(self.expected), [OA])
        assert balance.is_balanced
        assert balance.warnings == ["Stream mass flows not checked: no constants given"]

    def test_unresolved_point_raises_in_helper(self):
        with pytest.raises(UpstreamUnresolved):
            stream_mass_flow(self._streams(0.0)[0], StatePoint(id="oa", dry_bulb_temp=33.0), C, P)
