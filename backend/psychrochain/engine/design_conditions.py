"""
Seeds a project from its design conditions.

Builds the outdoor-air (OA) and room/return-air (RA) state points for each
season and the air streams that go with the design airflows. Point ids are
"<tag>_<season>", e.g. "oa_summer", "ra_winter".
"""

from psychrochain.config import InputPair, Season
from psychrochain.engine.state_resolver import resolve_state_point
from psychrochain.models.airflow import AirStream, AirStreamType
from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.design_conditions import DesignConditions, DesignPoints, SeasonCondition
from psychrochain.models.state_point import StatePoint

SEASONS = (Season.SUMMER, Season.WINTER)


def design_point_id(tag: str, season: Season) -> str:
    return f"{tag}_{season.value}"


def _point(point_id: str, name: str, season: Season, order: int, cond: SeasonCondition) -> StatePoint:
    # A given outdoor wet bulb rides along as a redundant value to cross-check
    return StatePoint(
        id=point_id,
        name=name,
        season=season,
        order=order,
        input_pair=InputPair.DRY_BULB_RH,
        dry_bulb_temp=cond.dry_bulb_temp,
        relative_humidity=cond.relative_humidity,
        wet_bulb_temp=cond.wet_bulb_temp,
    )


def design_state_points(
    conditions: DesignConditions, constants: PsychrometricConstants
) -> DesignPoints:
    """Resolved OA and RA points for both seasons at the design pressure."""
    pressure = conditions.outdoor.pressure
    points: list[StatePoint] = []
    warnings: list[str] = []

    for season in SEASONS:
        outdoor = getattr(conditions.outdoor, season.value)
        indoor = getattr(conditions.indoor, season.value)
        for point in (
            _point(design_point_id("oa", season), f"Outdoor air ({season.value})", season, 0, outdoor),
            _point(design_point_id("ra", season), f"Room air ({season.value})", season, 1, indoor),
        ):
            resolution = resolve_state_point(point, constants, pressure)
            points.append(resolution.point)
            warnings.extend(resolution.warnings)

    return DesignPoints(points=points, warnings=warnings)


def design_air_streams(conditions: DesignConditions, season: Season) -> list[AirStream]:
    """Design air streams of one season, tied to that season's design points."""
    airflow = conditions.airflow
    oa_id = design_point_id("oa", season)
    ra_id = design_point_id("ra", season)

    streams = [
        AirStream(id=f"OA_{season.value}", name="Outdoor air", type=AirStreamType.OA,
                  airflow=airflow.outdoor_air, state_point_id=oa_id, season=season),
        AirStream(id=f"SA_{season.value}", name="Supply air", type=AirStreamType.SA,
                  airflow=airflow.supply_air, season=season),
        AirStream(id=f"RA_{season.value}", name="Return air", type=AirStreamType.RA,
                  airflow=airflow.return_air, state_point_id=ra_id, season=season),
        AirStream(id=f"EA_{season.value}", name="Exhaust air", type=AirStreamType.EA,
                  airflow=airflow.exhaust_air, state_point_id=ra_id, season=season),
    ]
    if airflow.toilet_exhaust > 0:
        streams.append(
            AirStream(id=f"TEA_{season.value}", name="Toilet exhaust", type=AirStreamType.TEA,
                      airflow=airflow.toilet_exhaust, state_point_id=ra_id, season=season)
        )
    return streams
