from __future__ import annotations

import math

from ..schemas.trips import Reward, TransportMode

# kg CO2 / km. 무동력 이동 수단은 0
CO2_FACTORS: dict[TransportMode, float] = {
    TransportMode.DRIVING: 0.192,
    TransportMode.CYCLING: 0.0,
    TransportMode.WALKING: 0.0,
    TransportMode.JOGGING: 0.0,
}

POINTS_PER_KG_CO2 = 10


def emissions_by_mode(distance: float) -> dict[TransportMode, float]:
    """같은 거리를 각 이동 수단으로 갔을 때의 배출량 (kg)"""
    return {mode: distance * factor for mode, factor in CO2_FACTORS.items()}


def calculate_co2_saved(distance: float, mode: TransportMode) -> float:
    """자동차 대비 절감량. 항상 0 이상"""
    driving = distance * CO2_FACTORS[TransportMode.DRIVING]
    chosen = distance * CO2_FACTORS[mode]
    return max(0.0, driving - chosen)


def calculate_points(co2_saved: float) -> int:
    # 0.5는 올림
    return int(math.floor(co2_saved * POINTS_PER_KG_CO2 + 0.5))


def calculate_reward(distance: float, mode: TransportMode) -> Reward:
    co2_saved = calculate_co2_saved(distance, mode)
    return Reward(co2_saved=co2_saved, points=calculate_points(co2_saved))
