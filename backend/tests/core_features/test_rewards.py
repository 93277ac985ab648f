"""
보상 계산: CO2 절감량과 포인트
"""
import pytest

from backend.app.schemas.trips import TransportMode
from backend.app.services.rewards import (
    CO2_FACTORS,
    calculate_co2_saved,
    calculate_points,
    calculate_reward,
    emissions_by_mode,
)

DRIVING_FACTOR = CO2_FACTORS[TransportMode.DRIVING]
NON_MOTORIZED = [TransportMode.WALKING, TransportMode.JOGGING, TransportMode.CYCLING]


def test_driving_factor_is_positive_and_others_zero():
    assert DRIVING_FACTOR == pytest.approx(0.192)
    for mode in NON_MOTORIZED:
        assert CO2_FACTORS[mode] == 0


@pytest.mark.parametrize("distance", [0.0, 0.7, 2.3, 12.5, 100.0])
@pytest.mark.parametrize("mode", NON_MOTORIZED)
def test_non_motorized_saves_full_driving_emissions(distance, mode):
    assert calculate_co2_saved(distance, mode) == pytest.approx(distance * DRIVING_FACTOR)


@pytest.mark.parametrize("distance", [0.0, 2.3, 42.0])
def test_driving_saves_nothing(distance):
    reward = calculate_reward(distance, TransportMode.DRIVING)
    assert reward.co2_saved == 0
    assert reward.points == 0


def test_points_are_exact_multiple_of_saved_co2():
    assert calculate_points(5.0) == 50
    assert calculate_points(0.0) == 0


def test_points_round_half_up():
    assert calculate_points(0.25) == 3
    assert calculate_points(0.24) == 2


def test_cycling_hauptbahnhof_to_prinzipalmarkt():
    reward = calculate_reward(2.3, TransportMode.CYCLING)
    assert reward.co2_saved == pytest.approx(0.4416)
    assert reward.points == 4


def test_negative_distance_is_clamped_to_zero():
    reward = calculate_reward(-3.0, TransportMode.WALKING)
    assert reward.co2_saved == 0
    assert reward.points == 0


def test_emissions_by_mode_covers_every_mode():
    emissions = emissions_by_mode(10.0)
    assert set(emissions) == set(TransportMode)
    assert emissions[TransportMode.DRIVING] == pytest.approx(1.92)
    assert emissions[TransportMode.CYCLING] == 0
