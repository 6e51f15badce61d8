"""Tests for outfit selection."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from closet.domain.enums import Category, Color, Material, OutfitType, Regime, TemperatureUnit
from closet.domain.models import OutfitSlotSnapshot, WeatherSnapshot
from closet.errors import EmptyWardrobe
from closet.recommender import (
    OutfitRecommender,
    canonical_fahrenheit,
    classify_regime,
    filter_by_preference,
    generate_outfit,
    partition,
    pick_uniform,
)


def _weather(temperature: float, unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT) -> WeatherSnapshot:
    return WeatherSnapshot(
        temperature=temperature,
        condition="Clear sky",
        location="Your location",
        timestamp="2026-01-01T00:00:00+00:00",
        unit=unit,
    )


@pytest.mark.parametrize("mode", [OutfitType.WEATHER, OutfitType.RANDOM])
def test_empty_wardrobe_raises(mode: OutfitType) -> None:
    with pytest.raises(EmptyWardrobe, match="Add clothing items to your closet first!"):
        generate_outfit([], mode, _weather(55.0))


def test_manual_mode_is_not_generated(make_item) -> None:
    with pytest.raises(ValueError):
        generate_outfit([make_item()], OutfitType.MANUAL)


def test_shoes_only_wardrobe_leaves_other_slots_empty(make_item) -> None:
    shoe = make_item(Category.SHOE)

    outfit = generate_outfit([shoe], "random", rng=random.Random(1))

    assert outfit.type is OutfitType.RANDOM
    assert outfit.top is None
    assert outfit.bottom is None
    assert outfit.shoes is not None and outfit.shoes.id == shoe.id
    assert "top" not in outfit.to_dict()


@pytest.mark.parametrize(
    ("fahrenheit", "regime"),
    [
        (-10.0, Regime.COLD),
        (39.9, Regime.COLD),
        (40.0, Regime.MILD),
        (55.0, Regime.MILD),
        (70.0, Regime.MILD),
        (70.1, Regime.HOT),
        (95.0, Regime.HOT),
    ],
)
def test_classify_regime_boundaries(fahrenheit: float, regime: Regime) -> None:
    assert classify_regime(fahrenheit) is regime


def test_celsius_is_converted_before_thresholding() -> None:
    assert canonical_fahrenheit(0.0, "C") == 32.0
    assert canonical_fahrenheit(25.0, TemperatureUnit.CELSIUS) == 77.0
    assert canonical_fahrenheit(25.0, TemperatureUnit.FAHRENHEIT) == 25.0
    assert classify_regime(canonical_fahrenheit(0.0, "C")) is Regime.COLD


def test_cold_weather_prefers_heavy_and_medium(make_item) -> None:
    inventory = [
        make_item(Category.TOP, Material.LIGHT),
        make_item(Category.TOP, Material.HEAVY),
        make_item(Category.TOP, Material.MEDIUM),
        make_item(Category.BOTTOM, Material.LIGHT),
        make_item(Category.BOTTOM, Material.HEAVY),
    ]
    rng = random.Random(7)

    for _ in range(100):
        outfit = generate_outfit(inventory, OutfitType.WEATHER, _weather(30.0), rng=rng)
        assert outfit.top.material in {Material.HEAVY, Material.MEDIUM}
        assert outfit.bottom.material is Material.HEAVY


def test_hot_weather_prefers_light_and_medium(make_item) -> None:
    inventory = [
        make_item(Category.TOP, Material.HEAVY),
        make_item(Category.TOP, Material.LIGHT),
        make_item(Category.BOTTOM, Material.HEAVY),
        make_item(Category.BOTTOM, Material.MEDIUM),
    ]
    rng = random.Random(11)

    for _ in range(100):
        outfit = generate_outfit(inventory, OutfitType.WEATHER, _weather(85.0), rng=rng)
        assert outfit.top.material is Material.LIGHT
        assert outfit.bottom.material is Material.MEDIUM


def test_preference_falls_back_to_whole_bucket(make_item) -> None:
    light_top = make_item(Category.TOP, Material.LIGHT)

    outfit = generate_outfit([light_top], OutfitType.WEATHER, _weather(20.0), rng=random.Random(3))

    assert outfit.top is not None
    assert outfit.top.id == light_top.id


def test_freezing_celsius_reading_is_cold(make_item) -> None:
    inventory = [make_item(Category.TOP, Material.LIGHT), make_item(Category.TOP, Material.HEAVY)]
    rng = random.Random(5)
    weather = _weather(0.0, TemperatureUnit.CELSIUS)

    picks = {
        generate_outfit(inventory, OutfitType.WEATHER, weather, rng=rng).top.material
        for _ in range(50)
    }

    assert picks == {Material.HEAVY}


def test_hot_celsius_reading_uses_snapshot_unit(make_item) -> None:
    inventory = [make_item(Category.TOP, Material.HEAVY), make_item(Category.TOP, Material.LIGHT)]
    weather = _weather(30.0, TemperatureUnit.CELSIUS)

    picks = {
        generate_outfit(inventory, OutfitType.WEATHER, weather, rng=random.Random(seed)).top.material
        for seed in range(40)
    }

    assert picks == {Material.LIGHT}


def test_mild_weather_has_no_material_preference(make_item) -> None:
    tops = [make_item(Category.TOP, material) for material in Material]

    assert filter_by_preference(tops, Regime.MILD) == tops


def test_weather_mode_without_snapshot_matches_random_mode(make_item) -> None:
    inventory = [make_item(category, material) for category in Category for material in Material]

    weather_outfit = generate_outfit(inventory, OutfitType.WEATHER, None, rng=random.Random(42))
    random_outfit = generate_outfit(inventory, OutfitType.RANDOM, None, rng=random.Random(42))

    assert weather_outfit.type is OutfitType.WEATHER
    assert {name: slot.id for name, slot in weather_outfit.slots().items()} == {
        name: slot.id for name, slot in random_outfit.slots().items()
    }


@pytest.mark.parametrize("seed", range(10))
def test_shoe_pick_does_not_depend_on_mode(make_item, seed: int) -> None:
    inventory = [
        make_item(Category.TOP, Material.LIGHT),
        make_item(Category.TOP, Material.HEAVY),
        make_item(Category.BOTTOM, Material.MEDIUM),
        *(make_item(Category.SHOE, Material.MEDIUM, name=f"shoe {index}") for index in range(4)),
    ]

    weather_outfit = generate_outfit(inventory, OutfitType.WEATHER, _weather(10.0), rng=random.Random(seed))
    random_outfit = generate_outfit(inventory, OutfitType.RANDOM, None, rng=random.Random(seed))

    assert weather_outfit.shoes.id == random_outfit.shoes.id


def test_pick_uniform_is_roughly_uniform() -> None:
    rng = random.Random(2024)
    counts = Counter(pick_uniform(["a", "b", "c"], rng) for _ in range(3000))

    assert set(counts) == {"a", "b", "c"}
    assert all(800 < count < 1200 for count in counts.values())
    assert pick_uniform([], rng) is None


def test_partition_keeps_inventory_order(make_item) -> None:
    first = make_item(Category.TOP, name="first")
    shoe = make_item(Category.SHOE)
    second = make_item(Category.TOP, name="second")

    buckets = partition([first, shoe, second])

    assert buckets.tops == [first, second]
    assert buckets.shoes == [shoe]
    assert buckets.bottoms == []


def test_outfit_slots_are_detached_snapshots(make_item) -> None:
    top = make_item(Category.TOP, name="Linen shirt", colors=[Color.WHITE])

    outfit = generate_outfit([top], OutfitType.RANDOM, rng=random.Random(0))
    top.name = "Renamed"
    top.colors.append(Color.RED)

    assert isinstance(outfit.top, OutfitSlotSnapshot)
    assert outfit.top.name == "Linen shirt"
    assert outfit.top.colors == (Color.WHITE,)


@pytest.mark.asyncio
async def test_recommender_logs_outfit(storage, make_item) -> None:
    await storage.add_item(make_item(Category.TOP))
    await storage.add_item(make_item(Category.BOTTOM))
    recommender = OutfitRecommender(storage, rng=random.Random(9))

    outfit = await recommender.recommend(OutfitType.RANDOM)

    logged = await storage.list_outfits()
    assert [entry.id for entry in logged] == [outfit.id]
    assert logged[0].top == outfit.top


@pytest.mark.asyncio
async def test_recommender_does_not_log_on_empty_wardrobe(storage) -> None:
    recommender = OutfitRecommender(storage)

    with pytest.raises(EmptyWardrobe):
        await recommender.recommend(OutfitType.WEATHER, _weather(60.0))

    assert await storage.list_outfits() == []
