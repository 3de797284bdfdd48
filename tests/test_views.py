import itertools
from datetime import timedelta

import pytest

from client import views
from client.views import CategoryFilter, PlantQuery, SortOrder
from schemas.base import utcnow


@pytest.fixture
def plants(make_plant):
    return [
        make_plant(1, "Snake Plant", watered_days_ago=3, watering_frequency=21, location="Bedroom", light="Low",
                   scientific_name="Dracaena trifasciata"),
        make_plant(2, "Fiddle Leaf Fig", watered_days_ago=11, watering_frequency=10, location="Office", light="Bright",
                   health="attention", scientific_name="Ficus lyrata"),
        make_plant(3, "Monstera", watered_days_ago=5, watering_frequency=7, location="Living Room", light="Medium",
                   scientific_name="Monstera deliciosa"),
        make_plant(4, "Baby Rubber Plant", watered_days_ago=9, watering_frequency=7, location="Office", light="Medium",
                   scientific_name="Peperomia obtusifolia"),
        make_plant(5, "Rubber Fig", watered_days_ago=1, watering_frequency=14, location="Living Room", light="Bright",
                   health="attention", scientific_name="Ficus elastica"),
    ]


def _ids(plants):
    return [p.id for p in plants]


def test_category_filters(plants):
    assert _ids(views.visible_plants(plants, PlantQuery(category=CategoryFilter.NEEDS_WATER))) == [4, 2]
    assert set(_ids(views.visible_plants(plants, PlantQuery(category=CategoryFilter.HEALTHY)))) == {1, 3, 4}
    assert set(_ids(views.visible_plants(plants, PlantQuery(category=CategoryFilter.NEEDS_ATTENTION)))) == {2, 5}
    assert len(views.visible_plants(plants, PlantQuery())) == 5


def test_search_matches_name_or_scientific_name_case_insensitively(plants):
    assert set(_ids(views.visible_plants(plants, PlantQuery(search="RUBBER")))) == {4, 5}
    assert set(_ids(views.visible_plants(plants, PlantQuery(search="ficus")))) == {2, 5}
    assert views.visible_plants(plants, PlantQuery(search="cactus")) == []


def test_filters_commute(plants):
    predicates = [
        lambda ps: [p for p in ps if views.matches_search(p, "fig")],
        lambda ps: [p for p in ps if views.matches_location(p, "Office")],
        lambda ps: [p for p in ps if views.matches_light(p, "Bright")],
    ]
    results = set()
    for order in itertools.permutations(predicates):
        subset = plants
        for pred in order:
            subset = pred(subset)
        results.add(tuple(sorted(_ids(subset))))

    assert results == {(2,)}


def test_name_descending_is_reverse_of_ascending(plants):
    asc = views.sort_plants(plants, SortOrder.NAME_ASC)
    desc = views.sort_plants(plants, SortOrder.NAME_DESC)

    assert [p.name for p in asc] == ["Baby Rubber Plant", "Fiddle Leaf Fig", "Monstera", "Rubber Fig", "Snake Plant"]
    assert desc == list(reversed(asc))


def test_next_watering_sort_is_stable(make_plant):
    now = utcnow()
    a = make_plant(1, "A", last_watered=now - timedelta(days=2))
    b = make_plant(2, "B", last_watered=now - timedelta(days=5))
    c = make_plant(3, "C", last_watered=now - timedelta(days=2))

    ordered = views.sort_plants([a, b, c], SortOrder.NEXT_WATERING)
    assert _ids(ordered) == [2, 1, 3]


def test_visible_plants_does_not_touch_the_base_collection(plants):
    before = list(plants)
    views.visible_plants(plants, PlantQuery(search="fig", sort_by=SortOrder.NAME_DESC))
    assert plants == before


def test_summary(plants):
    summary = views.summarize(plants)
    assert summary == views.DashboardSummary(total=5, needs_water=2, healthy=3, needs_attention=2)


def test_statistics_counts(plants):
    stats = views.statistics(plants)

    assert stats.health == {"healthy": 3, "attention": 2}
    assert stats.by_location == {"Bedroom": 1, "Office": 2, "Living Room": 2}
    assert stats.by_light == {"Low": 1, "Medium": 2, "Bright": 2}
    assert len(stats.upcoming) == 7


def test_upcoming_histogram_counts_exact_days_only(make_plant):
    today = utcnow().date()
    plants = [
        # 水やり: 2日後、肥料: 今日
        make_plant(1, "A", watered_days_ago=5, watering_frequency=7, fertilized_days_ago=30, fertilizing_frequency=30),
        # 水やりも肥料も期限切れ -> どこにも数えない
        make_plant(2, "B", watered_days_ago=20, watering_frequency=7, fertilized_days_ago=90, fertilizing_frequency=30),
        # 水やり・肥料とも 6日後
        make_plant(3, "C", watered_days_ago=1, watering_frequency=7, fertilized_days_ago=24, fertilizing_frequency=30),
        # 窓の外（8日後）
        make_plant(4, "D", watered_days_ago=0, watering_frequency=8, fertilized_days_ago=0, fertilizing_frequency=60),
    ]

    upcoming = views.upcoming_tasks(plants, today)

    assert [u.day for u in upcoming] == [today + timedelta(days=i) for i in range(7)]
    assert [u.count for u in upcoming] == [1, 0, 1, 0, 0, 0, 2]
    assert upcoming[0].label == views.WEEKDAY_KEYS[today.weekday()]


def test_option_lists(plants):
    assert views.location_options(plants) == ["all", "Bedroom", "Office", "Living Room"]
    assert views.light_options(plants) == ["all", "Low", "Bright", "Medium"]
