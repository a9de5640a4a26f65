"""Tests for the Region dataclass."""

import pytest

from layouteval.region import Region, select_regions


def test_region_properties():
    r = Region(x=10, y=20, w=100, h=50, label="text")

    assert r.x2 == 110
    assert r.y2 == 70
    assert r.area == 5000
    assert r.contains_point(10, 20)
    assert not r.contains_point(110, 20)


def test_region_is_immutable():
    r = Region(x=0, y=0, w=5, h=5)
    with pytest.raises(AttributeError):
        r.x = 3


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Region(x=0, y=0, w=-1, h=5)


def test_intersection():
    r1 = Region(x=10, y=20, w=100, h=50)
    r2 = Region(x=50, y=30, w=100, h=50)

    overlap = r1.intersection(r2)
    assert overlap == Region(x=50, y=30, w=60, h=40)
    assert overlap.area == 2400
    assert r1.overlaps(r2)


def test_touching_regions_do_not_overlap():
    r1 = Region(x=0, y=0, w=10, h=10)
    r2 = Region(x=10, y=0, w=10, h=10)

    assert r1.intersection(r2) is None
    assert not r1.overlaps(r2)


def test_zero_area_region_never_overlaps():
    degenerate = Region(x=5, y=5, w=0, h=10)
    page = Region(x=0, y=0, w=20, h=20)

    assert degenerate.area == 0
    assert not degenerate.overlaps(page)


def test_within_bounds():
    assert Region(x=0, y=0, w=20, h=10).within_bounds(20, 10)
    assert not Region(x=1, y=0, w=20, h=10).within_bounds(20, 10)
    assert not Region(x=-1, y=0, w=5, h=5).within_bounds(20, 10)


def test_dict_conversion():
    r = Region(x=1, y=2, w=3, h=4, label="table")

    assert r.to_dict() == {'x': 1, 'y': 2, 'w': 3, 'h': 4, 'label': "table"}
    assert Region.from_dict(r.to_dict()) == r
    assert Region.from_dict({'x': "1", 'y': 2, 'w': 3, 'h': 4}).label is None


def test_select_regions_by_type():
    regions = [
        Region(x=0, y=0, w=5, h=5, label="text"),
        Region(x=5, y=0, w=5, h=5, label="figure"),
        Region(x=10, y=0, w=5, h=5),
    ]

    assert select_regions(regions, "text") == [regions[0], regions[2]]
    assert select_regions(regions, None) == regions
