"""Shared fixtures for ranking tests."""

import pytest

from institution_rankings.core import AreaTaxonomy, PublicationRecord, RegionTable


def make_record(name, dept, area, year=2020, count="1", adjusted="1"):
    return PublicationRecord(name=name, dept=dept, area=area, year=year,
                             count=str(count), adjusted_count=str(adjusted))


@pytest.fixture
def taxonomy():
    return AreaTaxonomy.default()


@pytest.fixture
def region_table():
    return RegionTable(
        regions={
            "ETH Zurich": "europe",
            "University of Toronto": "canada",
            "Tsinghua University": "asia",
            "University of Cape Town": "africa",
        },
        country_abbrv={
            "ETH Zurich": "ch",
            "University of Toronto": "ca",
            "Tsinghua University": "cn",
            "University of Cape Town": "za",
        },
    )


@pytest.fixture
def records():
    return [
        make_record("Alice Adams", "Carnegie Mellon University", "aaai", 2018, 3, 1.5),
        make_record("Alice Adams", "Carnegie Mellon University", "cvpr", 2019, 2, 1.0),
        make_record("Bob Brown", "Carnegie Mellon University", "sosp", 2020, 4, 2.0),
        make_record("Carol Clark", "ETH Zurich", "icml", 2020, 5, 2.5),
        make_record("Carol Clark", "ETH Zurich", "eurosys", 2020, 6, 3.0),
        make_record("Dan Davis", "University of Toronto", "ijcai", 2015, 2, 1.0),
        make_record("Erin Evans", "Tsinghua University", "osdi", 2021, 1, 0.5),
        make_record("Frank Fox", "", "aaai", 2020, 9, 9.0),
    ]
