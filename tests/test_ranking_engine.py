import pandas as pd
import pytest

from institution_rankings import InstitutionRankings, RankingConfig
from institution_rankings.core import default_selection

from .conftest import make_record


@pytest.fixture
def engine(records, region_table, taxonomy):
    return InstitutionRankings(records, region_table, taxonomy)


def test_rank_default_selection(engine, taxonomy):
    result = engine.rank((2015, 2021), "world", default_selection(taxonomy))
    depts = [entry.dept for entry in result.entries]
    assert depts[0] == "Carnegie Mellon University"
    assert set(depts) == {"Carnegie Mellon University", "ETH Zurich",
                          "University of Toronto", "Tsinghua University"}
    assert result.num_areas == len(taxonomy.root_areas)


def test_rank_entries_carry_faculty_breakdown(engine):
    result = engine.rank((2015, 2021), "world", ["ai", "aaai", "ijcai", "ops", "sosp", "osdi"])
    cmu = next(e for e in result.entries if e.dept == "Carnegie Mellon University")
    assert cmu.country_abbrv == "us"
    assert cmu.faculty_count == 2
    assert [f.name for f in cmu.faculty] == ["Bob Brown", "Alice Adams"]
    assert cmu.faculty[0].count == 4.0
    assert cmu.faculty[0].areas == "OS"
    # only the AI paper counts towards the ranking
    assert cmu.faculty[1].count == 3.0
    # but the profile shows every area
    assert cmu.faculty[1].areas == "AI,Vision"

    toronto = next(e for e in result.entries if e.dept == "University of Toronto")
    assert toronto.country_abbrv == "ca"


def test_rank_with_region_filter(engine, taxonomy):
    result = engine.rank((2015, 2021), "europe", default_selection(taxonomy))
    assert [e.dept for e in result.entries] == ["ETH Zurich"]

    result = engine.rank((2015, 2021), "northamerica", default_selection(taxonomy))
    assert {e.dept for e in result.entries} == {"Carnegie Mellon University",
                                                "University of Toronto"}


def test_nothing_selected(engine):
    result = engine.rank((2015, 2021), "world", ["aaai"])
    assert result.is_nothing_selected
    assert engine.accumulators is None
    with pytest.raises(ValueError):
        engine.export_results("unused.csv")


def test_summarize_areas_follows_year_range(engine):
    engine.rank((2018, 2018), "world", ["ai"])
    assert engine.summarize_areas("Alice Adams") == ["AI"]
    assert engine.summarize_areas("Alice Adams", (2019, 2019)) == ["Vision"]
    assert engine.area_string("Alice Adams", (2018, 2019)) == "AI,Vision"
    assert engine.summarize_areas("Nobody") == []


def test_area_chart(engine):
    chart = engine.area_chart("Carnegie Mellon University", (2015, 2021))
    values = {slice_.label: slice_.value for slice_ in chart}
    assert values["AI"] == 3.0
    assert values["OS"] == 4.0


def test_expand_minimum(records, region_table, taxonomy):
    many = [make_record(f"Author {i}", f"University {i:03d}", "aaai", 2020, 1, 1)
            for i in range(40)]
    engine = InstitutionRankings(many, region_table, taxonomy,
                                 RankingConfig(min_to_show=5, expanded_min_to_show=50))
    # all tied, so the whole group is shown
    assert len(engine.rank((2020, 2020), "world", ["ai"])) == 40

    uneven = [make_record(f"Author {i}", f"University {i:03d}", "aaai", 2020, i + 1, i + 1)
              for i in range(40)]
    engine = InstitutionRankings(uneven, region_table, taxonomy,
                                 RankingConfig(min_to_show=5, expanded_min_to_show=50))
    assert len(engine.rank((2020, 2020), "world", ["ai"])) == 5
    assert engine.expand_minimum()
    assert not engine.expand_minimum()
    assert len(engine.rank((2020, 2020), "world", ["ai"])) == 40


def test_dense_policy_from_config(region_table, taxonomy):
    records = [
        make_record("A", "Uni A", "aaai", adjusted=3),
        make_record("B", "Uni B", "aaai", adjusted=3),
        make_record("C", "Uni C", "aaai", adjusted=1),
    ]
    engine = InstitutionRankings(records, region_table, taxonomy,
                                 RankingConfig(ranking_policy="dense"))
    result = engine.rank((2020, 2020), "world", ["ai"])
    assert [e.rank for e in result.entries] == [1, 1, 2]


def test_invalid_config():
    with pytest.raises(ValueError):
        RankingConfig(ranking_policy="olympic")
    with pytest.raises(ValueError):
        RankingConfig(min_to_show=-1)


def test_department_details_and_distribution(engine, taxonomy):
    engine.rank((2015, 2021), "world", default_selection(taxonomy))
    details = engine.get_department_details("Carnegie Mellon University")
    assert details["area_adjusted_counts"] == {"ai": 1.5, "vision": 1.0, "ops": 2.0}
    assert details["raw_score"] > 1.0
    assert engine.get_department_details("Nowhere") is None

    distribution = engine.get_region_distribution()
    assert distribution == {"us": 1, "ch": 1, "ca": 1, "cn": 1}
    assert len(engine.get_top_departments(2)) == 2


def test_export_results(engine, taxonomy, tmp_path):
    engine.rank((2015, 2021), "world", default_selection(taxonomy))
    df = engine.rankings_to_dataframe()
    assert list(df.columns) == ['rank', 'institution', 'country', 'count', 'faculty', 'areas']
    assert df.iloc[0]['institution'] == "Carnegie Mellon University"

    output = tmp_path / "rankings.csv"
    engine.export_results(str(output), format='csv')
    exported = pd.read_csv(output)
    assert len(exported) == len(df)

    with pytest.raises(ValueError):
        engine.export_results(str(tmp_path / "rankings.txt"), format='txt')


def test_negative_adjusted_counts_do_not_break_ranking(region_table, taxonomy):
    records = [
        make_record("Amy Ames", "Uni A", "aaai", adjusted="-3"),
        make_record("Ben Bell", "Uni B", "aaai", adjusted="2"),
    ]
    engine = InstitutionRankings(records, region_table, taxonomy)
    result = engine.rank((2020, 2020), "world", ["ai", "aaai"])
    assert [(e.dept, e.rank, e.score) for e in result.entries] == [
        ("Uni B", 1, 3.0),
        ("Uni A", 2, 1.0),
    ]
    assert engine.accumulators.malformed_counts == 1


def test_area_counts_built_once_per_year_range(engine, monkeypatch):
    calls = []
    count_author_areas = engine.aggregator.count_author_areas

    def counting(records, year_range):
        calls.append(year_range)
        return count_author_areas(records, year_range)

    monkeypatch.setattr(engine.aggregator, "count_author_areas", counting)
    engine.rank((2015, 2021), "world", ["ai", "aaai"])
    engine.rank((2015, 2021), "world", ["ops", "sosp"])
    engine.summarize_areas("Alice Adams")
    assert calls == [(2015, 2021)]


def test_summary_cache_dropped_when_year_range_changes(engine):
    engine.rank((2018, 2018), "world", ["ai", "aaai"])
    engine.summarize_areas("Alice Adams")
    engine.summarize_areas("Alice Adams", (2019, 2019))
    assert {year_range for _, year_range in engine.summarizer._cache} == {(2019, 2019)}
