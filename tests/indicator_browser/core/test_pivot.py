import pytest

from indicator_browser.core.decomposition import DelimiterRule, PrefixRule, decompose
from indicator_browser.core.exceptions import FilterError
from indicator_browser.core.parser import parse_table
from indicator_browser.core.pivot import PivotEngine, Point, QueryStatus, series_key

BRIDGE_TEXT = (
    "year,North-State,North-Local,South-State\n"
    "2020,0.2,0.3,0.4\n"
    "2021,0.25,,0.35\n"
)


def _make_engine(text: str = BRIDGE_TEXT) -> PivotEngine:
    table = parse_table(text)
    rule = DelimiterRule(dimensions=("region", "ownership"))
    dmap = decompose(table.columns, rule, exclude=[table.period_column])
    return PivotEngine(table, dmap)


def test_single_wildcard_expands_in_value_order():
    engine = _make_engine()

    result = engine.resolve({"region": "All", "ownership": "State"})

    assert result.status == QueryStatus.OK
    assert result.wildcards == ("region",)
    assert [s.column for s in result.series] == ["North-State", "South-State"]
    assert result.series[0].points == (Point(2020, 0.2), Point(2021, 0.25))
    assert result.series[1].points == (Point(2020, 0.4), Point(2021, 0.35))


def test_concrete_filter_yields_at_most_one_series():
    engine = _make_engine()

    result = engine.resolve({"region": "North", "ownership": "Local"})

    assert len(result.series) == 1
    assert result.wildcards == ()
    assert result.series[0].key == "region=North|ownership=Local"


def test_concrete_filter_without_column_is_empty_not_error():
    engine = _make_engine()

    result = engine.resolve({"region": "West", "ownership": "State"})

    assert result.series == ()
    assert result.is_empty
    assert result.status == QueryStatus.NO_MATCH


def test_wildcard_count_bounded_by_value_set():
    engine = _make_engine()

    result = engine.resolve({"region": "North", "ownership": "All"})

    n_values = len(engine.dimension_map.values("ownership"))
    assert len(result.series) <= n_values
    assert [s.value_for("ownership") for s in result.series] == ["Local", "State"]


def test_all_wildcards_first_dimension_outermost_and_missing_omitted():
    engine = _make_engine()

    result = engine.resolve({"region": "All", "ownership": "All"})

    # South-Local has no column
    assert [s.column for s in result.series] == ["North-Local", "North-State", "South-State"]
    assert result.wildcards == ("region", "ownership")


def test_omitted_dimension_is_wildcard():
    engine = _make_engine()

    assert engine.resolve({"ownership": "State"}) == engine.resolve({"region": "All", "ownership": "State"})
    assert engine.resolve({}) == engine.resolve({"region": "All", "ownership": "All"})


def test_missing_cells_become_gaps():
    engine = _make_engine()

    result = engine.resolve({"region": "North", "ownership": "Local"})

    assert result.series[0].points == (Point(2020, 0.3), Point(2021, None))


def test_cross_section_narrows_to_target_period():
    engine = _make_engine()

    result = engine.resolve({"region": "All", "ownership": "State"}, target_period="2021")

    assert result.is_cross_section
    assert result.period == 2021
    assert [s.points for s in result.series] == [(Point(2021, 0.25),), (Point(2021, 0.35),)]


def test_cross_section_for_unknown_period():
    engine = _make_engine()

    result = engine.resolve({"region": "All", "ownership": "State"}, target_period=1999)

    assert result.status == QueryStatus.UNKNOWN_PERIOD
    assert result.series == ()


def test_unknown_dimension_raises_filter_error():
    engine = _make_engine()

    with pytest.raises(FilterError, match="Unknown dimension"):
        engine.resolve({"mode": "sov"})


def test_filter_error_is_value_error():
    engine = _make_engine()

    with pytest.raises(ValueError):
        engine.resolve({"color": "red"})


def test_resolve_is_idempotent():
    engine = _make_engine()
    selections = {"region": "All", "ownership": "All"}

    first = engine.resolve(selections)
    second = engine.resolve(selections)

    assert first == second
    assert [s.key for s in first.series] == [s.key for s in second.series]


def test_prefix_dataset_resolves():
    text = "Year,hwsov,hwtransit,chsov\n2022,0.7,0.1,0.6\n"

    table = parse_table(text, period_column="Year")
    rule = PrefixRule(dimensions=("purpose", "mode"), vocabulary=("sov", "transit"))
    engine = PivotEngine(table, decompose(table.columns, rule, exclude=["Year"]))

    result = engine.resolve({"purpose": "hw", "mode": "All"})

    assert [s.column for s in result.series] == ["hwsov", "hwtransit"]


def test_value_list_expands_in_value_order():
    engine = _make_engine()

    result = engine.resolve({"region": ["South", "North"], "ownership": "State"})

    # DimensionMap order, not the order the values were picked in
    assert [s.column for s in result.series] == ["North-State", "South-State"]
    assert result.wildcards == ()
    assert result.expanded == ("region",)


def test_value_list_skips_values_without_columns():
    engine = _make_engine()

    result = engine.resolve({"region": ["North", "West"], "ownership": ["Local", "State"]})

    assert [s.column for s in result.series] == ["North-Local", "North-State"]
    assert result.expanded == ("region", "ownership")


def test_value_list_with_no_known_value_is_no_match():
    engine = _make_engine()

    result = engine.resolve({"region": ["West"], "ownership": "State"})

    assert result.series == ()
    assert result.status == QueryStatus.NO_MATCH


def test_empty_list_or_list_with_all_is_wildcard():
    engine = _make_engine()
    everything = engine.resolve({})

    assert engine.resolve({"region": [], "ownership": []}).series == everything.series
    assert engine.resolve({"region": ["North", "All"]}).series == everything.series


def test_value_list_subset_of_wildcard_expansion():
    engine = _make_engine()

    wildcard = engine.resolve({"region": "All"})
    subset = engine.resolve({"region": ["North"]})

    assert set(s.key for s in subset.series) <= set(s.key for s in wildcard.series)
    assert len(subset.series) <= len(engine.dimension_map.values("ownership"))


def test_congestion_locations_and_times():
    text = "Year,hw24,hwAM,ch24,che24,cheAM\n2022,1.4,1.5,1.1,1.2,1.3\n"
    table = parse_table(text, period_column="Year")
    rule = PrefixRule(
        dimensions=("location", "time_of_day"),
        vocabulary=("AM", "MD", "PM", "NT", "24"),
        prefixes=("hw", "ch", "che"),
    )
    engine = PivotEngine(table, decompose(table.columns, rule, exclude=["Year"]))

    result = engine.resolve({"location": ["hw", "che"], "time_of_day": "24"})

    assert [s.column for s in result.series] == ["che24", "hw24"]


def test_series_key_escapes_separators():

    assert series_key(("region", "ownership"), ("North", "State")) == "region=North|ownership=State"
    assert series_key(("a", "b"), ("x|b=y", "z")) != series_key(("a", "b"), ("x", "y|b=z"))
    assert series_key(("a",), ("50%",)) == "a=50%25"
