from indicator_browser.core.filter_state import FilterProfile, FilterState


def test_roundtrip_through_dict():
    state = FilterState(
        dataset_name="Bridge conditions",
        view_id="comparison",
        selections={"region": "All", "ownership": "State"},
        period="2021",
        chart_type="bar",
    )

    restored = FilterState.from_dict(state.to_dict())

    assert restored == state


def test_from_dict_defaults():
    state = FilterState.from_dict({"dataset_name": "d", "view_id": "trend", "period": ""})

    assert state.selections == {}
    assert state.period is None
    assert state.chart_type == "line"


def test_missing_selection_is_wildcard():
    state = FilterState(dataset_name="d", view_id="trend", selections={"region": "North", "ownership": ""})

    assert state.selection_for("region") == "North"
    assert state.is_wildcard("ownership")
    assert state.is_wildcard("mode")


def test_filter_profile_defaults():
    profile = FilterProfile()

    assert profile.dimensions
    assert not profile.period
    assert not profile.chart_type


def test_value_list_selection_roundtrip():
    state = FilterState(
        dataset_name="Local Road Congestion",
        view_id="trend",
        selections={"location": ["hw", "che"], "time_of_day": "24"},
    )

    data = state.to_dict()
    restored = FilterState.from_dict(data)

    assert data["selections"]["location"] == ["hw", "che"]
    assert restored == state
    assert restored.selection_for("location") == ["hw", "che"]
    assert not restored.is_wildcard("location")


def test_empty_value_list_is_wildcard():
    state = FilterState(dataset_name="d", view_id="trend", selections={"region": []})

    assert state.is_wildcard("region")
