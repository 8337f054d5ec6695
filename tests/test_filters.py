from sipspot.models import FilterState


def test_default_state_serializes_to_bare_path():
    state = FilterState()
    assert state.to_query_params() == []
    assert state.to_url() == "/cafes"


def test_round_trip_through_query_string():
    states = [
        FilterState(),
        FilterState(search="latte art", city="Seattle"),
        FilterState(min_rating=4.0, max_price=2, page=3),
        FilterState(min_rating=3.5, amenities=frozenset({"WiFi", "Quiet", "Pet Friendly"})),
        FilterState(sort="-createdAt", search="café & bar", city="New York", page=2),
    ]
    for state in states:
        assert FilterState.from_query_string(state.to_query_string()) == state


def test_amenities_are_repeated_and_sorted():
    state = FilterState(amenities=frozenset({"WiFi", "Outdoor Seating", "Quiet"}))
    assert state.to_query_params() == [
        ("amenities", "Outdoor Seating"),
        ("amenities", "Quiet"),
        ("amenities", "WiFi"),
    ]


def test_whole_number_rating_has_no_decimal_point():
    assert ("minRating", "4") in FilterState(min_rating=4.0).to_query_params()
    assert ("minRating", "3.5") in FilterState(min_rating=3.5).to_query_params()


def test_malformed_numbers_are_dropped():
    state = FilterState.from_query_string("city=Seattle&minRating=abc&maxPrice=9&page=-2")
    assert state == FilterState(city="Seattle")


def test_last_singular_value_wins_and_unknown_keys_are_ignored():
    state = FilterState.from_query_string("?city=Boston&city=Austin&foo=bar")
    assert state.city == "Austin"


def test_with_changes_resets_page():
    state = FilterState(city="Seattle", page=4)
    assert state.with_changes(min_rating=3).page == 1
    assert state.with_page(2).city == "Seattle"
    assert state.toggle_amenity("WiFi").amenities == frozenset({"WiFi"})
    assert state.toggle_amenity("WiFi").toggle_amenity("WiFi").amenities == frozenset()


def test_query_strips_whitespace_and_active_count():
    state = FilterState(search="   ", city="Seattle", amenities=frozenset({"WiFi", "Quiet"}))
    assert state.query == ""
    assert state.active_count == 3
    assert state.cleared() == FilterState()
