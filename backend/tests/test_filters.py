from urbanstay.models.property import Furnishing, ListingType, PropertyType
from urbanstay.services.filters import (
    PropertyCriteria,
    SortKey,
    criteria_from_storage,
    normalize_criteria,
    normalize_sort,
    parse_number,
)


def test_absent_and_blank_values_are_omitted():
    criteria = normalize_criteria({
        "city": "",
        "minPrice": None,
        "maxPrice": "   ",
        "bedrooms": "",
        "search": "",
        "amenities": [],
    })
    assert criteria == PropertyCriteria()
    assert criteria.to_storage() == {}
    assert criteria.is_empty()


def test_unparsable_numbers_are_treated_as_absent():
    bad = normalize_criteria({"city": "Pune", "minPrice": "abc", "maxArea": "NaN", "bedrooms": "two"})
    assert bad == normalize_criteria({"city": "Pune"})
    assert bad.min_price is None
    assert bad.max_area is None
    assert bad.bedrooms is None


def test_numeric_strings_are_parsed():
    criteria = normalize_criteria({"minPrice": "5000000", "maxPrice": 10000000.5, "minArea": " 800 "})
    assert criteria.min_price == 5000000
    assert criteria.max_price == 10000000.5
    assert criteria.min_area == 800


def test_parse_number_rejects_infinities_and_booleans():
    assert parse_number("inf") is None
    assert parse_number(True) is None
    assert parse_number("12.5") == 12.5


def test_bedrooms_plus_suffix_means_at_least():
    criteria = normalize_criteria({"bedrooms": "5+"})
    assert criteria.min_bedrooms == 5
    assert criteria.bedrooms is None

    exact = normalize_criteria({"bedrooms": "2"})
    assert exact.bedrooms == 2
    assert exact.min_bedrooms is None


def test_enums_are_case_insensitive_and_unknown_values_dropped():
    criteria = normalize_criteria({
        "listingType": "BUY",
        "propertyType": "Villa,castle",
        "furnishing": "semi-furnished",
    })
    assert criteria.listing_type == ListingType.BUY
    assert criteria.property_types == [PropertyType.VILLA]
    assert criteria.furnishing == Furnishing.SEMI_FURNISHED


def test_cities_accept_list_or_comma_string_and_dedupe():
    assert normalize_criteria({"city": "Pune, Mumbai"}).cities == ["Pune", "Mumbai"]
    assert normalize_criteria({"cities": ["Mumbai", "mumbai", "Thane"]}).cities == ["Mumbai", "Thane"]


def test_flags():
    criteria = normalize_criteria({"featured": "true", "verified": "0"})
    assert criteria.featured_only is True
    assert criteria.verified_only is False


def test_storage_round_trip_keeps_only_set_constraints():
    criteria = normalize_criteria({"cities": ["Mumbai"], "maxPrice": "8000000"})
    stored = criteria.to_storage()
    assert stored == {"cities": ["Mumbai"], "max_price": 8000000.0}
    assert criteria_from_storage(stored) == criteria


def test_wire_form_reads_back_to_the_same_criteria():
    criteria = normalize_criteria({
        "listingType": "rent",
        "propertyType": "villa,apartment",
        "cities": ["Mumbai"],
        "minPrice": "50000",
        "maxPrice": "90000",
        "bedrooms": "3+",
        "maxArea": "1200",
        "furnishing": "semi-furnished",
        "verified": "true",
    })
    wire = criteria.to_wire()

    assert wire == {
        "listingType": "rent",
        "propertyTypes": ["villa", "apartment"],
        "cities": ["Mumbai"],
        "minPrice": 50000.0,
        "maxPrice": 90000.0,
        "minBedrooms": 3,
        "maxArea": 1200.0,
        "furnishing": "semi-furnished",
        "verified": True,
    }
    assert normalize_criteria(wire) == criteria


def test_normalize_sort():
    assert normalize_sort("price_low") == SortKey.PRICE_LOW
    assert normalize_sort("POPULAR") == SortKey.POPULAR
    assert normalize_sort("cheapest") is None
    assert normalize_sort(None) is None
