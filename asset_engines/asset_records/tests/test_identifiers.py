from asset_engines.asset_records.identifiers import next_identifier


def test_first_identifier_for_prefix():
    assert next_identifier("A", []) == "A01"
    assert next_identifier("B", ["A01", "A02"]) == "B01"


def test_takes_highest_not_count():
    assert next_identifier("A", ["A01", "A07", "A03"]) == "A08"


def test_only_matching_prefix_and_numeric_suffix():
    ids = ["A01", "B05", "AB09", "A-3", "Axx", ""]
    assert next_identifier("A", ids) == "A02"


def test_padding_stops_at_two_digits():
    assert next_identifier("C", ["C09"]) == "C10"
    assert next_identifier("C", ["C99"]) == "C100"
    assert next_identifier("C", ["C100"]) == "C101"
