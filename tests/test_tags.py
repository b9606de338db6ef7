from moolah.services.tags import extract_tags, normalize_tags


def test_extract_tags_lowercases_in_order_of_appearance() -> None:
    assert extract_tags("Lunch #Work and #team-lunch #work") == ["work", "team", "work"]


def test_extract_tags_without_hashtags() -> None:
    assert extract_tags("no tags here") == []
    assert extract_tags("") == []


def test_normalize_tags_deduplicates_case_insensitive() -> None:
    assert normalize_tags(["#Work", "work", " WORK ", "team", "", "#"]) == ["work", "team"]
