"""Tests for the pure upstream-to-record mappings."""

import pytest

from app_store_scraper import ValidationError
from app_store_scraper.extractors import (
    clean_app,
    extract_similar_ids,
    extract_suggestions,
    extract_token,
    map_privacy_entry,
    map_review_entry,
    map_version_entry,
    parse_histogram,
    validate_payload,
    xml_to_dict,
)
from app_store_scraper.extractors.app_store_schema import (
    AmpPrivacyType,
    AmpVersionEntry,
    ITunesApp,
    ReviewEntry,
    SuggestResponse,
)


class TestCleanApp:
    def test_empty_row_is_fully_defaulted(self):
        app = clean_app(ITunesApp())

        assert app.id == 0
        assert app.app_id == ""
        assert app.title == ""
        assert app.free is True
        assert app.price == 0
        assert app.genres == []
        assert app.genre_ids == []
        assert app.primary_genre_id == ""
        assert app.screenshots == []
        assert app.ipad_screenshots == []
        assert app.appletv_screenshots == []
        assert app.content_rating == "4+"
        assert app.currency == "USD"
        assert app.size == "0"
        assert app.developer_website is None
        assert app.histogram is None

    def test_maps_every_field(self, lookup_row):
        app = clean_app(ITunesApp.model_validate(lookup_row))

        assert app.id == 479516143
        assert app.app_id == "com.mojang.minecraftpe"
        assert app.icon == "https://is1-ssl.mzstatic.com/512x512bb.jpg"
        assert app.genre_ids == ["6014", "7002", "7015"]
        assert app.primary_genre_id == "6014"
        assert app.languages == ["EN", "FR"]
        assert app.price == 6.99
        assert app.free is False
        assert app.developer_id == 479516146
        assert app.developer_website == "https://www.minecraft.net"
        assert app.reviews == 639000
        assert app.ipad_screenshots == ["https://example.com/ipad1.jpg"]

    def test_icon_falls_back_to_100px(self):
        app = clean_app(ITunesApp.model_validate({"artworkUrl100": "small.jpg"}))
        assert app.icon == "small.jpg"

    def test_camel_case_dump(self, lookup_row):
        dumped = clean_app(ITunesApp.model_validate(lookup_row)).model_dump(by_alias=True)
        assert dumped["appId"] == "com.mojang.minecraftpe"
        assert dumped["primaryGenreId"] == "6014"
        assert dumped["appletvScreenshots"] == []


def test_map_review_entry():
    entry = ReviewEntry.model_validate({
        "author": {"uri": {"label": "https://itunes.apple.com/us/reviews/id1"}, "name": {"label": "steve"}},
        "im:version": {"label": "1.2.0"},
        "im:rating": {"label": "4"},
        "title": {"label": "Great"},
        "content": {"label": "Works well", "attributes": {"type": "text"}},
        "id": {"label": "10422"},
        "updated": {"label": "2024-05-01T10:00:00-07:00"},
    })

    review = map_review_entry(entry)

    assert review.id == "10422"
    assert review.user_name == "steve"
    assert review.user_url == "https://itunes.apple.com/us/reviews/id1"
    assert review.version == "1.2.0"
    assert review.score == 4
    assert review.text == "Works well"
    assert review.updated == "2024-05-01T10:00:00-07:00"


def test_map_review_entry_defaults():
    review = map_review_entry(ReviewEntry())
    assert review.id == ""
    assert review.score == 0
    assert review.user_name == ""


def test_map_privacy_entry_prefers_identifier():
    entry = AmpPrivacyType.model_validate({
        "privacyType": "Data Not Linked to You",
        "identifier": "DATA_NOT_LINKED_TO_YOU",
        "description": "The following data may be collected.",
        "dataCategories": [{"dataCategory": "Diagnostics", "identifier": "DIAGNOSTICS", "dataTypes": ["Crash Data"]}],
        "purposes": [],
    })

    privacy_type = map_privacy_entry(entry)

    assert privacy_type.privacy_type == "DATA_NOT_LINKED_TO_YOU"
    assert privacy_type.name == "Data Not Linked to You"
    assert privacy_type.data_categories[0]["dataCategory"] == "Diagnostics"
    assert privacy_type.purposes == []


def test_map_privacy_entry_without_identifier():
    privacy_type = map_privacy_entry(AmpPrivacyType.model_validate({"privacyType": "Data Not Collected"}))
    assert privacy_type.privacy_type == "Data Not Collected"
    assert privacy_type.description == ""
    assert privacy_type.data_categories is None


def test_map_version_entry():
    version = map_version_entry(AmpVersionEntry.model_validate({"versionDisplay": "2.0", "releaseDate": "2024-01-02"}))
    assert version.version_display == "2.0"
    assert version.release_date == "2024-01-02"
    assert version.release_notes is None


class TestParseHistogram:
    def test_rating_count_layout(self):
        html = """
        <div class="rating"><span class="rating-count">5 stars</span><span class="total">1,200</span></div>
        <div class="rating"><span class="rating-count">1 star</span><span class="total">35</span></div>
        """
        assert parse_histogram(html) == {1: 35, 2: 0, 3: 0, 4: 0, 5: 1200}

    def test_vote_layout_is_five_star_first(self):
        html = "".join(
            f'<div class="vote"><span class="total">{count}</span></div>' for count in (50, 40, 30, 20, 10)
        )
        assert parse_histogram(html) == {1: 10, 2: 20, 3: 30, 4: 40, 5: 50}

    def test_vote_layout_overwrites_rating_count(self):
        html = (
            '<div class="rating"><span class="rating-count">5 stars</span><span class="total">7</span></div>'
            '<div class="vote"><span class="total">99</span></div>'
        )
        assert parse_histogram(html)[5] == 99

    def test_nothing_found_is_all_zero(self):
        histogram = parse_histogram("<html><body>No ratings</body></html>")
        assert histogram == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
        assert sorted(histogram) == [1, 2, 3, 4, 5]


class TestExtractSimilarIds:
    def test_reads_marker_array(self):
        html = '<script>{"foo":1,"customersAlsoBoughtApps": [284882215, 389801252],"bar":[]}</script>'
        assert extract_similar_ids(html) == [284882215, 389801252]

    def test_missing_marker(self):
        assert extract_similar_ids("<html></html>") == []

    def test_malformed_array(self):
        assert extract_similar_ids('"customersAlsoBoughtApps":[1, 2') == []

    def test_non_integer_ids(self):
        assert extract_similar_ids('"customersAlsoBoughtApps":["a", "b"]') == []


def test_extract_token():
    html = 'content="%7B%22token%22%3A%22eyJhbGciOiJFUzI1NiJ9.abc%22%7D"'
    assert extract_token(html) == "eyJhbGciOiJFUzI1NiJ9.abc"
    assert extract_token("<html></html>") is None


HINTS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>title</key><string>Suggestions</string>
  <key>hints</key>
  <array>
    <dict><key>term</key><string>minecraft</string><key>url</key><string>https://example.com/1</string></dict>
    <dict><key>term</key><string>minecraft pocket edition</string><key>url</key><string>https://example.com/2</string></dict>
  </array>
</dict>
</plist>
"""


class TestSuggestions:
    def test_xml_to_dict_shape(self):
        data = xml_to_dict(HINTS_XML)
        hints = data["plist"]["dict"]["array"]["dict"]
        assert len(hints) == 2
        assert hints[0]["string"] == ["minecraft", "https://example.com/1"]

    def test_first_string_of_each_hint(self):
        response = validate_payload(SuggestResponse, xml_to_dict(HINTS_XML), "Suggest")
        assert [s.term for s in extract_suggestions(response)] == ["minecraft", "minecraft pocket edition"]

    def test_single_hint_collapsed_to_object(self):
        xml = "<plist><dict><array><dict><key>term</key><string>solo</string></dict></array></dict></plist>"
        response = validate_payload(SuggestResponse, xml_to_dict(xml), "Suggest")
        assert [s.term for s in extract_suggestions(response)] == ["solo"]

    def test_empty_array(self):
        response = validate_payload(SuggestResponse, xml_to_dict("<plist><dict><array/></dict></plist>"), "Suggest")
        assert extract_suggestions(response) == []

    def test_missing_array(self):
        response = validate_payload(SuggestResponse, {}, "Suggest")
        assert extract_suggestions(response) == []

    def test_empty_hint_is_skipped(self):
        xml = "<plist><dict><array><dict/><dict><string>a</string></dict></array></dict></plist>"
        response = validate_payload(SuggestResponse, xml_to_dict(xml), "Suggest")
        assert [s.term for s in extract_suggestions(response)] == ["a"]

    def test_error_path_omits_union_branches(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(SuggestResponse, {"plist": {"dict": {"array": 5}}}, "Suggest")
        assert excinfo.value.path == "$.plist.dict.array"
