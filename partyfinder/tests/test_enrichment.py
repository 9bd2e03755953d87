from __future__ import annotations

import pytest

from partyfinder.enrichment.classifier import (
    calculate_popularity,
    detect_crowd_type,
    detect_dress_code,
    detect_is_weekend,
    detect_minimum_age,
    detect_music_genres,
    detect_price_range,
    detect_time_of_day,
    enrich_event,
    enrich_events,
    extract_social_links,
    parse_hour,
)
from partyfinder.enrichment.models import (
    CrowdType,
    DressCode,
    EnrichedEvent,
    MusicGenre,
    PriceRange,
    RawEvent,
    TimeOfDay,
)


def _party(title: str = "Party", description: str = "", **fields) -> RawEvent:
    return RawEvent(id="e1", category="party", title=title, description=description, **fields)


# ── Music genres ─────────────────────────────────────────────────────────


class TestMusicGenres:
    def test_techno_and_house(self):
        event = _party("Warehouse Rave", "Join us for a techno and house music rave")
        genres = detect_music_genres(event)
        assert {MusicGenre.electronic, MusicGenre.house, MusicGenre.techno} <= set(genres)

    def test_no_duplicates(self):
        genres = detect_music_genres(_party("Deep House", "House and more house"))
        assert len(genres) == len(set(genres))

    def test_r_and_b_implies_hip_hop(self):
        genres = detect_music_genres(_party("R&B Night"))
        assert MusicGenre.hip_hop in genres
        assert MusicGenre.r_and_b in genres

    def test_latin(self):
        assert detect_music_genres(_party("Bachata Social")) == [MusicGenre.latin]

    def test_no_match_is_other(self):
        assert detect_music_genres(_party("Garden Party", "Bring a blanket.")) == [MusicGenre.other]


# ── Crowd / dress code ───────────────────────────────────────────────────


class TestCrowdType:
    def test_young_wins_over_upscale(self):
        assert detect_crowd_type(_party("College VIP Night")) == CrowdType.young

    def test_upscale(self):
        assert detect_crowd_type(_party("Exclusive Rooftop")) == CrowdType.upscale

    def test_casual(self):
        assert detect_crowd_type(_party("Chill Vibes")) == CrowdType.casual

    def test_lgbtq(self):
        assert detect_crowd_type(_party("Queer Dance")) == CrowdType.lgbtq

    def test_default_mixed(self):
        assert detect_crowd_type(_party("Garden Party")) == CrowdType.mixed


class TestDressCode:
    def test_formal(self):
        assert detect_dress_code(_party("Black Tie Gala")) == DressCode.formal

    def test_dressy_before_costume(self):
        event = _party("Costume Ball", "Dress to impress")
        assert detect_dress_code(event) == DressCode.dressy

    def test_costume(self):
        assert detect_dress_code(_party("Halloween Bash")) == DressCode.costume

    def test_default_casual(self):
        assert detect_dress_code(_party("Garden Party")) == DressCode.casual


# ── Price ────────────────────────────────────────────────────────────────


class TestPriceRange:
    def test_low(self):
        assert detect_price_range(_party(price="$15")) == PriceRange.low

    def test_free_text_in_price(self):
        assert detect_price_range(_party(price="Free entry")) == PriceRange.free

    def test_zero_dollars_is_free(self):
        assert detect_price_range(_party(price="$0")) == PriceRange.free

    def test_bucket_boundaries(self):
        assert detect_price_range(_party(price="$49")) == PriceRange.medium
        assert detect_price_range(_party(price="$50")) == PriceRange.high
        assert detect_price_range(_party(price="$99")) == PriceRange.high
        assert detect_price_range(_party(price="$100")) == PriceRange.vip

    def test_structured_price_beats_text(self):
        event = _party("Free Drinks Night", price="$25")
        assert detect_price_range(event) == PriceRange.medium

    def test_description_fallbacks(self):
        assert detect_price_range(_party("Late Show", "No cover all night")) == PriceRange.free
        assert detect_price_range(_party("Late Show", "Bottle service available")) == PriceRange.vip

    def test_unknown(self):
        assert detect_price_range(_party("Late Show", "Doors at nine.", price="TBA")) == PriceRange.unknown

    def test_numeric_price_is_accepted(self):
        event = RawEvent.model_validate({"category": "party", "title": "Show", "price": 15})
        assert event.price == "15"


# ── Time / weekend ───────────────────────────────────────────────────────


class TestTimeOfDay:
    def test_parse_hour(self):
        assert parse_hour("9pm") == 21
        assert parse_hour("10:30 AM") == 10
        assert parse_hour("12 PM") == 12
        assert parse_hour("12 AM") == 0
        assert parse_hour("21:00") == 21
        assert parse_hour("TBA") is None

    def test_buckets(self):
        assert detect_time_of_day(_party(time="10:30 AM")) == TimeOfDay.morning
        assert detect_time_of_day(_party(time="1 PM")) == TimeOfDay.afternoon
        assert detect_time_of_day(_party(time="6:30 PM")) == TimeOfDay.evening
        assert detect_time_of_day(_party(time="9pm")) == TimeOfDay.night
        assert detect_time_of_day(_party(time="12 AM")) == TimeOfDay.night

    def test_unparseable_defaults_to_evening(self):
        assert detect_time_of_day(_party()) == TimeOfDay.evening
        assert detect_time_of_day(_party(time="TBA")) == TimeOfDay.evening


class TestWeekend:
    def test_raw_date_saturday(self):
        assert detect_is_weekend(_party(raw_date="2024-06-15T21:00:00")) is True

    def test_raw_date_tuesday(self):
        assert detect_is_weekend(_party(raw_date="2024-06-18T21:00:00")) is False

    def test_display_date_day_name(self):
        assert detect_is_weekend(_party(date="Saturday, June 15")) is True

    def test_display_date_parsed(self):
        assert detect_is_weekend(_party(date="Monday, June 10, 2024")) is False
        assert detect_is_weekend(_party(date="June 16, 2024")) is True

    def test_unparseable_is_false(self):
        assert detect_is_weekend(_party(raw_date="not a date", date="soon")) is False
        assert detect_is_weekend(_party()) is False

    @pytest.mark.parametrize("word", ["Today", "now", "Tonight"])
    def test_relative_words_are_not_dates(self, word):
        assert detect_is_weekend(_party(date=word)) is False
        assert detect_is_weekend(_party(raw_date=word)) is False


# ── Age ──────────────────────────────────────────────────────────────────


class TestMinimumAge:
    def test_plus_pattern(self):
        assert detect_minimum_age(_party("Club Night", "21+ only")) == 21

    def test_and_over(self):
        assert detect_minimum_age(_party("Club Night", "18 and over")) == 18

    def test_ampersand_over(self):
        assert detect_minimum_age(_party("Club Night", "16 & over welcome")) == 16

    def test_age_prefix(self):
        assert detect_minimum_age(_party("Club Night", "Minimum age 25 at the door")) == 25

    def test_all_ages(self):
        assert detect_minimum_age(_party("Block Party", "All ages welcome")) == 0

    def test_numeric_bound_beats_all_ages(self):
        assert detect_minimum_age(_party("Block Party", "All ages, 21+ for the bar")) == 21

    def test_nightclub_default(self):
        assert detect_minimum_age(_party("Club Night", party_subcategory="nightclub")) == 21

    def test_absent(self):
        assert detect_minimum_age(_party("Block Party")) is None


# ── Popularity / links ───────────────────────────────────────────────────


class TestPopularity:
    def test_sparse_listing(self):
        # 50 - 10 (short description) - 15 (no image)
        assert calculate_popularity(_party("Quiet Meetup", "Small gathering.")) == 25

    def test_clamped_to_100(self):
        event = _party(
            "Festival Main Stage",
            "VIP tables, happy hour, food trucks, live band and a DJ. " + "x" * 500,
            venue="City Arena",
            party_subcategory="festival",
            time="11pm",
            raw_date="2024-06-15T23:00:00",
            image="https://example.com/stage.jpg",
        )
        assert calculate_popularity(event) == 100

    def test_always_in_range(self):
        for event in (_party(), _party("", ""), _party(description="y" * 2000)):
            assert 1 <= calculate_popularity(event) <= 100


class TestSocialLinks:
    def test_extracts_first_match_per_platform(self):
        event = _party(description=(
            "Follow instagram.com/party_people and facebook.com/party.people "
            "or buy at https://tickets.example.com/show?id=1"
        ))
        links = extract_social_links(event)
        assert links.instagram == "https://instagram.com/party_people"
        assert links.facebook == "https://facebook.com/party.people"
        assert links.twitter is None
        assert links.website == "https://tickets.example.com/show?id=1"

    def test_no_description(self):
        assert extract_social_links(_party(description=None)).model_dump() == {
            "instagram": None, "facebook": None, "twitter": None, "website": None,
        }


# ── enrich_event ─────────────────────────────────────────────────────────


class TestEnrichEvent:
    def test_party_event_gets_all_attributes(self):
        enriched = enrich_event(_party("Techno Night", "Resident DJ till late. 21+", time="11pm"))
        assert isinstance(enriched, EnrichedEvent)
        assert MusicGenre.techno in enriched.music_genres
        assert enriched.has_dj is True
        assert enriched.time_of_day == TimeOfDay.night
        assert enriched.minimum_age == 21
        assert 1 <= enriched.popularity <= 100
        assert enriched.social_media_links is not None

    def test_non_party_passes_through(self):
        event = RawEvent(id="talk", category="arts", title="Author Talk", description="21+ DJ set")
        enriched = enrich_event(event)
        assert enriched.title == "Author Talk"
        assert enriched.music_genres is None
        assert enriched.popularity is None
        assert enriched.minimum_age is None
        assert enriched.has_dj is None

    def test_party_flag_enriches_other_categories(self):
        event = RawEvent(id="x", category="music", is_party_event=True, title="Salsa Night")
        assert enrich_event(event).music_genres == [MusicGenre.latin]

    def test_deterministic(self):
        event = _party("Disco Brunch", "70s classics and bottomless brunch", raw_date="2024-06-16")
        assert enrich_event(event) == enrich_event(event)

    def test_camel_case_input(self):
        event = RawEvent.model_validate({
            "id": "club", "category": "party", "title": "Club Night",
            "partySubcategory": "nightclub", "rawDate": "2024-06-15T23:00:00",
        })
        enriched = enrich_event(event)
        assert enriched.minimum_age == 21
        assert enriched.is_weekend is True
        assert enriched.model_dump(by_alias=True)["hasDJ"] is False

    def test_enrich_events_preserves_order(self):
        events = [
            _party("A"),
            RawEvent(id="b", category="arts", title="B"),
            _party("C"),
        ]
        enriched = enrich_events(events)
        assert [e.title for e in enriched] == ["A", "B", "C"]
