from sipspot.models import Cafe, Review, SentimentStats, UserProfile, UserStats, VisitedCafe


def test_cafe_identity_collapses_id_fields():
    assert Cafe.from_api({"_id": "a1", "name": "A"}).id == "a1"
    assert Cafe.from_api({"id": "b2", "name": "B"}).id == "b2"


def test_cafe_parsing():
    cafe = Cafe.from_api({
        "_id": "c1",
        "name": "Blue Bottle",
        "rating": "4.5",
        "price": 3,
        "geometry": {"coordinates": [-122.33, 47.6]},
        "images": ["https://img/1.jpg", {"url": "https://img/2.jpg"}],
        "author": {"_id": "u1", "username": "ada"},
        "isFavorited": True,
    })
    assert cafe.rating == 4.5
    assert cafe.price_label == "$$$"
    assert (cafe.geometry.lat, cafe.geometry.lng) == (47.6, -122.33)
    assert cafe.images == ["https://img/1.jpg", "https://img/2.jpg"]
    assert cafe.is_owned_by("u1")
    assert not cafe.is_owned_by(None)
    assert cafe.is_favorited is True
    assert Cafe.from_api({"_id": "c2", "name": "X"}).is_favorited is None


def test_zero_geometry_has_no_location():
    cafe = Cafe.from_api({"_id": "c1", "name": "X", "geometry": {"coordinates": [0, 0]}})
    assert not cafe.has_location


def test_review_votes_and_analysis():
    review = Review.from_api({
        "_id": "r1",
        "cafe": {"_id": "c1"},
        "author": "u9",
        "rating": 4,
        "content": "Great beans, slow service.",
        "helpfulVotes": [{"user": "u1", "vote": "helpful"}, {"user": {"_id": "u2"}, "vote": "not-helpful"}],
        "aiAnalysis": {"sentiment": "positive", "keywords": ["beans"], "confidence": 1.7},
        "detailedRatings": {"coffee": 5, "service": 2, "ambience": 0},
    })
    assert review.cafe_id == "c1"
    assert review.vote_of("u1") == "helpful"
    assert review.vote_of("u2") == "not-helpful"
    assert review.vote_of(None) is None
    assert review.ai_analysis.confidence == 1.0
    assert review.detailed_ratings == {"coffee": 5, "service": 2}
    assert review.is_written_by("u9")


def test_sentiment_percentages_are_derived():
    stats = SentimentStats(positive=2, neutral=1, negative=1)
    assert stats.total == 4
    assert stats.percentages == {"positive": 50, "neutral": 25, "negative": 25}
    assert stats.dominant == "positive"
    assert SentimentStats().percentages == {"positive": 0, "neutral": 0, "negative": 0}


def test_user_profile_parsing():
    profile = UserProfile.from_api({
        "id": "u1",
        "username": "ada",
        "email": "ada@example.com",
        "avatar": {"url": "https://img.example.com/ada.png"},
        "createdAt": "2023-11-04T08:00:00.000Z",
        "visited": ["c1", "c2"],
        "reviewCount": -3,
    })
    assert profile.visited_count == 2
    assert profile.review_count == 0
    assert profile.created_at.year == 2023
    assert profile.to_ref().avatar == "https://img.example.com/ada.png"
    assert profile.edit_payload() == {
        "username": "ada", "email": "ada@example.com", "bio": "",
        "avatar": "https://img.example.com/ada.png",
    }
    assert UserProfile.from_api(None) is None


def test_user_stats_and_visited_entries():
    assert UserStats.from_api({"averageRating": "3.96", "totalLikes": 4}).average_rating == 4.0
    assert UserStats.from_api([]) is None
    entry = VisitedCafe.from_api({"cafe": {"_id": "c1", "name": "Ritual"}})
    assert (entry.cafe.id, entry.visited_at) == ("c1", None)
    assert VisitedCafe.from_api({"cafe": "c1"}) is None
