from unittest.mock import MagicMock

import pytest

from sipspot.models import FilterState
from sipspot.services.cafes_api import CafesAPI, page_info
from sipspot.services.http_client import ApiClient, ApiError

CAFE = {
    "_id": "c1",
    "name": "Blue Bottle",
    "rating": 4.5,
    "reviewCount": 12,
    "price": 3,
    "city": "Seattle",
    "geometry": {"type": "Point", "coordinates": [-122.33, 47.6]},
    "amenities": ["WiFi"],
    "images": [{"url": "https://img/1.jpg"}],
    "favoriteCount": 7,
}


def _api():
    client = MagicMock(spec=ApiClient)
    return CafesAPI(client), client


def test_page_info_variants():
    assert page_info({"pagination": {"pages": 3, "total": 30}}, 10) == (3, 30)
    assert page_info({"pages": 2, "total": 15}, 12) == (2, 15)
    assert page_info({"data": [1, 2]}, 2) == (1, 2)


def test_list_cafes_uses_list_endpoint_without_search():
    api, client = _api()
    client.get.return_value = {"data": [CAFE], "pagination": {"pages": 4, "total": 40}}

    page = api.list_cafes(FilterState(city="Seattle", min_rating=3.0), page=2, limit=12, sort="-rating")

    client.get.assert_called_once_with("/cafes", params={
        "city": "Seattle", "minRating": 3.0, "maxPrice": None, "amenities": None,
        "page": 2, "limit": 12, "sort": "-rating",
    })
    assert page.total_pages == 4
    assert page.total_count == 40
    assert page.items[0].id == "c1"


def test_list_cafes_uses_search_endpoint_with_query():
    api, client = _api()
    client.get.return_value = {"data": [CAFE, CAFE]}

    page = api.list_cafes(FilterState(search="  pour over "), page=3, limit=12)

    path = client.get.call_args.args[0]
    params = client.get.call_args.kwargs["params"]
    assert path == "/cafes/search"
    assert params["q"] == "pour over"
    assert params["limit"] == 12
    assert "page" not in params
    assert (page.total_pages, page.total_count) == (1, 2)


def test_blank_search_is_treated_as_no_search():
    api, client = _api()
    client.get.return_value = {"data": []}
    api.list_cafes(FilterState(search="   "))
    assert client.get.call_args.args[0] == "/cafes"


def test_toggle_favorite():
    api, client = _api()
    assert api.toggle_favorite("c1", True) is False
    client.delete.assert_called_once_with("/cafes/c1/favorite")
    client.post.assert_not_called()

    api, client = _api()
    assert api.toggle_favorite("c1", False) is True
    client.post.assert_called_once_with("/cafes/c1/favorite")
    client.delete.assert_not_called()


def test_toggle_favorite_propagates_errors():
    api, client = _api()
    client.post.side_effect = ApiError("Server down", status=500)
    with pytest.raises(ApiError):
        api.toggle_favorite("c1", False)
    assert client.post.call_count == 1


def test_create_review_multipart_only_with_images():
    api, client = _api()
    client.post.return_value = {"data": {"_id": "r1", "rating": 5, "content": "Great espresso!"}}
    review = api.create_review("c1", {"rating": 5, "content": "Great espresso!"})
    client.post.assert_called_once()
    client.upload_files.assert_not_called()
    assert review.id == "r1"

    api, client = _api()
    client.upload_files.return_value = {"data": {"id": "r2"}}
    images = [("a.jpg", b"x", "image/jpeg")]
    api.create_review("c1", {"rating": 4}, images)
    client.upload_files.assert_called_once_with("/cafes/c1/reviews", images, "images", {"rating": 4})
    client.post.assert_not_called()


def test_vote_review_rejects_unknown_vote_type():
    api, client = _api()
    with pytest.raises(ValueError):
        api.vote_review("r1", "love")
    client.post.assert_not_called()


def _routed_get(failing: str | None = None):
    def _get(path, params=None):
        if failing and path.endswith(failing):
            raise ApiError("boom", status=500)
        if path == "/cafes/c1":
            return {"data": CAFE}
        if path == "/cafes/c1/stats":
            return {"data": {"totalReviews": 12, "averageRating": 4.5}}
        if path == "/cafes/c1/reviews":
            return {"data": [{"_id": "r1", "rating": 5}], "pagination": {"pages": 1, "total": 1}}
        if path == "/cafes/c1/reviews/sentiment":
            return {"data": {"positive": 3, "neutral": 1, "negative": 0}}
        raise AssertionError(path)
    return _get


def test_full_info_tolerates_stats_failure():
    api, client = _api()
    client.get.side_effect = _routed_get(failing="/stats")

    info = api.get_cafe_full_info("c1")

    assert info.cafe.name == "Blue Bottle"
    assert info.stats is None
    assert [r.id for r in info.recent_reviews] == ["r1"]
    assert info.sentiment.positive == 3


def test_full_info_raises_when_cafe_fails():
    api, client = _api()
    client.get.side_effect = _routed_get(failing="/cafes/c1")
    with pytest.raises(ApiError):
        api.get_cafe_full_info("c1")


def test_recommendations_degrade_independently():
    api, client = _api()

    def _get(path, params=None):
        if path == "/cafes/nearby":
            raise ApiError("geo index missing", status=500)
        return {"data": [CAFE]}

    client.get.side_effect = _get
    recs = api.get_recommended_cafes(47.6, -122.3)
    assert recs.nearby == []
    assert [c.id for c in recs.top_rated] == ["c1"]
