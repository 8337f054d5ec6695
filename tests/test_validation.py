from sipspot.services.validation import (
    validate_cafe,
    validate_login,
    validate_password_change,
    validate_profile,
    validate_registration,
    validate_review,
)


def test_review_content_length_boundaries():
    assert "content" in validate_review(5, "x" * 9)
    assert validate_review(5, "x" * 10) == {}
    assert validate_review(5, "x" * 2000) == {}
    assert "content" in validate_review(5, "x" * 2001)


def test_review_content_is_trimmed_before_counting():
    assert "content" in validate_review(4, "   short   ")
    assert "content" in validate_review(4, "      ")


def test_review_rating_must_be_one_to_five():
    assert "rating" in validate_review(0, "A lovely flat white.")
    assert "rating" in validate_review(6, "A lovely flat white.")
    assert "rating" in validate_review(True, "A lovely flat white.")
    assert validate_review(1, "A lovely flat white.") == {}


def test_review_image_limit():
    assert validate_review(5, "A lovely flat white.", image_count=5) == {}
    assert "images" in validate_review(5, "A lovely flat white.", image_count=6)


def test_cafe_validation():
    good = {
        "name": "Blue Bottle",
        "description": "Third wave coffee with a view.",
        "address": "1 Pike St",
        "city": "Seattle",
        "price": 2,
    }
    assert validate_cafe(good) == {}
    errors = validate_cafe({**good, "price": 5, "website": "blue.com", "phoneNumber": "call me"})
    assert set(errors) == {"price", "website", "phoneNumber"}


def test_login_and_registration():
    assert set(validate_login("", "")) == {"identifier", "password"}
    assert validate_login("ada", "pw") == {}
    assert validate_registration("ada_l", "ada@example.com", "secret1") == {}
    errors = validate_registration("a!", "nope", "123")
    assert set(errors) == {"username", "email", "password"}


def test_profile_edits():
    ok = {"username": "ada_l", "email": "ada@example.com", "bio": "", "avatar": ""}
    assert validate_profile(ok) == {}
    assert validate_profile({**ok, "avatar": "https://img.example.com/a.png"}) == {}
    errors = validate_profile({**ok, "avatar": "ftp://x", "bio": "x" * 501, "email": "nope"})
    assert set(errors) == {"avatar", "bio", "email"}


def test_password_change():
    assert validate_password_change("secret1", "secret2", "secret2") == {}
    assert set(validate_password_change("", "123", "123")) == {"current", "new"}
    assert set(validate_password_change("secret1", "secret2", "secret3")) == {"confirm"}
