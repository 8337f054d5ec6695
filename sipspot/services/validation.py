"""Client-side form validation. Each validator returns {field: message}."""
import re

from config import BIO_MAX_LENGTH, REVIEW_MAX_IMAGES, REVIEW_MAX_LENGTH, REVIEW_MIN_LENGTH

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[a-zA-Z]{2,}$")
_PHONE_RE = re.compile(r"^[\d\s\-+()]+$")


def validate_review(rating, content: str, image_count: int = 0) -> dict[str, str]:
    """Validate a review before it is submitted.

    Detailed sub-ratings are optional and not checked here.
    """
    errors: dict[str, str] = {}
    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        errors["rating"] = "Please choose a rating"

    text = (content or "").strip()
    if not text:
        errors["content"] = "Please write your review"
    elif len(text) < REVIEW_MIN_LENGTH:
        errors["content"] = f"Reviews must be at least {REVIEW_MIN_LENGTH} characters"
    elif len(text) > REVIEW_MAX_LENGTH:
        errors["content"] = f"Reviews can be at most {REVIEW_MAX_LENGTH} characters"

    if image_count > REVIEW_MAX_IMAGES:
        errors["images"] = f"You can upload at most {REVIEW_MAX_IMAGES} images"
    return errors


def validate_cafe(data: dict) -> dict[str, str]:
    """Validate the create/edit cafe form (mirrors the backend schema)."""
    errors: dict[str, str] = {}
    name = (data.get("name") or "").strip()
    if not name:
        errors["name"] = "Please provide a cafe name"
    elif len(name) > 100:
        errors["name"] = "Cafe name cannot exceed 100 characters"

    description = (data.get("description") or "").strip()
    if len(description) < 10:
        errors["description"] = "Description must be at least 10 characters"
    elif len(description) > 2000:
        errors["description"] = "Description cannot exceed 2000 characters"

    if not (data.get("address") or "").strip():
        errors["address"] = "Please provide an address"
    if not (data.get("city") or "").strip():
        errors["city"] = "Please provide a city"

    price = data.get("price")
    if not isinstance(price, int) or not 1 <= price <= 4:
        errors["price"] = "Price level must be between 1-4"

    phone = data.get("phoneNumber")
    if phone and not _PHONE_RE.match(phone):
        errors["phoneNumber"] = "Please provide a valid phone number"
    website = data.get("website")
    if website and not re.match(r"^https?://.+", website):
        errors["website"] = "Please provide a valid URL"
    return errors


def validate_login(identifier: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (identifier or "").strip():
        errors["identifier"] = "Please enter your email or username"
    if not password:
        errors["password"] = "Please enter your password"
    return errors


def _account_errors(username: str, email: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    username = username or ""
    if not username:
        errors["username"] = "Please enter a username"
    elif len(username) < 3:
        errors["username"] = "Usernames must be at least 3 characters"
    elif len(username) > 30:
        errors["username"] = "Usernames can be at most 30 characters"
    elif not _USERNAME_RE.match(username):
        errors["username"] = "Usernames may only contain letters, digits and underscores"

    if not email:
        errors["email"] = "Please enter an email"
    elif not _EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email address"
    return errors


def validate_registration(username: str, email: str, password: str) -> dict[str, str]:
    errors = _account_errors(username, email)
    if not password:
        errors["password"] = "Please enter a password"
    elif len(password) < 6:
        errors["password"] = "Passwords must be at least 6 characters"
    return errors


def validate_profile(data: dict) -> dict[str, str]:
    """Validate the profile edit form; username and email follow the sign-up rules."""
    errors = _account_errors(data.get("username") or "", data.get("email") or "")
    if len(data.get("bio") or "") > BIO_MAX_LENGTH:
        errors["bio"] = f"Bio can be at most {BIO_MAX_LENGTH} characters"
    avatar = data.get("avatar")
    if avatar and not re.match(r"^https?://.+", avatar):
        errors["avatar"] = "Please provide a valid URL"
    return errors


def validate_password_change(current: str, new: str, confirm: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not current:
        errors["current"] = "Please enter your current password"
    if not new:
        errors["new"] = "Please enter a new password"
    elif len(new) < 6:
        errors["new"] = "Passwords must be at least 6 characters"
    if new and confirm != new:
        errors["confirm"] = "Passwords do not match"
    return errors
