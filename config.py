"""Application configuration."""
import os

from dotenv import load_dotenv

load_dotenv()

# Backend REST API
API_BASE_URL = os.getenv("SIPSPOT_API_URL", "http://localhost:5001/api").rstrip("/")
API_TIMEOUT = float(os.getenv("SIPSPOT_API_TIMEOUT", "15"))

# Paging
CAFES_PAGE_SIZE = 12
REVIEWS_PAGE_SIZE = 10
FAVORITES_PAGE_SIZE = 20

# Sorting
DEFAULT_CAFE_SORT = "-rating"
DEFAULT_REVIEW_SORT = "-createdAt"

CAFE_SORT_OPTIONS: dict[str, str] = {
    "-rating": "Highest rated",
    "-reviewCount": "Most reviewed",
    "-createdAt": "Newest",
    "price": "Price: low to high",
    "-price": "Price: high to low",
}

REVIEW_SORT_OPTIONS: dict[str, str] = {
    "-createdAt": "Newest",
    "createdAt": "Oldest",
    "-rating": "Highest rating",
    "rating": "Lowest rating",
    "-helpfulCount": "Most helpful",
}

# Amenities accepted by the backend
AMENITY_OPTIONS = [
    "WiFi",
    "Power Outlets",
    "Quiet",
    "Outdoor Seating",
    "Pet Friendly",
    "Non-Smoking",
    "Air Conditioning",
    "Parking Available",
    "Wheelchair Accessible",
    "Laptop Friendly",
    "Good for Groups",
    "Good for Work",
]

SPECIALTY_OPTIONS = [
    "Espresso",
    "Pour Over",
    "Cold Brew",
    "Latte Art",
    "Specialty Beans",
    "Desserts",
    "Light Meals",
]

CITY_OPTIONS = [
    "Seattle",
    "Portland",
    "San Francisco",
    "Los Angeles",
    "New York",
    "Chicago",
    "Boston",
    "Austin",
]

# Used for recommendations when the browser location is unknown
DEFAULT_LOCATION = {"lat": 40.7608, "lng": -111.8910, "city": "Salt Lake City"}
NEARBY_DISTANCE_METERS = 5000
NEARBY_DISTANCE_OPTIONS = [1000, 2000, 5000, 10000]
NEARBY_LIMIT = 20
VISITED_PAGE_SIZE = 20

# Maps
MAP_DEFAULT_ZOOM = 13
MARKERCLUSTER_JS = "https://unpkg.com/leaflet.markercluster@1.5.3/dist/leaflet.markercluster.js"
MARKERCLUSTER_CSS = "https://unpkg.com/leaflet.markercluster@1.5.3/dist/MarkerCluster.css"

# Review limits (mirrors backend validation)
REVIEW_MIN_LENGTH = 10
REVIEW_MAX_LENGTH = 2000
REVIEW_MAX_IMAGES = 5

# Profile limits
BIO_MAX_LENGTH = 500

# App settings
APP_TITLE = "SipSpot"
APP_PORT = int(os.getenv("APP_PORT", "8080"))
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
STORAGE_SECRET = os.getenv("SIPSPOT_STORAGE_SECRET", "sipspot-dev-secret")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
