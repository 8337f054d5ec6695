"""SipSpot cafe discovery - Main entry point."""
import logging

from fastapi import Request
from nicegui import app, ui

from config import API_BASE_URL, APP_HOST, APP_PORT, APP_TITLE, LOG_LEVEL, STORAGE_SECRET
from sipspot.ui.pages.cafe_detail import cafe_detail_page
from sipspot.ui.pages.cafe_form import cafe_form_page
from sipspot.ui.pages.cafe_list import cafe_list_page
from sipspot.ui.pages.favorites import favorites_page, my_reviews_page
from sipspot.ui.pages.home import home_page
from sipspot.ui.pages.login import login_page, logout_page
from sipspot.ui.pages.nearby import nearby_page
from sipspot.ui.pages.profile import profile_page

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger(__name__).info("Using API at %s", API_BASE_URL)


@ui.page("/")
def index():
    home_page()


@ui.page("/cafes")
def cafes_view(request: Request):
    cafe_list_page(request.url.query)


# Registered before /cafes/{cafe_id} so "new" is not taken for an id
@ui.page("/cafes/new")
def cafe_new_view():
    cafe_form_page()


@ui.page("/cafes/{cafe_id}")
def cafe_detail_view(cafe_id: str):
    cafe_detail_page(cafe_id)


@ui.page("/cafes/{cafe_id}/edit")
def cafe_edit_view(cafe_id: str):
    cafe_form_page(cafe_id)


@ui.page("/nearby")
def nearby_view():
    nearby_page()


@ui.page("/profile")
def profile_view():
    profile_page()


@ui.page("/favorites")
def favorites_view():
    favorites_page()


@ui.page("/my-reviews")
def my_reviews_view():
    my_reviews_page()


@ui.page("/login")
def login_view(redirect_to: str = "/"):
    login_page(redirect_to=redirect_to)


@ui.page("/logout")
async def logout_view():
    await logout_page()


@app.get("/_health")
async def health_check():
    return {"status": "ok", "app": "sipspot"}


ui.run(
    title=APP_TITLE,
    host=APP_HOST,
    port=APP_PORT,
    storage_secret=STORAGE_SECRET,
    reload=False,
    dark=False,
)
