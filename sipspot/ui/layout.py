"""Shared layout: header, navigation drawer, and content area."""
from urllib.parse import quote

from nicegui import ui

from config import APP_TITLE
from sipspot.ui.components.helpers import HOVER_BG, NAV_ACTIVE_BG, NAV_ACTIVE_TEXT
from sipspot.ui.session import current_user


# JavaScript to highlight the current nav link on page load.
_ACTIVE_NAV_JS = f"""
(function() {{
    var path = window.location.pathname;
    var links = document.querySelectorAll('.q-drawer a[href]');
    links.forEach(function(a) {{
        var href = a.getAttribute('href');
        var isActive = href === '/' ? path === '/' : path.startsWith(href);
        if (isActive) {{
            var row = a.querySelector('.row');
            if (row) {{
                row.style.background = '{NAV_ACTIVE_BG}';
            }}
            a.querySelectorAll('.text-secondary').forEach(function(child) {{
                child.style.color = '{NAV_ACTIVE_TEXT}';
                child.style.fontWeight = '600';
            }});
        }}
    }});
}})();
"""


def build_layout(title: str = APP_TITLE):
    """Create the shared page layout and return the content column."""
    ui.colors(
        primary="#6F4E37",
        secondary="#5f6368",
        accent="#C08552",
        positive="#34a853",
        negative="#ea4335",
    )
    ui.page_title(title)
    user = current_user()

    with ui.header().classes("items-center justify-between px-4 bg-primary"):
        with ui.row().classes("items-center gap-2"):
            ui.button(icon="menu", on_click=lambda: drawer.toggle()).props("flat round color=white")
            ui.icon("local_cafe").classes("text-white text-2xl")
            ui.link(APP_TITLE, "/").classes("text-h6 text-white no-underline font-bold")

        # Global search
        _search = ui.input(placeholder="Search cafes...").classes("w-64").props(
            "dark dense standout='bg-white/10' input-class='text-white'"
        )
        _search.props('prepend-inner-icon="search"')

        def _do_global_search(e=None):
            q = _search.value
            if q and q.strip():
                ui.navigate.to(f"/cafes?search={quote(q.strip())}")

        _search.on("keydown.enter", _do_global_search)

        with ui.row().classes("items-center gap-2"):
            if user:
                ui.link(user.display_name, "/profile").classes("text-body2 text-white no-underline")
                ui.button("Log out", on_click=lambda: ui.navigate.to("/logout")).props(
                    "flat dense color=white"
                )
            else:
                ui.button("Log in", on_click=lambda: ui.navigate.to("/login")).props(
                    "flat dense color=white"
                )

    with ui.left_drawer(value=False).classes("bg-grey-1") as drawer:
        drawer.props("width=240 bordered")
        ui.element("div").classes("h-3")
        _nav_link("Home", "home", "/")
        _nav_link("Cafes", "local_cafe", "/cafes")
        _nav_link("Nearby", "near_me", "/nearby")
        if user:
            _nav_link("Favorites", "favorite", "/favorites")
            _nav_link("My Reviews", "rate_review", "/my-reviews")
            _nav_link("Add a Cafe", "add_business", "/cafes/new")
            _nav_link("Profile", "person", "/profile")

    ui.timer(0.1, lambda: ui.run_javascript(_ACTIVE_NAV_JS), once=True)

    content = ui.column().classes("w-full p-6 max-w-7xl mx-auto gap-4")
    return content


def _nav_link(label: str, icon: str, path: str):
    """Render a main drawer nav item."""
    with ui.link(target=path).classes("no-underline w-full"):
        with ui.row().classes(
            "items-center gap-3 px-4 py-2 rounded-lg w-full "
            f"{HOVER_BG} cursor-pointer"
        ):
            ui.icon(icon).classes("text-secondary")
            ui.label(label).classes("text-body1 text-secondary")
