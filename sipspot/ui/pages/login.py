"""Login, registration and logout."""
import logging

from nicegui import ui

from sipspot.services import ApiError, validate_login, validate_registration
from sipspot.ui.components.helpers import INPUT_PROPS
from sipspot.ui.controllers.base import call_in_thread, error_text
from sipspot.ui.layout import build_layout
from sipspot.ui.session import forget_login, remember_login, users_api

logger = logging.getLogger(__name__)


def login_page(redirect_to: str = "/"):
    """Render the login / register tabs."""
    content = build_layout()
    users = users_api()

    with content, ui.card().classes("w-full max-w-md mx-auto p-6"):
        with ui.tabs().classes("w-full") as tabs:
            login_tab = ui.tab("Log in")
            register_tab = ui.tab("Sign up")

        with ui.tab_panels(tabs, value=login_tab).classes("w-full"):
            with ui.tab_panel(login_tab).classes("gap-3"):
                identifier = ui.input("Email or username").props(INPUT_PROPS).classes("w-full")
                password = ui.input("Password", password=True, password_toggle_button=True).props(
                    INPUT_PROPS
                ).classes("w-full")
                login_btn = ui.button("Log in", icon="login").props("color=primary").classes("w-full")

            with ui.tab_panel(register_tab).classes("gap-3"):
                username = ui.input("Username").props(INPUT_PROPS).classes("w-full")
                email = ui.input("Email").props(INPUT_PROPS).classes("w-full")
                new_password = ui.input("Password", password=True, password_toggle_button=True).props(
                    INPUT_PROPS
                ).classes("w-full")
                register_btn = ui.button("Create account", icon="person_add").props(
                    "color=primary"
                ).classes("w-full")

    async def _authenticate(button, call, *args):
        button.disable()
        try:
            user = await call_in_thread(call, *args)
        except ApiError as exc:
            logger.info("Authentication failed: %s", exc)
            ui.notify(error_text(exc), type="negative")
            return
        finally:
            button.enable()
        remember_login(user, users.client.token)
        ui.notify(f"Welcome, {user.display_name}!", type="positive")
        ui.navigate.to(redirect_to)

    async def _login():
        errors = validate_login(identifier.value, password.value)
        if errors:
            ui.notify(" · ".join(errors.values()), type="warning")
            return
        await _authenticate(login_btn, users.login, identifier.value.strip(), password.value)

    async def _register():
        errors = validate_registration(username.value, email.value, new_password.value)
        if errors:
            ui.notify(" · ".join(errors.values()), type="warning")
            return
        await _authenticate(register_btn, users.register, username.value, email.value, new_password.value)

    login_btn.on_click(_login)
    password.on("keydown.enter", _login)
    register_btn.on_click(_register)


async def logout_page():
    """End the session and return home."""
    await call_in_thread(users_api().logout)
    forget_login()
    ui.navigate.to("/")
