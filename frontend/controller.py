"""
Web client page controller.

Wires the single-page layout once the document is ready: navigation links
swap the visible section of #app, forms are intercepted, profile fields get
live character counters, the profile image gets a preview, and the
notification bell toggles its dot.

The login and profile forms are placeholders. They do not call the API;
connecting them to /api/auth is still pending.
"""

import logging
from typing import Dict, List, Optional, Tuple

from frontend.dom import Document, Element, Event, FileReader, form_data

logger = logging.getLogger("frontend")

HIDDEN = "hidden"

# Navigation link id -> page section id
PAGES: Dict[str, str] = {
    "home-link": "dashboard-page",
    "events-link": "dashboard-page",
    "profile-link": "profile-page",
    "history-link": "dashboard-page",
    "admin-link": "dashboard-page",
    "register-link": "login-page",
}

# (input id, counter id, max length)
CHARACTER_COUNTERS: List[Tuple[str, str, int]] = [
    ("full-name", "name-count", 50),
    ("address1", "address1-count", 100),
    ("address2", "address2-count", 100),
    ("city", "city-count", 100),
]


def local_part(email: str) -> str:
    return email.split("@")[0]


class PageController:
    def __init__(self, document: Document) -> None:
        self.document = document

    def init(self) -> None:
        """
        Bind every listener. Elements missing from the page are skipped.
        """
        self.bind_navigation()
        self.bind_login_form()
        self.bind_character_counters()
        self.bind_profile_form()
        self.bind_profile_image()
        self.bind_notifications()

    def element(self, element_id: str) -> Optional[Element]:
        return self.document.get_element_by_id(element_id)

    # --- NAVIGATION ---
    def show_page(self, page_id: str) -> None:
        """
        Hide every direct <div> child of #app, then reveal `page_id`.
        """
        app = self.element("app")
        if app:
            for page in app.children:
                if page.tag == "div":
                    page.class_list.add(HIDDEN)

        active = self.element(page_id)
        if active:
            active.class_list.remove(HIDDEN)

    def bind_navigation(self) -> None:
        for link_id, page_id in PAGES.items():
            link = self.element(link_id)
            if link:
                link.add_event_listener("click", self._navigate_to(page_id))

    def _navigate_to(self, page_id: str):
        def on_click(event: Event) -> None:
            event.prevent_default()
            self.show_page(page_id)
        return on_click

    # --- LOGIN ---
    def bind_login_form(self) -> None:
        form = self.element("login-form")
        if form:
            form.add_event_listener("submit", self.on_login_submit)

    def on_login_submit(self, event: Event) -> None:
        event.prevent_default()
        email = self.element("email").value
        password = self.element("password").value
        logger.info(f"Login attempt: email={email} password={password}")

        self.show_page("dashboard-page")
        username = local_part(email)
        self.element("username-display").text_content = username
        self.element("dashboard-username").text_content = username

    # --- PROFILE ---
    def bind_character_counters(self) -> None:
        for input_id, count_id, max_length in CHARACTER_COUNTERS:
            field = self.element(input_id)
            count = self.element(count_id)
            if field and count:
                field.add_event_listener("input", self._update_count(field, count, max_length))

    @staticmethod
    def _update_count(field: Element, count: Element, max_length: int):
        def on_input(event: Event) -> None:
            count.text_content = f"{len(field.value)}/{max_length} characters"
        return on_input

    def bind_profile_form(self) -> None:
        form = self.element("profile-form")
        if form:
            form.add_event_listener("submit", self.on_profile_submit)

    def on_profile_submit(self, event: Event) -> None:
        event.prevent_default()
        data = form_data(event.target)
        logger.info(f"Profile update: {data}")
        self.document.alert("Profile updated successfully!")

    def bind_profile_image(self) -> None:
        image_input = self.element("profile-image")
        preview = self.element("profile-image-preview")
        if not (image_input and preview):
            return

        def on_change(event: Event) -> None:
            files = event.target.files
            if not files:
                return
            reader = FileReader(self.document)

            def on_load(load_event: Event) -> None:
                preview.src = load_event.target.result

            reader.onload = on_load
            reader.read_as_data_url(files[0])

        image_input.add_event_listener("change", on_change)

    # --- NOTIFICATIONS ---
    def bind_notifications(self) -> None:
        button = self.element("notifications-btn")
        if not button:
            return

        def on_click(event: Event) -> None:
            dot = button.query_selector(".notification-dot")
            if dot:
                dot.class_list.toggle(HIDDEN)

        button.add_event_listener("click", on_click)


def install(document: Document) -> PageController:
    """
    Create the controller and initialize it when the document is ready.
    """
    controller = PageController(document)
    document.add_event_listener("DOMContentLoaded", lambda event: controller.init())
    return controller
