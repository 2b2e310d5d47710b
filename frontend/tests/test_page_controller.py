import base64
import logging

import pytest

from frontend.controller import PAGES, install, local_part
from frontend.dom import Document, Element, File


def build_page() -> Document:
    """Single-page layout with the ids the controller expects."""
    document = Document()
    body = document.body

    nav = body.append(Element("nav", tag="nav"))
    for link_id in PAGES:
        nav.append(Element(link_id, tag="a"))
    bell = nav.append(Element("notifications-btn", tag="button"))
    bell.append(Element(tag="span", classes=["notification-dot"]))
    nav.append(Element("username-display", tag="span"))

    app = body.append(Element("app"))
    login_page = app.append(Element("login-page"))
    dashboard = app.append(Element("dashboard-page", classes=["hidden"]))
    profile_page = app.append(Element("profile-page", classes=["hidden"]))
    app.append(Element("app-footer", tag="footer"))

    login_form = login_page.append(Element("login-form", tag="form"))
    login_form.append(Element("email", tag="input", name="email"))
    login_form.append(Element("password", tag="input", name="password"))

    dashboard.append(Element("dashboard-username", tag="span"))

    profile_form = profile_page.append(Element("profile-form", tag="form"))
    for field_id, count_id in [
        ("full-name", "name-count"),
        ("address1", "address1-count"),
        ("address2", "address2-count"),
        ("city", "city-count"),
    ]:
        profile_form.append(Element(field_id, tag="input", name=field_id))
        profile_form.append(Element(count_id, tag="small"))
    profile_form.append(Element("profile-image", tag="input", name="profile-image", input_type="file"))
    profile_page.append(Element("profile-image-preview", tag="img"))

    return document


@pytest.fixture
def page():
    document = build_page()
    install(document)
    document.content_loaded()
    return document


def visible_pages(document):
    app = document.get_element_by_id("app")
    return [p.id for p in app.children if p.tag == "div" and "hidden" not in p.class_list]


def test_nothing_bound_before_ready():
    document = build_page()
    install(document)

    document.get_element_by_id("profile-link").click()

    assert visible_pages(document) == ["login-page"]


@pytest.mark.parametrize("link_id, page_id", sorted(PAGES.items()))
def test_navigation_shows_one_page(page, link_id, page_id):
    event = page.get_element_by_id(link_id).click()

    assert event.default_prevented
    assert visible_pages(page) == [page_id]


def test_navigation_leaves_non_div_children_alone(page):
    page.get_element_by_id("profile-link").click()
    assert "hidden" not in page.get_element_by_id("app-footer").class_list


def test_login_submit_is_local(page, caplog):
    page.get_element_by_id("email").value = "jane.doe@example.com"
    page.get_element_by_id("password").value = "secret"

    with caplog.at_level(logging.INFO, logger="frontend"):
        event = page.get_element_by_id("login-form").submit()

    assert event.default_prevented
    assert visible_pages(page) == ["dashboard-page"]
    assert page.get_element_by_id("username-display").text_content == "jane.doe"
    assert page.get_element_by_id("dashboard-username").text_content == "jane.doe"
    assert "jane.doe@example.com" in caplog.text


def test_local_part_without_at_sign():
    assert local_part("plainname") == "plainname"


@pytest.mark.parametrize("field_id, count_id, limit", [
    ("full-name", "name-count", 50),
    ("address1", "address1-count", 100),
    ("address2", "address2-count", 100),
    ("city", "city-count", 100),
])
def test_character_counters(page, field_id, count_id, limit):
    page.get_element_by_id(field_id).type_text("Springfield")
    assert page.get_element_by_id(count_id).text_content == f"11/{limit} characters"


def test_profile_submit(page, caplog):
    page.get_element_by_id("full-name").value = "Jane Doe"
    page.get_element_by_id("city").value = "Houston"

    with caplog.at_level(logging.INFO, logger="frontend"):
        event = page.get_element_by_id("profile-form").submit()

    assert event.default_prevented
    assert page.alerts == ["Profile updated successfully!"]
    assert "'full-name': 'Jane Doe'" in caplog.text
    assert "'city': 'Houston'" in caplog.text


def test_profile_image_preview_loads_async(page):
    image = File("avatar.png", b"\x89PNG")
    preview = page.get_element_by_id("profile-image-preview")

    page.get_element_by_id("profile-image").choose_files(image)

    # Nothing until the read completes
    assert preview.src == ""
    assert page.run_pending() == 1
    assert preview.src == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("ascii")


def test_profile_image_without_file(page):
    page.get_element_by_id("profile-image").choose_files()
    assert page.run_pending() == 0


def test_notification_dot_toggles(page):
    bell = page.get_element_by_id("notifications-btn")
    dot = bell.query_selector(".notification-dot")

    bell.click()
    assert "hidden" in dot.class_list
    bell.click()
    assert "hidden" not in dot.class_list


def test_missing_elements_are_skipped():
    document = Document()
    document.body.append(Element("app"))
    install(document)

    document.content_loaded()

    assert document.alerts == []
