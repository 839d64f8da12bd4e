"""Tests for theme preference and the mock login gate."""

import pytest

from newslens.errors import InputValidationError
from newslens.preferences import LoginGate, ThemePreference
from newslens.storage import LOGGED_IN_KEY, REMEMBERED_USERNAME_KEY, THEME_KEY, MemoryStore


def test_theme_defaults_to_light():
    assert ThemePreference(MemoryStore()).theme == "light"


def test_theme_ignores_unknown_stored_value():
    assert ThemePreference(MemoryStore({THEME_KEY: "sepia"})).theme == "light"


def test_theme_toggle_persists():
    store = MemoryStore()
    pref = ThemePreference(store)

    assert pref.toggle() == "dark"
    assert store.get(THEME_KEY) == "dark"
    assert ThemePreference(store).theme == "dark"

    assert pref.toggle() == "light"
    assert store.get(THEME_KEY) == "light"


def test_theme_set_rejects_unknown():
    with pytest.raises(ValueError):
        ThemePreference(MemoryStore()).set("blue")  # type: ignore[arg-type]


def test_login_requires_both_fields():
    gate = LoginGate(MemoryStore())
    with pytest.raises(InputValidationError):
        gate.login("user@example.com", "")
    with pytest.raises(InputValidationError):
        gate.login("", "secret")
    assert not gate.is_logged_in


def test_login_remember_me_persists():
    store = MemoryStore()
    gate = LoginGate(store)
    gate.login("user@example.com", "anything", remember_me=True)

    assert gate.is_logged_in
    assert store.get(LOGGED_IN_KEY) == "true"
    assert store.get(REMEMBERED_USERNAME_KEY) == "user@example.com"

    restarted = LoginGate(store)
    assert restarted.is_logged_in
    assert restarted.remembered_username == "user@example.com"


def test_login_without_remember_me_forgets():
    store = MemoryStore({LOGGED_IN_KEY: "true", REMEMBERED_USERNAME_KEY: "old@example.com"})
    gate = LoginGate(store)
    gate.login("new@example.com", "pw", remember_me=False)

    assert gate.is_logged_in
    assert store.get(LOGGED_IN_KEY) is None
    assert gate.remembered_username is None
    assert not LoginGate(store).is_logged_in


def test_logout():
    store = MemoryStore()
    gate = LoginGate(store)
    gate.login("user@example.com", "pw", remember_me=True)
    gate.logout()

    assert not gate.is_logged_in
    assert not LoginGate(store).is_logged_in
    assert gate.remembered_username == "user@example.com"
