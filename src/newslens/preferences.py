"""Theme preference and the mock login gate, both persisted in the local store."""

from __future__ import annotations

import logging
from typing import Literal

from newslens.errors import InputValidationError
from newslens.storage import LOGGED_IN_KEY, REMEMBERED_USERNAME_KEY, THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]
_THEMES: tuple[Theme, ...] = ("light", "dark")


class ThemePreference:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        saved = store.get(THEME_KEY)
        self._theme: Theme = saved if saved in _THEMES else "light"  # type: ignore[assignment]

    @property
    def theme(self) -> Theme:
        return self._theme

    def set(self, theme: Theme) -> None:
        if theme not in _THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._theme = theme
        self._store.set(THEME_KEY, theme)

    def toggle(self) -> Theme:
        self.set("dark" if self._theme == "light" else "light")
        return self._theme


class LoginGate:
    """Unlocks the app for any non-empty username and password.

    Nothing is authenticated. ``remember_me`` controls whether the logged-in
    flag and the username survive a restart.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._logged_in = store.get(LOGGED_IN_KEY) == "true"

    @property
    def is_logged_in(self) -> bool:
        return self._logged_in

    @property
    def remembered_username(self) -> str | None:
        return self._store.get(REMEMBERED_USERNAME_KEY)

    def login(self, username: str, password: str, remember_me: bool = False) -> None:
        if not username or not password:
            raise InputValidationError("Please enter both username and password.")
        self._logged_in = True
        if remember_me:
            self._store.set(LOGGED_IN_KEY, "true")
            self._store.set(REMEMBERED_USERNAME_KEY, username)
        else:
            self._store.remove(LOGGED_IN_KEY)
            self._store.remove(REMEMBERED_USERNAME_KEY)
        logger.info("Session unlocked (remember_me=%s)", remember_me)

    def logout(self) -> None:
        self._logged_in = False
        self._store.remove(LOGGED_IN_KEY)
