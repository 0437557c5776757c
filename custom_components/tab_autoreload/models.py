"""Data models for the Tab Autoreload integration."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, Iterable, Optional

from .const import (
    CONFIG_VERSION,
    IDEMPOTENT_METHOD,
    PERIOD_DISABLED,
    OPT_RANDOMIZE,
    OPT_SMART,
    OPT_ONLY_ON_ERROR,
    OPT_STICKY_RELOAD,
    OPT_NO_CACHE,
    OPT_REMEMBER,
    DEFAULT_RANDOMIZE,
    DEFAULT_ONLY_ON_ERROR,
    DEFAULT_SMART,
    DEFAULT_STICKY_RELOAD,
    DEFAULT_NO_CACHE,
    DEFAULT_PIN_SETS_REMEMBER,
    DEFAULT_NEVER_CONFIRM_POST,
)

# Fields a user controls; these are what UrlMemory remembers per URL.
USER_SETTING_FIELDS = (
    "period",
    OPT_RANDOMIZE,
    OPT_SMART,
    OPT_ONLY_ON_ERROR,
    OPT_STICKY_RELOAD,
    OPT_NO_CACHE,
    OPT_REMEMBER,
)

# Fields that tie a record to its tab; never copied between records.
IDENTITY_FIELDS = ("tab_id", "timer_key")


def timer_key(tab_id: int) -> str:
    """Return the key under which a tab's timer and state are registered."""
    return f"tab-{tab_id}-alarm"


@dataclass
class TabState:
    """Everything tracked about one browser tab."""

    tab_id: int
    timer_key: str

    # User settings
    period: float = PERIOD_DISABLED
    randomize: bool = DEFAULT_RANDOMIZE
    smart: bool = DEFAULT_SMART
    only_on_error: bool = DEFAULT_ONLY_ON_ERROR
    sticky_reload: bool = DEFAULT_STICKY_RELOAD
    no_cache: bool = DEFAULT_NO_CACHE
    remember: bool = False

    # Internal state
    keep_refreshing: bool = False
    freeze_until: float = 0.0
    request_method: str = IDEMPOTENT_METHOD
    form_data: Optional[Dict[str, Any]] = None
    resend_confirmed: bool = False
    scroll_x: Optional[float] = None
    scroll_y: Optional[float] = None
    url: str = ""
    reload_by_system: bool = False
    load_error: bool = False

    @classmethod
    def new(cls, tab_id: int, defaults: Optional[Dict[str, bool]] = None) -> "TabState":
        """Create a default record for a tab, applying the user's defaults."""
        state = cls(tab_id=tab_id, timer_key=timer_key(tab_id))
        for key, value in (defaults or {}).items():
            if key in USER_SETTING_FIELDS:
                setattr(state, key, value)
        return state

    @property
    def non_idempotent(self) -> bool:
        return self.request_method.upper() != IDEMPOTENT_METHOD

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def snapshot(self) -> Dict[str, Any]:
        """Return the user settings only."""
        return {name: getattr(self, name) for name in USER_SETTING_FIELDS}

    def copy_from(
        self, saved: Dict[str, Any], only: Optional[Iterable[str]] = None
    ) -> None:
        """Copy every field present in both records, keeping our identity.

        Unknown names in ``saved`` are dropped; fields missing from it keep
        their current value.
        """
        names = only if only is not None else [f.name for f in fields(self)]
        for name in names:
            if name in IDENTITY_FIELDS or name not in saved:
                continue
            setattr(self, name, saved[name])


@dataclass
class Settings:
    """Process-wide settings."""

    defaults: Dict[str, bool] = field(default_factory=lambda: {
        OPT_RANDOMIZE: DEFAULT_RANDOMIZE,
        OPT_ONLY_ON_ERROR: DEFAULT_ONLY_ON_ERROR,
        OPT_SMART: DEFAULT_SMART,
        OPT_STICKY_RELOAD: DEFAULT_STICKY_RELOAD,
        OPT_NO_CACHE: DEFAULT_NO_CACHE,
    })
    pin_sets_remember: bool = DEFAULT_PIN_SETS_REMEMBER
    never_confirm_post: bool = DEFAULT_NEVER_CONFIRM_POST
    version: int = CONFIG_VERSION

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from a stored payload; raises on malformed data."""
        if not isinstance(data, dict):
            raise TypeError(f"Settings payload must be a dict, got {type(data).__name__}")
        defaults = cls().defaults
        stored = data["defaults"]
        if not isinstance(stored, dict):
            raise TypeError("Settings defaults must be a dict")
        for key, value in stored.items():
            if key in defaults:
                defaults[key] = bool(value)
        return cls(
            defaults=defaults,
            pin_sets_remember=bool(data["pin_sets_remember"]),
            never_confirm_post=bool(data["never_confirm_post"]),
            version=int(data.get("version", CONFIG_VERSION)),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TabInfo:
    """What the browser reports about an open tab."""

    tab_id: int
    url: str = ""
    incognito: bool = False
    pinned: bool = False
    window_id: Optional[int] = None


@dataclass
class HistoryItem:
    url: str
    last_visit_time: float
