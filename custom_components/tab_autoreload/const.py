# File: custom_components/tab_autoreload/const.py

DOMAIN = "tab_autoreload"

# Version of the serialized tab state and settings format
CONFIG_VERSION = 2

# Persistent storage
STORAGE_VERSION = 1
STORAGE_KEY_SETTINGS = f"{DOMAIN}.settings"
STORAGE_KEY_URL_MEMORY = f"{DOMAIN}.url_memory"
STORAGE_KEY_UPGRADE = f"{DOMAIN}.upgrade"

# Event bus
EVENT_BROWSER = f"{DOMAIN}_browser_event"
EVENT_COMMAND = f"{DOMAIN}_command"

# Period sentinels
PERIOD_DISABLED = -1
PERIOD_CUSTOM = -2

SECONDS_PER_MINUTE = 60

# Freeze windows (seconds)
ACTIVITY_FREEZE = 3
TAB_ACTIVATED_FREEZE = 5
WINDOW_FOCUS_FREEZE = 3

# Randomized delay bounds, as factors of the period
RANDOMIZE_MIN_FACTOR = 0.5
RANDOMIZE_MAX_FACTOR = 1.5

# Window (seconds) around a visit removed before a resend
HISTORY_DELETE_WINDOW = 0.001

IDEMPOTENT_METHOD = "GET"

# Tab load status reported when a page finished loading
STATUS_COMPLETE = "complete"

# Navigation transition kinds that are reloads rather than user navigation
RELOAD_TRANSITIONS = ("auto_subframe", "reload")

# Outbound commands
COMMAND_MESSAGE = "message"
COMMAND_RELOAD = "reload"
COMMAND_STORE_SESSION = "store_session"
COMMAND_PROMPT = "prompt"
COMMAND_DELETE_HISTORY = "delete_history"

# Page agent messages
MSG_TIMER_ENABLED = "timer-enabled"
MSG_TIMER_DISABLED = "timer-disabled"
MSG_RELOAD = "reload"
MSG_SCROLL = "scroll"
MSG_SET_TAB_ID = "set-tab-id"

# Prompts shown to the user
PROMPT_CONFIRM_RESEND = "confirm-resend"
PROMPT_CUSTOM_INTERVAL = "custom-interval"

# Per-tab options
OPT_RANDOMIZE = "randomize"
OPT_SMART = "smart"
OPT_ONLY_ON_ERROR = "only_on_error"
OPT_STICKY_RELOAD = "sticky_reload"
OPT_NO_CACHE = "no_cache"
OPT_REMEMBER = "remember"

TOGGLE_OPTIONS = (
    OPT_RANDOMIZE,
    OPT_REMEMBER,
    OPT_NO_CACHE,
    OPT_SMART,
    OPT_STICKY_RELOAD,
    OPT_ONLY_ON_ERROR,
)

# Config keys for settings
CONF_DEFAULT_RANDOMIZE = "default_randomize"
CONF_DEFAULT_ONLY_ON_ERROR = "default_only_on_error"
CONF_DEFAULT_SMART = "default_smart"
CONF_DEFAULT_STICKY_RELOAD = "default_sticky_reload"
CONF_DEFAULT_NO_CACHE = "default_no_cache"
CONF_PIN_SETS_REMEMBER = "pin_sets_remember"
CONF_NEVER_CONFIRM_POST = "never_confirm_post"

# Default values for settings
DEFAULT_RANDOMIZE = False
DEFAULT_ONLY_ON_ERROR = False
DEFAULT_SMART = True
DEFAULT_STICKY_RELOAD = False
DEFAULT_NO_CACHE = False
DEFAULT_PIN_SETS_REMEMBER = True
DEFAULT_NEVER_CONFIRM_POST = False

# Options flow key -> per-tab option it provides the default for
DEFAULT_OPTION_KEYS = {
    CONF_DEFAULT_RANDOMIZE: OPT_RANDOMIZE,
    CONF_DEFAULT_ONLY_ON_ERROR: OPT_ONLY_ON_ERROR,
    CONF_DEFAULT_SMART: OPT_SMART,
    CONF_DEFAULT_STICKY_RELOAD: OPT_STICKY_RELOAD,
    CONF_DEFAULT_NO_CACHE: OPT_NO_CACHE,
}

# Service names and attributes
SERVICE_SET_PERIOD = "set_period"
SERVICE_TOGGLE = "toggle"
SERVICE_RELOAD = "reload"
SERVICE_RELOAD_ALL = "reload_all"
SERVICE_ENABLE_ALL = "enable_all"
SERVICE_DISABLE_ALL = "disable_all"
SERVICE_CONFIRM_RESEND = "confirm_resend"

ATTR_TAB_ID = "tab_id"
ATTR_PERIOD = "period"
ATTR_OPTION = "option"
ATTR_ENABLED = "enabled"
