"""
Closed vocabularies shared by the MEDS spec and the UX rulebook.
"""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    """Viewport platform class detected from the screenshot."""

    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class PolicyPlatform(StrEnum):
    """Platforms a rulebook policy can be scoped to."""

    DESKTOP = "desktop"
    MOBILE = "mobile"


class ColorToken(StrEnum):
    """Semantic color token names. Free-form tokens are rejected."""

    BG = "bg"
    SURFACE = "surface"
    BORDER = "border"
    TEXT_PRIMARY = "text-primary"
    TEXT_SECONDARY = "text-secondary"
    TEXT_INVERSE = "text-inverse"
    BRAND = "brand"
    ACCENT = "accent"
    ERROR = "error"
    SUCCESS = "success"
    WARNING = "warning"
    OVERLAY = "overlay"


class ComponentType(StrEnum):
    """UI archetypes a component can be classified as."""

    APP_BAR = "AppBar"
    TOP_NAV = "TopNav"
    SIDEBAR = "Sidebar"
    DRAWER = "Drawer"
    TABS = "Tabs"
    BUTTON = "Button"
    ICON_BUTTON = "IconButton"
    TEXT_FIELD = "TextField"
    TEXT_AREA = "TextArea"
    SELECT = "Select"
    CHECKBOX = "Checkbox"
    RADIO_GROUP = "RadioGroup"
    SWITCH = "Switch"
    CARD = "Card"
    LIST_ITEM = "ListItem"
    TABLE = "Table"
    BADGE = "Badge"
    AVATAR = "Avatar"
    MODAL = "Modal"
    DIALOG = "Dialog"
    ALERT = "Alert"


class Density(StrEnum):
    """Composition density."""

    COMFORTABLE = "comfortable"
    COMPACT = "compact"


class ContrastLevel(StrEnum):
    """WCAG contrast class."""

    AA = "AA"
    AAA = "AAA"


class ShadowToken(StrEnum):
    """Named shadow presets."""

    NONE = "none"
    SM = "sm"
    MD = "md"
    LG = "lg"


class UXFamily(StrEnum):
    """Rule families in the UX rulebook."""

    NAVIGATION = "Navigation"
    DETAILS = "Details"
    EDIT = "Edit"
    MENUS = "Menus"
    CONFIRM = "Confirm"
    FEEDBACK = "Feedback"
    TARGET = "Target"
    MOTION = "Motion"


class UXEvent(StrEnum):
    """Interaction events a rule reacts to."""

    CLICK = "click"
    HOVER = "hover"
    FOCUS = "focus"
    SUBMIT = "submit"


class UXAction(StrEnum):
    """UX behaviors a rule can decide on."""

    ROUTE = "route"
    MODAL = "modal"
    DRAWER = "drawer"
    SHEET = "sheet"
    TOAST = "toast"
    BANNER = "banner"
    POPOVER = "popover"
    DROPDOWN = "dropdown"
    SKELETON = "skeleton"
    SPINNER = "spinner"
    PROGRESS = "progress"
    PROGRESSBAR = "progressbar"
    EMPTY_STATE = "empty-state"
    MENU = "menu"
    EXTERNAL = "external"
    DOWNLOAD = "download"
    ENSURE_A11Y = "ensure-a11y"
    CONSTRAINTS = "constraints"
    SET_COLOR = "set-color"
    INLINE_ERRORS = "inline-errors"
    ENSURE_TARGET_SIZE = "ensure-target-size"


class UXPriority(StrEnum):
    """Decision priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContentType(StrEnum):
    """Dominant content shape of a screen."""

    LIST = "list"
    TABLE = "table"
    SINGLE = "single"


class EmptyStateKind(StrEnum):
    """Kinds of empty state a screen can show."""

    FIRST_RUN = "firstRun"
    NO_RESULTS = "noResults"
