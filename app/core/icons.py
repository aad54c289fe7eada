"""Allow-listed app icon keys and translation of legacy two-letter codes."""

ALLOWED_ICON_KEYS = (
    "grid",
    "briefcase",
    "users",
    "settings",
    "chart",
    "database",
    "file",
    "calendar",
    "message",
    "shield",
    "globe",
    "link",
    "shop",
    "credit-card",
    "box",
)

LEGACY_ICON_MAP = {
    "TS": "shop",
    "TB": "grid",
    "EX": "credit-card",
}


def normalize_icon_key(raw: object) -> str | None:
    """Return the allow-listed key for raw (legacy codes translated), or None."""
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if not value:
        return None
    if value in ALLOWED_ICON_KEYS:
        return value
    return LEGACY_ICON_MAP.get(value)
