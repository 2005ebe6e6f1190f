"""User-facing message lookup.

Messages are looked up by code so the hosting application can swap in
localized text with ``set_translations``.
"""

DEFAULT_MESSAGES: dict[str, str] = {
    "ValidateRequired": "%s is required.",
    "Description": "Description",
    "Version": "Version",
    "License": "License",
    "Could not open addon file. Addons must be zip files.": (
        "Could not open addon file. Addons must be zip files."
    ),
    "Could not parse addon info array.": "Could not parse addon info array.",
    "AddonKeyMismatch": "%s: The addon's key is not the same as its folder name.",
    "NoAddonFound": "Could not find any addon information in the archive.",
}

_translations: dict[str, str] = {}


def set_translations(translations: dict[str, str]) -> None:
    """Replace the active translation table.

    Args:
        translations: Mapping of message code to localized text. Codes
            missing from it fall back to the built-in English text.
    """
    _translations.clear()
    _translations.update(translations)


def translate(code: str, default: str | None = None) -> str:
    """Look up the localized text for a message code.

    Args:
        code: Message code, e.g. "ValidateRequired"
        default: Text to use when no translation exists (defaults to the code)

    Returns:
        The localized message
    """
    if code in _translations:
        return _translations[code]
    if code in DEFAULT_MESSAGES:
        return DEFAULT_MESSAGES[code]
    return default if default is not None else code
