"""Named chat channels and their category codes in the game log."""

import re

from chatlog_translator.errors import ConfigurationError

CHANNEL_CODES: dict[str, str] = {
    "SAY": "000A",
    "SHOUT": "000B",
    "WHISPER": "000C",
    "PARTY": "000E",
    "ALLIANCE": "000F",
    "LINKSHELL1": "0010",
    "LINKSHELL2": "0011",
    "LINKSHELL3": "0012",
    "LINKSHELL4": "0013",
    "LINKSHELL5": "0014",
    "LINKSHELL6": "0015",
    "LINKSHELL7": "0016",
    "LINKSHELL8": "0017",
    "FREE_COMPANY": "0018",
    "CUSTOM_EMOTE": "001C",
    "EMOTE": "001D",
    "YELL": "001E",
    "CROSSWORLD_LINKSHELL1": "0025",
    "CROSSWORLD_LINKSHELL2": "0065",
    "CROSSWORLD_LINKSHELL3": "0066",
    "CROSSWORLD_LINKSHELL4": "0067",
    "CROSSWORLD_LINKSHELL5": "0068",
}

CODE_PATTERN = re.compile(r"^[0-9A-Fa-f]{4}$")


def resolve_code(value: str) -> str:
    """Return the category code for a channel name, or a raw code unchanged."""
    name = value.strip()
    if name.upper() in CHANNEL_CODES:
        return CHANNEL_CODES[name.upper()]
    if CODE_PATTERN.match(name):
        return name
    raise ConfigurationError(f"Unknown chat channel or code: {value!r}")


def resolve_codes(values) -> tuple[str, ...]:
    """Resolve names/codes, dropping blanks and duplicates (order kept)."""
    codes: list[str] = []
    for value in values:
        if not value or not value.strip():
            continue
        code = resolve_code(value)
        if code not in codes:
            codes.append(code)
    return tuple(codes)
