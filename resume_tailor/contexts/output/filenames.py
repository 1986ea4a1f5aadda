"""Output filename rule shared by every save strategy."""

import re

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def _underscores(match: "re.Match[str]") -> str:
    # One underscore per UTF-16 code unit, so astral characters (emoji) give two
    return "_" * (len(match.group().encode("utf-16-le")) // 2)


def sanitize(text: str) -> str:
    """
    Replace every character outside [A-Za-z0-9] with an underscore.

    Characters outside the Basic Multilingual Plane count as two characters,
    matching filenames produced by the web client.

    Examples:
        >>> sanitize("Jane Doe")
        'Jane_Doe'
        >>> sanitize("C++ Corp!")
        'C___Corp_'
        >>> sanitize("Acme 🚀")
        'Acme___'
    """
    return UNSAFE_CHARS.sub(_underscores, text)


def build_filename(profile_name: str, company: str, role: str) -> str:
    """<Profile>_<Company>_<Role>.pdf with each part sanitized."""
    return f"{sanitize(profile_name)}_{sanitize(company)}_{sanitize(role)}.pdf"
