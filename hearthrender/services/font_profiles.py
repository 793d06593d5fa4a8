"""
Locale typography profiles.

Every locale starts from BASE_FONT_PROFILE. A locale listed in
FONT_PROFILE_OVERRIDES replaces exactly the fields named in its entry;
nothing is merged at a finer grain than a whole field.
"""

from dataclasses import replace
from typing import Any

from hearthrender.models.font_profile import FontOffset, FontProfile
from hearthrender.models.locale import LocaleCode

BASE_FONT_PROFILE = FontProfile(
    title_font="Belwe",
    body_font_bold="Franklin Gothic Bold",
    body_font_italic="Franklin Gothic Italic",
    body_font_bold_italic="Franklin Gothic Bold",
    body_font_regular="Franklin Gothic",
    gem_font="Belwe",
    body_font_size=38,
    body_line_height=40,
    body_font_offset=FontOffset(x=0, y=26),
)

# Traditional Chinese has no Belwe/Franklin glyph coverage
FONT_PROFILE_OVERRIDES: dict[LocaleCode, dict[str, Any]] = {
    LocaleCode.ZH_TW: {
        "title_font": "AR Leisu Demi B5",
        "body_font_bold": "BlizzardGlobal",
        "body_font_italic": "BlizzardGlobal",
        "body_font_bold_italic": "BlizzardGlobal",
        "body_font_regular": "BlizzardGlobal",
    },
}


def resolve_font_profile(locale: LocaleCode) -> FontProfile:
    """
    Get the font profile for a locale.

    Args:
        locale: Already validated locale

    Returns:
        BASE_FONT_PROFILE with the locale's overrides applied, if any.
    """
    overrides = FONT_PROFILE_OVERRIDES.get(locale)
    if not overrides:
        return BASE_FONT_PROFILE
    return replace(BASE_FONT_PROFILE, **overrides)
