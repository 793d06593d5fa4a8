from enum import Enum

from hearthrender.config import DEFAULT_LOCALE, SUPPORTED_LOCALES


class LocaleCode(str, Enum):
    """Supported catalog/typography locales."""

    EN_US = "enUS"
    FR_FR = "frFR"
    DE_DE = "deDE"
    KO_KR = "koKR"
    ES_ES = "esES"
    ES_MX = "esMX"
    RU_RU = "ruRU"
    ZH_TW = "zhTW"
    ZH_CN = "zhCN"
    IT_IT = "itIT"
    PL_PL = "plPL"
    PT_BR = "ptBR"
    JA_JP = "jaJP"
    TH_TH = "thTH"


def resolve_locale(value: str | None) -> LocaleCode:
    """
    Validate a locale tag against the supported set.

    Matching is exact (case-sensitive). Anything else, including None or
    an empty string, collapses to the default locale.
    """
    if value in SUPPORTED_LOCALES:
        return LocaleCode(value)
    return LocaleCode(DEFAULT_LOCALE)
