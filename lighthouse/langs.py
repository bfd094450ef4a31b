"""Language codes and well-known keys used by structured errors."""

SPERROR_KEY = "sperror"
HASH_KEY = "hash"
SOURCE_KEY = "source"

EN = "en"
RU = "ru"
DE = "de"
FR = "fr"
ES = "es"
PT = "pt"
IT = "it"
NL = "nl"
PL = "pl"
UK = "uk"
CZ = "cz"
TR = "tr"
AR = "ar"
JA = "ja"
KO = "ko"
ZH = "zh"
NO = "no"
SV = "sv"
FI = "fi"
DA = "da"
IS = "is"
CS = "cs"
EL = "el"
HU = "hu"
RO = "ro"
BG = "bg"
LT = "lt"
SK = "sk"
SL = "sl"
HR = "hr"
TH = "th"
LV = "lv"
ET = "et"
HE = "he"

LANGUAGES = frozenset(
    {
        EN, RU, DE, FR, ES, PT, IT, NL, PL, UK, CZ, TR, AR, JA, KO, ZH, NO,
        SV, FI, DA, IS, CS, EL, HU, RO, BG, LT, SK, SL, HR, TH, LV, ET, HE,
    }
)


def is_known(code):
    """Return True if ``code`` is one of the supported language codes."""
    return code in LANGUAGES