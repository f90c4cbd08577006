"""
dBase language driver (codepage) table.

Byte 29 of the file header selects a legacy text encoding and the
character used as decimal separator in numeric fields.
"""

from enum import IntEnum
from typing import Dict, Tuple

from dbf_errors import DBFFormatError


# Constants
DBF_LANG_OEM = 0x00
DBF_LANG_US = 0x01
DBF_LANG_WESTERN_EUROPE = 0x02
DBF_LANG_WINDOWS_ANSI = 0x03
DBF_LANG_ANSI = 0x57
DBF_LANG_JAPAN = 0x7B


class DBFLanguage(IntEnum):
    """Language driver ids, named after their DOS / Windows codepage."""
    OEM = 0x00
    CP437_US_MSDOS = 0x01
    CP850_INTERNATIONAL_MSDOS = 0x02
    CP1252_WINDOWS_ANSI = 0x03
    ANSI = 0x57
    CP852_EASTERN_EUROPEAN_MSDOS = 0x64
    CP866_RUSSIAN_MSDOS = 0x65
    CP865_NORDIC_MSDOS = 0x66
    CP861_ICELANDIC_MSDOS = 0x67
    CP737_GREEK_MSDOS = 0x6A
    CP857_TURKISH_MSDOS = 0x6B
    CP950_CHINESE_WINDOWS = 0x78
    CP936_CHINESE_WINDOWS = 0x7A
    CP932_JAPANESE_WINDOWS = 0x7B
    CP1255_HEBREW_WINDOWS = 0x7D
    CP1256_ARABIC_WINDOWS = 0x7E
    CP1250_EASTERN_EUROPEAN_WINDOWS = 0xC8
    CP1251_RUSSIAN_WINDOWS = 0xC9
    CP1254_TURKISH_WINDOWS = 0xCA
    CP1253_GREEK_WINDOWS = 0xCB


# id -> (python codec name, decimal separator)
LANGUAGE_TABLE: Dict[int, Tuple[str, str]] = {
    DBFLanguage.OEM: ('ascii', ','),
    DBFLanguage.ANSI: ('ascii', ','),
    DBFLanguage.CP437_US_MSDOS: ('cp437', '.'),
    DBFLanguage.CP850_INTERNATIONAL_MSDOS: ('cp850', '.'),
    DBFLanguage.CP1252_WINDOWS_ANSI: ('cp1252', '.'),
    DBFLanguage.CP852_EASTERN_EUROPEAN_MSDOS: ('cp852', ','),
    DBFLanguage.CP866_RUSSIAN_MSDOS: ('cp866', ','),
    DBFLanguage.CP865_NORDIC_MSDOS: ('cp865', ','),
    DBFLanguage.CP861_ICELANDIC_MSDOS: ('cp861', ','),
    DBFLanguage.CP737_GREEK_MSDOS: ('cp737', ','),
    DBFLanguage.CP857_TURKISH_MSDOS: ('cp857', ','),
    DBFLanguage.CP950_CHINESE_WINDOWS: ('big5', '.'),
    DBFLanguage.CP936_CHINESE_WINDOWS: ('gb2312', '.'),
    DBFLanguage.CP932_JAPANESE_WINDOWS: ('shift_jis', '.'),
    DBFLanguage.CP1255_HEBREW_WINDOWS: ('cp1255', '.'),
    DBFLanguage.CP1256_ARABIC_WINDOWS: ('cp1256', '.'),
    DBFLanguage.CP1250_EASTERN_EUROPEAN_WINDOWS: ('cp1250', ','),
    DBFLanguage.CP1251_RUSSIAN_WINDOWS: ('cp1251', ' '),
    DBFLanguage.CP1254_TURKISH_WINDOWS: ('cp1254', ','),
    DBFLanguage.CP1253_GREEK_WINDOWS: ('cp1253', ','),
}


def _lookup(language_driver: int) -> Tuple[str, str]:
    try:
        return LANGUAGE_TABLE[language_driver]
    except KeyError:
        raise DBFFormatError(f"Unknown language driver 0x{language_driver:02X}") from None


def dbf_language_get_encoding(language_driver: int) -> str:
    """
    Get the Python codec name for a language driver id.

    Args:
        language_driver: Header byte 29

    Returns:
        Codec name usable with bytes.decode / str.encode
    """
    return _lookup(language_driver)[0]


def dbf_language_get_decimal_separator(language_driver: int) -> str:
    """
    Get the decimal separator for a language driver id.

    Args:
        language_driver: Header byte 29

    Returns:
        One character: '.', ',' or ' '
    """
    return _lookup(language_driver)[1]


def dbf_language_is_known(language_driver: int) -> bool:
    """Check whether a language driver id is in the table."""
    return language_driver in LANGUAGE_TABLE


__all__ = [
    'DBFLanguage', 'LANGUAGE_TABLE',
    'DBF_LANG_OEM', 'DBF_LANG_US', 'DBF_LANG_WESTERN_EUROPE', 'DBF_LANG_WINDOWS_ANSI',
    'DBF_LANG_ANSI', 'DBF_LANG_JAPAN',
    'dbf_language_get_encoding', 'dbf_language_get_decimal_separator', 'dbf_language_is_known',
]
