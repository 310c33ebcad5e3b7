import re

_PARENS_TO_REPLACE = "{}[]"
_REPLACEMENT_PARENS = "()" * (len(_PARENS_TO_REPLACE) // 2)
_CHARS_TO_REPLACE = r"/\$#%&<>*=^€|"
_REPLACEMENT_CHARS = "_" * len(_CHARS_TO_REPLACE)
_CHARS_TO_DELETE = r""";!?"'`.:"""
_FILE_STRING_TRANSLATION_TABLE = str.maketrans(
    _PARENS_TO_REPLACE + _CHARS_TO_REPLACE,
    _REPLACEMENT_PARENS + _REPLACEMENT_CHARS,
    _CHARS_TO_DELETE,
)


def sanitize_file_name(text: str) -> str:
    text = text.replace("C#", "CSharp")
    return text.strip().translate(_FILE_STRING_TRANSLATION_TABLE)


def strip_markup(text: str) -> str:
    """Remove emphasis and inline code markers from a markdown fragment."""
    return re.sub(r"[*_`]+", "", text).strip()
