"""Language code helpers for directive matching."""

# ISO 639-1 (2-letter) to ISO 639-2/B (3-letter) mapping.
# ffprobe reports the container's language tag, which is ISO 639-2 for
# Matroska and MP4.
ISO_639_1_TO_639_2 = {
    "en": "eng",  # English
    "es": "spa",  # Spanish
    "fr": "fre",  # French
    "de": "ger",  # German
    "it": "ita",  # Italian
    "pt": "por",  # Portuguese
    "ru": "rus",  # Russian
    "ja": "jpn",  # Japanese
    "ko": "kor",  # Korean
    "zh": "chi",  # Chinese
    "ar": "ara",  # Arabic
    "hi": "hin",  # Hindi
    "nl": "dut",  # Dutch
    "pl": "pol",  # Polish
    "tr": "tur",  # Turkish
    "sv": "swe",  # Swedish
    "da": "dan",  # Danish
    "no": "nor",  # Norwegian
    "fi": "fin",  # Finnish
    "cs": "cze",  # Czech
    "hu": "hun",  # Hungarian
    "ro": "rum",  # Romanian
    "th": "tha",  # Thai
    "vi": "vie",  # Vietnamese
    "id": "ind",  # Indonesian
    "he": "heb",  # Hebrew
    "el": "gre",  # Greek
    "uk": "ukr",  # Ukrainian
    "ca": "cat",  # Catalan
    "sk": "slo",  # Slovak
    "hr": "hrv",  # Croatian
    "sr": "srp",  # Serbian
    "bg": "bul",  # Bulgarian
    "lt": "lit",  # Lithuanian
    "lv": "lav",  # Latvian
    "et": "est",  # Estonian
    "sl": "slv",  # Slovenian
    "fa": "per",  # Persian
    "ms": "may",  # Malay
    "ta": "tam",  # Tamil
    "te": "tel",  # Telugu
    "bn": "ben",  # Bengali
    "mr": "mar",  # Marathi
}

UNDETERMINED = "und"


def normalize_language_code(code: str) -> str:
    """Normalize a language code for comparison.

    Lower-cases and strips the code, and expands known 2-letter ISO 639-1
    codes to ISO 639-2/B. Anything else is returned lower-cased as-is.

    Args:
        code: Language code (e.g. 'ENG', 'en', 'jpn')

    Returns:
        Normalized code (e.g. 'eng')
    """
    if not code:
        return code

    code_lower = code.strip().lower()
    if len(code_lower) == 2:
        return ISO_639_1_TO_639_2.get(code_lower, code_lower)
    return code_lower


def languages_match(track_language: str, wanted: str) -> bool:
    """Case-insensitive comparison of a track's language tag with a wanted code."""
    return (track_language or UNDETERMINED).lower() == wanted.lower()
