"""Bible book keys and verse reference labels."""
from __future__ import annotations

from enum import Enum


class Book(str, Enum):
    """Canonical book keys as stored on typed verses."""

    GENESIS = "genesis"
    EXODUS = "exodus"
    LEVITICUS = "leviticus"
    NUMBERS = "numbers"
    DEUTERONOMY = "deuteronomy"
    JOSHUA = "joshua"
    JUDGES = "judges"
    RUTH = "ruth"
    FIRST_SAMUEL = "1_samuel"
    SECOND_SAMUEL = "2_samuel"
    FIRST_KINGS = "1_kings"
    SECOND_KINGS = "2_kings"
    FIRST_CHRONICLES = "1_chronicles"
    SECOND_CHRONICLES = "2_chronicles"
    EZRA = "ezra"
    NEHEMIAH = "nehemiah"
    ESTHER = "esther"
    JOB = "job"
    PSALM = "psalm"
    PROVERBS = "proverbs"
    ECCLESIASTES = "ecclesiastes"
    SONG_OF_SOLOMON = "song_of_solomon"
    ISAIAH = "isaiah"
    JEREMIAH = "jeremiah"
    LAMENTATIONS = "lamentations"
    EZEKIEL = "ezekiel"
    DANIEL = "daniel"
    HOSEA = "hosea"
    JOEL = "joel"
    AMOS = "amos"
    OBADIAH = "obadiah"
    JONAH = "jonah"
    MICAH = "micah"
    NAHUM = "nahum"
    HABAKKUK = "habakkuk"
    ZEPHANIAH = "zephaniah"
    HAGGAI = "haggai"
    ZECHARIAH = "zechariah"
    MALACHI = "malachi"
    MATTHEW = "matthew"
    MARK = "mark"
    LUKE = "luke"
    JOHN = "john"
    ACTS = "acts"
    ROMANS = "romans"
    FIRST_CORINTHIANS = "1_corinthians"
    SECOND_CORINTHIANS = "2_corinthians"
    GALATIANS = "galatians"
    EPHESIANS = "ephesians"
    PHILIPPIANS = "philippians"
    COLOSSIANS = "colossians"
    FIRST_THESSALONIANS = "1_thessalonians"
    SECOND_THESSALONIANS = "2_thessalonians"
    FIRST_TIMOTHY = "1_timothy"
    SECOND_TIMOTHY = "2_timothy"
    TITUS = "titus"
    PHILEMON = "philemon"
    HEBREWS = "hebrews"
    JAMES = "james"
    FIRST_PETER = "1_peter"
    SECOND_PETER = "2_peter"
    FIRST_JOHN = "1_john"
    SECOND_JOHN = "2_john"
    THIRD_JOHN = "3_john"
    JUDE = "jude"
    REVELATION = "revelation"


def to_proper_case(value: str) -> str:
    """Capitalise the first letter of every space separated word."""

    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


def format_verse_reference(book: Book | str, chapter: int, verse: int) -> str:
    """Return a display label such as ``"1 Corinthians 13:4"``."""

    key = book.value if isinstance(book, Book) else book
    book_name = to_proper_case(key.replace("_", " "))
    return f"{book_name} {chapter}:{verse}"


def unique_in_order(labels) -> list[str]:
    """Drop repeated labels, keeping the first occurrence of each."""

    return list(dict.fromkeys(labels))
