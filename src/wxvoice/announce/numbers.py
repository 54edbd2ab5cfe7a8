"""Number verbalization for spoken announcements.

Cardinal words for plain speech and digit-by-digit words for the
radiotelephony convention used by the aviation style.
"""

from fractions import Fraction

_ONES = [
    "zero",
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
    "eleven",
    "twelve",
    "thirteen",
    "fourteen",
    "fifteen",
    "sixteen",
    "seventeen",
    "eighteen",
    "nineteen",
]

_TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]

_SCALES = [(1_000_000, "million"), (1_000, "thousand"), (100, "hundred")]

_ORDINAL_EXCEPTIONS = {
    "one": "first",
    "two": "second",
    "three": "third",
    "five": "fifth",
    "eight": "eighth",
    "nine": "ninth",
    "twelve": "twelfth",
}

_FRACTION_NAMES = {
    2: ("half", "halves"),
    4: ("quarter", "quarters"),
}


def cardinal(number: int) -> str:
    """Spell an integer in words.

    Examples:
        >>> cardinal(22)
        'twenty-two'
        >>> cardinal(-5)
        'minus five'
        >>> cardinal(1013)
        'one thousand thirteen'
    """
    if number < 0:
        return f"minus {cardinal(-number)}"
    if number < 20:
        return _ONES[number]
    if number < 100:
        tens, ones = divmod(number, 10)
        return _TENS[tens] if ones == 0 else f"{_TENS[tens]}-{_ONES[ones]}"

    for scale, name in _SCALES:
        if number >= scale:
            head, rest = divmod(number, scale)
            words = f"{cardinal(head)} {name}"
            return words if rest == 0 else f"{words} {cardinal(rest)}"

    raise AssertionError("unreachable")


def digits(value: int | str) -> str:
    """Speak each digit individually.

    A leading minus sign becomes "minus"; a decimal point becomes "decimal".

    Examples:
        >>> digits(3012)
        'three zero one two'
        >>> digits("280")
        'two eight zero'
    """
    words = []
    for char in str(value):
        if char.isdigit():
            words.append(_ONES[int(char)])
        elif char == "-":
            words.append("minus")
        elif char == ".":
            words.append("decimal")
    return " ".join(words)


def ordinal(number: int) -> str:
    """Spell an ordinal number ("first", "twenty-third")."""
    words = cardinal(number)
    split = max(words.rfind(" "), words.rfind("-")) + 1
    head, last = words[:split], words[split:]
    if last in _ORDINAL_EXCEPTIONS:
        last = _ORDINAL_EXCEPTIONS[last]
    elif last.endswith("y"):
        last = last[:-1] + "ieth"
    else:
        last = last + "th"
    return head + last


def decimal(value: float, places: int = 2) -> str:
    """Spell a decimal number with the fractional digits read individually.

    Examples:
        >>> decimal(30.12)
        'thirty point one two'
    """
    text = f"{value:.{places}f}"
    whole, _, fraction = text.partition(".")
    words = cardinal(int(whole))
    if whole.startswith("-") and int(whole) == 0:
        words = "minus zero"
    fraction = fraction.rstrip("0")
    if not fraction:
        return words
    return f"{words} point {digits(fraction)}"


def fraction(value: Fraction) -> str:
    """Spell a mixed number ("one and one half", "three quarters")."""
    whole = value.numerator // value.denominator
    part = value - whole

    if part == 0:
        return cardinal(whole)

    numerator, denominator = part.numerator, part.denominator
    if denominator in _FRACTION_NAMES:
        singular, plural = _FRACTION_NAMES[denominator]
    else:
        singular = ordinal(denominator)
        plural = singular + "s"
    part_words = f"{cardinal(numerator)} {singular if numerator == 1 else plural}"

    if whole == 0:
        return part_words
    return f"{cardinal(whole)} and {part_words}"


def clock(hour: int, minute: int) -> str:
    """Spell a 24-hour clock time the way it is read aloud.

    Examples:
        >>> clock(18, 53)
        'eighteen fifty-three'
        >>> clock(9, 5)
        'zero nine oh five'
        >>> clock(14, 0)
        'fourteen hundred'
    """
    hour_words = cardinal(hour) if hour >= 10 else f"zero {cardinal(hour)}"
    if hour == 0:
        hour_words = "zero"
    if minute == 0:
        return f"{hour_words} hundred"
    if minute < 10:
        return f"{hour_words} oh {cardinal(minute)}"
    return f"{hour_words} {cardinal(minute)}"


__all__ = ["cardinal", "clock", "decimal", "digits", "fraction", "ordinal"]
