"""
Address resolution against the street, suburb and hundred reference tables.
"""

import re
from typing import List, Sequence

from .reference import ReferenceData


# Suburb already carries a state and post code, e.g. "PIRIE SA 5540"
STATE_POSTCODE_PATTERN = re.compile(r' (?:SA|NSW|VIC|QLD|WA|TAS|NT|ACT) [0-9]{4}$')
HUNDRED_STREET_PATTERN = re.compile(r'^(?:HD|HUNDRED) ')  # "HD NAPPERBY", "HUNDRED WANDEARAH"
HUNDRED_PREFIX_PATTERN = re.compile(r'^HD OF ')
WHITESPACE_PATTERN = re.compile(r'\s\s+')


def collapse_whitespace(text: str) -> str:
    """Trim and replace runs of whitespace with a single space."""
    return WHITESPACE_PATTERN.sub(' ', text.strip())


def deduplicate_tokens(tokens: List[str]) -> List[str]:
    """Drop a doubled leading word and a doubled trailing word."""
    tokens = list(tokens)
    if len(tokens) >= 2 and tokens[0] == tokens[1]:
        tokens.pop(0)
    if len(tokens) >= 2 and tokens[-2] == tokens[-1]:
        tokens.pop()
    return tokens


def expand_street_suffix(tokens: List[str], reference: ReferenceData) -> List[str]:
    """
    Expand an abbreviated final token, e.g. "ST" becomes "STREET".

    An upper-case abbreviation gets an upper-case expansion; otherwise the
    expansion is used as written in the suffix table.
    """
    tokens = list(tokens)
    abbreviation = tokens[-1] if tokens else ""
    suffix = reference.expand_suffix(abbreviation)
    if suffix is not None:
        tokens[-1] = suffix.upper() if abbreviation == abbreviation.upper() else suffix
    return tokens


def choose_suburb(street_suburbs: Sequence[str], hundred_suburbs: Sequence[str]) -> str:
    """
    Pick a suburb from the street and hundred candidates.

    A unique street match wins, then a unique hundred match, then the first
    candidate of whichever lookup matched. When both lookups have several
    candidates the first suburb common to both is used, falling back to the
    first street suburb.
    """
    if not street_suburbs and not hundred_suburbs:
        return ""
    if len(street_suburbs) == 1:
        return street_suburbs[0]
    if len(hundred_suburbs) == 1:
        return hundred_suburbs[0]
    if street_suburbs and not hundred_suburbs:
        return street_suburbs[0]
    if hundred_suburbs and not street_suburbs:
        return hundred_suburbs[0]

    intersection = [name for name in street_suburbs if name in hundred_suburbs]
    return intersection[0] if intersection else street_suburbs[0]


def format_address(
    house_number: str,
    street_name: str,
    suburb_name: str,
    hundred_name: str,
    reference: ReferenceData
) -> str:
    """
    Format an address, ensuring that it has a valid suburb, state and post code.

    Args:
        house_number: Raw house number
        street_name: Raw street name
        suburb_name: Raw suburb name
        hundred_name: Raw hundred name
        reference: Reference tables

    Returns:
        Formatted address, or an empty string when the address is invalid
    """
    house_number = collapse_whitespace(house_number)
    street_name = collapse_whitespace(street_name)
    suburb_name = collapse_whitespace(suburb_name)
    hundred_name = collapse_whitespace(hundred_name)

    # No street name means the address is invalid
    if street_name in ("", "0"):
        return ""

    # The street field sometimes holds the hundred name
    if HUNDRED_STREET_PATTERN.search(street_name):
        street_name = ""

    street_name = street_name.replace("(NAP) ", "")
    street_name = re.sub(r' ROA$', ' ROAD', street_name)

    tokens = deduplicate_tokens(street_name.split(" "))
    tokens = expand_street_suffix(tokens, reference)
    street_name = " ".join(tokens)

    if not STATE_POSTCODE_PATTERN.search(suburb_name):
        suburb_name = reference.lookup_suburb(suburb_name)

    # Derive the suburb from the street and the hundred. The same street
    # name can pass through, or recur in, several suburbs.
    if suburb_name == "":
        hundred_key = HUNDRED_PREFIX_PATTERN.sub("", hundred_name).strip()
        suburb_name = choose_suburb(
            reference.suburbs_for_street(street_name),
            reference.suburbs_for_hundred(hundred_key)
        )

    if suburb_name == "":
        return ""

    if house_number == "" and street_name == "":
        return suburb_name.strip()

    return f"{(house_number + ' ' + street_name).strip()}, {suburb_name}".strip()
