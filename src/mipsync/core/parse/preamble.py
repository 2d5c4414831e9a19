"""Preamble extraction: the leading `Key: value` metadata block of a proposal"""

import re

from mipsync.core.models import PreambleFields


SUBPROPOSAL_KEY_RE = re.compile(r'^(MIP\d+[ac]\d+)-SP#$', re.IGNORECASE)
COMMA_SPLIT_RE = re.compile(r',')
NAME_SPLIT_RE = re.compile(r',|\s+and\s+')

SCALAR_KEYS: dict[str, str] = {
    'title':         'preamble_title',
    'type':          'types',
    'status':        'status',
    'date proposed': 'date_proposed',
    'date ratified': 'date_ratified',
    'replaces':      'replaces',
}

LIST_KEYS: dict[str, str] = {
    'author':          'author',
    'authors':         'author',
    'author(s)':       'author',
    'contributors':    'contributors',
    'contributor(s)':  'contributors',
    'dependencies':    'dependencies',
    'tags':            'tags',
}

NAME_FIELDS = {'author', 'contributors'}

NOT_APPLICABLE = 'n/a'


def split_list(value: str, names: bool = False) -> list[str]:
    """Split a comma separated value into trimmed, non-empty items; `names` also splits on 'and'."""
    pattern = NAME_SPLIT_RE if names else COMMA_SPLIT_RE
    return [part.strip() for part in pattern.split(value) if part.strip()]


def parse_preamble(data: str | None) -> PreambleFields:
    """Parse `Key: value` lines up to the first blank line after the block starts.

    Unknown keys are ignored and malformed values are skipped; never raises.
    """
    fields: dict = {}
    started = False

    for line in (data or '').splitlines():
        if not line.strip():
            if started:
                break
            continue
        key, sep, value = line.partition(':')
        if not sep:
            continue
        started = True
        key, value = key.strip(), value.strip()
        lowered = key.lower()

        if lowered == 'mip#':
            if value.isdigit():
                fields['mip'] = int(value)
        elif m := SUBPROPOSAL_KEY_RE.match(key):
            if value:
                fields['subproposal'] = f"{m.group(1)}-SP{value}"
        elif lowered in SCALAR_KEYS:
            if value:
                fields[SCALAR_KEYS[lowered]] = value
        elif lowered in LIST_KEYS:
            name = LIST_KEYS[lowered]
            items = split_list(value, names=name in NAME_FIELDS)
            if name == 'dependencies' and not items:
                items = [NOT_APPLICABLE]
            fields[name] = items

    return PreambleFields(**fields)
