"""Identifier normalization for generated Go source.

Names taken from an API description (tags, operation ids, schema and
property names, parameter names) are arbitrary strings. ``normalize`` turns
them into valid, idiomatically cased Go identifiers with canonical
initialisms (``userId`` -> ``userID``, ``api-url`` -> ``APIURL``).

The function is pure and idempotent::

    >>> normalize('foo-bar_baz', True)
    'FooBarBaz'
    >>> normalize('__id', False)
    '__id'
    >>> normalize('id', True)
    'ID'
"""

import re

# Ported from golang.org/x/lint. Only entries that are highly unlikely to be
# non-initialisms: "ID" is fine, "AND" is not.
COMMON_INITIALISMS = frozenset(
    {
        'ACL',
        'API',
        'ASCII',
        'CPU',
        'CSS',
        'DNS',
        'EOF',
        'GUID',
        'HTML',
        'HTTP',
        'HTTPS',
        'ID',
        'IP',
        'JSON',
        'LHS',
        'QPS',
        'RAM',
        'RHS',
        'RPC',
        'SLA',
        'SMTP',
        'SQL',
        'SSH',
        'TCP',
        'TLS',
        'TTL',
        'UDP',
        'UI',
        'UID',
        'UUID',
        'URI',
        'URL',
        'UTF8',
        'VM',
        'XML',
        'XMPP',
        'XSRF',
        'XSS',
    }
)

PUNCTUATION = frozenset('-.$/')

# Prepended to identifiers that would otherwise start with a digit. A double
# underscore survives re-normalization unchanged.
DIGIT_PREFIX = 'X__'

_UNDERSCORE_RUNS = re.compile(r'(_+)')


def normalize(raw: str, capitalize_first: bool) -> str:
    """Return ``raw`` as a valid Go identifier.

    Args:
        raw: Name as it appears in the API description.
        capitalize_first: Upper-case the first retained character, producing
            an exported identifier.

    Returns:
        The normalized identifier. Empty input yields an empty string.
    """
    name = depunct(raw, capitalize_first)
    # Prefixed before fix_name so the words after it are cased as they
    # will be on the next pass.
    if name[:1].isdigit():
        name = DIGIT_PREFIX + name
    name = fix_name(name)
    if name == 'Typ':
        name = 'Type'
    return name


def depunct(ident: str, need_cap: bool) -> str:
    """Remove punctuation from ``ident``, capitalizing the character after it.

    Everything up to and including the last ``]`` is dropped. ``-``, ``.``,
    ``$``, ``/`` and any other character that cannot appear in an identifier
    are elided. A lone ``_`` is elided as well; runs of two or more
    underscores are kept verbatim.
    """
    idx = ident.rfind(']')
    if idx > -1:
        ident = ident[idx + 1:]

    out = []
    preserve = False
    for i, c in enumerate(ident):
        if c == '_':
            if preserve or ident.startswith('__', i):
                preserve = True
            else:
                need_cap = True
                continue
        else:
            preserve = False
            if c in PUNCTUATION or not c.isalnum():
                need_cap = True
                continue
        if need_cap:
            c = c.upper()
            need_cap = False
        out.append(c)
    return ''.join(out)


def fix_name(name: str) -> str:
    """Apply Go naming idiom to a punctuation-free candidate.

    Splits camelCase words at lower->non-lower transitions and around
    underscore runs, renders words found in ``COMMON_INITIALISMS`` in their
    canonical casing and capitalizes the remaining lower-case words after
    the first.
    """
    # Fast path for simple cases: "_" and all lowercase.
    if name == '_':
        return name
    if name == 'type':
        return 'typ'
    if name.islower():
        return name

    out = []
    first = True
    for chunk in _UNDERSCORE_RUNS.split(name):
        if not chunk:
            continue
        if chunk[0] == '_':
            out.append(chunk)
            continue
        for word in _split_words(chunk):
            upper = word.upper()
            if upper in COMMON_INITIALISMS:
                # Lower case only at the start.
                word = upper.lower() if first and word[0].islower() else upper
            elif not first and word.lower() == word:
                word = word[0].upper() + word[1:]
            out.append(word)
            first = False
    return ''.join(out)


def _split_words(chunk: str) -> list[str]:
    words = []
    start = 0
    for i in range(len(chunk) - 1):
        if chunk[i].islower() and not chunk[i + 1].islower():
            words.append(chunk[start:i + 1])
            start = i + 1
    words.append(chunk[start:])
    return words


def to_snake_case(name: str) -> str:
    """Convert an identifier to snake_case, keeping initialisms together.

    >>> to_snake_case('PetStore')
    'pet_store'
    >>> to_snake_case('APIKey')
    'api_key'
    """
    name = re.sub(r'[^0-9A-Za-z]+', '_', name)
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    return name.strip('_').lower()


def is_vowel(c: str) -> bool:
    return c in ('a', 'e', 'i', 'o', 'u')


def article_for(text: str) -> str:
    """Indefinite article for ``text``: "an" before a vowel, "a" otherwise."""
    return 'an' if text and is_vowel(text[0]) else 'a'


def sentence(text: str) -> str:
    """Lower-case ``text`` on one line, terminated by a period (doc comment style)."""
    text = ' '.join(text.split()).lower()
    if text and not text.endswith('.'):
        text += '.'
    return text
