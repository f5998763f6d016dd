"""Hash generation and URL normalization utilities

This module provides the helpers behind both hash namespaces of the service:

- Per-user bookmark hashes: deterministic, non-sequential codes derived from a
  per-user counter and a salt (the owner's user name).
- Global long URL hashes: content-derived codes computed from the normalized
  URL, with a salted `attempt` for collision fallback.

Functions:
    normalize_url(url):
        Canonicalize a long URL before hashing and storing it.
    encode_base62(value, length):
        Encode a non-negative integer into a fixed-length Base62 string.
    generate_shortcode(counter, salt='default_salt', length=7, mult=1315423911):
        Generate a short hash from a counter (per-user bookmark hash).
    generate_url_hash(url, attempt=0, length=6):
        Generate a short hash from a URL (global long URL hash).

Example:
    >>> from urlservice.utils import generate_url_hash, normalize_url
    >>> normalize_url('HTTPS://Example.ORG:443')
    'https://example.org/'
    >>> len(generate_url_hash('https://example.org/'))
    6
"""

import math
import string
from urllib.parse import urlsplit, urlunsplit

import xxhash

from urlservice.constants import Defaults
from urlservice.exceptions import InvalidURLError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

ALLOWED_SCHEMES = frozenset({'http', 'https', 'ftp'})
DEFAULT_PORTS = {'http': 80, 'https': 443, 'ftp': 21}


def normalize_url(url: str) -> str:
    """Canonicalize a long URL.

    Two URLs which normalize to the same string share one global hash, so this
    rule decides deduplication:

    - surrounding whitespace is stripped;
    - scheme and host are lower-cased, user info is kept verbatim;
    - default ports are dropped (http:80, https:443, ftp:21);
    - an empty path becomes '/', other paths (trailing slash included) are kept;
    - query string and fragment are kept verbatim.

    Args:
        url (str): Long URL as submitted by the user.

    Returns:
        str: Normalized URL.

    Raises:
        InvalidURLError: If the scheme isn't http/https/ftp or the host is missing.

    Example:
        >>> normalize_url('HTTP://Example.org:80/Path/?q=1#Top')
        'http://example.org/Path/?q=1#Top'
    """
    if not isinstance(url, str):
        raise InvalidURLError(f'URL must be of type string (given type: {type(url)}).')

    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(f'Malformed URL: {url!r}.') from e

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(f'Unsupported URL scheme {parts.scheme!r} (given value: {url!r}).')
    if not parts.hostname:
        raise InvalidURLError(f'URL is missing a host (given value: {url!r}).')

    host = parts.hostname.lower()
    if ':' in host:
        host = f'[{host}]'  # IPv6 literal
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f'{host}:{port}'

    userinfo, sep, _ = parts.netloc.rpartition('@')
    netloc = f'{userinfo}@{host}' if sep else host

    return urlunsplit((scheme, netloc, parts.path or '/', parts.query, parts.fragment))


def encode_base62(value: int, length: int) -> str:
    """Encode `value` modulo BASE**length into a fixed-length Base62 string."""
    # Custom base62 encoding algorithm:
    # 1- Encode the value into base62 digits, least significant first
    # 2- Reverse so the most significant digit comes first
    # 3- Pad with leading 'a' characters to ensure fixed length
    return ''.join(reversed([ALPHABET[(value // BASE**i) % BASE] for i in range(length)])).rjust(length, ALPHABET[0])


def generate_shortcode(counter: int, salt: str = 'default_salt', length: int = Defaults.BOOKMARK_HASH_LENGTH, mult: int = 1315423911) -> str:
    """Generate a short, deterministic hash from a counter and salt.

    This function encodes a numeric counter into an n-character Base62 string
    (using A-Z, a-z, 0-9). The counter is salted and wrapped in modulo
    BASE^length to ensure fixed-length output.

    This implementation uses a **multiplicative permutation** over a fixed
    Base62 space to guarantee:
    - 1:1 mapping (bijective)
    - Deterministic output
    - No visible sequential patterns
    - Constant-time execution

    Args:
        counter (int):
            Unique integer value identifying the bookmark within its namespace.

        salt (str, optional):
            String used to randomize the output space. Bookmarks use the
            owner's user name so two users never walk the same sequence.

        length (int, optional):
            Length of the resulting hash. Defaults to 7.

        mult (int, optional):
            Multiplicative factor for the permutation.
            Must be coprime with mod (BASE**length).

    Returns:
        str: A short alphanumeric hash derived from the counter and salt.

    NOTE:
        - Collisions only occur after the counter wraps around the modulo space.
          Callers still guard inserts with a uniqueness check.
        - The output is not trivially predictable without knowledge of the salt
          and permutation parameters (this is obfuscation, not encryption).
    """
    if not isinstance(counter, int):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')
    if math.gcd(mult, BASE**length) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({BASE**length}) (given value: mult={mult}).')

    # Affine permutation over the fixed modulo space: scrambles sequential
    # counters while preserving a 1:1 mapping as long as counter < BASE**length.
    modulo_space = BASE**length
    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    return encode_base62(permuted, length)


def generate_url_hash(url: str, attempt: int = 0, length: int = Defaults.LONG_URL_HASH_LENGTH) -> str:
    """Generate a content-derived global hash for a normalized URL.

    The hash is a pure function of `(url, attempt)`: the xxhash64 digest of the
    URL, seeded with `attempt`, reduced modulo BASE**length. Attempt 0 is the
    primary hash; higher attempts are the salted fallbacks used on collision.

    Args:
        url (str): Normalized URL (see normalize_url()).
        attempt (int): Collision fallback round, starting at 0.
        length (int): Length of the resulting hash. Defaults to 6.

    Returns:
        str: Base62 hash of exactly `length` characters.
    """
    if not isinstance(url, str) or not url:
        raise ValueError(f'URL must be a non-empty string (given value: {url!r}).')
    if attempt < 0:
        raise ValueError(f'Attempt must be a non-negative integer (given value: {attempt}).')

    digest = xxhash.xxh64_intdigest(url.encode('utf-8'), seed=attempt)
    return encode_base62(digest % BASE**length, length)


def is_generated_hash(value: str, length: int = Defaults.BOOKMARK_HASH_LENGTH) -> bool:
    """True if `value` has the shape of a generated bookmark hash."""
    return len(value) == length and all(c in ALPHABET for c in value)
