"""
Security utilities for guarded_fetch requests.

This module provides SSRF protection for request targets and a safe-range
check for header values. The URL guard is purely syntactic: hostnames are
never resolved, so DNS names always pass.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from ..exceptions import InvalidMetadataError, InvalidUrlError, UnsafeUrlError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})

# (first octet, second octet range) pairs; the 172 block is checked by its
# second-octet bounds rather than CIDR arithmetic
PRIVATE_IPV4_RANGES = {
    "class_a": (10, None),
    "class_b": (172, (16, 31)),
    "class_c": (192, (168, 168)),
    "link_local": (169, (254, 254)),
    "zero": (0, None),
}
LOOPBACK_FIRST_OCTET = 127

LOOPBACK_IPV6 = frozenset({"::1", "::"})
BLOCKED_IPV6_PREFIXES = ("fe80:", "fc00:", "fd00:")

_RAW_HOST = re.compile(r"^https?://([^/:?#]+)", re.IGNORECASE)
_DOTTED_QUAD = re.compile(r"^(\d+\.){3}\d+$")
_DIGITS = {
    10: re.compile(r"^[0-9]+$"),
    16: re.compile(r"^[0-9a-f]+$", re.IGNORECASE),
    8: re.compile(r"^[0-7]+$"),
}


def assert_url(url: str, unsafe: bool = False, localhost: bool = False) -> None:
    """
    Reject URLs that point at forbidden destinations.

    Args:
        url: Absolute URL to check
        unsafe: Skip every check except the scheme and octet syntax checks
        localhost: Allow ``localhost`` and loopback addresses

    Raises:
        UnsafeUrlError: If the scheme or destination is not allowed
        InvalidUrlError: If an http(s) URL cannot be parsed or has no host
    """
    _check_raw_octets(url)

    try:
        parsed = urlsplit(url.strip())
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {e}", url=url) from e

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        logger.debug(f"Rejected scheme {scheme!r} for {url}")
        raise UnsafeUrlError(f"Blocked URL scheme: {scheme or '(none)'}", url=url)

    if not hostname:
        raise InvalidUrlError("Invalid URL: missing hostname", url=url)

    if unsafe:
        return

    hostname = hostname.lower()

    if hostname.rstrip(".") == "localhost":
        if not localhost:
            raise UnsafeUrlError(f"Blocked hostname: {hostname}", url=url)
        return

    if ":" in hostname:
        _check_ipv6(_compress_ipv6(hostname), url, localhost)
        return

    address = _normalize_ipv4(hostname, url)
    if address is None:
        return

    _check_ipv4(address, url, localhost)


def assert_metadata(values: Mapping[str, Any]) -> None:
    """
    Reject header values containing characters outside the safe range.

    Every character must be printable Latin-1: code points 32-126 and
    128-255 are accepted.

    Raises:
        InvalidMetadataError: On the first offending character
    """
    for name, value in values.items():
        for char in str(value):
            code = ord(char)
            if code < 32 or code == 127 or code > 255:
                logger.debug(f"Rejected header {name!r}: character code {code}")
                raise InvalidMetadataError(
                    f"Invalid character in header {name}", header=name, code=code
                )


def is_safe_url(url: str, unsafe: bool = False, localhost: bool = False) -> bool:
    """Boolean form of :func:`assert_url`."""
    try:
        assert_url(url, unsafe, localhost)
    except (UnsafeUrlError, InvalidUrlError):
        return False
    return True


def _check_raw_octets(url: str) -> None:
    """Reject zero-padded or out-of-range dotted quads before any parsing."""
    matched = _RAW_HOST.match(url.strip())
    if not matched or not _DOTTED_QUAD.match(matched.group(1)):
        return

    octets = matched.group(1).split(".")
    if any(len(octet) > 1 and octet.startswith("0") for octet in octets):
        raise UnsafeUrlError(f"Ambiguous IPv4 address: {matched.group(1)}", url=url)
    if any(int(octet) > 255 for octet in octets):
        raise UnsafeUrlError(f"Invalid IPv4 address: {matched.group(1)}", url=url)


def _compress_ipv6(hostname: str) -> str:
    try:
        return ipaddress.IPv6Address(hostname).compressed
    except ValueError:
        return hostname


def _check_ipv6(hostname: str, url: str, localhost: bool) -> None:
    if hostname in LOOPBACK_IPV6:
        if not localhost:
            raise UnsafeUrlError(f"Blocked IPv6 address: [{hostname}]", url=url)
        return

    if hostname.startswith(BLOCKED_IPV6_PREFIXES):
        raise UnsafeUrlError(f"Blocked IPv6 address: [{hostname}]", url=url)


def _parse_ipv4_part(part: str) -> Optional[int]:
    radix = 10
    if part[:2].lower() == "0x":
        part, radix = part[2:], 16
    elif len(part) > 1 and part.startswith("0"):
        part, radix = part[1:], 8

    if not part:
        return 0
    if not _DIGITS[radix].match(part):
        return None
    return int(part, radix)


def _normalize_ipv4(hostname: str, url: str) -> Optional[str]:
    """
    Convert any numeric IPv4 host form to a dotted quad.

    Follows the browser URL parser: ``2130706433``, ``0x7f.1`` and
    ``127.1`` all name 127.0.0.1. Returns None for DNS names.
    """
    parts = hostname.split(".")
    if len(parts) > 1 and parts[-1] == "":
        parts.pop()
    if not 1 <= len(parts) <= 4 or "" in parts:
        return None

    numbers = [_parse_ipv4_part(part) for part in parts]
    if any(number is None for number in numbers):
        return None

    *head, last = numbers
    if any(number > 255 for number in head) or last >= 256 ** (5 - len(numbers)):
        raise UnsafeUrlError(f"Invalid IPv4 address: {hostname}", url=url)

    value = last
    for index, number in enumerate(head):
        value += number * 256 ** (3 - index)
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def _check_ipv4(address: str, url: str, localhost: bool) -> None:
    first, second = (int(octet) for octet in address.split(".")[:2])

    if first == LOOPBACK_FIRST_OCTET:
        if not localhost:
            raise UnsafeUrlError(f"Blocked loopback address: {address}", url=url)
        return

    for name, (expected_first, second_range) in PRIVATE_IPV4_RANGES.items():
        if first != expected_first:
            continue
        if second_range is None or second_range[0] <= second <= second_range[1]:
            logger.debug(f"Rejected {address} ({name}) for {url}")
            raise UnsafeUrlError(f"Blocked private address: {address}", url=url)


__all__ = [
    "ALLOWED_SCHEMES",
    "assert_url",
    "assert_metadata",
    "is_safe_url",
]
