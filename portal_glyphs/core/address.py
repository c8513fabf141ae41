"""
Portal Addresses
================

The one address grammar shared by the HTTP route, the service and the front-end:
sixteen uppercase hexadecimal characters.
"""

import re

from .errors import InvalidAddressError

ADDRESS_LENGTH = 16
ADDRESS_REGEX = "[0-9A-F]{%d}" % ADDRESS_LENGTH

_ADDRESS_PATTERN = re.compile(ADDRESS_REGEX)


def is_valid_address(address: object) -> bool:
    return isinstance(address, str) and _ADDRESS_PATTERN.fullmatch(address) is not None


def validate_address(address: object) -> str:
    """
    Validate a portal address.

    Args:
        address: Candidate address

    Returns:
        The address unchanged

    Raises:
        InvalidAddressError: If it is not exactly 16 characters of ``0-9A-F``
    """
    if not is_valid_address(address):
        raise InvalidAddressError(
            f"Address must be {ADDRESS_LENGTH} characters of 0-9A-F, got {address!r}"
        )
    return address  # type: ignore[return-value]
