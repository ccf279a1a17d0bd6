"""Helpers shared by the IPv4 and IPv6 probe code."""

from __future__ import annotations

import errno

from hoptrace.platform import is_not_in_progress_error

_ADDRESS_UNAVAILABLE_CODES = frozenset({errno.EADDRINUSE, errno.EADDRNOTAVAIL})


def process_result(address, error) -> None:
    """Check the outcome of a bind or connect on a non-blocking socket.

    `error` is the exception the operation raised, or None if it succeeded.
    An "in progress" error counts as success. An address in use or not
    available becomes `AddressNotAvailable` for `address`. Any other error
    is raised unchanged.
    """
    if error is None:
        return
    code = getattr(error, "errno", None)
    if code is None:
        raise error
    if not is_not_in_progress_error(code):
        return
    if code in _ADDRESS_UNAVAILABLE_CODES:
        # Imported here to keep the error types next to the socket interface.
        from hoptrace.socket import AddressNotAvailable

        raise AddressNotAvailable(address) from error
    raise error