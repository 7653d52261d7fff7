"""Exception types used throughout nomad-tramp.

Every error raised on the resolve-and-exec path derives from
:class:`NomadTrampError` and carries the exit code the CLI reports. The
split between transport, parse and not-found failures is kept strict: an
unreachable API is never reported as a missing allocation.
"""


class NomadTrampError(Exception):
    """Common base for all nomad-tramp errors."""

    exit_code = 1


class TransportError(NomadTrampError):
    """Raised when the Nomad API is unreachable, times out or returns non-2xx."""


class ParseError(NomadTrampError):
    """Raised when the Nomad API returns malformed JSON or an unexpected shape."""


class NotFoundError(NomadTrampError):
    """Raised when no allocation (or task) matches an address."""


class ExecLaunchError(NomadTrampError):
    """Raised when the nomad binary is missing or fails to start."""


class AddressError(NomadTrampError):
    """Raised when an address cannot be parsed."""


class RegistrationError(NomadTrampError):
    """Raised when a method name is registered twice."""
