"""Exceptions raised by the artist-manager services and workflows."""


class ArtistManagerError(RuntimeError):
    """Base class for errors that the HTTP boundary turns into responses."""

    status_code = 500


class NotFound(ArtistManagerError):
    """The requested entity does not exist."""

    status_code = 404


class Conflict(ArtistManagerError):
    """A uniqueness rule or a self-action rule was violated."""

    status_code = 409


class Forbidden(ArtistManagerError):
    """The actor's role does not permit this action."""

    status_code = 403


class EmailNotVerified(Forbidden):
    """The account exists but its email address has not been verified."""


class Unauthorized(ArtistManagerError):
    """No acceptable credential was presented."""

    status_code = 401


class InvalidCredentials(Unauthorized):
    """Email or password is wrong. Deliberately does not say which."""


class InvalidCredential(Unauthorized):
    """The session token is malformed, tampered with, or expired."""


class MissingCredential(Unauthorized):
    """No session token was supplied with the request."""

    status_code = 403


class ValidationFailed(ArtistManagerError):
    """Input was rejected before reaching storage."""

    status_code = 400


class ServiceUnavailable(ArtistManagerError):
    """A dependency (database, mail) could not be reached."""

    status_code = 503


class InternalError(ArtistManagerError):
    """Unclassified failure."""


class ConfigurationError(InternalError):
    """The process is missing required configuration or setup."""


class InvalidToken(ValueError):
    """A session token could not be decoded or its claims are unusable."""
