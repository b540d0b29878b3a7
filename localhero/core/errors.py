"""Domain exceptions shared by services, jobs and the HTTP layer."""


class LocalHeroError(RuntimeError):
    """Base class for expected, caller-facing failures."""


class ValidationError(LocalHeroError):
    """Raised when caller input is rejected before any work is done."""


class NotFoundError(LocalHeroError):
    """Raised when a referenced row does not exist."""


class NotAuthenticatedError(LocalHeroError):
    """Raised when a request carries no usable caller identity."""


class NotAuthorizedError(LocalHeroError):
    """Raised when a user operates on a location they do not own."""


class NoLandmarksError(LocalHeroError):
    """Raised when generation needs landmarks but the cache is empty."""


class CacheReplaceError(LocalHeroError):
    """Raised when the landmark cache could not be swapped after all attempts.

    The previous cache generation is left in place.
    """
