"""Exceptions raised by the packaging engine."""


class PackagingError(Exception):
    """Base class for packaging failures."""


class ChangeDetectionError(PackagingError):
    """Baseline could not be fetched or diffed. Fatal for the run."""


class ArchiveError(PackagingError):
    """Archive for a single skill could not be created."""


class ReleaseError(PackagingError):
    """Release for a single group could not be created."""
