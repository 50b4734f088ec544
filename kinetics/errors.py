"""
errors.py
Exception taxonomy for the analysis engine and its storage collaborator.

Only InputTooLarge (and a missing/empty input) ever reaches the caller of the
pipeline. The rest are raised inside a component and handled by the layer
above it, which degrades instead of failing.
"""


class KineticsError(Exception):
    """Base class for all engine errors."""


class InputTooLarge(KineticsError):
    """Upload exceeds the size ceiling; rejected before sampling starts."""

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        limit_gb = limit_bytes / (1024 ** 3)
        super().__init__(f"File too large. Max size is {limit_gb:g}GB.")


class MediaUnreadable(KineticsError):
    """Video could not be opened or decoded at all."""


class FrameSampleTimeout(KineticsError):
    """Seek/decode stalled past the watchdog deadline."""


class PersistenceQuotaExceeded(KineticsError):
    """Embedded media payload does not fit the storage budget."""


class DuplicateIdentity(KineticsError):
    """Username already registered."""
