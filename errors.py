# errors.py
# Error kinds shared by the repositories, the tracker and the app shell.


class MedTrackError(Exception):
    pass


class ValidationError(MedTrackError, ValueError):
    """Bad input to a create/update call. Nothing has been written."""


class NotFound(MedTrackError, LookupError):
    pass


class StorageError(MedTrackError):
    """The key-value store could not read or write a blob."""


class CorruptValueError(StorageError):
    """A stored blob exists but cannot be decrypted."""
