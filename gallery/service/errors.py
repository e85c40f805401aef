"""
Import failure taxonomy.

Every error below is caught at the per-URL boundary of the pipeline and
recorded as that URL's result message.
"""


class MediaImportError(Exception):
    """Base class for per-URL import failures"""

    default_message = 'Import failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class InvalidUrl(MediaImportError):
    default_message = 'Invalid URL'


class DomainNotAllowed(MediaImportError):
    default_message = 'Domain is not allowed'


class PrimaryAcquireFailed(MediaImportError):
    """Soft failure: the bulk downloader failed, the fallback is tried next"""

    default_message = 'Downloader failed'


class FallbackFetchFailed(MediaImportError):
    default_message = 'Fallback fetch failed'


class NoMediaFound(MediaImportError):
    default_message = 'No media found on page'


class MediaTooLarge(MediaImportError):
    default_message = 'Media exceeds the size limit'


class NoFilesDownloaded(MediaImportError):
    default_message = 'No files downloaded'


class NoValidMediaFound(MediaImportError):
    """Files were acquired but none survived classification, conversion or size checks"""

    default_message = 'No valid media found'


class UnexpectedError(MediaImportError):
    default_message = 'Unexpected error'
