"""Fatal bootstrap errors. Each one aborts the run with exit status 1."""


class BootstrapError(Exception):
    """Base class for errors that stop the server from being launched"""


class ConfigurationError(BootstrapError):
    """Required configuration is missing or malformed"""


class TokenRefreshError(BootstrapError):
    """The OAuth refresh could not produce a new access token"""


class DownloaderNotFoundError(BootstrapError):
    """Neither hytale-downloader binary exists in the server directory"""


class DownloadError(BootstrapError):
    """The downloader did not produce the server archive"""


class MissingArtifactError(BootstrapError):
    """HytaleServer.jar is still missing after the download step"""
