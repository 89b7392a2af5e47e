"""
MovieVault constants.

Grouped by domain; import from this package rather than the submodules.
"""

from .cache import Cache
from .cli import CLIHelp
from .http_codes import HTTPHeaders, HTTPStatusCodes
from .tmdb import ImageKind, RecordAssembly, TMDBConfig, TMDBErrorHandling

__all__ = [
    "CLIHelp",
    "Cache",
    "HTTPHeaders",
    "HTTPStatusCodes",
    "ImageKind",
    "RecordAssembly",
    "TMDBConfig",
    "TMDBErrorHandling",
]
