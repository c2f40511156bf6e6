"""Google Cloud Storage path resolution.

Validates ``gs://`` strings, caches one filesystem handle per bucket and
produces ``GcsPath`` objects that delegate I/O to a request handler.

Example:
    >>> from bucketpath.core.gcs import GcsPathBuilder, validate_gcs_path
    >>> validate_gcs_path("gs://my-bucket/some/object.txt")
    ValidFullGcsPath(kind='valid_full', bucket='my-bucket', path='/some/object.txt')
"""

from bucketpath.core.gcs.auth import (
    ApplicationDefaultMode,
    GoogleAuthMode,
    ServiceAccountFileMode,
    UserServiceAccountMode,
    auth_mode_from_config,
)
from bucketpath.core.gcs.bucket import GcsRequestHandler, StorageRequestHandler, to_request_handler
from bucketpath.core.gcs.builder import (
    GcsPathBuilder,
    from_auth_mode,
    from_config,
    from_credentials,
)
from bucketpath.core.gcs.cache import GcsFileSystemCache
from bucketpath.core.gcs.client import BlobId, gcs_storage_client
from bucketpath.core.gcs.errors import (
    FileSystemConstructionError,
    InvalidGcsPathError,
    NotCloudStoragePathError,
    PathBuildError,
    PathBuildErrorKind,
    RelativePathNotSupportedError,
)
from bucketpath.core.gcs.filesystem import (
    URI_SCHEME,
    CloudStoragePath,
    FileSystemFactory,
    GcsBucketFileSystem,
    create_bucket_filesystem,
    is_gcs_path,
)
from bucketpath.core.gcs.path import GcsPath
from bucketpath.core.gcs.result import PathBuildResult
from bucketpath.core.gcs.validation import (
    POSSIBLY_VALID_RELATIVE,
    GcsPathValidation,
    InvalidFullGcsPath,
    InvalidGcsPath,
    InvalidScheme,
    PossiblyValidRelativeGcsPath,
    UnparseableGcsPath,
    ValidFullGcsPath,
    validate_gcs_path,
)

__all__ = [
    # Validation
    "validate_gcs_path",
    "GcsPathValidation",
    "ValidFullGcsPath",
    "PossiblyValidRelativeGcsPath",
    "POSSIBLY_VALID_RELATIVE",
    "InvalidGcsPath",
    "InvalidScheme",
    "InvalidFullGcsPath",
    "UnparseableGcsPath",
    # Builder and paths
    "GcsPathBuilder",
    "GcsPath",
    "PathBuildResult",
    "BlobId",
    "from_credentials",
    "from_auth_mode",
    "from_config",
    "gcs_storage_client",
    # Filesystem
    "URI_SCHEME",
    "CloudStoragePath",
    "GcsBucketFileSystem",
    "GcsFileSystemCache",
    "FileSystemFactory",
    "create_bucket_filesystem",
    "is_gcs_path",
    # Access policy
    "GcsRequestHandler",
    "StorageRequestHandler",
    "to_request_handler",
    # Auth
    "GoogleAuthMode",
    "ApplicationDefaultMode",
    "ServiceAccountFileMode",
    "UserServiceAccountMode",
    "auth_mode_from_config",
    # Errors
    "PathBuildError",
    "PathBuildErrorKind",
    "InvalidGcsPathError",
    "RelativePathNotSupportedError",
    "FileSystemConstructionError",
    "NotCloudStoragePathError",
]
