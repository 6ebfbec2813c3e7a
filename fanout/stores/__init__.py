from .filesystem_store import FilesystemStore as FilesystemStore
from .object_store import ObjectStore as ObjectStore
from .s3_store import S3Store as S3Store
