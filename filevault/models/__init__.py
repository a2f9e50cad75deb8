from filevault.models.stored_file import FileTag, FileTombstone, StoredFile
from filevault.models.user import User

__all__ = ["FileTag", "FileTombstone", "StoredFile", "User"]
