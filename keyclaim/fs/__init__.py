"""File based implementation of KeyStore"""

from keyclaim.fs.file_key_store import FileKeyStore

__all__ = ["FileKeyStore"]
