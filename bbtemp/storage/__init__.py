"""Persistence for BBTemp: key-value slots and the entry codec."""

from bbtemp.storage.codec import decode_entries, encode_entries
from bbtemp.storage.kv import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "encode_entries",
    "decode_entries",
]
