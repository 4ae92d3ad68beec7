"""
Storage module.

Persists the student collection to a local JSON file.
"""

from .store import NAMESPACE_KEY, JsonStudentStore, decode_students, encode_students

__all__ = ["NAMESPACE_KEY", "JsonStudentStore", "decode_students", "encode_students"]
