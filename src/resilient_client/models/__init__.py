"""
Shared data models for the resilient client.

Includes:
- Enums (ErrorKind)
- Multipart form parts (MultiPartNameValuePair)
"""

from resilient_client.models.enums import ErrorKind
from resilient_client.models.multipart import MultiPartNameValuePair

__all__ = [
    "ErrorKind",
    "MultiPartNameValuePair",
]
