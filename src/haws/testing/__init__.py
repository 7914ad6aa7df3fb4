"""Test utilities for haws applications.

::

    from haws.testing import TestClient
"""

from haws.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
]
