"""
Authorization for rest_api.
"""
from .authorizer import (
    Authorizer,
    CustomAuth,
    TokenAuth,
)
from .encoding import (
    base64_decode,
    base64_encode,
    encode_basic_credentials,
)

__all__ = [
    "Authorizer",
    "CustomAuth",
    "TokenAuth",
    "base64_decode",
    "base64_encode",
    "encode_basic_credentials",
]
