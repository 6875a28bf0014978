import base64


def base64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("utf-8")


def base64_decode(b64: str, encoding: str = "utf-8") -> str:
    return base64.b64decode(b64).decode(encoding)


def encode_basic_credentials(username: str, password: str) -> str:
    """
    Encode a username/password pair the way the Basic scheme expects.

    Args:
        username: Account identifier
        password: Secret for the account

    Returns:
        base64 of "<username>:<password>" (without the "Basic " prefix)
    """
    return base64_encode(f"{username}:{password}")
