"""
URL construction for rest_api.
"""
from .config import ApiSettings


def base_url(settings: ApiSettings) -> str:
    """Join root, stage, prefix and version; always ends with a single slash."""
    url = settings.root

    for segment in (settings.stage, settings.prefix, settings.version):
        if segment:
            url += "/" + segment

    return f"{url}/"


def build_url(settings: ApiSettings, path: str) -> str:
    """Build the full request URL for a path relative to the base URL."""
    # base_url already ends with a slash
    if path.startswith("/"):
        path = path[1:]

    return base_url(settings) + path
