"""
Configuration for rest_api.

Settings are merged over ``DEFAULT_SETTINGS``, validated, then sanitized into
a frozen ``ApiSettings``.
"""
import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError, InsecureSchemeError
from .options import deep_merge
from .types import AuthorizationStrategy

logger = logging.getLogger(__name__)

HeadersInput = Union[Mapping[str, str], Callable[[], Mapping[str, str]]]

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class DefaultOptions:
    """Options applied to every call unless overridden."""

    method: str = "GET"
    headers: HeadersInput = field(
        default_factory=lambda: {"Content-Type": DEFAULT_CONTENT_TYPE}
    )


@dataclass(frozen=True)
class ApiSettings:
    """Sanitized settings for an Api instance."""

    root: str
    stage: Optional[str] = None
    prefix: Optional[str] = None
    version: Optional[str] = None
    verbose: bool = False
    secure_only: bool = True
    authorization_strategy: AuthorizationStrategy = AuthorizationStrategy.NONE
    default_options: DefaultOptions = field(default_factory=DefaultOptions)


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


DEFAULT_TIMEOUT = TimeoutConfig()

DEFAULT_SETTINGS: Dict[str, Any] = {
    "root": None,
    "stage": None,
    "prefix": None,
    "version": None,
    "verbose": False,
    "secure_only": True,
    "authorization_strategy": AuthorizationStrategy.NONE.value,
    "default_options": {
        "method": "GET",
        "headers": {"Content-Type": DEFAULT_CONTENT_TYPE},
    },
}

# Required keys and the kinds they must have
REQUIRED_SCHEMA: Dict[str, Tuple[type, ...]] = {
    "root": (str,),
    "verbose": (bool,),
    "secure_only": (bool,),
    "authorization_strategy": (str,),
    "default_options": (Mapping, DefaultOptions),
}

OPTIONAL_SEGMENTS = ("stage", "prefix", "version")

_KIND_NAMES = {str: "string", bool: "boolean", Mapping: "object", DefaultOptions: "object"}


class DefaultSerializer:
    """Default JSON serializer."""

    def serialize(self, data: Any) -> str:
        """Serialize data to JSON string."""
        return json.dumps(data)

    def deserialize(self, text: str) -> Any:
        """Deserialize JSON string to data."""
        return json.loads(text)


default_serializer = DefaultSerializer()


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return DEFAULT_TIMEOUT
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


def canonical_strategy(name: str) -> str:
    """Capitalize a strategy name: first character upper, the rest lower."""
    return name[:1].upper() + name[1:].lower()


def strip_slashes(segment: Optional[str]) -> Optional[str]:
    """Remove every slash from a path segment."""
    if not segment:
        return segment
    return segment.replace("/", "")


def sanitize_root(root: str, secure_only: bool = True) -> str:
    """
    Ensure the root has a scheme and no trailing slash.

    An explicit non-HTTPS scheme is rejected when ``secure_only`` is set and
    only warned about otherwise. A root without any scheme is given
    ``https://`` whatever ``secure_only`` says.
    """
    parts = root.split("://")

    if len(parts) > 1:
        scheme = parts[0]
        if scheme != "https":
            if secure_only:
                raise InsecureSchemeError(scheme)
            logger.warning(f"API Base URL should use HTTPS for security: {root}")
    else:
        root = f"https://{root}"

    if root.endswith("/"):
        root = root[:-1]

    return root


def _settings_to_dict(settings: Union[Mapping[str, Any], ApiSettings, None]) -> Dict[str, Any]:
    if settings is None:
        return {}
    if isinstance(settings, ApiSettings):
        data = {f.name: getattr(settings, f.name) for f in fields(settings)}
        options = data["default_options"]
        data["default_options"] = {"method": options.method, "headers": options.headers}
        return data
    if not isinstance(settings, Mapping):
        raise ConfigurationError(
            f"settings must be a mapping or ApiSettings, got {type(settings).__name__}"
        )
    return dict(settings)


def validate_settings(settings: Mapping[str, Any]) -> None:
    """
    Verify the required settings exist and have the documented kinds.

    Raises:
        ConfigurationError: naming the first missing, mistyped or unknown key
    """
    unknown = sorted(set(settings) - set(DEFAULT_SETTINGS))
    if unknown:
        raise ConfigurationError(f"Unknown setting: {unknown[0]}", key=unknown[0])

    for key, kinds in REQUIRED_SCHEMA.items():
        value = settings.get(key)
        if value is None or (key == "root" and value == ""):
            raise ConfigurationError(f"{key} is required", key=key)
        if not isinstance(value, kinds):
            raise ConfigurationError(
                f"{key} must be of type {_KIND_NAMES[kinds[0]]}, got {type(value).__name__}",
                key=key,
            )

    for key in OPTIONAL_SEGMENTS:
        value = settings.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(
                f"{key} must be of type string, got {type(value).__name__}", key=key
            )

    strategy = canonical_strategy(settings["authorization_strategy"])
    valid = [s.value for s in AuthorizationStrategy]
    if strategy not in valid:
        raise ConfigurationError(
            f"Invalid authorization_strategy: {settings['authorization_strategy']}. "
            f"Must be one of: {valid}",
            key="authorization_strategy",
        )

    options = settings["default_options"]
    if isinstance(options, Mapping):
        method = options.get("method", "GET")
        headers = options.get("headers", {})
    else:
        method, headers = options.method, options.headers
    if not isinstance(method, str):
        raise ConfigurationError("default_options.method must be of type string", key="default_options")
    if not (isinstance(headers, Mapping) or callable(headers)):
        raise ConfigurationError(
            "default_options.headers must be a mapping or a function returning one",
            key="default_options",
        )


def sanitize_settings(settings: Mapping[str, Any]) -> ApiSettings:
    """Build the frozen ApiSettings from validated raw settings."""
    options = settings["default_options"]
    if isinstance(options, Mapping):
        headers = options.get("headers", {})
        default_options = DefaultOptions(
            method=options.get("method", "GET"),
            headers=dict(headers) if isinstance(headers, Mapping) else headers,
        )
    else:
        default_options = options

    return ApiSettings(
        root=sanitize_root(settings["root"], settings["secure_only"]),
        stage=strip_slashes(settings.get("stage")),
        prefix=strip_slashes(settings.get("prefix")),
        version=strip_slashes(settings.get("version")),
        verbose=settings["verbose"],
        secure_only=settings["secure_only"],
        authorization_strategy=AuthorizationStrategy(
            canonical_strategy(settings["authorization_strategy"])
        ),
        default_options=default_options,
    )


def resolve_settings(
    settings: Union[Mapping[str, Any], ApiSettings, None] = None,
    **overrides: Any,
) -> ApiSettings:
    """Merge settings over the defaults, validate, then sanitize."""
    merged = deep_merge(DEFAULT_SETTINGS, _settings_to_dict(settings))
    merged = deep_merge(merged, overrides)

    validate_settings(merged)
    resolved = sanitize_settings(merged)

    logger.debug(
        f"resolve_settings: root={resolved.root}, stage={resolved.stage}, "
        f"prefix={resolved.prefix}, version={resolved.version}, "
        f"authorization_strategy={resolved.authorization_strategy.value}"
    )
    return resolved
