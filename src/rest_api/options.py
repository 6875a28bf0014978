"""
Option merging for rest_api.

Per-call overrides are layered over the instance defaults without touching
either input, so a call can never leak headers into the next one.
"""
import logging
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .resolvable import resolve_value
from .types import RequestOptions

logger = logging.getLogger(__name__)

OptionsInput = Union[Mapping[str, Any], RequestOptions, None]


def deep_merge(target: Optional[Mapping[str, Any]], source: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries recursively.

    Args:
        target: The base dictionary to merge into
        source: The dictionary with override values

    Returns:
        A new merged dictionary

    Example:
        >>> deep_merge({"headers": {"Accept": "a", "X-One": "1"}}, {"headers": {"Accept": "b"}})
        {'headers': {'Accept': 'b', 'X-One': '1'}}
    """
    result: Dict[str, Any] = dict(target or {})

    for key, source_value in (source or {}).items():
        # None in source never overrides
        if source_value is None:
            continue

        target_value = result.get(key)

        if isinstance(source_value, Mapping) and isinstance(target_value, Mapping):
            result[key] = deep_merge(target_value, source_value)
        elif isinstance(source_value, Mapping):
            result[key] = deep_merge({}, source_value)
        else:
            result[key] = source_value

    return result


def options_to_dict(options: OptionsInput) -> Dict[str, Any]:
    """Flatten options (mapping or dataclass) into a plain dict; extra keys are inlined."""
    if options is None:
        return {}
    if is_dataclass(options):
        data = {f.name: getattr(options, f.name) for f in fields(options)}
        extra = data.pop("extra", None) or {}
        return {**extra, **data}
    return dict(options)


def _resolve_headers(headers: Any) -> Dict[str, str]:
    """Headers may be a mapping or a zero-argument provider of one."""
    value = resolve_value(headers)
    if value is None:
        return {}
    return dict(value)


def merge_options(defaults: OptionsInput, overrides: OptionsInput = None) -> RequestOptions:
    """
    Combine instance defaults with per-call overrides into a new RequestOptions.

    Headers are merged key by key with the override winning; method and body
    are replaced when the override carries them. Any other keys end up in
    ``extra`` and are forwarded to the transport.
    """
    base = options_to_dict(defaults)
    override = options_to_dict(overrides)

    headers = _resolve_headers(base.pop("headers", None))
    headers.update(_resolve_headers(override.pop("headers", None)))

    method = override.pop("method", None) or base.pop("method", None) or "GET"
    base.pop("method", None)

    body = override.pop("body", None)
    if body is None:
        body = base.pop("body", None)
    base.pop("body", None)

    extra = deep_merge(base, override)

    merged = RequestOptions(
        method=str(method).upper(),
        headers=headers,
        body=body,
        extra=extra,
    )
    logger.debug(
        f"merge_options: method={merged.method}, header_keys={sorted(headers)}, "
        f"has_body={body is not None}, extra_keys={sorted(extra)}"
    )
    return merged
