"""
Verbose request/response output for rest_api, rendered with rich.
"""
import json
from typing import Any, Dict, Mapping, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .types import RequestOptions

# Global console instance
console = Console()

SENSITIVE_HEADERS = ("authorization", "x-api-key")


def mask_auth_header(value: Optional[str], show_chars: int = 15) -> str:
    """Mask an auth header value, keeping the first characters visible."""
    if not value:
        return "<none>"
    if len(value) <= show_chars:
        return "*" * len(value)
    return value[:show_chars] + "***"


def mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of headers with authorization values masked."""
    masked = dict(headers)
    for key in masked:
        if key.lower() in SENSITIVE_HEADERS:
            masked[key] = mask_auth_header(masked[key])
    return masked


def format_body(body: Any) -> str:
    """Format body for pretty printing."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    if isinstance(body, bytes):
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    return str(body)


def print_debug(*args: Any) -> None:
    console.print("[dim][DEBUG:rest_api][/dim]", *args)


def print_request(url: str, options: RequestOptions) -> None:
    """Print the outgoing request with masked credentials."""
    console.print(
        Panel(f"[bold cyan]{options.method}[/bold cyan] {url}", title="[bold blue]Request[/bold blue]")
    )
    console.print("[bold]Headers:[/bold]", mask_headers(options.headers))
    if options.extra:
        console.print("[bold]Options:[/bold]", options.extra)
    if options.body is not None:
        console.print(
            Panel(
                Syntax(format_body(options.body), "json", theme="monokai"),
                title="[bold]Request Body[/bold]",
            )
        )


def print_response(url: str, response: Any) -> None:
    """Print status and headers of a response (any object with ``status``)."""
    status = getattr(response, "status", None)
    ok = bool(getattr(response, "ok", False))
    status_color = "green" if ok else "red"
    status_text = getattr(response, "status_text", "") or ""
    console.print(
        Panel(
            f"[bold {status_color}]{status}[/bold {status_color}] {status_text}",
            title=f"[bold blue]Response[/bold blue] ({url})",
        )
    )
    headers = getattr(response, "headers", None)
    if isinstance(headers, Mapping):
        console.print("[bold]Headers:[/bold]", dict(headers))
