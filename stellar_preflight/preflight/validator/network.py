"""Network connectivity validation -- lightweight endpoint reachability probes."""

from __future__ import annotations

import asyncio
import logging
import socket
import ssl

import httpx
from pydantic import BaseModel, ConfigDict

from preflight.validator.models import ValidationIssue, ValidationResult, build_result, create_issue

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
USER_AGENT = "StellarSuite-PreFlight/1.0"


class NetworkEndpoint(BaseModel):
    """One endpoint to probe."""

    model_config = ConfigDict(frozen=True)

    url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    label: str | None = None


def _iter_causes(exc: BaseException):
    """Walk an exception, its causes/contexts and any grouped sub-exceptions."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(getattr(current, "exceptions", ()) or ())
        if current.__cause__ is not None:
            stack.append(current.__cause__)
        if current.__context__ is not None:
            stack.append(current.__context__)


def _classify(exc: BaseException, url: str, host: str) -> tuple[str, str]:
    """Map a transport failure onto an issue code and a tailored suggestion."""
    causes = list(_iter_causes(exc))

    def has(kind: type[BaseException]) -> bool:
        return any(isinstance(c, kind) for c in causes)

    text = " ".join(str(c) for c in causes).lower()

    if has(httpx.TimeoutException) or has(asyncio.TimeoutError) or "timed out" in text:
        return (
            "NETWORK_TIMEOUT",
            "Verify the endpoint is running and reachable. Increase timeout if on a slow network.",
        )
    if has(ConnectionRefusedError) or "refused" in text:
        return (
            "CONNECTION_REFUSED",
            f'The endpoint at "{url}" is refusing connections. Verify it is running.',
        )
    if (
        has(socket.gaierror)
        or "name or service not known" in text
        or "nodename nor servname" in text
        or "name resolution" in text
        or "getaddrinfo" in text
    ):
        return (
            "DNS_RESOLUTION_FAILED",
            f'DNS resolution failed for "{host}". Check the URL and your DNS settings.',
        )
    if has(ConnectionResetError) or "connection reset" in text:
        return (
            "CONNECTION_RESET",
            "The connection was reset. This may be transient, retry in a moment.",
        )
    if has(ssl.SSLError) or "certificate verify" in text or "[ssl" in text:
        return (
            "TLS_ERROR",
            "TLS/certificate error. Verify the endpoint certificate or use http for local testing.",
        )
    return "NETWORK_ERROR", "Check your network connection and try again."


def _parse_url(url: str) -> httpx.URL | None:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return None
    if parsed.scheme not in ("http", "https") or not parsed.host:
        return None
    return parsed


async def check_endpoint(
    url: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    label: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    log: logging.Logger | None = None,
) -> ValidationIssue | None:
    """Probe one endpoint with a HEAD request.

    Any HTTP response, including 4xx/5xx, means the endpoint is reachable;
    only transport-level failures are reported. Returns None on success.
    """
    log = log or logger
    display = label or url

    parsed = _parse_url(url)
    if parsed is None:
        return create_issue(
            "INVALID_URL",
            f'Invalid URL: "{url}"',
            field="url",
            received_value=url,
            suggestion="Provide a valid http(s) URL.",
        )

    log.debug("Testing connectivity to %s...", display)
    timeout_s = timeout_ms / 1000

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT})

    try:
        resp = await asyncio.wait_for(
            client.head(parsed, timeout=httpx.Timeout(timeout_s), follow_redirects=False),
            timeout=timeout_s,
        )
    except (httpx.TransportError, asyncio.TimeoutError, OSError) as e:
        reason = str(e) or type(e).__name__
        code, suggestion = _classify(e, url, parsed.host)
        if code == "NETWORK_TIMEOUT":
            message = f'Connection to "{display}" timed out after {timeout_ms}ms.'
        else:
            message = f'Failed to connect to "{display}": {reason}'
        log.warning("%s unreachable (%s): %s", display, code, reason)
        return create_issue(
            code,
            message,
            field="url",
            received_value=url,
            suggestion=suggestion,
        )
    finally:
        if owns_client:
            await client.aclose()

    log.debug("%s responded with status %d", display, resp.status_code)
    return None


async def validate_network_connectivity(
    endpoint: NetworkEndpoint,
    *,
    client: httpx.AsyncClient | None = None,
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Check connectivity to a single endpoint."""
    issue = await check_endpoint(
        endpoint.url, endpoint.timeout_ms, endpoint.label, client=client, log=log,
    )
    return build_result([issue] if issue else [])


async def check_endpoints(
    endpoints: list[NetworkEndpoint],
    *,
    client: httpx.AsyncClient | None = None,
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Probe every endpoint concurrently; only failures end up in the result."""
    log = log or logger
    if not endpoints:
        return build_result([])

    log.debug("Checking %d endpoint(s)...", len(endpoints))

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT})
    try:
        outcomes = await asyncio.gather(*(
            check_endpoint(ep.url, ep.timeout_ms, ep.label, client=client, log=log)
            for ep in endpoints
        ))
    finally:
        if owns_client:
            await client.aclose()

    result = build_result([issue for issue in outcomes if issue is not None])
    if result.valid:
        log.debug("All endpoints reachable")
    else:
        log.warning("%d endpoint(s) unreachable", len(result.errors))
    return result
