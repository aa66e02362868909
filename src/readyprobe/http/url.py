# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers for building and sanity-checking probe candidates."""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable
from urllib.parse import urlparse


def is_http_url(value: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(str(value or ""))
        _ = parsed.port
    except ValueError:
        # Out-of-range ports surface here.
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


def parse_port_mapping(mapping: str) -> list[int]:
    """
    Parse a ``HOST:CONTAINER`` publish mapping (or a bare port) into ports to probe.

    ``"3000:8080"`` -> ``[3000, 8080]``; the host-side port comes first since that
    is the one reachable from outside the container.
    """
    ports: list[int] = []
    for part in str(mapping or "").split(":"):
        part = part.strip()
        if not part:
            continue
        try:
            port = int(part)
        except ValueError as exc:
            raise ValueError(f"invalid port in mapping {mapping!r}: {part!r}") from exc
        if not 0 < port < 65536:
            raise ValueError(f"port out of range in mapping {mapping!r}: {port}")
        if port not in ports:
            ports.append(port)
    return ports


def build_port_candidates(host: str, ports: Iterable[int], path: str = "/", *, scheme: str = "http") -> list[str]:
    """
    Build ordered, de-duplicated candidate URLs for ``host`` on each port.

    Example:
      build_port_candidates("127.0.0.1", [3000, 8080])
        -> ["http://127.0.0.1:3000/", "http://127.0.0.1:8080/"]
    """
    raw_host = str(host or "127.0.0.1").strip()
    if ":" in raw_host and not raw_host.startswith("["):
        raw_host = f"[{raw_host}]"
    raw_path = str(path or "/")
    if not raw_path.startswith("/"):
        raw_path = f"/{raw_path}"

    candidates: list[str] = []
    for port in ports:
        url = f"{scheme}://{raw_host}:{int(port)}{raw_path}"
        if url not in candidates:
            candidates.append(url)
    return candidates


def _is_loopback(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def host_advisories(url: str) -> list[str]:
    """
    Return operator hints about hosts a containerized client may fail to reach.

    Loopback addresses resolve to the container itself, and mDNS ``.local`` names
    are often not resolvable from inside a container.
    """
    host = (urlparse(str(url or "")).hostname or "").lower()
    if not host:
        return []
    if _is_loopback(host):
        return [
            f"{host} is a loopback address; it will not be reachable from inside a container. "
            "Bind the service to 0.0.0.0 and use the LAN IP instead."
        ]
    if host.endswith(".local"):
        return [f"{host} is an mDNS name; some containers cannot resolve .local hostnames. Prefer the numeric LAN IP."]
    return []


__all__ = ["build_port_candidates", "host_advisories", "is_http_url", "parse_port_mapping"]
