"""Tenant Resolution — derives the board id from prioritized request signals.

Invariants:
    - Signals evaluated in fixed order: route param, query param, x-board-id
      header, configured BOARD_ID, Host pattern, collector URL pattern
    - First non-empty value wins
    - No signal → TenantResolution(None, TenantSource.NONE); never ""
    - Pure function: no IO, no request object, no settings lookup

Design Decisions:
    - TenantSignals is a plain value object built at the API boundary, so
      the resolver is testable without FastAPI
    - Host/URL pattern passed in (TENANT_ID_PATTERN), first capture group is
      the board id
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_TENANT_PATTERN = r"webapi([a-f0-9]{24})"

BOARD_ID_PARAM = "boardId"
BOARD_ID_HEADER = "x-board-id"


class TenantSource(str, Enum):
    """Which signal produced the board id."""
    ROUTE_PARAM = "route_param"
    QUERY_PARAM = "query_param"
    HEADER = "header"
    CONFIG = "config"
    HOST = "host"
    COLLECTOR_URL = "collector_url"
    NONE = "none"


@dataclass(frozen=True)
class TenantSignals:
    """Every input the resolver may consult."""
    route_params: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    configured_board_id: str | None = None
    collector_url: str | None = None


@dataclass(frozen=True)
class TenantResolution:
    tenant_id: str | None
    source: TenantSource

    @property
    def found(self) -> bool:
        return self.tenant_id is not None


def compile_tenant_pattern(pattern: str = DEFAULT_TENANT_PATTERN) -> re.Pattern:
    """Compile a tenant pattern; matching is always case-insensitive."""
    return re.compile(pattern, re.IGNORECASE)


def resolve_tenant(
    signals: TenantSignals,
    pattern: re.Pattern | None = None,
) -> TenantResolution:
    """Return the first non-empty board id, or an explicit absence."""
    tenant_pattern = pattern or compile_tenant_pattern()
    candidates: tuple[tuple[TenantSource, Callable[[], str | None]], ...] = (
        (TenantSource.ROUTE_PARAM,
         lambda: signals.route_params.get(BOARD_ID_PARAM)),
        (TenantSource.QUERY_PARAM,
         lambda: signals.query_params.get(BOARD_ID_PARAM)),
        (TenantSource.HEADER,
         lambda: _header(signals.headers, BOARD_ID_HEADER)),
        (TenantSource.CONFIG,
         lambda: signals.configured_board_id),
        (TenantSource.HOST,
         lambda: _match(tenant_pattern, _header(signals.headers, "host"))),
        (TenantSource.COLLECTOR_URL,
         lambda: _match(tenant_pattern, signals.collector_url)),
    )
    for source, read in candidates:
        value = read()
        if value:
            return TenantResolution(value, source)
    return TenantResolution(None, TenantSource.NONE)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup over any mapping."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def _match(pattern: re.Pattern, text: str | None) -> str | None:
    if not text:
        return None
    found = pattern.search(text)
    if not found:
        return None
    return found.group(1) if pattern.groups else found.group(0)
