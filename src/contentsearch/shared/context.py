"""Request context for multi-tenant isolation."""

from contextvars import ContextVar
from dataclasses import dataclass
from uuid import UUID

from contentsearch.config import DEFAULT_ORGANIZATION_ID
from contentsearch.shared.exceptions import TenantContextError


@dataclass(frozen=True)
class TenantContext:
    """Context for the current request's tenant (organization)."""

    organization_id: UUID
    user_id: UUID | None = None


# Context variable to hold tenant info for current request
_tenant_context: ContextVar[TenantContext | None] = ContextVar(
    "tenant_context", default=None
)


def set_tenant_context(ctx: TenantContext) -> None:
    """Set the tenant context for the current request."""
    _tenant_context.set(ctx)


def get_tenant_context() -> TenantContext:
    """Get the tenant context for the current request.

    Raises:
        TenantContextError: If no tenant context is set.
    """
    ctx = _tenant_context.get()
    if ctx is None:
        raise TenantContextError("No tenant context available for the search index.")
    return ctx


def get_optional_tenant_context() -> TenantContext | None:
    """Get the tenant context if available, None otherwise."""
    return _tenant_context.get()


def clear_tenant_context() -> None:
    """Clear the tenant context."""
    _tenant_context.set(None)


def resolve_organization_id(
    organization_id: UUID | None = None,
    *,
    single_tenant_mode: bool = False,
) -> UUID:
    """Pick the tenant for an operation.

    An explicit organization_id wins, then the request context. In
    single-tenant mode the default organization is used as a last resort.

    Raises:
        TenantContextError: No tenant could be determined.
    """
    if organization_id is not None:
        return organization_id
    ctx = get_optional_tenant_context()
    if ctx is not None:
        return ctx.organization_id
    if single_tenant_mode:
        return DEFAULT_ORGANIZATION_ID
    return get_tenant_context().organization_id
