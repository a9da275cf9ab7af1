from .context import (
    Principal,
    SecurityContext,
    authorities_of,
    clear_principal,
    configure_session,
    store_principal,
)

__all__ = [
    'Principal',
    'SecurityContext',
    'authorities_of',
    'clear_principal',
    'configure_session',
    'store_principal',
]
