"""Function entry/exit tracing, injected by a source transformation pass.

Usage:
    from tracefn_core import trace_fn

    @trace_fn(level="info", skip="password")
    def login(username: str, password: str) -> bool:
        ...

Run `tracefn build` to rewrite marked functions ahead of time, or import the
module as written to have the decorator instrument them at import time.
"""

from tracefn_core.decorator import trace_fn as trace_fn
from tracefn_core.facade import TraceFn as TraceFn
