"""Fedora GLF post-install provisioning runner.

Core design goals:
- Sequential, single run per invocation
- Explicit step criticality (fatal vs recoverable)
- Idempotent configuration mutations
- Host facts detected once and passed down
- Centralized, run-scoped logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
