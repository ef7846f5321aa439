"""ProviderHub - provider configuration service.

Manages credentials and lifecycle state for pluggable external providers
(backup storage, calendar, invoicing, notification channels) with secret
masking, test-before-save and cached status summaries.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
