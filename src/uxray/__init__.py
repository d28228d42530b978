"""UXRay - static accessibility auditor for component markup."""

__version__ = "0.3.0"
