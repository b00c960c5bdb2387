"""
Adapter base package.

Provider-agnostic contracts shared by every adapter: the canonical model,
error taxonomy, cancellation, logging, request validation, streaming
machinery and the ``BaseAdapter`` lifecycle. Import concrete names from the
facade modules (``base.models``, ``base.errors``, ``base.adapter``, ...);
this package module stays import-light so ``relay_providers.catalog`` can
depend on it without cycles.
"""
