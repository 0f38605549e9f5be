"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every catalog resource and the auth flow
use (DB wiring, settings, logging, error envelopes, file storage, mail, and
the generic list/slug/delete helpers). Keep resource-specific SQL and
validation in the corresponding feature package (e.g. `products/`).
"""
