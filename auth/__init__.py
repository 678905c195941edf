"""auth/ -- Authentication gate for Samunu.

Validation, error taxonomy, the identity service client, the form submission
controller, the registry of forms with a submission in flight, and the
session gate.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or web/.
api/ and web/ import from auth/, not the other way around.
"""
