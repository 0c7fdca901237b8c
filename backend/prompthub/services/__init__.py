"""
Services Layer

Pure business logic services that:
- Accept domain inputs (IDs, sessions, identities)
- Return domain outputs (models, dicts, decisions)
- Do NOT depend on HTTP request/response objects
- Raise ApiError subclasses for expected failures
"""
