"""
Services Layer

Clients for external collaborators (geocoding). They:
- Accept plain inputs (query strings, settings)
- Return plain outputs (dataclasses)
- Do NOT depend on HTTP request/response objects
"""
