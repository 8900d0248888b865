"""Services — the domain operations behind each route.

Invariants:
    - Services never raise for expected domain outcomes; they return None/False
    - Services never import from api/ (routes depend on services, not the reverse)
"""
