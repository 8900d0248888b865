"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter; main.py mounts them under api_prefix
    - Routes never contain business logic (delegate to services)
"""
