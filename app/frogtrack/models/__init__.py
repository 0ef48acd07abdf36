from frogtrack.models.models import Certification

__all__ = [
    "Certification",
]
