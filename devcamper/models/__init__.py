from devcamper.models.bootcamp import DEFAULT_PHOTO, Bootcamp, Career

__all__ = [
    "Bootcamp",
    "Career",
    "DEFAULT_PHOTO",
]
