from devcamper.repositories.bootcamp_repo import BootcampRepository, SqlBootcampRepository, get_bootcamp_repository

__all__ = [
    "BootcampRepository",
    "SqlBootcampRepository",
    "get_bootcamp_repository",
]
