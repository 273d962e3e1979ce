from typing import List, Optional, Protocol

from fastapi import Depends
from sqlmodel import Session, select

from devcamper.database import get_session
from devcamper.models.bootcamp import Bootcamp
from devcamper.utils.geo import angular_distance, bounding_box


class BootcampRepository(Protocol):
    """Storage operations the bootcamp routes depend on."""

    def find_by_id(self, bootcamp_id: int) -> Optional[Bootcamp]: ...

    def find_one_by_user(self, user_id: int) -> Optional[Bootcamp]: ...

    def create(self, fields: dict) -> Bootcamp: ...

    def update(self, bootcamp_id: int, fields: dict) -> Optional[Bootcamp]: ...

    def delete(self, bootcamp: Bootcamp) -> None: ...

    def find_within_radius(self, longitude: float, latitude: float, radius: float) -> List[Bootcamp]: ...


class SqlBootcampRepository:
    """BootcampRepository over a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, bootcamp_id: int) -> Optional[Bootcamp]:
        return self.session.get(Bootcamp, bootcamp_id)

    def find_one_by_user(self, user_id: int) -> Optional[Bootcamp]:
        return self.session.exec(select(Bootcamp).where(Bootcamp.user_id == user_id)).first()

    def create(self, fields: dict) -> Bootcamp:
        bootcamp = Bootcamp(**fields)
        self.session.add(bootcamp)
        self._commit()
        self.session.refresh(bootcamp)
        return bootcamp

    def update(self, bootcamp_id: int, fields: dict) -> Optional[Bootcamp]:
        bootcamp = self.session.get(Bootcamp, bootcamp_id)
        if not bootcamp:
            return None
        for field, value in fields.items():
            setattr(bootcamp, field, value)
        self.session.add(bootcamp)
        self._commit()
        self.session.refresh(bootcamp)
        return bootcamp

    def delete(self, bootcamp: Bootcamp) -> None:
        self.session.delete(bootcamp)
        self._commit()

    def find_within_radius(self, longitude: float, latitude: float, radius: float) -> List[Bootcamp]:
        """Bootcamps whose location lies within ``radius`` radians of the point."""
        min_lat, max_lat, min_lng, max_lng = bounding_box(longitude, latitude, radius)

        # Bounding-box prefilter in SQL, exact spherical test below
        statement = select(Bootcamp).where(
            Bootcamp.latitude.is_not(None),
            Bootcamp.longitude.is_not(None),
            Bootcamp.latitude >= min_lat,
            Bootcamp.latitude <= max_lat,
        )
        if min_lng is not None:
            statement = statement.where(Bootcamp.longitude >= min_lng, Bootcamp.longitude <= max_lng)

        candidates = self.session.exec(statement).all()
        return [
            b for b in candidates if angular_distance(longitude, latitude, b.longitude, b.latitude) <= radius
        ]

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise


def get_bootcamp_repository(session: Session = Depends(get_session)) -> BootcampRepository:
    return SqlBootcampRepository(session)
