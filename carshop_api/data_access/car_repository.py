from typing import Iterable, Optional

from fastcrud import FastCRUD
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from carshop_api.models import Car
from carshop_api.schemas.car_schemas import CarCreateRecord, CarUpdateRecord, CarRead

# Relations a caller may ask to have attached to a car.
CAR_RELATIONS = ("customer", "created_user", "updated_user")

CRUDCar = FastCRUD[Car, CarCreateRecord, CarUpdateRecord, CarUpdateRecord, CarUpdateRecord, CarRead]
crud_cars = CRUDCar(Car)


class RecordNotFoundError(Exception):
    """No car row matched the given id."""
    def __init__(self, car_id: int):
        self.car_id = car_id
        super().__init__(f"Car with id {car_id} does not exist")

class RecordConstraintError(Exception):
    """The store rejected the row, e.g. a dangling customer reference."""
    pass


class CarRepository:
    """
    Persistence for cars, bound to one session.
    Writes go through FastCRUD; reads use plain selects so relations can be eager loaded.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _load_options(self, include: Iterable[str]) -> list:
        return [selectinload(getattr(Car, name)) for name in CAR_RELATIONS if name in include]

    async def create(self, record: CarCreateRecord) -> Car:
        try:
            return await crud_cars.create(db=self.db, object=record)
        except IntegrityError as exc:
            await self.db.rollback()
            raise RecordConstraintError(str(exc.orig)) from exc

    async def find_many(self, include: Iterable[str] = ()) -> list[Car]:
        stmt = (
            select(Car)
            .options(*self._load_options(include))
            .order_by(Car.brand.asc(), Car.model.asc(), Car.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_unique(self, car_id: int, include: Iterable[str] = ()) -> Optional[Car]:
        stmt = select(Car).where(Car.id == car_id).options(*self._load_options(include))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, car_id: int, record: CarUpdateRecord) -> None:
        if not await crud_cars.exists(db=self.db, id=car_id):
            raise RecordNotFoundError(car_id)
        try:
            await crud_cars.update(db=self.db, object=record.model_dump(), id=car_id)
        except NoResultFound as exc:
            raise RecordNotFoundError(car_id) from exc
        except IntegrityError as exc:
            await self.db.rollback()
            raise RecordConstraintError(str(exc.orig)) from exc

    async def delete(self, car_id: int) -> None:
        if not await crud_cars.exists(db=self.db, id=car_id):
            raise RecordNotFoundError(car_id)
        try:
            await crud_cars.delete(db=self.db, id=car_id)
        except NoResultFound as exc:
            raise RecordNotFoundError(car_id) from exc
