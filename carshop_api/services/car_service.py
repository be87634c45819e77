import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from carshop_api.data_access.car_repository import (
    CAR_RELATIONS,
    CarRepository,
    RecordNotFoundError,
)
from carshop_api.models import Car
from carshop_api.schemas.car_schemas import (
    CarCreateRecord,
    CarDetail,
    CarInput,
    CarRead,
    CarUpdateRecord,
)
from carshop_api.schemas.customer_schemas import CustomerRead
from carshop_api.schemas.user_schemas import UserReadSchema

logger = logging.getLogger(__name__)

# Keys the client may send but never gets to decide.
SERVER_CONTROLLED_FIELDS = ("id", "created_user_id", "updated_user_id")

_RELATION_SCHEMAS = {
    "customer": CustomerRead,
    "created_user": UserReadSchema,
    "updated_user": UserReadSchema,
}


class CarValidationError(Exception):
    def __init__(self, issues: list[dict[str, Any]]):
        self.issues = issues
        super().__init__(f"{len(issues)} invalid field(s)")

class CarNotFoundError(Exception):
    def __init__(self, car_id: int):
        self.car_id = car_id
        super().__init__(f"Car {car_id} not found")

class CarServiceError(Exception):
    pass


def parse_include(raw: Optional[str]) -> frozenset[str]:
    """Turns the ``include`` query parameter ("customer,created_user") into a set of names."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())

def coerce_selling_date(value: Any) -> Any:
    """
    Parses a textual selling date into a date.
    Text that is not an ISO date or datetime is returned untouched so validation reports it.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()

def validation_issues(errors: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flattens pydantic errors into ``{"code", "path", "message"}`` issues."""
    return [
        {"code": error["type"], "path": list(error["loc"]), "message": error["msg"]}
        for error in errors
    ]


class CarService:
    """
    Validates car payloads and applies them through the repository.

    The caller's identity is passed separately from the payload and is the only
    source of the provenance fields. Any repository failure other than a missing
    record is logged and raised as ``CarServiceError``.
    """

    def __init__(self, repository: CarRepository):
        self.repository = repository

    def _validate(self, payload: Any) -> CarInput:
        if not isinstance(payload, dict):
            issues = [{"code": "dict_type", "path": [], "message": "Input should be a valid dictionary"}]
            logger.info(f"Rejected car payload: {issues}")
            raise CarValidationError(issues)
        data = {key: value for key, value in payload.items() if key not in SERVER_CONTROLLED_FIELDS}
        if data.get("selling_date"):
            data["selling_date"] = coerce_selling_date(data["selling_date"])
        try:
            return CarInput.model_validate(data)
        except ValidationError as exc:
            issues = validation_issues(exc.errors())
            logger.info(f"Rejected car payload: {issues}")
            raise CarValidationError(issues) from exc

    def _to_detail(self, car: Car, include: Iterable[str]) -> CarDetail:
        fields = CarRead.model_validate(car).model_dump()
        for name in CAR_RELATIONS:
            if name in include:
                related = getattr(car, name)
                fields[name] = _RELATION_SCHEMAS[name].model_validate(related) if related is not None else None
        return CarDetail(**fields)

    async def create(self, payload: Any, caller_id: int) -> None:
        car_in = self._validate(payload)
        record = CarCreateRecord(
            **car_in.model_dump(),
            created_user_id=caller_id,
            updated_user_id=caller_id,
        )
        try:
            car = await self.repository.create(record)
        except Exception as exc:
            logger.error(f"Failed to create car: {exc}", exc_info=True)
            raise CarServiceError("Could not create car") from exc
        logger.info(f"Car {getattr(car, 'id', None)} created by user {caller_id}")

    async def retrieve_all(self, include: Iterable[str] = frozenset()) -> list[CarDetail]:
        try:
            cars = await self.repository.find_many(include)
            return [self._to_detail(car, include) for car in cars]
        except Exception as exc:
            logger.error(f"Failed to list cars: {exc}", exc_info=True)
            raise CarServiceError("Could not list cars") from exc

    async def retrieve_one(self, car_id: int, include: Iterable[str] = frozenset()) -> CarDetail:
        try:
            car = await self.repository.find_unique(car_id, include)
            detail = self._to_detail(car, include) if car is not None else None
        except Exception as exc:
            logger.error(f"Failed to fetch car {car_id}: {exc}", exc_info=True)
            raise CarServiceError("Could not fetch car") from exc
        if detail is None:
            raise CarNotFoundError(car_id)
        return detail

    async def update(self, car_id: int, payload: Any, caller_id: int) -> None:
        car_in = self._validate(payload)
        record = CarUpdateRecord(**car_in.model_dump(), updated_user_id=caller_id)
        try:
            await self.repository.update(car_id, record)
        except RecordNotFoundError as exc:
            logger.warning(f"Update of missing car {car_id}")
            raise CarNotFoundError(car_id) from exc
        except Exception as exc:
            logger.error(f"Failed to update car {car_id}: {exc}", exc_info=True)
            raise CarServiceError("Could not update car") from exc
        logger.info(f"Car {car_id} updated by user {caller_id}")

    async def delete(self, car_id: int) -> None:
        try:
            await self.repository.delete(car_id)
        except RecordNotFoundError as exc:
            logger.warning(f"Delete of missing car {car_id}")
            raise CarNotFoundError(car_id) from exc
        except Exception as exc:
            logger.error(f"Failed to delete car {car_id}: {exc}", exc_info=True)
            raise CarServiceError("Could not delete car") from exc
        logger.info(f"Car {car_id} deleted")
