from typing import Annotated, Any, Callable, List, Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from carshop_api import models, schemas
from carshop_api.api import dependencies
from carshop_api.services.car_service import (
    CarNotFoundError,
    CarService,
    CarServiceError,
    CarValidationError,
    parse_include,
    validation_issues,
)

# Literal code: the Starlette constant name differs between versions.
HTTP_422 = 422


class CarIssuesRoute(APIRoute):
    """
    Reports request parsing failures (bad JSON, non-object body, bad path params)
    as the same issue list the car validation produces.
    """

    def get_route_handler(self) -> Callable:
        route_handler = super().get_route_handler()

        async def issues_route_handler(request: Request) -> Response:
            try:
                return await route_handler(request)
            except RequestValidationError as exc:
                errors = []
                for error in exc.errors():
                    loc = tuple(error["loc"])
                    errors.append({**error, "loc": loc[1:] if loc[:1] == ("body",) else loc})
                return JSONResponse(status_code=HTTP_422, content=validation_issues(errors))

        return issues_route_handler


router = APIRouter(route_class=CarIssuesRoute)

CarServiceDep = Annotated[CarService, Depends(dependencies.get_car_service)]
CurrentUserDep = Annotated[models.User, Depends(dependencies.get_current_active_user)]


def _unprocessable(exc: CarValidationError) -> JSONResponse:
    return JSONResponse(status_code=HTTP_422, content=exc.issues)


@router.post("/", status_code=status.HTTP_201_CREATED, response_class=Response)
async def create_car(
    payload: Annotated[dict[str, Any], Body()],
    service: CarServiceDep,
    current_user: CurrentUserDep,
):
    """
    Create a new car.
    The creator and updater are always the authenticated user.
    """
    try:
        await service.create(payload, caller_id=current_user.id)
    except CarValidationError as exc:
        return _unprocessable(exc)
    except CarServiceError:
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get(
    "/",
    response_model=List[schemas.car_schemas.CarDetail],
    response_model_exclude_unset=True,
)
async def get_cars(
    service: CarServiceDep,
    current_user: CurrentUserDep,
    include: Optional[str] = None,
):
    """List every car ordered by brand, model and id. `include` takes customer,created_user,updated_user."""
    try:
        return await service.retrieve_all(parse_include(include))
    except CarServiceError:
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get(
    "/{car_id}",
    response_model=schemas.car_schemas.CarDetail,
    response_model_exclude_unset=True,
)
async def get_car(
    car_id: int,
    service: CarServiceDep,
    current_user: CurrentUserDep,
    include: Optional[str] = None,
):
    """Get a car by ID."""
    try:
        return await service.retrieve_one(car_id, parse_include(include))
    except CarNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except CarServiceError:
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.put("/{car_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_car(
    car_id: int,
    payload: Annotated[dict[str, Any], Body()],
    service: CarServiceDep,
    current_user: CurrentUserDep,
):
    """Replace all fields of a car."""
    try:
        await service.update(car_id, payload, caller_id=current_user.id)
    except CarValidationError as exc:
        return _unprocessable(exc)
    except CarNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except CarServiceError:
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_car(
    car_id: int,
    service: CarServiceDep,
    current_user: CurrentUserDep,
):
    """Delete a car."""
    try:
        await service.delete(car_id)
    except CarNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except CarServiceError:
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
