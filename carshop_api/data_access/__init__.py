# Makes it easier to import the repositories from other modules.

from .user_repository import user_repo
from .car_repository import CarRepository, crud_cars, RecordNotFoundError, RecordConstraintError
