from . import car_schemas, customer_schemas, token_schemas, user_schemas
