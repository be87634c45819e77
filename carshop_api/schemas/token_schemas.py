from pydantic import BaseModel

class TokenSchema(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"

class TokenPayloadSchema(BaseModel):
    sub: str  # Subject - the user id as a string

class LoginRequestSchema(BaseModel):
    username: str
    password: str
