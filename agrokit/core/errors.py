from fastapi import HTTPException, status


class BadRequest(HTTPException):
    def __init__(self, detail: str = "Faltan datos"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Conflict(HTTPException):
    # el cliente original responde 400 a un usuario duplicado, se mantiene
    def __init__(self, detail: str = "Usuario ya existe"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Credenciales inválidas"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Token inválido"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ServerError(HTTPException):
    def __init__(self, detail: str = "Error servidor"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
