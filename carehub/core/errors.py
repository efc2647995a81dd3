"""
Errores de dominio. Son HTTPException para que los servicios puedan
levantarlos directo (como hacen los routers) y FastAPI los serialice.
"""
from fastapi import HTTPException, status


class Forbidden(HTTPException):
    def __init__(self, detail: str = "forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationFailed(HTTPException):
    """Un campo del formulario no cumple; `field` indica cuál resaltar."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": field, "message": message},
        )


class StoreUnavailable(HTTPException):
    def __init__(self, detail: str = "store unavailable, try again later"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class RendererUnavailable(HTTPException):
    def __init__(self, detail: str = "document renderer unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class ImmutableRecordError(RuntimeError):
    """Se intentó modificar o borrar una receta ya emitida."""
