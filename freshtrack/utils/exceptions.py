from fastapi import HTTPException, status


class FreshTrackError(Exception):
    """Erreur de base du moteur de suivi"""


class ProductValidationError(FreshTrackError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageError(FreshTrackError):
    """Échec d'une écriture (I/O, contrainte) ; la transaction est annulée"""


class ProductNotFoundException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )


class CategoryNotFoundException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )
