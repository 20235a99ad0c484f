"""
Domain errors raised by the Products service.

Each error carries the ``code`` reported to GraphQL callers in the error
``extensions`` so clients can tell the outcomes apart.
"""
from typing import List, Dict


class ProductsError(Exception):
    """Base class for expected failures of a products operation."""
    code = "INTERNAL_SERVER_ERROR"

    @property
    def extensions(self) -> dict:
        return {"code": self.code}


class ProductNotFoundError(ProductsError):
    """Raised when an update or removal targets a product that does not exist."""
    code = "NOT_FOUND"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")

    @property
    def extensions(self) -> dict:
        return {"code": self.code, "id": str(self.product_id)}


class UnauthorizedError(ProductsError):
    """Raised when a mutation arrives without a valid admin key."""
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Invalid or missing admin key"):
        super().__init__(message)


class ValidationFailure(ProductsError):
    """
    Raised when input fails validation before the store is touched.

    Attributes:
        errors: One ``{"field", "message"}`` entry per offending field
    """
    code = "BAD_USER_INPUT"

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(f"Invalid product input: {fields}")

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationFailure":
        """Build from a pydantic ``ValidationError`` keeping field-level detail."""
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors(include_url=False, include_context=False, include_input=False)
        ]
        return cls(errors)

    @property
    def extensions(self) -> dict:
        return {"code": self.code, "errors": self.errors}
