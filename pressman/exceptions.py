"""Pressman exceptions."""

from typing import Any


ERROR_MESSAGES = {
    "CATALOG_NOT_FOUND": "No catalog configured for this product",
    "INVALID_CATALOG": "Invalid catalog configuration",
    "INVALID_SELECTION_DATA": "Malformed selection data",
    "INCOMPATIBLE_SELECTION": "Selection is incompatible with the catalog",
    "PRECONDITION_VIOLATED": "Calculator called on an unvalidated selection",
    "CATALOG_CORRUPTED": "Catalog has no rate for a legal selection",
    "OVERRIDE_NOT_PERMITTED": "Not allowed to override the unit price",
}


class PricingError(Exception):
    """
    Structured exception for pricing operations.

    Usage:
        try:
            options = resolve(catalog, selection)
        except PricingError as e:
            if e.code == "INCOMPATIBLE_SELECTION":
                print(f"{e.data['field']} is not allowed")
    """

    def __init__(self, code: str, message: str = "", **data: Any) -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    @property
    def product_id(self) -> str | None:
        return self.data.get("product_id")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "data": self.data,
        }


class IncompatibleSelection(PricingError):
    """
    A supplied value contradicts what its parent level allows.

    Recoverable: the caller re-prompts with ``suggestions``.
    """

    def __init__(
        self,
        field: str,
        value: Any,
        parent_field: str | None = None,
        parent_value: Any = None,
        suggestions: list | None = None,
        message: str = "",
    ) -> None:
        if not message:
            if parent_field is None:
                message = f"{field} {value!r} is not offered by this catalog"
            else:
                message = f"{field} {value!r} is not allowed for {parent_field} {parent_value!r}"
        super().__init__(
            "INCOMPATIBLE_SELECTION",
            message,
            field=field,
            value=value,
            parent_field=parent_field,
            parent_value=parent_value,
            suggestions=list(suggestions or []),
        )

    @property
    def field(self) -> str:
        return self.data["field"]

    @property
    def parent_field(self) -> str | None:
        return self.data["parent_field"]

    @property
    def parent_value(self) -> Any:
        return self.data["parent_value"]


class PreconditionViolated(PricingError):
    """Calculator invoked on an incomplete or invalid selection (caller bug)."""

    def __init__(self, message: str = "", **data: Any) -> None:
        super().__init__("PRECONDITION_VIOLATED", message, **data)


class CatalogCorrupted(PricingError):
    """A selection passed the cascade but the catalog has no rate for it."""

    def __init__(self, message: str = "", **data: Any) -> None:
        super().__init__("CATALOG_CORRUPTED", message, **data)
