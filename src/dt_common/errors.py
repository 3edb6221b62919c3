"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Debt
  9xxx: System

Every concrete error belongs to one of four families (Conflict, Unauthorized,
BadRequest, NotFound) that fix its HTTP status. Several debt messages are in
Spanish; clients match on them verbatim.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ConflictError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class UnauthorizedError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 401)


class BadRequestError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


# --- 1xxx: Auth/User ---

class EmailExistsError(ConflictError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already exists")


class InvalidEmailError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid email")


class InvalidPasswordError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid password")


class InvalidTokenError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(1004, "Invalid or expired token")


# --- 2xxx: Debt ---

class InvalidDebtAmountError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(2001, "El valor de la deuda debe ser mayor a 0")


class PaidDebtImmutableError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(2002, "No se puede modificar una deuda pagada")


class DebtAlreadyPaidError(BadRequestError):
    def __init__(self) -> None:
        super().__init__(2003, "Ya está pagada")


class UnsupportedExportFormatError(BadRequestError):
    def __init__(self, fmt: str) -> None:
        super().__init__(2004, f"Unsupported export format: {fmt}")


class DebtNotFoundError(NotFoundError):
    """Raised for missing debts AND for debts owned by someone else."""

    def __init__(self) -> None:
        super().__init__(2005, "Deuda no encontrada")


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
