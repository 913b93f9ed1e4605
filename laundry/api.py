from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import ErrorKind, LaundryServiceError
from .logging_utils import configure_root_logger
from .models import (
    CreateCustomerRequest,
    CustomerBalance,
    CustomerResponse,
    LaundryBalance,
    Transaction,
    TransactionRequest,
    TransactionResponse,
    UpdateBalanceRequest,
)
from .service import LaundryService

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.INSUFFICIENT_BALANCE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_AMOUNT: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def create_app(service: Optional[LaundryService] = None) -> FastAPI:
    settings = get_settings()
    configure_root_logger(settings.log_level)

    app = FastAPI(
        title="Laundry Ledger API",
        description="Customers, prepaid balances and laundry orders from drop-off to pick-up",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.laundry_service = service or LaundryService(settings=settings)

    @app.exception_handler(LaundryServiceError)
    async def handle_service_error(request: Request, exc: LaundryServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=ERROR_STATUS[exc.kind],
            content={"detail": exc.message, "kind": exc.kind.value},
        )

    def laundry_service() -> LaundryService:
        return app.state.laundry_service

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "laundry-ledger", "environment": settings.environment}

    @app.post("/customers", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED, tags=["Customers"])
    def create_customer(request: CreateCustomerRequest) -> CustomerResponse:
        return laundry_service().create_customer(request)

    @app.get("/customers/{name:path}/balance", response_model=CustomerBalance, tags=["Customers"])
    def get_customer_balance(name: str) -> CustomerBalance:
        return laundry_service().get_customer_balance(name)

    @app.post("/customers/{name:path}/balance", response_model=CustomerResponse, tags=["Customers"])
    def update_balance(name: str, request: UpdateBalanceRequest) -> CustomerResponse:
        return laundry_service().update_balance(name, request)

    @app.get("/transactions", response_model=list[Transaction], tags=["Transactions"])
    def list_transactions() -> list[Transaction]:
        return laundry_service().list_transactions()

    @app.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED, tags=["Transactions"])
    def create_transaction(request: TransactionRequest) -> TransactionResponse:
        return laundry_service().create_transaction(request)

    @app.get("/transactions/{transaction_id}", response_model=Transaction, tags=["Transactions"])
    def get_transaction(transaction_id: str) -> Transaction:
        return laundry_service().get_transaction(transaction_id)

    @app.put("/transactions/{transaction_id}", response_model=TransactionResponse, tags=["Transactions"])
    def update_transaction(transaction_id: str, request: TransactionRequest) -> TransactionResponse:
        return laundry_service().update_transaction(transaction_id, request)

    @app.post("/transactions/{transaction_id}/carry-on", response_model=TransactionResponse, tags=["Transactions"])
    def carry_on_transaction(transaction_id: str) -> TransactionResponse:
        return laundry_service().carry_on_transaction(transaction_id)

    @app.post("/transactions/{transaction_id}/finish-working", response_model=TransactionResponse, tags=["Transactions"])
    def finish_working_transaction(transaction_id: str) -> TransactionResponse:
        return laundry_service().finish_working_transaction(transaction_id)

    @app.post("/transactions/{transaction_id}/finish", response_model=TransactionResponse, tags=["Transactions"])
    def finish_transaction(transaction_id: str) -> TransactionResponse:
        return laundry_service().finish_transaction(transaction_id)

    @app.post("/transactions/{transaction_id}/cancel", response_model=TransactionResponse, tags=["Transactions"])
    def cancel_transaction(transaction_id: str) -> TransactionResponse:
        return laundry_service().cancel_transaction(transaction_id)

    @app.get("/laundry/balance", response_model=LaundryBalance, tags=["Laundry"])
    def get_laundry_balance() -> LaundryBalance:
        return laundry_service().get_laundry_balance()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
