"""
FastAPI REST API Module

Thin HTTP surface over one LedgerEngine so a demo UI can list accounts,
submit transfers and read the transaction and notification history.
Runs on port 8090 by default.
"""

from typing import List, Optional
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from . import __version__
from .config import get_config
from .engine import LedgerEngine
from .formatting import limits_hint
from .logging_config import setup_logging
from .validation import TransferValidationError
from .schemas import (
    AccountResponse, LimitsResponse, NotificationResponse, TransactionResponse,
    TransferRequest, ValidationResponse
)


def get_engine(request: Request) -> LedgerEngine:
    """Dependency returning the engine owned by this app"""
    return request.app.state.engine


def create_app(engine: Optional[LedgerEngine] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Fund Transfer Simulator API",
        description="Mock fund transfers over an in-memory ledger",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.engine = engine or LedgerEngine()

    # Demo UI may be served from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "fund_transfer_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Fund Transfer Simulator API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts",
                "limits": "/limits",
                "transfers": "/transfers",
                "transactions": "/transactions",
                "notifications": "/notifications",
            }
        }

    @app.get("/accounts", response_model=List[AccountResponse])
    def list_accounts(engine: LedgerEngine = Depends(get_engine)):
        """List the user's accounts with current balances"""
        return [AccountResponse.from_snapshot(a) for a in engine.accounts]

    @app.get("/accounts/{account_id}", response_model=AccountResponse)
    def get_account(account_id: str, engine: LedgerEngine = Depends(get_engine)):
        account = engine.get_account(account_id)
        if account is None:
            raise HTTPException(status_code=404, detail="Account not found")
        return AccountResponse.from_snapshot(account)

    @app.get("/limits", response_model=LimitsResponse)
    def get_limits(engine: LedgerEngine = Depends(get_engine)):
        """Transfer limits and accepted external accounts"""
        return LimitsResponse(
            min_amount=str(engine.min_amount),
            max_amount=str(engine.max_amount),
            hint=limits_hint(engine.min_amount, engine.max_amount),
            valid_external_accounts=engine.valid_external_accounts,
            user_email=engine.user_email
        )

    @app.post("/transfers/validate", response_model=ValidationResponse)
    def validate_transfer(request: TransferRequest, engine: LedgerEngine = Depends(get_engine)):
        """Check a transfer without applying it"""
        result = engine.validate_transfer(
            request.source_id, request.dest_type, request.dest_id,
            request.external_account_number, request.amount
        )
        return ValidationResponse.from_result(result)

    @app.post("/transfers", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
    def create_transfer(request: TransferRequest, engine: LedgerEngine = Depends(get_engine)):
        """Validate and apply a transfer"""
        try:
            transaction = engine.transfer(
                request.source_id, request.dest_type, request.dest_id,
                request.external_account_number, request.amount
            )
        except TransferValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return TransactionResponse.from_transaction(transaction)

    @app.get("/transactions", response_model=List[TransactionResponse])
    def list_transactions(engine: LedgerEngine = Depends(get_engine)):
        """Transaction history, most recent first"""
        return [TransactionResponse.from_transaction(t) for t in engine.transactions]

    @app.get("/transactions/{transaction_id}", response_model=TransactionResponse)
    def get_transaction(transaction_id: str, engine: LedgerEngine = Depends(get_engine)):
        transaction = engine.get_transaction(transaction_id)
        if transaction is None:
            raise HTTPException(status_code=404, detail="Transaction not found")
        return TransactionResponse.from_transaction(transaction)

    @app.get("/notifications", response_model=List[NotificationResponse])
    def list_notifications(
        transaction_id: Optional[str] = None,
        engine: LedgerEngine = Depends(get_engine)
    ):
        """Email inbox, most recent first, optionally for one transaction"""
        if transaction_id is not None:
            notifications = engine.notifications_for(transaction_id)
        else:
            notifications = engine.notifications
        return [NotificationResponse.from_notification(n) for n in notifications]

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the API server with uvicorn"""
    config = get_config()
    setup_logging(
        level="DEBUG" if debug else config.log_level,
        format_type=config.log_format,
        log_file=config.log_file
    )
    uvicorn.run(
        create_app(),
        host=host or config.api_host,
        port=port or config.api_port,
        log_level="debug" if debug else "info"
    )
