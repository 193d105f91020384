from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from services.auth_service.dependencies import get_current_session
from services.auth_service.service import SessionContext
from .schemas import (
    BalanceChangeResponse,
    LedgerEntryResponse,
    MoneyMovement,
    ReconciliationResponse,
    TransactionResponse,
    TransactionSummary,
    TransactionType,
    WalletCreate,
    WalletResponse,
)
from .service import WalletService

router = APIRouter(
    prefix="/wallets",
    tags=["Wallets"],
    dependencies=[Depends(get_current_session)],
)
transactions_router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
    dependencies=[Depends(get_current_session)],
)


@router.post("/", response_model=WalletResponse, status_code=status.HTTP_201_CREATED)
async def create_wallet(payload: WalletCreate, db: AsyncSession = Depends(get_db)):
    return await WalletService.create_wallet(db, payload.owner_email)

@router.get("/", response_model=list[WalletResponse])
async def list_wallets(db: AsyncSession = Depends(get_db)):
    return await WalletService.list_wallets(db)

@router.get("/me", response_model=WalletResponse)
async def get_my_wallet(
    current: SessionContext = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    return await WalletService.get_wallet_for_owner(db, current.email)

@router.get("/{wallet_id}", response_model=WalletResponse)
async def get_wallet(wallet_id: int, db: AsyncSession = Depends(get_db)):
    return await WalletService.get_wallet(db, wallet_id)

@router.post("/{wallet_id}/deposit", response_model=BalanceChangeResponse)
async def deposit(wallet_id: int, payload: MoneyMovement, db: AsyncSession = Depends(get_db)):
    return await WalletService.deposit(
        db, wallet_id, payload.amount, payload.reference, payload.description
    )

@router.post("/{wallet_id}/withdraw", response_model=BalanceChangeResponse)
async def withdraw(wallet_id: int, payload: MoneyMovement, db: AsyncSession = Depends(get_db)):
    return await WalletService.withdraw(
        db, wallet_id, payload.amount, payload.reference, payload.description
    )

@router.get("/{wallet_id}/transactions", response_model=list[TransactionResponse])
async def wallet_transactions(wallet_id: int, db: AsyncSession = Depends(get_db)):
    return await WalletService.get_transactions(db, wallet_id)

@router.get("/{wallet_id}/summary", response_model=TransactionSummary)
async def wallet_summary(wallet_id: int, db: AsyncSession = Depends(get_db)):
    return await WalletService.transaction_summary(db, wallet_id)

@router.get("/{wallet_id}/reconciliation", response_model=ReconciliationResponse)
async def reconcile_wallet(wallet_id: int, db: AsyncSession = Depends(get_db)):
    return await WalletService.reconcile(db, wallet_id)


# --- Admin-wide transaction log ---

@transactions_router.get("/", response_model=list[LedgerEntryResponse])
async def list_transactions(
    type: Optional[TransactionType] = Query(default=None),
    wallet_id: Optional[int] = Query(default=None),
    search: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, gt=0, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    return await WalletService.get_all_transactions(
        db, type=type, wallet_id=wallet_id, search=search, limit=limit, offset=offset
    )

@transactions_router.get("/summary", response_model=TransactionSummary)
async def transactions_summary(db: AsyncSession = Depends(get_db)):
    return await WalletService.transaction_summary(db)
