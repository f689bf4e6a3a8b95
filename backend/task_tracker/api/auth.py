# backend/task_tracker/api/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .. import repository
from ..database import get_db
from ..models import Account
from ..schemas.account import Account as AccountSchema, AccountCreate, LoginRequest, Token
from ..security import create_access_token, get_current_account, get_password_hash, verify_password
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AccountSchema, status_code=status.HTTP_201_CREATED)
async def register(payload: AccountCreate, db: Session = Depends(get_db)):
    api_logger.info("Registering account", extra={"email": payload.email})

    if repository.find_account_by_email(db, payload.email):
        api_logger.warning("Email already registered", extra={"email": payload.email})
        raise HTTPException(status_code=409, detail="Email already registered")

    try:
        account = repository.insert_account(db, payload.email, get_password_hash(payload.password))
    except IntegrityError:
        # Lost a race with a concurrent registration of the same address
        db.rollback()
        api_logger.warning("Email already registered", extra={"email": payload.email})
        raise HTTPException(status_code=409, detail="Email already registered")
    except SQLAlchemyError as e:
        db.rollback()
        api_logger.error("Failed to register account", extra={"email": payload.email, "error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to register account")

    api_logger.info("Account registered", extra={"account_id": account.id})
    return account


@router.post("/login", response_model=Token)
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    account = repository.find_account_by_email(db, payload.email)
    if not account or not verify_password(payload.password, account.hashed_password):
        api_logger.warning("Failed login attempt", extra={"email": payload.email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    api_logger.info("Account logged in", extra={"account_id": account.id})
    return Token(access_token=create_access_token({"sub": account.id}))


@router.get("/me", response_model=AccountSchema)
async def me(current_account: Account = Depends(get_current_account)):
    return current_account
