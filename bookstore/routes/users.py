from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from bookstore.config import settings
from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.schemas.user_schemas import UserLogin, UserRegister, UserResponse
from bookstore.utils.hash import hash_password, verify_password
from bookstore.utils.session import SessionStore, get_current_user, get_session_store

router = APIRouter()


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
    )


def _email_taken(session: Session, email: str) -> bool:
    return session.exec(select(User).where(User.email == email)).first() is not None


@router.post("/register", response_model=UserResponse, status_code=201)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    email = payload.email.lower()
    if _email_taken(session, email):
        raise HTTPException(400, "Email already registered")

    user = User(
        name=payload.name,
        email=email,
        password=hash_password(payload.password)
    )

    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(400, "Email already registered")
    session.refresh(user)

    return _to_response(user)


@router.post("/login", response_model=UserResponse)
def login(
    payload: UserLogin,
    response: Response,
    session: Session = Depends(get_session),
    sessions: SessionStore = Depends(get_session_store)
):
    user = session.exec(select(User).where(User.email == payload.email.lower())).first()

    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(401, "Invalid email or password")

    sid = sessions.create(user.id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sid,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return _to_response(user)


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    sessions: SessionStore = Depends(get_session_store)
):
    sid = request.cookies.get(settings.session_cookie_name)
    if sid:
        sessions.destroy(sid)
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Logout successful"}


# -------- USER PROFILE --------

@router.get("/me", response_model=UserResponse)
def get_my_profile(current_user: User = Depends(get_current_user)):
    return _to_response(current_user)
