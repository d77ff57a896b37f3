from fastapi import Depends, HTTPException, Request, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth
from typing import Optional
from sqlalchemy.orm import Session
from collabspace.database import get_db
from collabspace import crud, schemas
from collabspace.utils.logger import get_logger, set_user_context

logger = get_logger(__name__)


def _verify_bearer_token(db: Session, token: str):
    """
    Verify a Firebase ID token and return the matching user row,
    creating it on first sight.
    """
    decoded_token = auth.verify_id_token(token)

    user_id = decoded_token.get("uid")
    email = decoded_token.get("email")
    display_name = decoded_token.get("name")

    db_user = crud.get_user(db, user_id)
    if db_user:
        if display_name:
            db_user = crud.update_user_display_name(db, user_id, display_name)
    else:
        db_user = crud.create_user(db, user_id, email, display_name or "", state="active")
        logger.info(f"Created user {user_id} from verified token")
    return db_user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Verify Firebase ID token and resolve the calling user.
    Falls back to X-User-ID header for already-known users if no bearer token is provided.

    Args:
        request: The incoming request; the resolved user id is stored on request.state.
        credentials: The HTTP Authorization credentials.
        x_user_id: Optional X-User-ID header value.
        db: The database session.

    Returns:
        CurrentUser: id, email and display name of the caller

    Raises:
        HTTPException: 401 if both token and X-User-ID are invalid or missing
    """
    if credentials is None and x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Either Bearer authentication or X-User-ID header is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        if credentials:
            try:
                db_user = _verify_bearer_token(db, credentials.credentials)
            except Exception as firebase_error:
                logger.warning(f"Bearer token rejected: {firebase_error}")
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid token",
                    headers={"WWW-Authenticate": "Bearer"},
                )
        else:
            db_user = crud.get_user(db, x_user_id)
            if not db_user:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid X-User-ID",
                )

        # Consumed by the rate limiter key function and by log lines
        request.state.user_id = db_user.id
        set_user_context(db_user.id)

        return schemas.CurrentUser(
            id=db_user.id,
            email=db_user.email,
            display_name=db_user.display_name,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Authentication failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
