from sqlalchemy.orm import Session
from typing import Optional
from collabspace.models import User

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()

def create_user(db: Session, user_id: str, email: Optional[str], display_name: str, state: str = "inactive") -> User:
    """
    Create a new user.

    Args:
        db: Database session
        user_id: User ID (Firebase UID)
        email: User email, if the identity provider supplied one
        display_name: User display name
        state: User activation state

    Returns:
        Created User object
    """
    db_user = User(
        id=user_id,
        email=email,
        display_name=display_name,
        state=state
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user_display_name(db: Session, user_id: str, display_name: str) -> Optional[User]:
    """Update a user's display name."""
    db_user = get_user(db, user_id)
    if db_user and db_user.display_name != display_name:
        db_user.display_name = display_name
        db.commit()
        db.refresh(db_user)
    return db_user
