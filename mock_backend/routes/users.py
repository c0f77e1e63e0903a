"""Account API routes for the mock backend"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Depends

from ..models.user import User, UserLookup, UpdateUserRequest
from ..database.users import user_db, DuplicateUserError
from ..security.auth import require_api_token, require_user

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserLookup])
async def find_users(
    email: Optional[str] = Query(None, description="Case-insensitive email match"),
    _: None = Depends(require_api_token),
):
    """Search accounts by email"""
    if email is None:
        users = list(user_db.users.values())
    else:
        user = user_db.find_by_email(email)
        users = [user] if user else []
    return [UserLookup(document_id=u.document_id, email=u.email) for u in users]


@router.get("/me", response_model=User)
async def get_me(user: User = Depends(require_user)):
    """Account behind the presented user token"""
    return user


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: int,
    request: UpdateUserRequest,
    _: None = Depends(require_api_token),
):
    """Change an account's username"""
    user = user_db.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        return user_db.update_username(user, request.username)
    except DuplicateUserError as e:
        raise HTTPException(status_code=400, detail=str(e))
