from fastapi import APIRouter

from hygieneresto.core.deps import CurrentUser
from hygieneresto.schemas.user import UserOut

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", summary="Current user", description="Full profile of the caller.")
async def get_me(current_user: CurrentUser) -> UserOut:
    return UserOut.model_validate(current_user)
