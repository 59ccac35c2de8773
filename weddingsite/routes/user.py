from typing import Optional

from fastapi import APIRouter, Depends

from weddingsite.auth.dependencies import Caller, get_current_caller
from weddingsite.errors import Forbidden, Unauthorized

router = APIRouter()


@router.get("/user/info")
async def get_my_profile(caller: Optional[Caller] = Depends(get_current_caller)) -> Caller:
    if caller is None:
        raise Unauthorized()
    if not caller.has_profile:
        raise Forbidden("User profile not found")
    return caller
