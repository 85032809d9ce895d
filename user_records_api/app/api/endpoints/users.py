"""
User record endpoints.

Bodies are accepted as raw JSON and validated by ``UserService``
against the active field descriptors, because the record shape is
chosen at start-up.  The path identifier is taken as a string so that
a non-integer value is reported as a validation error (400) rather
than a routing error.  Error responses are produced by the exception
handlers registered in ``main.create_app``.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Request, status

from user_records_api.app.services.user_service import UserService


router = APIRouter()


def get_user_service(request: Request) -> UserService:
    """Return the service instance attached to the running application."""
    return request.app.state.user_service


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_user(
    body: Any = Body(None),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Create a user and return the stored record including its ``id``."""
    return await service.create_user(body)


@router.get("")
@router.get("/", include_in_schema=False)
async def list_users(service: UserService = Depends(get_user_service)) -> List[Dict[str, Any]]:
    """Return every user ordered by ascending ``id``."""
    return await service.list_users()


@router.get("/{user_id}")
async def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    return await service.get_user(user_id)


@router.put("/{user_id}")
async def replace_user(
    user_id: str,
    body: Any = Body(None),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Replace all fields of a user.  Every required field must be supplied."""
    return await service.replace_user(user_id, body)


@router.patch("/{user_id}")
async def patch_user(
    user_id: str,
    body: Any = Body(None),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Update only the supplied fields of a user."""
    return await service.patch_user(user_id, body)


@router.delete("/{user_id}")
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)) -> Dict[str, str]:
    await service.delete_user(user_id)
    return {"message": "User deleted successfully"}
