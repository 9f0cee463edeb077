from fastapi import APIRouter, Depends

from hris.db import users_collection
from hris.exceptions import ValidationError, get_unknown_entity_exception
from hris.models.base import now_iso
from hris.models.users import public_user
from hris.schemas.auth import ChangePassword, ProfileUpdate
from hris.utils.app_utils import Identity, get_current_user, hash_password, verify_password

router = APIRouter()


def _get_own_user(identity: Identity) -> dict:
    user = users_collection.find_one({"id": identity.id})
    if not user:
        raise get_unknown_entity_exception("User")
    return user


@router.get("/me")
async def get_profile(identity: Identity = Depends(get_current_user)):
    return public_user(_get_own_user(identity))


@router.put("/me")
async def update_profile(profile: ProfileUpdate, identity: Identity = Depends(get_current_user)):
    """
    Update the caller's own profile.
    Only name, phone, address and avatar can be changed here; role, department
    and manager are managed through the employees endpoints.
    """
    _get_own_user(identity)

    changes = profile.model_dump(exclude_unset=True, by_alias=True)
    changes["updatedAt"] = now_iso()
    user = users_collection.update_one({"id": identity.id}, changes)

    return public_user(user)


@router.post("/change-password")
async def change_password(passwords: ChangePassword, identity: Identity = Depends(get_current_user)):
    user = _get_own_user(identity)

    if not verify_password(passwords.current_password, user.get("password")):
        raise ValidationError(detail="Current password is incorrect")

    users_collection.update_one(
        {"id": identity.id},
        {"password": hash_password(passwords.new_password), "updatedAt": now_iso()},
    )

    return {"message": "Password updated successfully"}


@router.post("/toggle-2fa")
async def toggle_two_factor(identity: Identity = Depends(get_current_user)):
    user = _get_own_user(identity)

    user = users_collection.update_one(
        {"id": identity.id},
        {"twoFactorEnabled": not user.get("twoFactorEnabled", False)},
    )

    return {"twoFactorEnabled": user["twoFactorEnabled"]}
