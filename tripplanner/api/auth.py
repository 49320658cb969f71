import logging
from datetime import timedelta, datetime, timezone
from typing import Dict

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from jose import JWTError
from pymongo.errors import DuplicateKeyError, PyMongoError

from tripplanner.agents.trip_planner.errors import PersistenceError
from tripplanner.api.deps import get_itinerary_store
from tripplanner.schemas.user_schema import AccountDeleted, UserCreate, UserOut, Token
from tripplanner.utils import security
from tripplanner.utils.config import ACCESS_TOKEN_EXPIRE_MINUTES
from tripplanner.utils.db import get_db
from tripplanner.utils.itinerary_store import ItineraryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def _user_out(user_doc: Dict) -> Dict:
    return {
        "id": str(user_doc["_id"]),
        "username": user_doc["username"],
        "name": user_doc["name"],
        "email": user_doc["email"],
        "created_at": user_doc["created_at"]
    }


async def get_current_user(token: str = Depends(oauth2_scheme)) -> Dict:
    credentials_error = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                      detail="Could not validate credentials",
                                      headers={"WWW-Authenticate": "Bearer"})
    try:
        payload = security.decode_token(token)
        user_id = payload.get("sub")
    except JWTError:
        raise credentials_error
    if not user_id:
        raise credentials_error

    try:
        object_id = ObjectId(user_id)
    except InvalidId:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user ID format")

    user_doc = await get_db().users.find_one({"_id": object_id})
    if not user_doc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return _user_out(user_doc)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate):
    users = get_db().users

    existing = await users.find_one({"$or": [{"email": user.email}, {"username": user.username}]})
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                            detail="User with given email or username already exists")

    doc = {
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "hashed_password": security.hash_password(user.password),
        "created_at": datetime.now(timezone.utc)
    }

    try:
        result = await users.insert_one(doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                            detail="User with given email or username already exists")
    except PyMongoError:
        logger.exception("Registration failed for %s", user.username)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    doc["_id"] = result.inserted_id
    return _user_out(doc)


@router.post("/token", response_model=Token)
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    users = get_db().users
    login_value = form_data.username

    user_doc = await users.find_one({"$or": [{"email": login_value}, {"username": login_value}]})
    if not user_doc or not security.verify_password(form_data.password, user_doc.get("hashed_password", "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Incorrect email/username or password",
                            headers={"WWW-Authenticate": "Bearer"})

    expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = security.create_access_token(
        subject=str(user_doc["_id"]),
        expires_delta=expires_delta,
        username=user_doc["username"],
    )
    return {"access_token": access_token, "token_type": "bearer",
            "expires_in": int(expires_delta.total_seconds())}


@router.get("/me", response_model=UserOut)
async def read_users_me(current_user: Dict = Depends(get_current_user)):
    """Returns the details of the currently authenticated user."""
    return current_user


@router.delete("/me", response_model=AccountDeleted, status_code=status.HTTP_200_OK)
async def delete_user_account(current_user: Dict = Depends(get_current_user),
                              store: ItineraryStore = Depends(get_itinerary_store)):
    """
    Deletes the current user's account together with all of their saved trips.
    """
    user_id = current_user["id"]

    # 1. Saved trips first, so no orphaned itineraries are left behind
    try:
        removed = await store.delete_all_for_user(user_id)
    except PersistenceError as exc:
        logger.error("Failed to delete itineraries for user %s: %s", user_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to delete saved trips; account was not deleted")

    # 2. The user document itself
    result = await get_db().users.delete_one({"_id": ObjectId(user_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found or already deleted")

    logger.info("Deleted user %s and %d saved trips", user_id, removed)
    return {"message": "Account successfully deleted. All associated data has been removed.",
            "deleted_itineraries": removed}
