"""User profiles stored in the Supabase ``users`` table, keyed by Firebase uid."""
import logging
from typing import Any, Dict, Optional

from livora_api.errors import UserNotFoundError
from livora_api.models import ProfileUpdateRequest, UserMetadata, UserProfile
from livora_api.services.supabase_client import SupabaseRepository
from livora_api.utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Livora user"


class UserRepository(SupabaseRepository):
    TABLE_NAME = "users"

    def get(self, firebase_uid: str) -> Optional[UserProfile]:
        result = self.client.table(self.TABLE_NAME) \
            .select("*") \
            .eq("firebase_uid", firebase_uid) \
            .limit(1) \
            .execute()
        rows = result.data or []
        return UserProfile.model_validate(rows[0]) if rows else None

    def create(self, profile: UserProfile) -> UserProfile:
        record = profile.model_dump(mode="json", exclude={"created_at", "updated_at"})
        result = self.client.table(self.TABLE_NAME).insert(record).execute()
        return UserProfile.model_validate(result.data[0]) if result.data else profile

    def update(self, firebase_uid: str, fields: Dict[str, Any]) -> Optional[UserProfile]:
        fields = {**fields, "updated_at": utcnow().isoformat()}
        result = self.client.table(self.TABLE_NAME) \
            .update(fields) \
            .eq("firebase_uid", firebase_uid) \
            .execute()
        rows = result.data or []
        return UserProfile.model_validate(rows[0]) if rows else None


class UserService:
    """Profile lookups and updates on behalf of an authenticated user."""

    def __init__(self, repository: Optional[UserRepository] = None):
        self.users = repository or UserRepository()

    def get(self, firebase_uid: str) -> Optional[UserProfile]:
        return self.users.get(firebase_uid)

    def get_or_create(self, claims: Dict[str, Any]) -> UserProfile:
        """Return the caller's profile, creating it from token claims on first use."""
        uid = claims["user_id"]
        user = self.users.get(uid)
        if user is None:
            logger.info("Creating profile for user %s", uid)
            user = self.users.create(UserProfile(
                firebase_uid=uid,
                email=claims.get("email") or None,
                display_name=claims.get("name") or DEFAULT_DISPLAY_NAME,
                photo_url=claims.get("picture") or None,
                email_verified=bool(claims.get("email_verified")),
            ))
        now = utcnow()
        updated = self.users.update(uid, {"last_login": now.isoformat()})
        return updated or user.model_copy(update={"last_login": now})

    def update_profile(self, firebase_uid: str, request: ProfileUpdateRequest) -> UserProfile:
        user = self.users.get(firebase_uid)
        if user is None:
            raise UserNotFoundError("User not found")

        fields: Dict[str, Any] = {}
        if request.display_name:
            fields["display_name"] = request.display_name
        if request.metadata is not None:
            merged = user.metadata.model_dump()
            merged.update(request.metadata.model_dump(exclude_unset=True))
            fields["metadata"] = UserMetadata.model_validate(merged).model_dump(mode="json")

        if not fields:
            return user
        return self.users.update(firebase_uid, fields) or user
