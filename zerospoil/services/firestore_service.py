import os
import uuid
import logging
import datetime
from typing import Any, Dict, List, Optional
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account

from zerospoil.utils.error_handler import AppError

logger = logging.getLogger(__name__)

PROFILES = "user_profiles"
WASTE_LOGS = "waste_logs"
FOOD_ITEMS = "food_items"
DONATIONS = "donations"
DONATION_LOCATIONS = "donation_locations"

# Location fields embedded in donation records
LOCATION_FIELDS = ("name", "address", "contact_phone", "hours")


class FirestoreServiceError(AppError):
    """Raised when a Firestore read or write fails."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def _utc_now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def filter_food_items(items: List[Dict[str, Any]], status: Optional[str] = None, category: Optional[str] = None,
                      storage_location: Optional[str] = None) -> List[Dict[str, Any]]:
    """Apply the food item list filters and order the result newest first. A status of "all" disables that filter."""
    result = [
        item for item in items
        if (not status or status == "all" or item.get("status") == status)
        and (not category or item.get("category") == category)
        and (not storage_location or item.get("storage_location") == storage_location)
    ]
    result.sort(key=lambda item: item.get("created_at") or "", reverse=True)
    return result


def filter_waste_logs(logs: List[Dict[str, Any]], action: Optional[str] = None,
                      start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Apply the waste log list filters and order the result newest first.

    Dates are ISO `YYYY-MM-DD` strings so they compare lexically. An action
    of "all" disables the action filter.
    """
    result = []
    for log in logs:
        if action and action != "all" and log.get("action") != action:
            continue
        if start_date and (log.get("date") or "") < start_date:
            continue
        if end_date and (log.get("date") or "") > end_date:
            continue
        result.append(log)
    result.sort(key=lambda log: log.get("date") or "", reverse=True)
    return result


class FirestoreService:
    """
    Service for Firestore database operations.

    Profiles, waste logs, food items and donations all live in top-level
    collections keyed by document id and scoped to a user through `user_id`.
    """

    # Singleton instance
    _instance = None

    @classmethod
    def get_instance(cls) -> 'FirestoreService':
        """Get the singleton instance of FirestoreService."""
        if cls._instance is None:
            cls._instance = FirestoreService()
        return cls._instance

    def __init__(self, db: Any = None):
        self.db = db if db is not None else self._initialize_firestore()
        self.is_initialized = not isinstance(self.db, NoOpFirestore)

    def _initialize_firestore(self) -> Any:
        """
        Initialize the Firestore client with proper credentials handling.
        Returns a NoOpFirestore if initialization fails.
        """
        try:
            service_account_path = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS')
            project_id = os.environ.get('FIREBASE_PROJECT_ID')

            if service_account_path and os.path.exists(service_account_path):
                logger.info(f"Initializing Firestore with service account from: {service_account_path}")
                return firestore.Client(project=project_id) if project_id else firestore.Client()

            service_account_file = self._find_service_account_file()
            if service_account_file:
                logger.info(f"Found service account file: {service_account_file}")
                credentials = service_account.Credentials.from_service_account_file(
                    service_account_file,
                    scopes=["https://www.googleapis.com/auth/cloud-platform"]
                )
                return firestore.Client(project=project_id or credentials.project_id, credentials=credentials)

            if project_id:
                logger.info(f"Initializing Firestore with project ID from environment: {project_id}")
                return firestore.Client(project=project_id)

            logger.warning("No Firestore credentials found. Using NoOpFirestore as fallback.")
            return NoOpFirestore()
        except Exception as e:
            logger.error(f"Failed to initialize Firestore: {e}")
            return NoOpFirestore()

    def _find_service_account_file(self) -> Optional[str]:
        """Find a service account file in the current directory."""
        possible_files = [
            'firebase-adminsdk.json',
            'firebase-service-account.json',
            'service-account.json',
        ]
        for filename in sorted(os.listdir('.')):
            if filename.endswith('.json') and 'firebase-adminsdk' in filename and filename not in possible_files:
                possible_files.append(filename)

        for file in possible_files:
            if os.path.exists(file):
                return file
        return None

    def _stream_for_user(self, collection: str, user_id: str) -> List[Dict[str, Any]]:
        docs = self.db.collection(collection).where(filter=FieldFilter("user_id", "==", user_id)).stream()
        return [{"id": doc.id, **(doc.to_dict() or {})} for doc in docs]

    # --- User Profiles ---

    def create_user_profile(self, profile: Dict[str, Any]) -> None:
        """Insert a profile row; fails if one already exists for the id."""
        user_id = profile["id"]
        logger.info(f"Creating user profile for user_id={user_id}")
        self.db.collection(PROFILES).document(user_id).create(profile)

    def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user profile by ID."""
        try:
            logger.info(f"Fetching user profile for user_id={user_id}")
            doc = self.db.collection(PROFILES).document(user_id).get()
            return doc.to_dict() if doc.exists else None
        except Exception as e:
            logger.error(f"Error getting user profile: {e}")
            raise FirestoreServiceError("Failed to fetch profile") from e

    def upsert_user_profile(self, user_id: str, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Create or merge a user profile and return what was written."""
        try:
            logger.info(f"Upserting user profile for user_id={user_id}")
            self.db.collection(PROFILES).document(user_id).set(profile, merge=True)
            return profile
        except Exception as e:
            logger.error(f"Error updating user profile: {e}")
            raise FirestoreServiceError("Failed to update profile") from e

    # --- Waste Logs ---

    def list_waste_logs(self, user_id: str, action: Optional[str] = None,
                        start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[Dict[str, Any]]:
        """List a user's waste logs, newest first, with the food item attached."""
        try:
            logger.info(f"Fetching waste logs for user_id={user_id}, action={action}, "
                        f"start_date={start_date}, end_date={end_date}")
            logs = filter_waste_logs(self._stream_for_user(WASTE_LOGS, user_id), action, start_date, end_date)
        except Exception as e:
            logger.error(f"Error fetching waste logs: {e}")
            raise FirestoreServiceError("Failed to fetch waste logs") from e
        return [self._attach_food_item(log) for log in logs]

    def create_waste_log(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a waste log for a user and return the stored record."""
        return self._attach_food_item(self._insert_owned(WASTE_LOGS, user_id, data, "waste log"))

    def _attach_food_item(self, log: Dict[str, Any]) -> Dict[str, Any]:
        food_item_id = log.get("food_item_id")
        if not food_item_id:
            return {**log, "food_items": None}
        try:
            doc = self.db.collection(FOOD_ITEMS).document(food_item_id).get()
            item = doc.to_dict() if doc.exists else None
        except Exception as e:
            logger.warning(f"Could not load food item {food_item_id} for waste log: {e}")
            item = None
        food_item = None
        if item:
            food_item = {"id": food_item_id, "name": item.get("name"), "category": item.get("category")}
        return {**log, "food_items": food_item}

    # --- Owned documents ---

    def _get_owned(self, collection: str, user_id: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(collection).document(doc_id).get()
        data = doc.to_dict() if doc.exists else None
        if not data or data.get("user_id") != user_id:
            return None
        return {"id": doc_id, **data}

    def _insert_owned(self, collection: str, user_id: str, data: Dict[str, Any], label: str) -> Dict[str, Any]:
        doc_id = uuid.uuid4().hex
        record = {**data, "user_id": user_id, "created_at": _utc_now()}
        try:
            logger.info(f"Creating {label} for user_id={user_id}, id={doc_id}")
            self.db.collection(collection).document(doc_id).set(record)
        except Exception as e:
            logger.error(f"Error creating {label}: {e}")
            raise FirestoreServiceError(f"Failed to create {label}") from e
        return {"id": doc_id, **record}

    def _update_owned(self, collection: str, user_id: str, doc_id: str,
                      updates: Dict[str, Any], label: str) -> Optional[Dict[str, Any]]:
        """Merge `updates` into a document the user owns; None when there is no such document."""
        try:
            existing = self._get_owned(collection, user_id, doc_id)
            if existing is None:
                return None
            changes = {**updates, "updated_at": _utc_now()}
            logger.info(f"Updating {label} {doc_id} for user_id={user_id}")
            self.db.collection(collection).document(doc_id).set(changes, merge=True)
        except Exception as e:
            logger.error(f"Error updating {label}: {e}")
            raise FirestoreServiceError(f"Failed to update {label}") from e
        return {**existing, **changes}

    def _delete_owned(self, collection: str, user_id: str, doc_id: str, label: str) -> bool:
        try:
            if self._get_owned(collection, user_id, doc_id) is None:
                return False
            logger.info(f"Deleting {label} {doc_id} for user_id={user_id}")
            self.db.collection(collection).document(doc_id).delete()
        except Exception as e:
            logger.error(f"Error deleting {label}: {e}")
            raise FirestoreServiceError(f"Failed to delete {label}") from e
        return True

    # --- Food Items ---

    def list_food_items(self, user_id: str, status: Optional[str] = None, category: Optional[str] = None,
                        storage_location: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get a user's food items, most recently added first."""
        try:
            logger.info(f"Fetching food items for user_id={user_id}, status={status}, "
                        f"category={category}, storage_location={storage_location}")
            items = self._stream_for_user(FOOD_ITEMS, user_id)
        except Exception as e:
            logger.error(f"Error fetching food items: {e}")
            raise FirestoreServiceError("Failed to fetch food items") from e
        return filter_food_items(items, status, category, storage_location)

    def get_food_item(self, user_id: str, item_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._get_owned(FOOD_ITEMS, user_id, item_id)
        except Exception as e:
            logger.error(f"Error fetching food item: {e}")
            raise FirestoreServiceError("Failed to fetch food item") from e

    def create_food_item(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a food item; new items always start out fresh."""
        return self._insert_owned(FOOD_ITEMS, user_id, {**data, "status": "fresh", "updated_at": _utc_now()},
                                  "food item")

    def update_food_item(self, user_id: str, item_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_owned(FOOD_ITEMS, user_id, item_id, updates, "food item")

    def delete_food_item(self, user_id: str, item_id: str) -> bool:
        return self._delete_owned(FOOD_ITEMS, user_id, item_id, "food item")

    # --- Donations ---

    def list_donations(self, user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get a user's donations, latest scheduled date first, with the drop-off location attached."""
        try:
            logger.info(f"Fetching donations for user_id={user_id}, status={status}")
            donations = self._stream_for_user(DONATIONS, user_id)
        except Exception as e:
            logger.error(f"Error fetching donations: {e}")
            raise FirestoreServiceError("Failed to fetch donations") from e
        if status and status != "all":
            donations = [d for d in donations if d.get("status") == status]
        donations.sort(key=lambda d: d.get("scheduled_date") or "", reverse=True)
        return [self._attach_location(d) for d in donations]

    def list_completed_donations(self, user_id: str) -> List[Dict[str, Any]]:
        """Get a user's donations that reached the completed state."""
        try:
            logger.info(f"Fetching completed donations for user_id={user_id}")
            return [d for d in self._stream_for_user(DONATIONS, user_id) if d.get("status") == "completed"]
        except Exception as e:
            logger.error(f"Error fetching donations: {e}")
            raise FirestoreServiceError("Failed to fetch analytics data") from e

    def get_donation(self, user_id: str, donation_id: str) -> Optional[Dict[str, Any]]:
        try:
            donation = self._get_owned(DONATIONS, user_id, donation_id)
        except Exception as e:
            logger.error(f"Error fetching donation: {e}")
            raise FirestoreServiceError("Failed to fetch donation") from e
        return self._attach_location(donation) if donation else None

    def create_donation(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a donation; new donations always start out scheduled."""
        donation = self._insert_owned(DONATIONS, user_id, {**data, "status": "scheduled"}, "donation")
        return self._attach_location(donation)

    def update_donation(self, user_id: str, donation_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        donation = self._update_owned(DONATIONS, user_id, donation_id, updates, "donation")
        return self._attach_location(donation) if donation else None

    def delete_donation(self, user_id: str, donation_id: str) -> bool:
        return self._delete_owned(DONATIONS, user_id, donation_id, "donation")

    def _attach_location(self, donation: Dict[str, Any]) -> Dict[str, Any]:
        location_id = donation.get("location_id")
        location = None
        if location_id:
            try:
                doc = self.db.collection(DONATION_LOCATIONS).document(location_id).get()
                data = doc.to_dict() if doc.exists else None
            except Exception as e:
                logger.warning(f"Could not load donation location {location_id}: {e}")
                data = None
            if data:
                location = {"id": location_id, **{key: data.get(key) for key in LOCATION_FIELDS}}
        return {**donation, "donation_locations": location}


# A placeholder class that logs warnings but doesn't throw exceptions
class NoOpFirestore:
    """
    A no-op implementation of Firestore client.
    This allows the app to start even if Firestore isn't configured.
    """

    def collection(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring collection({args}, {kwargs})")
        return self

    def document(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring document({args}, {kwargs})")
        return self

    def where(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring where({args}, {kwargs})")
        return self

    def create(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring create({args}, {kwargs})")
        return None

    def set(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring set({args}, {kwargs})")
        return None

    def delete(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring delete({args}, {kwargs})")
        return None

    def get(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring get({args}, {kwargs})")

        class MockDoc:
            @property
            def exists(self):
                return False

            def to_dict(self):
                return None

        return MockDoc()

    def stream(self, *args, **kwargs):
        logger.warning(f"Firestore not initialized. Ignoring stream({args}, {kwargs})")
        return []


def get_firestore_service() -> FirestoreService:
    """FastAPI dependency returning the shared Firestore service."""
    return FirestoreService.get_instance()
