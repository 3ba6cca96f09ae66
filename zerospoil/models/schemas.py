from enum import Enum
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator
import datetime

class WasteAction(str, Enum):
    """What happened to a food item"""
    CONSUMED = "consumed"
    DONATED = "donated"
    WASTED = "wasted"
    PRESERVED = "preserved"
    COMPOSTED = "composted"

# Actions that count as food saved from the bin
SAVED_ACTIONS = (WasteAction.CONSUMED.value, WasteAction.DONATED.value, WasteAction.PRESERVED.value)

class SignupRequest(BaseModel):
    """Body of the signup route"""
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None

class SigninRequest(BaseModel):
    """Body of the signin route"""
    email: Optional[str] = None
    password: Optional[str] = None

class NotificationSettings(BaseModel):
    """Per-user notification switches"""
    expiration_alerts: bool = True
    recipe_suggestions: bool = True
    donation_reminders: bool = True
    achievement_notifications: bool = True
    email_notifications: bool = False

class UserProfile(BaseModel):
    """Denormalized profile row stored next to the auth account"""
    id: str
    email: Optional[str] = None
    full_name: str = ""
    avatar_url: str = ""
    dietary_restrictions: List[str] = Field(default_factory=list)
    favorite_cuisines: List[str] = Field(default_factory=list)
    measurement_system: str = "metric"
    business_account: bool = False
    theme: str = "light"
    notification_settings: NotificationSettings = Field(default_factory=NotificationSettings)

class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields fall back to the defaults"""
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    dietary_restrictions: Optional[List[str]] = None
    favorite_cuisines: Optional[List[str]] = None
    measurement_system: Optional[str] = None
    business_account: Optional[bool] = None
    theme: Optional[str] = None
    notification_settings: Optional[NotificationSettings] = None

class WasteLogCreate(BaseModel):
    """Waste log fields a client may submit"""
    food_item_id: Optional[str] = None
    action: WasteAction
    date: str
    quantity: Optional[float] = None
    estimated_value: Optional[float] = None
    notes: Optional[str] = None

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        datetime.date.fromisoformat(v)
        return v

class WasteLogFilters(BaseModel):
    """Query filters for listing waste logs"""
    action: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

class FoodStatus(str, Enum):
    """Freshness of a pantry item"""
    FRESH = "fresh"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"

class FoodItemCreate(BaseModel):
    """Food item fields a client may submit; new items start out fresh"""
    name: str
    category: str
    purchase_date: str
    expiration_date: Optional[str] = None
    storage_location: str
    quantity: float
    unit: str
    notes: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator('purchase_date', 'expiration_date')
    @classmethod
    def validate_dates(cls, v):
        if v is not None:
            datetime.date.fromisoformat(v)
        return v

class FoodItemUpdate(BaseModel):
    """Partial food item update; only the fields sent are written"""
    name: Optional[str] = None
    category: Optional[str] = None
    purchase_date: Optional[str] = None
    expiration_date: Optional[str] = None
    storage_location: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    status: Optional[FoodStatus] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None

class FoodItemFilters(BaseModel):
    """Query filters for listing food items"""
    status: Optional[str] = None
    category: Optional[str] = None
    storage_location: Optional[str] = None

class DonationStatus(str, Enum):
    """Lifecycle of a scheduled donation"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class DonationItem(BaseModel):
    """One food item handed over in a donation"""
    food_item_id: Optional[str] = None
    name: str
    quantity: float
    unit: str

class DonationCreate(BaseModel):
    """Donation fields a client may submit; new donations start out scheduled"""
    location_id: str
    scheduled_date: str
    items: List[DonationItem]
    total_weight: Optional[float] = None
    estimated_meals: Optional[int] = None
    notes: Optional[str] = None

class DonationUpdate(BaseModel):
    """Partial donation update, typically a status change"""
    location_id: Optional[str] = None
    scheduled_date: Optional[str] = None
    status: Optional[DonationStatus] = None
    items: Optional[List[DonationItem]] = None
    total_weight: Optional[float] = None
    estimated_meals: Optional[int] = None
    notes: Optional[str] = None

class DonationFilters(BaseModel):
    """Query filters for listing donations"""
    status: Optional[str] = None

class ThemeUpdate(BaseModel):
    """Body of the theme select route"""
    theme: str

class AuthResult(BaseModel):
    """User and session returned by the auth provider"""
    user: Optional[Dict[str, Any]] = None
    session: Optional[Dict[str, Any]] = None
