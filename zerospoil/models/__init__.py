"""
Data models for the application.
"""

from .schemas import (
    WasteAction, SAVED_ACTIONS, SignupRequest, SigninRequest,
    NotificationSettings, UserProfile, ProfileUpdate, WasteLogCreate,
    WasteLogFilters, FoodStatus, FoodItemCreate, FoodItemUpdate, FoodItemFilters,
    DonationStatus, DonationItem, DonationCreate, DonationUpdate, DonationFilters,
    ThemeUpdate, AuthResult
)

__all__ = [
    'WasteAction', 'SAVED_ACTIONS', 'SignupRequest', 'SigninRequest',
    'NotificationSettings', 'UserProfile', 'ProfileUpdate', 'WasteLogCreate',
    'WasteLogFilters', 'FoodStatus', 'FoodItemCreate', 'FoodItemUpdate', 'FoodItemFilters',
    'DonationStatus', 'DonationItem', 'DonationCreate', 'DonationUpdate', 'DonationFilters',
    'ThemeUpdate', 'AuthResult'
]
