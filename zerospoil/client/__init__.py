"""
Client-side access to the HTTP API.
"""

from .api_client import (
    ApiClient, ApiClientError, AnalyticsApi, AuthApi, DonationsApi, FoodApi, create_api_client
)
from .analytics_hook import AnalyticsHook

__all__ = ['ApiClient', 'create_api_client', 'ApiClientError', 'AnalyticsApi', 'AuthApi', 'FoodApi', 'DonationsApi',
           'AnalyticsHook']
