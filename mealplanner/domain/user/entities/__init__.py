"""User Entities"""
from .user_profile import UserPreferences, UserProfile, hash_password, verify_password

__all__ = ["UserPreferences", "UserProfile", "hash_password", "verify_password"]
