"""
Services Module

Application logic that sits between the routers and the database:
- UserStore: credential store (lookups, existence checks, save)
- Authenticator: sign-in with token issuance, sign-up with uniqueness checks
"""
from .user_store import UserStore
from .authenticator import Authenticator, SignInResult

__all__ = [
    "UserStore",
    "Authenticator",
    "SignInResult",
]
