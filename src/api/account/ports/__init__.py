"""Ports for the account context."""

from account.ports.repositories import IIdentityRepository, IUserRepository

__all__ = [
    "IIdentityRepository",
    "IUserRepository",
]
