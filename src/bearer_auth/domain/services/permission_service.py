from typing import Iterable

from bearer_auth.domain.value_objects.claims import Claims


class PermissionService:
    """Domain service for permission claims carried inside tokens"""

    @staticmethod
    def list_permissions(claims: Claims) -> list[str]:
        """Get the permissions of the claims, empty when the claim is absent"""
        return list(claims.permissions or [])

    @staticmethod
    def has_permission(claims: Claims, name: str) -> bool:
        """Check if the claims grant a specific permission"""
        return name in (claims.permissions or [])

    @staticmethod
    def has_all_permissions(claims: Claims, names: Iterable[str]) -> bool:
        """Check if the claims grant every one of the given permissions"""
        return all(PermissionService.has_permission(claims, name) for name in names)

    @staticmethod
    def has_any_permission(claims: Claims, names: Iterable[str]) -> bool:
        """Check if the claims grant at least one of the given permissions"""
        return any(PermissionService.has_permission(claims, name) for name in names)

    @staticmethod
    def grant(claims: Claims, name: str) -> None:
        """Add a permission unless already present"""
        if claims.permissions is None:
            claims.permissions = []
        if name not in claims.permissions:
            claims.permissions.append(name)

    @staticmethod
    def revoke(claims: Claims, name: str) -> None:
        """Remove the first occurrence of a permission, no-op when absent"""
        if claims.permissions and name in claims.permissions:
            claims.permissions.remove(name)
