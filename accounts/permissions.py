"""
Role-based permissions for the farm back-office.

- IsEmployee: employees and admins (every back-office endpoint)
- IsAdminRole: admins only (site settings, detailed health)
"""
from rest_framework import permissions


class IsEmployee(permissions.BasePermission):
    message = 'Employee or admin access required.'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_farm_staff
        )


class IsAdminRole(permissions.BasePermission):
    message = 'Admin access required.'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_farm_admin
        )
