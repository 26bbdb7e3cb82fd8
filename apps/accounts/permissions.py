"""
Role based permissions
"""
from rest_framework.permissions import BasePermission

from .models import User


class HasRole(BasePermission):
    allowed_roles = ()
    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


class IsAdmin(HasRole):
    allowed_roles = (User.ADMIN,)


class IsSellerOrAdmin(HasRole):
    allowed_roles = (User.SELLER, User.ADMIN)
