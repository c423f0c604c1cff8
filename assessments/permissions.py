from rest_framework import permissions


class IsPlatformAdmin(permissions.BasePermission):
    """Staff users and accounts with the admin role."""
    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_staff or getattr(user, 'role', '') == 'admin'))


class IsQuestionAuthor(permissions.BasePermission):
    """
    Allows access to Admins and Master Practitioners.
    Strictly blocks Candidates.
    """
    def has_permission(self, request, view):
        # 1. User must be logged in
        if not request.user or not request.user.is_authenticated:
            return False

        # 2. Check Role
        return (
            request.user.is_staff or
            getattr(request.user, 'role', '') in ['admin', 'master_practitioner']
        )


class HasPaidMembership(permissions.BasePermission):
    """The payment gate: membership fee paid and payment completed."""
    message = "Membership payment must be completed before taking the test."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        profile = getattr(user, 'profile', None)
        return bool(profile and profile.may_take_test)
