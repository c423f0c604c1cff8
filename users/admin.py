from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User, Profile


@admin.register(User)
class PlatformUserAdmin(UserAdmin):
    list_display = ('email', 'first_name', 'last_name', 'role', 'is_staff')
    fieldsets = UserAdmin.fieldsets + (
        ('Certification', {'fields': ('role', 'phone_number', 'bio', 'avatar')}),
    )


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'payment_status', 'test_completed', 'test_score', 'certificate_issued')
    list_filter = ('payment_status', 'test_completed', 'certificate_issued')
