from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin

from accounts.models import BoxOfficeUser


@admin.register(BoxOfficeUser)
class BoxOfficeUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[misc]
    list_display = ["email", "first_name", "last_name", "guest", "is_staff", "date_joined"]
    list_filter = ["guest", "is_staff", "is_superuser", "is_active"]
    search_fields = ["email", "username", "first_name", "last_name", "phone_number"]
    fieldsets = (
        *UserAdmin.fieldsets,  # type: ignore[misc]
        ("Profile", {"fields": ("phone_number", "location", "guest")}),
    )
