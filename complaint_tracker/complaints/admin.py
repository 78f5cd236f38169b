from django.contrib import admin

from .models import StorageSlot


@admin.register(StorageSlot)
class StorageSlotAdmin(admin.ModelAdmin):
    list_display = ("key", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("key", "value", "updated_at")

    def has_add_permission(self, request):
        return False
