from django.contrib import admin
from .models import LootEntry


@admin.register(LootEntry)
class LootEntryAdmin(admin.ModelAdmin):
    list_display = ['item_name', 'quality', 'character', 'location', 'dropped_by', 'timestamp']
    list_filter = ['quality', 'difficulty', 'timestamp']
    search_fields = ['item_name', 'character', 'location', 'dropped_by']
    readonly_fields = [
        'id', 'timestamp', 'character', 'character_class', 'level', 'difficulty',
        'item_name', 'item_id', 'quality', 'location', 'dropped_by', 'stats', 'created_at',
    ]
    ordering = ['-timestamp']

    fieldsets = (
        ('Item', {
            'fields': ('id', 'item_name', 'item_id', 'quality', 'stats')
        }),
        ('Character', {
            'fields': ('character', 'character_class', 'level', 'difficulty')
        }),
        ('Drop', {
            'fields': ('timestamp', 'location', 'dropped_by', 'created_at')
        }),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
