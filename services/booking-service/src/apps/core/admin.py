from django.contrib import admin
from .models import Facility, OperatingHours, Reservation, MaintenanceWindow


class OperatingHoursInline(admin.TabularInline):
    model = OperatingHours
    extra = 0


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'surface', 'hourly_rate', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['name']
    inlines = [OperatingHoursInline]


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ['reservation_number', 'facility', 'start_time', 'end_time', 'status', 'total_price']
    list_filter = ['status', 'facility']
    search_fields = ['reservation_number']


@admin.register(MaintenanceWindow)
class MaintenanceWindowAdmin(admin.ModelAdmin):
    list_display = ['facility', 'start_time', 'end_time', 'finished_at']
    list_filter = ['facility']
