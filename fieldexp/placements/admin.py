"""
placements/admin.py
───────────────────
Django admin for the placement models.  Day-to-day school and quota work
happens on the /manage/ dashboard; this is the fallback for everything else
(student records, registrations).
"""

from django.contrib import admin

from .models import Registration, School, SchoolQuota, Student


class SchoolQuotaInline(admin.TabularInline):
    model = SchoolQuota
    extra = 0
    fields = ('subject', 'total_quota', 'registered_count')


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display  = ('name', 'location', 'min_gpa', 'latitude', 'longitude', 'created_at')
    search_fields = ('name', 'location', 'address')
    readonly_fields = ('created_at',)
    inlines = (SchoolQuotaInline,)

    fieldsets = (
        (None, {
            'fields': ('name', 'location', 'address', 'min_gpa'),
        }),
        ('Map', {
            'fields': ('latitude', 'longitude'),
            'description': 'Coordinates enable the embedded map on the selection page.',
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',),
        }),
    )


@admin.register(SchoolQuota)
class SchoolQuotaAdmin(admin.ModelAdmin):
    list_display  = ('school', 'subject', 'total_quota', 'registered_count', 'available')
    list_filter   = ('subject',)
    search_fields = ('school__name', 'school__location')

    @admin.display(description='Available')
    def available(self, obj):
        return obj.available


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display  = ('student_id', 'name', 'has_microteaching', 'microteaching_grade', 'gpa', 'user')
    list_filter   = ('has_microteaching', 'microteaching_grade')
    search_fields = ('student_id', 'name', 'user__username')
    raw_id_fields = ('user',)


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display  = ('student', 'school', 'subject', 'created_at')
    list_filter   = ('subject', 'school')
    search_fields = ('student__student_id', 'student__name', 'school__name')
    readonly_fields = ('created_at',)
    raw_id_fields = ('student',)
