from django.contrib import admin

from roster.models import Admin, Event, Task, TaskAssignment, Volunteer


@admin.register(Volunteer)
class VolunteerAdmin(admin.ModelAdmin):
    list_display = ("name", "handle", "status", "commitments", "period_start", "period_end")
    list_filter = ("status",)
    search_fields = ("name", "handle")


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "date", "format", "status", "venue")
    list_filter = ("status", "format")
    inlines = [TaskInline]


@admin.register(TaskAssignment)
class TaskAssignmentAdmin(admin.ModelAdmin):
    list_display = ("task", "volunteer", "assigned_by", "assigned_at")


admin.site.register(Admin)
