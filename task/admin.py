from django.contrib import admin
from django_summernote.admin import SummernoteModelAdmin

from .models import Task, TaskAssignment


class TaskAssignmentInline(admin.TabularInline):
    model = TaskAssignment
    extra = 0
    raw_id_fields = ('user', 'submitted_work')


@admin.register(Task)
class TaskAdmin(SummernoteModelAdmin):
    list_display = ('title', 'deadline', 'status', 'priority', 'completion_rate', 'submission_count')
    list_filter = ('status', 'priority', 'type', 'category')
    search_fields = ('title', 'description')
    summernote_fields = ('description',)
    readonly_fields = ('completion_rate', 'submission_count')
    inlines = [TaskAssignmentInline]
