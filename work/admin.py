from django.contrib import admin
from django_summernote.admin import SummernoteModelAdmin

from .models import Work, WorkComment, WorkFile


class WorkFileInline(admin.TabularInline):
    model = WorkFile
    extra = 0


class WorkCommentInline(admin.TabularInline):
    model = WorkComment
    extra = 0


@admin.register(Work)
class WorkAdmin(SummernoteModelAdmin):
    list_display = ('title', 'type', 'author', 'status', 'category', 'views', 'likes', 'is_task_submission')
    list_filter = ('status', 'type', 'category', 'is_public', 'is_featured')
    search_fields = ('title', 'description', 'author_name')
    summernote_fields = ('description',)
    inlines = [WorkFileInline, WorkCommentInline]
