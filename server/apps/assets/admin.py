"""Django admin configuration for assets app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.html import format_html

from server.apps.assets.models import (
    Commit,
    Contractor,
    File,
    Section,
    SectionStatus,
)


class ContractorInline(admin.TabularInline):
    """Contractors listed on the file page."""

    model = Contractor
    extra = 0
    readonly_fields = ['user', 'count']


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'name',
        'type',
        'section_count',
        'progress_display',
        'last_updated',
    ]

    list_filter = [
        'type',
        'last_updated',
    ]

    search_fields = [
        'name',
        'assets_path',
    ]

    readonly_fields = [
        'translated',
        'corrected',
        'polished',
        'sections',
        'last_updated',
    ]

    inlines = [ContractorInline]

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'assets_path', 'type'),
        }),
        ('Progress', {
            'fields': ('translated', 'corrected', 'polished'),
        }),
        ('Sections', {
            'fields': ('sections',),
        }),
        ('Timestamps', {
            'fields': ('last_updated',),
        }),
    )

    def section_count(self, obj: File) -> int:
        """Number of sections listed by the file.

        Args:
            obj: File instance.

        Returns:
            Length of the hash list.
        """
        return len(obj.sections)
    section_count.short_description = 'Sections'  # type: ignore[attr-defined]

    def progress_display(self, obj: File) -> str:
        """Display translated/corrected/polished counters.

        Args:
            obj: File instance.

        Returns:
            Counters formatted as 'T / C / P'.
        """
        return f'{obj.translated} / {obj.corrected} / {obj.polished}'
    progress_display.short_description = 'T / C / P'  # type: ignore[attr-defined]


class CommitInline(admin.TabularInline):
    """Commits listed on the section page."""

    model = Commit
    extra = 0
    readonly_fields = ['user', 'text', 'created_at']


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin[Section]):
    """Admin interface for Section model."""

    list_display = [
        'hash',
        'status_display',
        'contractor',
        'contracted_at',
        'created_at',
    ]

    list_filter = [
        'status',
        'created_at',
    ]

    search_fields = [
        'hash',
        'origin_text',
    ]

    readonly_fields = [
        'hash',
        'parents',
        'created_at',
    ]

    inlines = [CommitInline]

    def status_display(self, obj: Section) -> str:
        """Display status with a color marker.

        Args:
            obj: Section instance.

        Returns:
            HTML formatted status label.
        """
        if obj.status >= SectionStatus.POLISHED:
            color = '#28a745'  # Green - done
        elif obj.status >= SectionStatus.TRANSLATED:
            color = '#ffc107'  # Yellow - in review
        else:
            color = '#6c757d'  # Grey - untouched

        return format_html(
            '<span style="color: {color}; font-weight: bold;">'
            '{status}</span>',
            color=color,
            status=SectionStatus(obj.status).label,
        )
    status_display.short_description = 'Status'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Section]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('contractor')


@admin.register(Contractor)
class ContractorAdmin(admin.ModelAdmin[Contractor]):
    """Admin interface for Contractor model."""

    list_display = [
        'user',
        'file',
        'count',
    ]

    list_filter = [
        'user',
    ]

    search_fields = [
        'user__username',
        'file__name',
    ]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Contractor]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'file')
