from django.db import transaction
from rest_framework import serializers

from user.adapters.serializers.user_serializers import UserSummarySerializer
from user.models import display_name
from ...models import (
    MAX_FILES,
    MIMETYPE_PREFIX,
    ReviewStatus,
    Work,
    WorkCategory,
    WorkComment,
    WorkFile,
    WorkType,
)

METADATA_KEYS = {'camera', 'lens', 'settings', 'location', 'shooting_date'}
SETTINGS_KEYS = {'iso', 'aperture', 'shutter_speed', 'focal_length'}


def _absolute_url(context, field_file):
    if not field_file:
        return None
    request = context.get('request')
    if request is not None:
        return request.build_absolute_uri(field_file.url)
    return field_file.url


class TagListField(serializers.ListField):
    child = serializers.CharField(max_length=20, trim_whitespace=True)


class WorkFileSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = WorkFile
        fields = ('id', 'url', 'original_name', 'mimetype', 'size')

    def get_url(self, obj):
        return _absolute_url(self.context, obj.file)


class CommentSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    content = serializers.CharField(min_length=1, max_length=500)

    class Meta:
        model = WorkComment
        fields = ('id', 'user', 'content', 'created_at')
        read_only_fields = ('id', 'user', 'created_at')


class WorkListSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    files = WorkFileSerializer(many=True, read_only=True)
    thumbnail = serializers.SerializerMethodField()
    comment_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Work
        fields = (
            'id', 'title', 'description', 'type', 'author', 'author_name',
            'files', 'thumbnail', 'tags', 'category', 'status', 'is_public',
            'is_featured', 'views', 'likes', 'comment_count', 'submission_date',
            'related_task', 'is_task_submission', 'created_at',
        )

    def get_thumbnail(self, obj):
        return _absolute_url(self.context, obj.thumbnail_file)


class WorkSerializer(WorkListSerializer):
    comments = CommentSerializer(many=True, read_only=True)
    approved_by = UserSummarySerializer(read_only=True)
    is_liked = serializers.SerializerMethodField()

    class Meta(WorkListSerializer.Meta):
        fields = WorkListSerializer.Meta.fields + (
            'comments', 'metadata', 'approval_date', 'approved_by',
            'rejection_reason', 'is_liked', 'updated_at',
        )

    def get_is_liked(self, obj):
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return False
        return obj.liked_by.filter(pk=request.user.pk).exists()


class WorkCreateSerializer(serializers.ModelSerializer):
    """Multipart upload of a new work with its files."""
    files = serializers.ListField(
        child=serializers.FileField(),
        allow_empty=False,
        max_length=MAX_FILES,
        write_only=True,
        error_messages={'empty': 'Please choose at least one file to upload.'},
    )
    author_name = serializers.CharField(min_length=1, max_length=50, required=False)
    tags = TagListField(required=False)
    metadata = serializers.JSONField(required=False)

    class Meta:
        model = Work
        fields = ('title', 'description', 'type', 'author_name', 'category', 'tags', 'metadata', 'files')
        extra_kwargs = {
            'title': {'min_length': 1},
            'category': {'default': WorkCategory.OTHER},
        }

    def validate_metadata(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Metadata must be an object.')
        unknown = set(value) - METADATA_KEYS
        if unknown:
            raise serializers.ValidationError(f"Unknown metadata keys: {', '.join(sorted(unknown))}")
        settings = value.get('settings', {})
        if not isinstance(settings, dict) or set(settings) - SETTINGS_KEYS:
            raise serializers.ValidationError('Settings may only hold iso, aperture, shutter_speed and focal_length.')
        return value

    def validate(self, attrs):
        prefix = MIMETYPE_PREFIX[WorkType(attrs['type'])]
        mismatched = [
            upload.name for upload in attrs['files']
            if not (getattr(upload, 'content_type', '') or '').startswith(prefix)
        ]
        if mismatched:
            kind = 'image' if attrs['type'] == WorkType.PHOTO else 'video'
            raise serializers.ValidationError({
                'files': [f"File type does not match the work type; {attrs['type']} works accept {kind} files only."],
            })
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        uploads = validated_data.pop('files')
        author = validated_data['author']
        validated_data.setdefault('author_name', display_name(author))
        work = Work.objects.create(status=ReviewStatus.PENDING, **validated_data)
        for upload in uploads:
            WorkFile.objects.create(
                work=work,
                file=upload,
                original_name=upload.name,
                mimetype=upload.content_type,
                size=upload.size,
            )
        return work


class WorkUpdateSerializer(serializers.ModelSerializer):
    tags = TagListField(required=False)

    class Meta:
        model = Work
        fields = ('title', 'description', 'category', 'tags')
        extra_kwargs = {'title': {'min_length': 1}}


class ReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=(('approve', 'Approve'), ('reject', 'Reject')))
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['action'] == 'reject' and not attrs.get('reason'):
            raise serializers.ValidationError('A reason is required when rejecting a work.')
        return attrs
