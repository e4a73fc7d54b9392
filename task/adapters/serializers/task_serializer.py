from django.utils import timezone
from rest_framework import serializers

from task import services
from task.models import AssignmentStatus, DONE_STATUSES, Task, TaskAssignment
from user.adapters.serializers.user_serializers import UserContactSerializer, UserSummarySerializer
from work.models import Work


class TagListField(serializers.ListField):
    child = serializers.CharField(max_length=20, trim_whitespace=True)


class SubmittedWorkSerializer(serializers.ModelSerializer):
    class Meta:
        model = Work
        fields = ('id', 'title', 'type', 'status', 'created_at')


class TaskAssignmentSerializer(serializers.ModelSerializer):
    user = UserContactSerializer(read_only=True)
    submitted_work = SubmittedWorkSerializer(read_only=True)

    class Meta:
        model = TaskAssignment
        fields = ('user', 'assigned_at', 'status', 'submitted_work', 'submitted_at', 'feedback')


class RequirementsSerializer(serializers.Serializer):
    min_files = serializers.IntegerField(min_value=1, required=False)
    max_files = serializers.IntegerField(min_value=1, max_value=10, required=False)
    specifications = serializers.CharField(max_length=500, allow_blank=True, required=False)


class TaskSerializer(serializers.ModelSerializer):
    """Read shape of a task with its assignments."""
    creator = UserSummarySerializer(read_only=True)
    assigned_to = TaskAssignmentSerializer(source='assignments', many=True, read_only=True)
    requirements = RequirementsSerializer(read_only=True)
    assigned_count = serializers.SerializerMethodField()
    completed_count = serializers.SerializerMethodField()
    submitted_count = serializers.SerializerMethodField()
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Task
        fields = (
            'id', 'title', 'description', 'type', 'creator', 'assigned_to',
            'deadline', 'priority', 'status', 'requirements', 'category', 'tags',
            'is_public', 'completion_rate', 'submission_count', 'assigned_count',
            'completed_count', 'submitted_count', 'is_overdue', 'created_at', 'updated_at',
        )

    # Counted from the prefetched assignments to avoid a query per task
    def get_assigned_count(self, obj):
        return len(obj.assignments.all())

    def get_completed_count(self, obj):
        return sum(1 for a in obj.assignments.all() if a.status in DONE_STATUSES)

    def get_submitted_count(self, obj):
        return sum(1 for a in obj.assignments.all() if a.status == AssignmentStatus.SUBMITTED)


class TaskWriteSerializer(serializers.ModelSerializer):
    assigned_to = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        allow_empty=True,
        write_only=True,
    )
    requirements = RequirementsSerializer(required=False)
    tags = TagListField(required=False)

    class Meta:
        model = Task
        fields = (
            'title',
            'description',
            'type',
            'deadline',
            'priority',
            'status',
            'requirements',
            'category',
            'tags',
            'is_public',
            'assigned_to',
        )
        extra_kwargs = {
            'title': {'min_length': 1},
            'description': {'min_length': 1},
            'type': {'required': True},
        }

    def validate_deadline(self, value):
        unchanged = self.instance is not None and value == self.instance.deadline
        if not unchanged and value <= timezone.now():
            raise serializers.ValidationError('Deadline must be in the future.')
        return value

    def validate(self, attrs):
        if self.instance is None:
            # New tasks always start as drafts
            attrs.pop('status', None)
        elif 'assigned_to' in attrs:
            raise serializers.ValidationError({'assigned_to': ['Use the assign endpoint to add assignees.']})

        requirements = attrs.pop('requirements', None)
        if requirements is not None:
            current = self.instance.requirements if self.instance else {'min_files': 1, 'max_files': 5}
            merged = {**current, **requirements}
            if merged['min_files'] > merged['max_files']:
                raise serializers.ValidationError({'requirements': ['min_files cannot exceed max_files.']})
            attrs.update(requirements)
        return attrs

    def create(self, validated_data):
        assigned_to = validated_data.pop('assigned_to', [])
        return services.create_task(self.context['request'].user, assigned_to=assigned_to, **validated_data)


class AssignSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class SubmitSerializer(serializers.Serializer):
    work_id = serializers.IntegerField(min_value=1)


class AssignmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AssignmentStatus.choices)
    work_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    feedback = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class TaskStatsSerializer(serializers.Serializer):
    total_tasks = serializers.IntegerField()
    published_tasks = serializers.IntegerField()
    completed_tasks = serializers.IntegerField()
    overdue_tasks = serializers.IntegerField()
    avg_completion_rate = serializers.FloatField()
    total_assignments = serializers.IntegerField()
    total_submissions = serializers.IntegerField()
