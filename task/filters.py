from django.db.models import Exists, OuterRef
from django_filters import rest_framework as django_filters

from user.models import is_admin
from .models import Priority, Status, Task, TaskAssignment, TaskType


class TaskFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Status.choices, method='filter_status')
    priority = django_filters.ChoiceFilter(choices=Priority.choices)
    type = django_filters.ChoiceFilter(choices=TaskType.choices)
    assigned_to_me = django_filters.BooleanFilter(method='filter_assigned_to_me')

    class Meta:
        model = Task
        fields = ['status', 'priority', 'type', 'assigned_to_me']

    def filter_status(self, queryset, name, value):
        # Members only ever list published tasks
        if is_admin(self.request.user):
            return queryset.filter(status=value)
        return queryset

    def filter_assigned_to_me(self, queryset, name, value):
        if not value or is_admin(self.request.user):
            return queryset
        assigned = TaskAssignment.objects.filter(task=OuterRef('pk'), user=self.request.user)
        return queryset.filter(Exists(assigned))
