from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .adapters.viewsets.dashboard_count_card_viewset import DashboardViewset
from .adapters.viewsets.dashboard_task_status_viewset import (
    TaskStatusDistribution,
    TaskPriorityDistribution,
)
from .adapters.viewsets.dashboard_due_tasks_viewset import DueTasksView

router = DefaultRouter()
router.register(r'dashboard', DashboardViewset, basename='dashboard')

urlpatterns = [
    path('', include(router.urls)),
    path('dashboard/', include([
        path('task-status-distribution/', TaskStatusDistribution.as_view(), name='task-status-distribution'),
        path('task-priority-distribution/', TaskPriorityDistribution.as_view(), name='task-priority-distribution'),
        path('due-tasks/', DueTasksView.as_view(), name='due-tasks'),
    ])),
]
