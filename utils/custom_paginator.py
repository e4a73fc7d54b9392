from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class CustomPaginator(PageNumberPagination):
    """
    `page` / `limit` pagination answering in the response envelope.

    Views tune it with `results_key` (name of the list inside `data`),
    `page_size` (default limit) and `max_page_size`.
    """
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 50
    results_key = 'results'

    def paginate_queryset(self, queryset, request, view=None):
        if view is not None:
            self.results_key = getattr(view, 'results_key', self.results_key)
            self.page_size = getattr(view, 'page_size', self.page_size)
            self.max_page_size = getattr(view, 'max_page_size', self.max_page_size)
        self._validate_page_param(request)
        return super().paginate_queryset(queryset, request, view)

    def _validate_page_param(self, request):
        raw_page = request.query_params.get(self.page_query_param)
        if raw_page is not None and (not raw_page.isdigit() or int(raw_page) < 1):
            raise ValidationError({'page': ['Page must be a positive integer.']})

    def get_page_size(self, request):
        raw_limit = request.query_params.get(self.page_size_query_param)
        if raw_limit is None:
            return self.page_size
        if not raw_limit.isdigit() or not 1 <= int(raw_limit) <= self.max_page_size:
            raise ValidationError(
                {'limit': [f'Limit must be between 1 and {self.max_page_size}.']}
            )
        return int(raw_limit)

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'data': {
                self.results_key: data,
                'pagination': {
                    'current': self.page.number,
                    'total': self.page.paginator.num_pages,
                    'count': len(data),
                    'total_count': self.page.paginator.count,
                    'next': self.get_next_link(),
                    'previous': self.get_previous_link(),
                },
            },
        })
