from rest_framework import status
from rest_framework.exceptions import APIException


class DomainRuleViolation(APIException):
    """A business rule rejected otherwise well-formed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request violates a business rule.'
    default_code = 'domain_rule'


class NotAssignedError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not assigned to this task.'
    default_code = 'not_assigned'


class ResourceNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'
