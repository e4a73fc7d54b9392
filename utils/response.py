from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(data=None, message=None, status=http_status.HTTP_200_OK, headers=None):
    """
    Wrap a payload in the `{success, message, data}` envelope every endpoint answers with.
    """
    body = {'success': True}
    if message is not None:
        body['message'] = message
    if data is not None:
        body['data'] = data
    return Response(body, status=status, headers=headers)
