"""
Base ViewSet for all API endpoints.
"""
from rest_framework import viewsets, status
from rest_framework.response import Response
from pydantic import ValidationError
from typing import Type, TypeVar, Optional, Tuple

from infrastructure.bootstrap import get_container
from config.api.contracts.base import ErrorResponse

T = TypeVar('T')


class BaseViewSet(viewsets.ViewSet):
    """
    Base ViewSet with common functionality.

    Provides:
    - DI container access
    - Command/Query execution
    - Pydantic validation
    - Standard error responses
    """

    def get_container(self):
        """Get the DI container."""
        return get_container()

    def get_command(self, command_class: Type[T]) -> T:
        """Get a Command instance from the container."""
        return self.get_container().get(command_class)

    def get_query(self, query_class: Type[T]) -> T:
        """Get a Query instance from the container."""
        return self.get_container().get(query_class)

    def validate_request(
        self,
        request_model: Type[T],
        data
    ) -> Tuple[Optional[T], Optional[Response]]:
        """
        Validate request data with Pydantic model.

        Returns:
            Tuple of (validated_model, None) on success
            Tuple of (None, error_response) on failure
        """
        try:
            return request_model.model_validate(data), None
        except ValidationError as e:
            return None, self.validation_error(e)

    def validation_error(self, error: ValidationError) -> Response:
        """Create validation error response."""
        return Response(
            ErrorResponse(
                error="Validation Error",
                code="VALIDATION_ERROR",
                details={'errors': error.errors(include_url=False, include_context=False, include_input=False)}
            ).model_dump(),
            status=status.HTTP_400_BAD_REQUEST
        )

    def success(self, data, status_code: int = status.HTTP_200_OK) -> Response:
        """Create success response."""
        return Response(data, status=status_code)

    def error(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict = None
    ) -> Response:
        """Create error response."""
        return Response(
            ErrorResponse(
                error=message,
                code=code,
                details=details
            ).model_dump(exclude_none=True),
            status=status_code
        )

    def unauthorized(self, message: str = "Unauthorized") -> Response:
        """Create 401 response."""
        return self.error(message, "UNAUTHORIZED", status.HTTP_401_UNAUTHORIZED)

    def server_error(self, message: str = "Internal server error") -> Response:
        """Create 500 response."""
        return self.error(message, "INTERNAL_ERROR", status.HTTP_500_INTERNAL_SERVER_ERROR)
