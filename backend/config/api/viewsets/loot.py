"""
Loot ViewSet - webhook ingest and dashboard feed.

- POST /api/loot
- GET /api/loot?limit=&category=&character=
"""
import logging
import re
from typing import Optional

from rest_framework import status
from rest_framework.exceptions import ParseError

from .base import BaseViewSet
from config.api.authentication import has_valid_webhook_secret
from config.api.contracts import LootWebhookRequest
from services.commands import IngestLootCommand
from services.queries import GetLootQuery

logger = logging.getLogger(__name__)

LEADING_INTEGER = re.compile(r'\s*([+-]?\d+)')


def _parse_limit(raw: Optional[str]) -> Optional[int]:
    """
    Read the leading integer of the limit parameter ("10.5" and "10abc" give 10).
    Limits without one fall back to the default.
    """
    if not raw:
        return None
    match = LEADING_INTEGER.match(raw)
    return int(match.group(1)) if match else None


class LootViewSet(BaseViewSet):
    """Loot entries sent by the bot"""

    def list(self, request):
        """
        Recent loot with dashboard totals
        GET /api/loot
        """
        query = self.get_query(GetLootQuery)

        try:
            result = query.execute(
                limit=_parse_limit(request.query_params.get('limit')),
                category=request.query_params.get('category'),
                character=request.query_params.get('character'),
            )
        except Exception:
            logger.exception("Error fetching loot logs")
            return self.server_error()

        return self.success({
            'logs': result.logs,
            'totals': result.totals,
        })

    def create(self, request):
        """
        Store one loot event from the bot
        POST /api/loot
        """
        if not has_valid_webhook_secret(request):
            logger.warning("Rejected loot webhook with invalid secret")
            return self.unauthorized()

        try:
            data = request.data
        except ParseError as e:
            return self.error("Validation Error", "VALIDATION_ERROR", status.HTTP_400_BAD_REQUEST,
                              details={'errors': [str(e.detail)]})

        payload, error_response = self.validate_request(LootWebhookRequest, data)
        if error_response:
            return error_response

        command = self.get_command(IngestLootCommand)

        try:
            result = command.execute(**payload.to_command_kwargs())
        except Exception:
            logger.exception("Error processing loot webhook")
            return self.server_error()

        if not result.success:
            return self.error(result.error, result.error_code, status.HTTP_400_BAD_REQUEST)

        if result.duplicate:
            return self.success({
                'success': True,
                'duplicate': True,
                'id': result.entry_id,
            })

        return self.success({
            'success': True,
            'id': result.entry_id,
        }, status_code=status.HTTP_201_CREATED)
