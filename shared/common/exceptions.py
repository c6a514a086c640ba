# shared/common/exceptions.py
"""
Custom Exception Classes and Error Formatting
"""

import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTIONS
# =============================================================================

class BaseServiceException(Exception):
    """Base exception class for all service errors"""

    default_detail = 'An unexpected error occurred.'
    error_code = 'INTERNAL_ERROR'

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra_data: Optional[Dict] = None
    ):
        self.detail = detail or self.default_detail
        self.error_code = error_code or self.error_code
        self.extra_data = extra_data or {}
        super().__init__(self.detail)

    def to_dict(self, request_id: str = None) -> Dict[str, Any]:
        """Render the error in the shared response shape."""
        return format_error(self, request_id)


# =============================================================================
# ERROR FORMATTING
# =============================================================================

def format_error(exc: Exception, request_id: str = None) -> Dict[str, Any]:
    """
    Format an exception in consistent structure.

    Service exceptions keep their error code and any attached details;
    anything else is reported as an internal error.
    """
    if not isinstance(exc, BaseServiceException):
        logger.error(
            f"Unhandled exception: {exc}",
            extra={
                'request_id': request_id,
                'exception_type': type(exc).__name__,
            }
        )
        return {
            'success': False,
            'error': {
                'code': BaseServiceException.error_code,
                'message': BaseServiceException.default_detail,
                'request_id': request_id,
            }
        }

    error_data = {
        'success': False,
        'error': {
            'code': exc.error_code,
            'message': exc.detail,
            'request_id': request_id,
        }
    }

    if exc.extra_data.get('errors'):
        error_data['error']['details'] = exc.extra_data['errors']

    for key, value in exc.extra_data.items():
        if key != 'errors':
            error_data['error'][key] = value

    return error_data
