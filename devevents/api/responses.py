"""Response envelope shared by every API endpoint.

    {"success": bool, "message": str, "data": ..., "error": str, "pagination": {...}}
"""

import math
from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse

def pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': math.ceil(total / limit) if limit else 0,
    }

def success(message: str, data: Any = None, page_info: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {'success': True, 'message': message}
    if data is not None:
        body['data'] = data
    if page_info is not None:
        body['pagination'] = page_info
    return body

def failure(
    status_code: int,
    message: str,
    error: Optional[str] = None,
    errors: Optional[List[str]] = None
) -> JSONResponse:
    body: Dict[str, Any] = {'success': False, 'message': message}
    if error is not None:
        body['error'] = error
    if errors:
        body['errors'] = errors
    return JSONResponse(status_code=status_code, content=body)
