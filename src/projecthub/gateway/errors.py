"""统一错误响应 -- {"error": {"code", "message"}}"""

from starlette.responses import JSONResponse


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
            }
        },
    )


def not_found(entity: str, entity_id: str) -> JSONResponse:
    """实体不存在的 404 响应，entity 如 "task" / "project" / "member" """
    return error_response(
        404,
        f"{entity.upper()}_NOT_FOUND",
        f"{entity.capitalize()} with id {entity_id} does not exist",
    )
