"""备份路由

GET    /api/backup/export: 下载备份文档
POST   /api/backup/import: 请求体为备份文档文本，解析失败返回 400 且不做任何修改
DELETE /api/data: 删除项目、作业、成员数据（保留设置与活动日志）
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from projecthub.core.exceptions import BackupFormatError
from starlette.responses import JSONResponse

from ..deps import get_workspace_service
from ..errors import error_response
from ..services.workspace_service import WorkspaceService

router = APIRouter()


@router.get("/api/backup/export")
async def export_backup(service: WorkspaceService = Depends(get_workspace_service)):
    document = await service.export_backup()
    filename = f"projecthub-backup-{datetime.now(UTC).date().isoformat()}.json"
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/backup/import")
async def import_backup(
    request: Request,
    service: WorkspaceService = Depends(get_workspace_service),
):
    body = await request.body()
    try:
        keys = await service.import_backup(body)
    except BackupFormatError as e:
        return error_response(400, "INVALID_BACKUP", str(e))
    return {"imported": keys}


@router.delete("/api/data", status_code=204)
async def clear_all_data(service: WorkspaceService = Depends(get_workspace_service)):
    await service.clear_all_data()
