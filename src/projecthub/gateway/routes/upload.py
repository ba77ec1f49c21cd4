"""本地上传路由

POST   /upload: multipart 字段 file，保存到上传目录
DELETE /files/{filename}: 删除已上传文件，不存在时 404
已上传文件通过 /files 静态挂载访问（见 main.py）。
"""

from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile
from projecthub.core.exceptions import UploadError

from ..deps import get_upload_dir
from ..errors import error_response
from ..services.file_service import FileService

router = APIRouter()


@router.post("/upload")
async def upload_file(
    file: UploadFile | None = File(default=None),
    upload_dir: Path = Depends(get_upload_dir),
):
    if file is None:
        return error_response(400, "NO_FILE", "No file uploaded.")

    service = FileService(upload_dir)
    try:
        path, size = service.save(file.filename, file.file)
    except UploadError as e:
        return error_response(e.status_code, "UPLOAD_FAILED", str(e))
    finally:
        await file.close()

    return {
        "message": "File uploaded successfully",
        "filename": path.name,
        "path": str(path),
        "size": size,
    }


@router.delete("/files/{filename}")
async def delete_file(
    filename: str,
    upload_dir: Path = Depends(get_upload_dir),
):
    try:
        FileService(upload_dir).delete(filename)
    except UploadError as e:
        code = "FILE_NOT_FOUND" if e.status_code == 404 else "INVALID_FILENAME"
        return error_response(e.status_code, code, str(e))
    return {"message": "File deleted successfully"}
