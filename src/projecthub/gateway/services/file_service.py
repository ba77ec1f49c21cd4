"""FileService -- 上传文件的保存与删除

文件以原始文件名保存在上传目录下，同名文件直接覆盖。
"""

import shutil
from pathlib import Path
from typing import BinaryIO

import structlog
from projecthub.core.exceptions import UploadError

log = structlog.get_logger()


def repair_filename(name: str) -> str:
    """修复被按 latin1 解码的 UTF-8 文件名

    已经是正确 Unicode 的文件名（含无法按 latin1 编码的字符）原样返回。
    """
    try:
        return name.encode("latin1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return name


def safe_filename(name: str | None) -> str:
    """校验并返回不含目录部分的文件名

    Raises:
        UploadError: 文件名为空或指向目录
    """
    if not name:
        raise UploadError("No file uploaded.")
    candidate = Path(name.replace("\\", "/")).name
    if candidate in ("", ".", ".."):
        raise UploadError(f"Invalid filename: {name}")
    return candidate


class FileService:
    """上传目录内的文件操作"""

    def __init__(self, upload_dir: Path) -> None:
        self._upload_dir = upload_dir

    def save(self, filename: str | None, source: BinaryIO) -> tuple[Path, int]:
        """保存上传文件

        Returns:
            (保存路径, 文件字节数)

        Raises:
            UploadError: 文件名非法
        """
        name = safe_filename(repair_filename(filename) if filename else filename)
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        target = self._upload_dir / name
        with target.open("wb") as fh:
            shutil.copyfileobj(source, fh)
        size = target.stat().st_size
        log.info("file_uploaded", filename=name, size=size)
        return target, size

    def delete(self, filename: str) -> None:
        """删除上传目录下的文件

        Raises:
            UploadError: 文件名非法（400）或文件不存在（404）
        """
        name = safe_filename(filename)
        target = self._upload_dir / name
        if not target.is_file():
            raise UploadError("File not found", status_code=404)
        target.unlink()
        log.info("file_deleted", filename=name)
