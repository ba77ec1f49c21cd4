"""上传路由测试

1. POST /upload 保存文件并返回元信息
2. latin1 误解码的 UTF-8 文件名被修复
3. DELETE /files/{filename} 删除文件，不存在时 404
4. 已上传文件可通过 /files 访问
"""

from pathlib import Path

import pytest
from httpx import AsyncClient
from projecthub.core.exceptions import UploadError
from projecthub.gateway.services.file_service import repair_filename, safe_filename


class TestFilenameHelpers:
    def test_repairs_latin1_mojibake(self):
        garbled = "보고서.pdf".encode().decode("latin1")
        assert repair_filename(garbled) == "보고서.pdf"

    def test_keeps_proper_unicode(self):
        assert repair_filename("보고서.pdf") == "보고서.pdf"
        assert repair_filename("report.pdf") == "report.pdf"

    def test_strips_directories(self):
        assert safe_filename("../../etc/passwd") == "passwd"
        assert safe_filename("C:\\temp\\a.txt") == "a.txt"

    @pytest.mark.parametrize("name", ["", None, "..", "."])
    def test_rejects_empty_names(self, name):
        with pytest.raises(UploadError):
            safe_filename(name)


class TestUploadRoutes:
    async def test_upload_and_download(self, app, client: AsyncClient):
        resp = await client.post(
            "/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "File uploaded successfully"
        assert data["filename"] == "notes.txt"
        assert data["size"] == 5

        upload_dir: Path = app.state.upload_dir
        assert (upload_dir / "notes.txt").read_bytes() == b"hello"

        resp = await client.get("/files/notes.txt")
        assert resp.status_code == 200
        assert resp.content == b"hello"

    async def test_upload_without_file(self, client: AsyncClient):
        resp = await client.post("/upload", data={"other": "x"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "NO_FILE"

    async def test_delete_file(self, app, client: AsyncClient):
        (app.state.upload_dir / "old.txt").write_bytes(b"x")

        resp = await client.delete("/files/old.txt")
        assert resp.status_code == 200
        assert resp.json() == {"message": "File deleted successfully"}
        assert not (app.state.upload_dir / "old.txt").exists()

    async def test_delete_missing_file(self, client: AsyncClient):
        resp = await client.delete("/files/missing.txt")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "FILE_NOT_FOUND"
