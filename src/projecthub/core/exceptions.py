"""ProjectHub 异常体系

核心 Store 对不存在的 ID 静默 no-op，不使用异常；
这里的异常只用于备份导入、文件上传等外围入口。
"""


class ProjectHubError(Exception):
    """ProjectHub 基础异常"""


class BackupFormatError(ProjectHubError):
    """备份文件无法解析

    导入时抛出此异常表示没有任何键被写入。
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"잘못된 백업 파일입니다: {reason}")
        self.reason = reason


class UploadError(ProjectHubError):
    """上传文件处理失败"""

    def __init__(self, message: str, status_code: int = 400) -> None:
        """
        Args:
            message: 错误描述
            status_code: 对应的 HTTP 状态码
        """
        super().__init__(message)
        self.status_code = status_code
