"""預設設定值。"""

DEFAULT_CONFIG = {
    "ledger": {
        "prefix": "com.mtdata.",
        "tool_name": "MTData for macOS",
        "tool_version": "2.0",
    },
    "attributes": {
        "linux_namespace": "user.",
    },
    "extraction": {
        "command_timeout_sec": 30.0,
        "text_max_bytes": 8 * 1024 * 1024,
    },
    "retry": {
        "max_retries": 2,
        "backoff_base_sec": 0.2,
        "backoff_cap_sec": 2.0,
    },
    "file_extensions": {
        "pdf": [".pdf"],
        "image": [
            ".jpg",
            ".jpeg",
            ".png",
            ".heic",
            ".heif",
            ".tif",
            ".tiff",
            ".bmp",
            ".gif",
            ".webp",
        ],
        "audio": [".mp3", ".m4a", ".aac", ".flac", ".wav", ".aiff", ".ogg", ".opus"],
        "movie": [".mp4", ".mov", ".m4v", ".avi", ".mkv", ".wmv", ".webm", ".3gp"],
        "text": [
            ".txt",
            ".md",
            ".markdown",
            ".csv",
            ".json",
            ".xml",
            ".yaml",
            ".yml",
            ".log",
            ".py",
            ".swift",
            ".c",
            ".h",
            ".js",
            ".sh",
            ".html",
            ".css",
        ],
        "office": [".docx", ".xlsx", ".pptx"],
        "epub": [".epub"],
        "archive": [".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar"],
        "executable": [".app", ".dylib", ".so", ".exe"],
    },
}
