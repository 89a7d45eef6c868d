"""file-meta-lens：檔案 metadata 檢視與延伸屬性註記。"""

__version__ = "0.3.0"
