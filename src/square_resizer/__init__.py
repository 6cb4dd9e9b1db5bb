"""正方形缩略图生成工具。"""

__version__ = "0.1.0"
