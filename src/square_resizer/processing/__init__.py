"""图像校验、几何计算与编码。"""
