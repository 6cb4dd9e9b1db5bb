"""核心数据模型、配置与存储。"""
