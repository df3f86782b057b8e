"""
REST 接口层
"""
