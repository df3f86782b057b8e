"""
错误类型包
"""
