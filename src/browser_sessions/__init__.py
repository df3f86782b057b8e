"""
Browser Session Launcher

按需创建浏览器自动化容器，等待其就绪后返回可访问的 URL。
"""

__version__ = "0.1.0"
