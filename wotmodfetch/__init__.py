"""
wotmodfetch - wgmods.net 模组下载工具
"""

__version__ = "0.1.0"
