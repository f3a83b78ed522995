"""DesignDesk project aggregate store"""

__version__ = "1.0.0"
