"""API dependencies"""

from fastapi import Request

from designdesk.storage.adapter import StorageAdapter


def get_storage(request: Request) -> StorageAdapter:
    """Storage facade the application was built with"""
    return request.app.state.storage
