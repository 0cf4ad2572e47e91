"""测试公共夹具"""

import pytest


@pytest.fixture
def anyio_backend():
    """异步测试统一运行在 asyncio 上"""
    return "asyncio"
