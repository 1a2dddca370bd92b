"""
Service layer: backend RPC access, the paged data source, bulk actions and
the student table service that ties them to the query cache.
"""

from .bulk_actions import BulkAction, BulkActionDispatcher, BulkResult, MARK_PAID, MARK_UNPAID
from .data_source import DataSourceAdapter
from .rpc_client import HttpRpcClient, RpcClient, RpcResponse
from .table_service import StudentTableService

__all__ = [
    "BulkAction",
    "BulkActionDispatcher",
    "BulkResult",
    "DataSourceAdapter",
    "HttpRpcClient",
    "MARK_PAID",
    "MARK_UNPAID",
    "RpcClient",
    "RpcResponse",
    "StudentTableService",
]
