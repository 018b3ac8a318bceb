from pyelastomer.bulk import Bulk, Operation, failed_items, succeeded
from pyelastomer.client import Client
from pyelastomer.cluster import Cluster
from pyelastomer.exceptions import (Timeout, ConnectionError,
                                    ElasticHttpError,
                                    ElasticHttpNotFoundError,
                                    IndexAlreadyExistsError,
                                    InvalidJsonResponseError)
from pyelastomer.utils import bulk_chunks


__all__ = ['Client', 'Cluster', 'Bulk', 'Operation', 'ElasticHttpError',
           'Timeout', 'ConnectionError', 'ElasticHttpNotFoundError',
           'IndexAlreadyExistsError', 'InvalidJsonResponseError',
           'bulk_chunks', 'succeeded', 'failed_items']
__version__ = '0.1.0'
__version_info__ = tuple(__version__.split('.'))

get_version = lambda: __version_info__
