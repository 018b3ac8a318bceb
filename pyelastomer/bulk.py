from collections import namedtuple
from collections.abc import Mapping
from types import MappingProxyType

from pyelastomer.utils import Limiter, encoded_size


#: The actions the bulk API understands
ACTIONS = ('index', 'create', 'delete', 'update')


def _underscore_keys(d):
    """Return a dict with every key prefixed by a single underscore."""
    return dict((k if k.startswith('_') else '_%s' % k, v)
                for k, v in d.items())


class Operation(namedtuple('Operation', ['action', 'metadata', 'document'])):
    """
    A single bulk action: what to do, to which document, and (except for
    deletes) the document itself

    :arg action: One of 'index', 'create', 'delete', or 'update'
    :arg metadata: A mapping of things like ``id``, ``type``, and ``index``,
        destined for the action line. Keys may be given with or without
        their leading underscore. An ``id`` of None or '' is left out, so the
        server makes one up. The mapping is copied and frozen.
    :arg document: A mapping of fields, or a string of already-encoded JSON
        to be sent verbatim. For 'update', this is the update payload
        (``{"doc": ...}``, ``{"script": ...}``, and so on). Must be None for
        'delete'.
    """
    __slots__ = ()

    def __new__(cls, action, metadata=None, document=None):
        if action not in ACTIONS:
            raise ValueError('Unknown bulk action %r. Use one of %s.' %
                             (action, ', '.join(ACTIONS)))
        if action == 'delete':
            if document is not None:
                raise ValueError('Delete operations take no document.')
        elif document is None:
            raise ValueError('A %s operation needs a document.' % action)

        metadata = _underscore_keys(metadata or {})
        if metadata.get('_id') in (None, ''):
            metadata.pop('_id', None)
        return super(Operation, cls).__new__(cls, action,
                                             MappingProxyType(metadata),
                                             document)

    def encode(self, encode_json):
        """
        Return the operation as one JSON line, or two joined by a newline.

        :arg encode_json: A callable turning a Python value into JSON text
        """
        ret = encode_json({self.action: dict(self.metadata)})
        if self.document is not None:
            if isinstance(self.document, str):
                ret += '\n' + self.document
            else:
                ret += '\n' + encode_json(self.document)
        return ret


class Bulk(object):
    """
    A bulk session that sends operations in batches as they pile up

    Get one from :meth:`~pyelastomer.Client.bulk_session()`, feed it
    operations, and it sends them off whenever a batch fills up::

        with es.bulk_session(index='library', action_count=500) as bulk:
            for book in books:
                bulk.index({'title': book.title}, id=book.id, type='book')
        # Leaving the block sends whatever is left over.

    Each send makes its own request and gets its own response. The call that
    triggered it returns that response; every other call returns None. All
    of them are also kept, in order, in :attr:`responses`.

    A session is for one caller at a time. If a send fails, the exception
    comes straight out of the triggering call, and the session should be
    thrown away: the failed batch is not resent.
    """
    def __init__(self, client, index=None, doc_type=None, request_size=None,
                 action_count=None):
        """
        :arg client: The :class:`~pyelastomer.Client` to send batches through
        :arg index: Default index for operations that don't name one
        :arg doc_type: Default doc type for operations that don't name one.
            Cannot be specified without ``index``.
        :arg request_size: Send the batch before it would grow past this many
            bytes of request body. None means no byte limit.
        :arg action_count: Send the batch as soon as it holds this many
            operations. None means no count limit.
        """
        if doc_type is not None and index is None:
            raise ValueError(
                'Please also pass `index` if you pass `doc_type`.')
        for name, limit in [('request_size', request_size),
                            ('action_count', action_count)]:
            if limit is not None and (not isinstance(limit, int) or
                                      isinstance(limit, bool) or
                                      limit < 1):
                raise ValueError('%s must be a positive integer or None, not '
                                 '%r.' % (name, limit))

        self.client = client
        #: Index and doc type for operations that don't name their own
        self.default_index = index
        self.default_doc_type = doc_type
        self.request_size = request_size
        self.action_count = action_count

        #: Every response received so far, oldest first
        self.responses = []
        #: The response from the final send done by :meth:`end()`
        self.response = None

        self._actions = []
        self._limiter = Limiter(max_operations=action_count,
                                max_bytes=request_size)

    def __len__(self):
        """Return the number of operations waiting to be sent."""
        return len(self._actions)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        # Don't send a half-built batch when the caller's block blew up.
        if exc_type is None:
            self.end()

    def add(self, operation):
        """
        Queue an :class:`Operation`, sending batches as the limits demand.

        If the operation would push the batch past ``request_size``, the batch
        is sent first and the operation starts a fresh one. If the operation
        brings the batch up to ``action_count``, the batch, including it, is
        sent right away.

        Return the response of the send this call caused, or None if it only
        queued the operation. One call never causes two sends: after a
        byte-limit send the batch holds just this operation, which fills it
        only when ``action_count`` is 1, and then nothing was left to send
        beforehand.
        """
        action = operation.encode(self.client._encode_json)
        size = encoded_size(action)

        response = None
        if self._limiter.would_overflow(size):
            response = self.flush()

        self._actions.append(action)
        self._limiter.add(size)

        if self._limiter.is_full():
            response = self.flush()
        return response

    def index(self, document, **meta):
        """
        Queue a document for indexing.

        :arg document: A mapping or a string of JSON. Underscore-prefixed keys
            of a mapping, like ``_id`` and ``_type``, are taken out of it and
            used as metadata.
        :arg meta: Metadata like ``id``, ``type``, ``index``, or ``routing``.
            These win over any found in the document.
        """
        return self.add(self._operation('index', document, meta))

    def create(self, document, **meta):
        """
        Queue a document for creation, failing if its ID is already taken.

        Arguments are as for :meth:`index()`.
        """
        return self.add(self._operation('create', document, meta))

    def update(self, document, **meta):
        """
        Queue an update to an existing document.

        :arg document: The update payload, such as ``{'doc': {'pages': 4}}``
            or ``{'script': ..., 'params': ...}``
        :arg meta: Metadata like ``id`` and ``retry_on_conflict``
        """
        return self.add(self._operation('update', document, meta))

    def delete(self, **meta):
        """
        Queue a document for deletion.

        :arg meta: Which document to delete: ``id``, and ``type`` and
            ``index`` if they differ from the session's
        """
        return self.add(Operation('delete', meta))

    def flush(self):
        """
        Send the queued operations now, and return the response.

        Return None, sending nothing, if nothing is queued.
        """
        if not self._actions:
            return None

        actions = self._actions
        self.client.log.debug('Sending bulk batch of %s operations (%s bytes)',
                              self._limiter.op_count,
                              self._limiter.byte_count)
        # Start afresh before sending so a failure can't get a batch resent.
        self._actions = []
        self._limiter.reset()

        response = self.client.bulk(actions,
                                    index=self.default_index,
                                    doc_type=self.default_doc_type)
        self.responses.append(response)
        return response

    def end(self):
        """
        Send whatever is still queued, and return the response.

        Return None if there was nothing left to send.
        """
        self.response = self.flush()
        return self.response

    @staticmethod
    def _operation(action, document, meta):
        meta = _underscore_keys(meta)
        if isinstance(document, Mapping):
            document = dict(document)
            for key in [k for k in document if k.startswith('_')]:
                meta.setdefault(key, document.pop(key))
        return Operation(action, meta, document)


def succeeded(item):
    """
    Return whether one item of a bulk response reports success.

    Servers report a numeric ``status``; older ones reported a boolean
    ``ok`` instead. Either is understood::

        {"index": {"_id": "1", "status": 201}}
        {"delete": {"_id": "1", "ok": true}}
    """
    result = next(iter(item.values()))
    status = result.get('status')
    if status is not None:
        return 200 <= status < 300
    return result.get('ok') is True


def failed_items(response):
    """Return the items of a bulk response that did not succeed, in order."""
    return [item for item in response.get('items', []) if not succeeded(item)]
