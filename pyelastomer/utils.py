from functools import wraps
import re


def _add_es_kwarg_docs(params, method):
    """
    Add stub documentation for any args in ``params`` that aren't already in
    the docstring of ``method``.

    The stubs may not tell much about each arg, but they let the user know
    the arg is safe to use: we won't pave over it later with something
    pyelastomer-specific.
    """
    doc = method.__doc__
    if doc is None:  # It's none under python -OO.
        return

    # Python 3.13 dedents docstrings at compile time, so find the margin
    # rather than assuming the usual 8 spaces.
    margin = re.search(r'^([ \t]*)(?::arg |\(Insert es_kwargs here\.\))',
                       doc,
                       re.MULTILINE)
    if margin is None:
        return
    indent = margin.group(1)

    def docs_for_kwarg(p):
        return '\n%s:arg %s: See the server docs.' % (indent, p)

    # Handle the case where there are no :arg declarations to key off:
    if ('\n%s:arg' % indent) not in doc and params:
        first_param, params = params[0], params[1:]
        doc = doc.replace('\n%s(Insert es_kwargs here.)' % indent,
                          docs_for_kwarg(first_param))

    for p in params:
        if ('\n%s:arg %s: ' % (indent, p)) not in doc:
            # Find the end of the arg block so we can put our generated docs
            # after it. The regex cache saves us compiling this.
            insertion_point = re.search(
                r'%s:arg (.*?)(?=\n+%s(?:[ ]*\Z|[^: \n]))' % (indent, indent),
                doc,
                re.DOTALL).end()

            doc = ''.join([doc[:insertion_point],
                           docs_for_kwarg(p),
                           doc[insertion_point:]])
    method.__doc__ = doc


def es_kwargs(*args_to_convert):
    """
    Mark which kwargs will become query string params in the eventual call.

    Return a decorator that grabs the kwargs of the given names, plus any
    beginning with "es_", subtracts them from the ordinary kwargs, and passes
    them to the decorated function through the ``query_params`` kwarg. The
    remaining kwargs and the args are passed through unscathed.

    Also, if any of the given kwargs are undocumented in the decorated method's
    docstring, add stub documentation for them.
    """
    convertible_args = set(args_to_convert)

    def decorator(func):
        # Add docs for any missing query params:
        _add_es_kwarg_docs(args_to_convert, func)

        @wraps(func)
        def decorate(*args, **kwargs):
            # Let one @es_kwargs-wrapped function call another:
            query_params = kwargs.pop('query_params', {})

            for k in list(kwargs):  # Make a copy; we mutate kwargs.
                if k.startswith('es_'):
                    query_params[k[3:]] = kwargs.pop(k)
                elif k in convertible_args:
                    query_params[k] = kwargs.pop(k)
            return func(*args, query_params=query_params, **kwargs)
        return decorate
    return decorator


def encoded_size(action):
    """
    Return the number of bytes ``action`` contributes to a bulk request body,
    counting the newline that terminates it.
    """
    if not isinstance(action, bytes):
        action = action.encode('utf-8')
    return len(action) + 1


class Limiter(object):
    """
    Keep score of a batch of bulk actions against a count and a byte limit.

    The byte limit is checked before an action goes in: a batch that already
    holds something is closed off rather than pushed past ``max_bytes``. The
    count limit is checked after: the action that reaches ``max_operations``
    is the last one in its batch. A batch with nothing in it is never "over",
    so an action bigger than ``max_bytes`` still ships, alone.
    """
    def __init__(self, max_operations=None, max_bytes=None):
        self.max_operations = max_operations
        self.max_bytes = max_bytes
        self.reset()

    def would_overflow(self, size):
        """Return whether adding ``size`` bytes would burst the byte limit."""
        return (self.max_bytes is not None and
                self.op_count > 0 and
                self.byte_count + size > self.max_bytes)

    def add(self, size):
        self.op_count += 1
        self.byte_count += size

    def is_full(self):
        return (self.max_operations is not None and
                self.op_count >= self.max_operations)

    def reset(self):
        self.op_count = self.byte_count = 0


def bulk_chunks(actions, docs_per_chunk=300, bytes_per_chunk=None):
    """
    Return groups of bulk operations to send to
    :meth:`~pyelastomer.Client.bulk()`.

    Return an iterable of chunks, each of which is a list of JSON-encoded
    lines or pairs of lines in the format understood by the bulk API.

    :arg actions: An iterable of bulk actions, JSON-encoded. The best idea is
        to pass me the outputs of :meth:`~pyelastomer.Client.index_op()`,
        :meth:`~pyelastomer.Client.delete_op()`, and friends.
    :arg docs_per_chunk: The number of actions to put in each chunk. Set to
        None to use only ``bytes_per_chunk``.
    :arg bytes_per_chunk: The maximum number of bytes of HTTP body payload
        to put in each chunk. Leave at None to use only ``docs_per_chunk``.
        This helps prevent timeouts when you have occasional very large
        documents.

    Chunks are cut by the same rules a :class:`~pyelastomer.bulk.Bulk`
    session follows: an action that would push a chunk past
    ``bytes_per_chunk`` starts a new one, and the action that reaches
    ``docs_per_chunk`` ends its chunk. An action larger than
    ``bytes_per_chunk`` gets a chunk to itself. If both limits are None, all
    actions end up in one big chunk.
    """
    limiter = Limiter(docs_per_chunk, bytes_per_chunk)
    chunk = []
    for action in actions:
        size = encoded_size(action)
        if limiter.would_overflow(size):
            yield chunk
            chunk = []
            limiter.reset()

        chunk.append(action)
        limiter.add(size)

        if limiter.is_full():
            yield chunk
            chunk = []
            limiter.reset()

    if chunk:  # Don't yield an empty chunk at the end.
        yield chunk
