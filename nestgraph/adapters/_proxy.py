class BackendProxy:
    """Forward attribute access to a backend library, converting the graph on demand.

    ``proxy.<name>(*args)`` calls ``backend_module.<name>(backend_graph, *args)``.
    Names the module does not define are looked up on the backend graph itself.
    The conversion is cached until the source graph is mutated.
    """

    def __init__(self, graph, backend_name):
        self._graph = graph
        self._backend_name = backend_name

    def _materialize(self):
        from .manager import ensure_materialized

        return ensure_materialized(self._backend_name, self._graph)

    @property
    def backend(self):
        """The converted backend graph."""
        return self._materialize()["graph"]

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        backend = self._materialize()
        # Try backend-level function (e.g., networkx.shortest_path)
        fn = getattr(backend["module"], name, None)
        if callable(fn):

            def wrapped(*args, **kwargs):
                return fn(backend["graph"], *args, **kwargs)

            return wrapped

        # Otherwise forward attribute to the backend graph itself
        return getattr(backend["graph"], name)
