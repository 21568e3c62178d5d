import importlib.util
from pathlib import Path
from typing import Callable, Dict, Mapping, Protocol, Tuple

HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


class ModuleLoader(Protocol):
    suffixes: Tuple[str, ...]

    def load_handlers(self, path: Path) -> Mapping[str, Callable]:
        ...


class PythonModuleLoader:
    """Runs a handler file on every call so edits apply without a restart.

    A handler file defines functions named after HTTP methods::

        from aiohttp import web

        async def GET(request):
            return web.json_response({"hello": "world"})

    Modules are never registered in ``sys.modules``.
    """

    # source wins over a sourceless bytecode file for the same route
    suffixes = (".py", ".pyc")

    def load_handlers(self, path: Path) -> Dict[str, Callable]:
        path = Path(path)
        spec = importlib.util.spec_from_file_location("liveserver_api." + path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"No loader for {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        handlers = {}
        for method in HTTP_METHODS:
            handler = getattr(module, method, None)
            if callable(handler):
                handlers[method] = handler
        return handlers
