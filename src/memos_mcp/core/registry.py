from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Set,
    Type,
    get_origin,
    get_type_hints,
)

from mcp.types import ToolAnnotations
from pydantic import BaseModel, WithJsonSchema, create_model

from .client import MemosClient
from .observability import log_event

log = logging.getLogger("memos_mcp.core.registry")

TOOLS_PACKAGE = "memos_mcp.core.tools"


# --- Tool metadata ---------------------------------------------------------- #


def tool_annotations(
    *,
    title: str,
    read_only: bool = False,
    destructive: Optional[bool] = None,
    idempotent: Optional[bool] = None,
) -> Callable[[Callable], Callable]:
    """Attach MCP tool hints (title, read-only, ...) to a tool function."""

    def decorator(func: Callable) -> Callable:
        func.__tool_annotations__ = ToolAnnotations(  # type: ignore[attr-defined]
            title=title,
            readOnlyHint=read_only,
            destructiveHint=destructive,
            idempotentHint=idempotent,
        )
        return func

    return decorator


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(package_name: str = TOOLS_PACKAGE) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        try:
            module = importlib.import_module(name)
            modules.append(module)
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)
            continue

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield functions that satisfy the tool convention."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_"):
            continue
        if func.__module__ != module.__name__:
            # Skip imported functions
            continue

        sig = inspect.signature(func)
        params = list(sig.parameters.values())
        if not params or params[0].name != "client":
            log.debug(
                "Skipping %s.%s: first parameter must be 'client'",
                module.__name__,
                func.__name__,
            )
            continue

        # Type[...] parameters can't be described as tool input
        if any(get_origin(p.annotation) is type for p in params[1:]):
            log.debug(
                "Skipping %s.%s: unsupported parameter annotation (Type[...] detected)",
                module.__name__,
                func.__name__,
            )
            continue

        yield func


# --- Encoding -------------------------------------------------------------- #


def encode_result(value: Any) -> Any:
    """Convert a tool result into JSON-compatible data (wire field names)."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [encode_result(v) for v in value]
    if isinstance(value, dict):
        return {k: encode_result(v) for k, v in value.items()}
    return value


def error_payload(exc: BaseException) -> Dict[str, str]:
    message = str(exc).strip() or type(exc).__name__
    return {"error": message}


# --- Wrapping / registration ---------------------------------------------- #


def _arguments_model(func: Callable) -> Type[BaseModel]:
    """Pydantic model describing a tool's caller-supplied arguments."""
    sig = inspect.signature(func)
    type_hints = get_type_hints(func)
    fields: Dict[str, Any] = {}
    for i, (name, param) in enumerate(sig.parameters.items()):
        if i == 0 and name == "client":
            continue
        ann = type_hints.get(name, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[name] = (ann, default)
    return create_model(f"{func.__name__}_arguments", **fields)


_DEFS_PREFIX = "#/$defs/"


def _inline_refs(node: Any, defs: Dict[str, Any]) -> Any:
    """Replace local ``$ref`` pointers with the referenced definitions."""
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith(_DEFS_PREFIX):
            siblings = {k: v for k, v in node.items() if k != "$ref"}
            target = defs[ref[len(_DEFS_PREFIX) :]]
            return _inline_refs({**target, **siblings}, defs)
        return {k: _inline_refs(v, defs) for k, v in node.items()}
    if isinstance(node, list):
        return [_inline_refs(v, defs) for v in node]
    return node


def _field_schemas(args_model: Type[BaseModel]) -> Dict[str, Dict[str, Any]]:
    """Self-contained JSON schema per argument of ``args_model``."""
    schema = args_model.model_json_schema(by_alias=True)
    defs = schema.get("$defs", {})
    return {
        name: _inline_refs(prop, defs)
        for name, prop in schema.get("properties", {}).items()
    }


def _drop_unset(args_model: Type[BaseModel], kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """
    The published signature defaults every argument to None, so None stands
    for "not supplied" unless the argument's own default is None.
    """
    fields = args_model.model_fields
    return {
        k: v
        for k, v in kwargs.items()
        if v is not None
        or (k in fields and not fields[k].is_required() and fields[k].default is None)
    }


def _wrap_tool(func: Callable, client_provider: Callable[[], MemosClient]) -> Callable:
    """
    Return a wrapper that injects the client, hides it from the signature,
    and turns every failure into an ``{"error": ...}`` payload.

    Published parameters are typed ``Any`` (carrying the real JSON schema for
    clients), so the server accepts any input and decoding happens inside the
    wrapper against the tool's own argument model.
    """
    original_sig = inspect.signature(func)
    args_model = _arguments_model(func)
    schemas = _field_schemas(args_model)
    tool_name = func.__name__

    new_params = []
    for i, (name, param) in enumerate(original_sig.parameters.items()):
        if i == 0 and name == "client":
            continue  # drop injected client
        ann = Annotated[Any, WithJsonSchema(schemas.get(name, {}))]
        new_params.append(param.replace(annotation=ann, default=None))

    # No return annotation: results are plain JSON payloads
    new_sig = inspect.Signature(parameters=new_params)

    async def wrapped(**kwargs):
        try:
            args = args_model.model_validate(_drop_unset(args_model, kwargs))
            client = client_provider()
            result = await func(
                client, **{name: getattr(args, name) for name in args_model.model_fields}
            )
        except Exception as exc:
            log_event(
                "tool_error",
                logger=log,
                level=logging.WARNING,
                tool=tool_name,
                error_type=type(exc).__name__,
            )
            return error_payload(exc)
        return encode_result(result)

    wrapped.__name__ = func.__name__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: Callable[[], MemosClient] | MemosClient,
    modules: List[ModuleType] | None = None,
) -> None:
    """Register discovered tools on an app that exposes a .tool decorator."""
    if isinstance(client_provider, MemosClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    modules = modules or discover_tool_modules()
    seen_names: Set[str] = set()

    for module in modules:
        for func in iter_tool_functions(module):
            name = func.__name__
            if name in seen_names:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, client_provider)
            annotations = getattr(func, "__tool_annotations__", None)
            if annotations is not None:
                app.tool(name=name, annotations=annotations)(wrapped)
            else:
                app.tool(name=name)(wrapped)
            seen_names.add(name)
            log.info("Registered tool: %s (%s)", name, module.__name__)


__all__ = [
    "TOOLS_PACKAGE",
    "tool_annotations",
    "discover_tool_modules",
    "iter_tool_functions",
    "encode_result",
    "error_payload",
    "register_discovered_tools",
]
