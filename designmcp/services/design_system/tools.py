"""Design-system tools exposed through ``tools/list`` and ``tools/call``."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Literal

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from designmcp.api.rpc.errors import Violation, format_violations
from designmcp.api.rpc.schemas import EmptyParams, ParamsModel, violations_from_error
from designmcp.services.design_system.catalog import DesignSystemCatalog
from designmcp.utils.exceptions import InvalidParamsError


class ComponentNameArgs(ParamsModel):
    componentName: str = Field(min_length=1, max_length=100, description="Name of the component (case-insensitive)")


class SearchArgs(ParamsModel):
    query: str = Field(min_length=1, max_length=200, description="Search query")
    category: str | None = Field(default=None, max_length=100, description="Filter by category (optional)")


class StyleGuideArgs(ParamsModel):
    section: Literal["colors", "typography", "spacing", "breakpoints", "all"] = Field(
        default="all",
        description="Which section of the style guide to retrieve",
    )


class ColorArgs(ParamsModel):
    category: str | None = Field(default=None, max_length=100, description="Color category (Primary, Neutral, Semantic)")


ToolResult = dict[str, Any]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    args: type[BaseModel]
    run: Callable[[DesignSystemCatalog, Any], ToolResult]

    def definition(self) -> dict[str, Any]:
        schema = self.args.model_json_schema()
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": schema.get("properties", {}),
                "required": schema.get("required", []),
            },
        }


def text_result(text: str, *, is_error: bool = False) -> ToolResult:
    result: ToolResult = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


def json_result(payload: Any) -> ToolResult:
    return text_result(json.dumps(payload, indent=2, ensure_ascii=False))


def _list_components(catalog: DesignSystemCatalog, _: EmptyParams) -> ToolResult:
    return json_result(catalog.list_components())


def _get_component(catalog: DesignSystemCatalog, args: ComponentNameArgs) -> ToolResult:
    component = catalog.get_component(args.componentName)
    if component is None:
        available = ", ".join(catalog.component_names())
        return text_result(f'Component "{args.componentName}" not found. Available: {available}', is_error=True)
    return json_result(component)


def _search_components(catalog: DesignSystemCatalog, args: SearchArgs) -> ToolResult:
    return json_result(catalog.search_components(args.query, args.category))


def _get_component_examples(catalog: DesignSystemCatalog, args: ComponentNameArgs) -> ToolResult:
    text = catalog.component_examples_markdown(args.componentName)
    if text is None:
        return text_result(f'Component "{args.componentName}" not found.', is_error=True)
    return text_result(text)


def _get_style_guide(catalog: DesignSystemCatalog, args: StyleGuideArgs) -> ToolResult:
    return json_result(catalog.get_style_guide(args.section))


def _get_colors(catalog: DesignSystemCatalog, args: ColorArgs) -> ToolResult:
    return json_result(catalog.get_colors(args.category))


def _section(section: str) -> Callable[[DesignSystemCatalog, EmptyParams], ToolResult]:
    def run(catalog: DesignSystemCatalog, _: EmptyParams) -> ToolResult:
        return json_result(catalog.get_section(section))

    return run


def _get_design_system_info(catalog: DesignSystemCatalog, _: EmptyParams) -> ToolResult:
    return json_result(catalog.info())


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("list_components", "List all available design system components with their categories", EmptyParams, _list_components),
    ToolSpec(
        "get_component",
        "Get detailed specification for a specific component including props, examples, and usage",
        ComponentNameArgs,
        _get_component,
    ),
    ToolSpec("search_components", "Search for components by name, description, or category", SearchArgs, _search_components),
    ToolSpec("get_component_examples", "Get code examples for a specific component", ComponentNameArgs, _get_component_examples),
    ToolSpec(
        "get_style_guide",
        "Get style guide information (colors, typography, spacing, breakpoints)",
        StyleGuideArgs,
        _get_style_guide,
    ),
    ToolSpec("get_colors", "Get color tokens from the design system", ColorArgs, _get_colors),
    ToolSpec("get_typography", "Get typography styles from the design system", EmptyParams, _section("typography")),
    ToolSpec("get_spacing", "Get spacing scale tokens from the design system", EmptyParams, _section("spacing")),
    ToolSpec("get_breakpoints", "Get responsive breakpoint definitions", EmptyParams, _section("breakpoints")),
    ToolSpec("get_design_system_info", "Get overview information about the design system", EmptyParams, _get_design_system_info),
)


class DesignSystemTools:
    """Tool table bound to one catalog."""

    def __init__(self, catalog: DesignSystemCatalog | None = None, tools: tuple[ToolSpec, ...] = TOOLS):
        self.catalog = catalog or DesignSystemCatalog()
        self._tools = {t.name: t for t in tools}

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[dict[str, Any]]:
        return [t.definition() for t in self._tools.values()]

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Run one tool. Unknown tools are tool-level errors; bad arguments raise InvalidParamsError."""
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Unknown tool requested: {}", name)
            return text_result(f"Unknown tool: {name}", is_error=True)
        try:
            args = tool.args.model_validate(arguments or {})
        except ValidationError as e:
            violations = [Violation(path=("arguments", *v.path), message=v.message) for v in violations_from_error(e)]
            raise InvalidParamsError(format_violations(violations), [v.to_dict() for v in violations]) from e
        logger.debug("Running tool {}", name)
        return tool.run(self.catalog, args)
