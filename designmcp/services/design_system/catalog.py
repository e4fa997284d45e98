"""Read-only queries over the design-system content."""

from __future__ import annotations

import copy
from typing import Any

from designmcp.services.design_system.data import DESIGN_SYSTEM

STYLE_GUIDE_SECTIONS = ("colors", "typography", "spacing", "breakpoints")


class DesignSystemCatalog:
    """Lookups used by the design-system tools. Returned values are copies."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data = data if data is not None else DESIGN_SYSTEM

    @property
    def name(self) -> str:
        return self._data["name"]

    @property
    def version(self) -> str:
        return self._data["version"]

    @property
    def components(self) -> list[dict[str, Any]]:
        return self._data["components"]

    @property
    def style_guide(self) -> dict[str, Any]:
        return self._data["styleGuide"]

    def component_names(self) -> list[str]:
        return [c["name"] for c in self.components]

    def categories(self) -> list[str]:
        seen: list[str] = []
        for c in self.components:
            if c["category"] not in seen:
                seen.append(c["category"])
        return seen

    def get_component(self, name: str) -> dict[str, Any] | None:
        """Case-insensitive lookup by component name."""
        wanted = name.strip().lower()
        for c in self.components:
            if c["name"].lower() == wanted:
                return copy.deepcopy(c)
        return None

    def list_components(self) -> dict[str, Any]:
        by_category: dict[str, list[dict[str, str]]] = {}
        for c in self.components:
            by_category.setdefault(c["category"], []).append({"name": c["name"], "description": c["description"]})
        return {
            "designSystemName": self.name,
            "version": self.version,
            "totalComponents": len(self.components),
            "componentsByCategory": by_category,
        }

    def search_components(self, query: str, category: str | None = None) -> dict[str, Any]:
        q = query.lower()
        results = [
            c
            for c in self.components
            if q in c["name"].lower() or q in c["description"].lower() or q in c["category"].lower()
        ]
        if category:
            results = [c for c in results if c["category"].lower() == category.lower()]
        return {
            "query": query,
            "resultsCount": len(results),
            "results": [
                {
                    "name": c["name"],
                    "category": c["category"],
                    "description": c["description"],
                    "importStatement": c["importStatement"],
                }
                for c in results
            ],
        }

    def component_examples_markdown(self, name: str) -> str | None:
        component = self.get_component(name)
        if component is None:
            return None
        blocks = "\n\n".join(f"### {ex['title']}\n```tsx\n{ex['code']}\n```" for ex in component["examples"])
        return f"# {component['name']} Examples\n\nImport: `{component['importStatement']}`\n\n{blocks}"

    def get_style_guide(self, section: str = "all") -> dict[str, Any]:
        if section == "all":
            data = copy.deepcopy(self.style_guide)
        else:
            data = {section: copy.deepcopy(self.style_guide.get(section))}
        return {"designSystem": self.name, "section": section, "data": data}

    def get_colors(self, category: str | None = None) -> dict[str, Any]:
        colors = self.style_guide["colors"]
        if category:
            colors = [c for c in colors if c["name"].lower() == category.lower()]
        return {"colors": copy.deepcopy(colors)}

    def get_section(self, section: str) -> dict[str, Any]:
        return {section: copy.deepcopy(self.style_guide[section])}

    def info(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self._data["description"],
            "stats": {
                "totalComponents": len(self.components),
                "categories": self.categories(),
                "colorCategories": len(self.style_guide["colors"]),
                "typographyStyles": len(self.style_guide["typography"]),
            },
        }
