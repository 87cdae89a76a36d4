"""Per-run state shared by the markup stages"""

from dataclasses import dataclass, field

from bs4 import Tag


LANGUAGE_PREFIX = "language-"
DEFAULT_LANGUAGE = "text"


@dataclass
class StageContext:
    """Carries the visited set that keeps each stage from processing a node twice in one run."""
    diagram_language: str = "mermaid"
    visited: set[tuple[str, int]] = field(default_factory=set)

    def visit(self, stage: str, node: Tag) -> bool:
        """Record node for stage; False when the stage already saw it this run."""
        key = (stage, id(node))
        if key in self.visited:
            return False
        self.visited.add(key)
        return True


def has_class(node: Tag | None, name: str) -> bool:
    return node is not None and name in (node.get("class") or [])


def add_class(node: Tag, name: str) -> None:
    classes = list(node.get("class") or [])
    if name not in classes:
        classes.append(name)
    node["class"] = classes


def code_language(pre: Tag) -> str:
    """Language of a <pre> block from data-language or a language-* class, else 'text'."""
    if pre.get("data-language"):
        return pre["data-language"]
    for node in (pre, pre.find("code")):
        for cls in (node.get("class") or []) if node is not None else []:
            if cls.startswith(LANGUAGE_PREFIX) and len(cls) > len(LANGUAGE_PREFIX):
                return cls[len(LANGUAGE_PREFIX):]
    return DEFAULT_LANGUAGE
